"""Tests for the ``fhir-validate`` command line entrypoint."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import structlog
from pydantic import ValidationError
from structlog.testing import capture_logs

from fhir_validation.scripts import validate as cli
from fhir_validation.validation.base import TypeOperation, ValidationParams
from fhir_validation.validation.errors import InvalidResourceError, InvocationFailureError
from fhir_validation.validation.models import ValidationOutcome
from fhir_validation.validation.remote import encode_payload


def _events(capsys) -> list[dict]:
    err = capsys.readouterr().err
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


@pytest.fixture
def resource_file(tmp_path):
    path = tmp_path / "patient.json"
    path.write_text(json.dumps({"resourceType": "Patient"}), encoding="utf-8")
    return path


@pytest.fixture
def validator():
    validator = MagicMock()
    validator.validate = AsyncMock(return_value=None)
    with patch.object(cli, "create_remote_validator", return_value=validator) as factory:
        validator.factory = factory
        yield validator


def test_valid_resource_exits_zero(resource_file, validator) -> None:
    code = cli.main(
        [
            str(resource_file),
            "--function-arn",
            "fn",
            "--tenant-id",
            "t1",
            "--type-operation",
            "create",
        ]
    )

    assert code == cli.EXIT_VALID
    validator.validate.assert_awaited_once_with(
        {"resourceType": "Patient"},
        ValidationParams(tenant_id="t1", type_operation=TypeOperation.CREATE),
    )
    settings = validator.factory.call_args.args[0]
    assert settings.function_arn == "fn"


def test_invalid_resource_prints_messages(resource_file, validator, capsys) -> None:
    validator.validate.side_effect = InvalidResourceError("error1\nerror2")

    code = cli.main([str(resource_file), "--function-arn", "fn"])

    assert code == cli.EXIT_INVALID
    assert "error1\nerror2" in capsys.readouterr().err


def test_invocation_failure_exits_with_error(resource_file, validator) -> None:
    validator.validate.side_effect = InvocationFailureError("boom", function_name="fn")

    assert cli.main([str(resource_file), "--function-arn", "fn"]) == cli.EXIT_ERROR


def test_unreadable_resource_exits_with_error(tmp_path, validator) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert cli.main([str(path)]) == cli.EXIT_ERROR
    validator.factory.assert_not_called()


def test_missing_function_arn_exits_with_error(resource_file) -> None:
    assert cli.main([str(resource_file)]) == cli.EXIT_ERROR


def test_unknown_environment_exits_with_error(resource_file, validator, monkeypatch) -> None:
    monkeypatch.setenv("FV_ENV", "qa")

    with capture_logs() as logs:
        code = cli.main([str(resource_file), "--function-arn", "fn"])

    assert code == cli.EXIT_ERROR
    assert logs[-1]["event"] == "validate.misconfigured"
    assert "qa" in logs[-1]["error"]
    validator.factory.assert_not_called()


def test_invalid_settings_value_exits_with_error(resource_file, validator, monkeypatch) -> None:
    monkeypatch.setenv("FV_VALIDATOR__TIMEOUT_MS", "soon")

    assert cli.main([str(resource_file), "--function-arn", "fn"]) == cli.EXIT_ERROR
    validator.factory.assert_not_called()


def test_malformed_function_response_exits_with_error(resource_file, validator, capsys) -> None:
    with pytest.raises(ValidationError) as excinfo:
        ValidationOutcome.model_validate_json("not json")
    validator.validate.side_effect = excinfo.value

    code = cli.main([str(resource_file), "--function-arn", "fn"])

    assert code == cli.EXIT_ERROR
    event = _events(capsys)[-1]
    assert event["event"] == "validate.failed"
    assert event["error_type"] == "ValidationError"


def test_non_finite_number_in_resource_exits_with_error(tmp_path, validator, capsys) -> None:
    path = tmp_path / "observation.json"
    path.write_text('{"resourceType": "Observation", "valueQuantity": {"value": NaN}}', encoding="utf-8")
    validator.validate.side_effect = lambda resource, params: encode_payload(resource)

    code = cli.main([str(path), "--function-arn", "fn"])

    assert code == cli.EXIT_ERROR
    assert _events(capsys)[-1]["event"] == "validate.resource_unencodable"


def test_log_events_carry_correlation_id(resource_file, validator, capsys) -> None:
    validator.validate.side_effect = InvocationFailureError("boom", function_name="fn")

    code = cli.main([str(resource_file), "--function-arn", "fn", "--correlation-id", "run-1"])

    assert code == cli.EXIT_ERROR
    failed = [event for event in _events(capsys) if event.get("event") == "validate.failed"]
    assert failed[0]["correlation_id"] == "run-1"


def test_correlation_id_is_generated_and_released(resource_file, validator) -> None:
    seen = []

    async def record(resource, params):
        seen.append(structlog.contextvars.get_contextvars().get("correlation_id"))

    validator.validate.side_effect = record

    assert cli.main([str(resource_file), "--function-arn", "fn"]) == cli.EXIT_VALID
    assert seen[0]
    assert "correlation_id" not in structlog.contextvars.get_contextvars()
