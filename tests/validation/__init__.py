"""Tests for remote resource validation."""
