"""Tests for error sanitization utilities."""

from __future__ import annotations

from rds_operator.utils.errors import (
    sanitize_error_message,
    sanitize_exception,
)


class TestSanitizeErrorMessage:
    """Test cases for sanitize_error_message function."""

    def test_sanitize_secret_key(self):
        """Test that secret keys are sanitized."""
        message = "Error: secret_access_key: wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY"
        result = sanitize_error_message(message)
        assert "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY" not in result
        assert "[REDACTED]" in result

    def test_sanitize_master_user_password(self):
        """Test that master passwords in request dumps are sanitized."""
        message = "Invalid request: MasterUserPassword=Sup3rS3cret, Engine=postgres"
        result = sanitize_error_message(message)
        assert "Sup3rS3cret" not in result
        assert "Engine=postgres" in result

    def test_sanitize_password(self):
        """Test that passwords are sanitized."""
        message = "Error: password: mysecretpassword123"
        result = sanitize_error_message(message)
        assert "mysecretpassword123" not in result
        assert "[REDACTED]" in result

    def test_no_sensitive_data(self):
        """Test that messages without sensitive data are unchanged."""
        message = "DB instance postgres-abc not found"
        assert sanitize_error_message(message) == message

    def test_prose_mentioning_fields_is_unchanged(self):
        """Test that field names without a value separator are left alone."""
        for message in (
            "connection secret write failed",
            "master user password rejected by RDS",
            "token expired, retrying",
        ):
            assert sanitize_error_message(message) == message

    def test_equals_separator_is_sanitized(self):
        """Test that key=value pairs are sanitized."""
        result = sanitize_error_message("request failed: secret=abc123")
        assert "abc123" not in result


class TestSanitizeException:
    """Test cases for sanitize_exception function."""

    def test_sanitize_exception(self):
        """Test sanitizing an exception."""
        error = ValueError("token: abc123def456")
        result = sanitize_exception(error)
        assert "abc123def456" not in result
