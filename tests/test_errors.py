"""
Unit tests for error types and caller-facing error descriptions
"""

from wpfiller_core.errors import (
    AuthError,
    NavigationError,
    PayloadError,
    SaveError,
    WpFillerError,
    describe_error,
)


def test_auth_error_never_retryable():
    result = describe_error(AuthError("dashboard not reached"))
    assert result["severity"] == "critical"
    assert result["can_retry"] is False
    assert result["technical"] == "dashboard not reached"


def test_navigation_error():
    result = describe_error(NavigationError("New landing page editor could not be opened"))
    assert "editor" in result["message"]
    assert result["can_retry"] is True


def test_save_error():
    result = describe_error(SaveError("Could not click the Save Draft control to save the landing page"))
    assert result["message"] == "The landing page could not be saved"


def test_timeout():
    result = describe_error(TimeoutError("Timeout 30000ms exceeded"))
    assert result["severity"] == "warning"
    assert result["can_retry"] is True


def test_network():
    result = describe_error(Exception("page.goto: net::ERR_NAME_NOT_RESOLVED"))
    assert "Network" in result["message"]


def test_unknown_error():
    result = describe_error(RuntimeError("boom"), technical_details="trace here")
    assert result["technical"] == "trace here"
    assert result["severity"] == "error"
    assert set(result) == {"message", "suggestion", "technical", "severity", "can_retry"}


def test_payload_error_details():
    error = PayloadError([{"field": "header_headline", "message": "is required"}])
    assert isinstance(error, WpFillerError)
    assert error.details[0]["field"] == "header_headline"
    assert str(error) == "Invalid payload: header_headline: is required"


def test_error_type_wins_over_message_text():
    result = describe_error(NavigationError("Redirected to https://wp.example.com/wp-login.php"))
    assert result["message"] == "The landing page editor could not be opened"
    assert result["can_retry"] is True


def test_save_error_mentioning_login():
    result = describe_error(SaveError("Save control missing; page shows wp-login.php"))
    assert result["message"] == "The landing page could not be saved"
    assert result["severity"] == "error"


def test_timeout_with_login_url_is_retryable():
    result = describe_error(TimeoutError("Timeout 30000ms exceeded navigating to /wp-login.php"))
    assert result["severity"] == "warning"
    assert result["can_retry"] is True
    assert "WP_PASSWORD" not in result["suggestion"]
