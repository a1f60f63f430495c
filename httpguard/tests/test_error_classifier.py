"""Unit tests for ErrorClassifier."""

import pytest

from httpguard.core.execution.error_classifier import (
    NETWORK_ERROR,
    PARSE_ERROR,
    STATUS_DESCRIPTIONS,
    TIMEOUT_ERROR,
    UNKNOWN_ERROR,
    ErrorClassifier,
)
from httpguard.core.execution.failures import (
    DecodingFailure,
    HttpStatusError,
    TimedOut,
    TransportError,
    UnexpectedFailure,
)
from httpguard.core.retry_config import ErrorSeverity


class TestClassifyTable:
    """Test classification of known status codes."""

    @pytest.mark.parametrize("status_code", sorted(STATUS_DESCRIPTIONS))
    def test_table_codes_return_authored_description(self, status_code):
        """Test every table code returns its own entry unchanged."""
        description = ErrorClassifier.classify(status_code)

        assert description is STATUS_DESCRIPTIONS[status_code]
        assert description.status_code == status_code

    def test_unauthorized_suggests_sign_in(self):
        """Test 401 carries the sign-in action."""
        description = ErrorClassifier.classify(401)

        assert description.user_message == "You need to log in to access this resource."
        assert description.severity == ErrorSeverity.WARNING
        assert description.can_retry is False
        assert description.action_label == "Sign In"
        assert description.action_target == "/login"

    def test_not_found_suggests_home(self):
        """Test 404 points back to the root route."""
        description = ErrorClassifier.classify(404)

        assert description.action_label == "Go Home"
        assert description.action_target == "/"
        assert description.can_retry is False

    @pytest.mark.parametrize("status_code", [408, 429, 500, 502, 503, 504])
    def test_transient_codes_are_retryable(self, status_code):
        """Test transient codes are marked retryable with a retry-style action."""
        description = ErrorClassifier.classify(status_code)

        assert description.can_retry is True
        assert description.action_label in ("Retry", "Try Again")
        assert description.action_target is None

    def test_service_unavailable_copy(self):
        """Test 503 copy and severity."""
        description = ErrorClassifier.classify(503)

        assert description.user_message == "Our service is temporarily down for maintenance."
        assert description.severity == ErrorSeverity.ERROR

    def test_not_implemented_is_not_retryable(self):
        """Test 501 is a server error that is not retried."""
        assert ErrorClassifier.classify(501).can_retry is False


class TestClassifyFallback:
    """Test range fallback for codes missing from the table."""

    def test_unknown_server_error(self):
        """Test unlisted 5xx falls back to a retryable server error."""
        description = ErrorClassifier.classify(599)

        assert description.status_code == 599
        assert description.user_message == "Server error occurred. Please try again later"
        assert description.severity == ErrorSeverity.ERROR
        assert description.can_retry is True

    def test_unknown_client_error(self):
        """Test unlisted 4xx falls back to a non-retryable client error."""
        description = ErrorClassifier.classify(418)

        assert description.status_code == 418
        assert description.user_message == "Request failed. Please check your input and try again"
        assert description.can_retry is False

    def test_non_error_range_is_unknown(self):
        """Test codes below 400 that are not listed use the unknown copy."""
        description = ErrorClassifier.classify(304)

        assert description.user_message == UNKNOWN_ERROR.user_message
        assert description.status_code == 304


class TestClassifyOverrides:
    """Test custom message overrides."""

    def test_override_replaces_message(self):
        """Test an override wins over the table and drops the action."""
        description = ErrorClassifier.classify(404, {404: "No such widget"})

        assert description.user_message == "No such widget"
        assert description.severity == ErrorSeverity.WARNING
        assert description.can_retry is False
        assert description.action_label is None

    @pytest.mark.parametrize(
        "status_code,severity,can_retry",
        [
            (503, ErrorSeverity.ERROR, True),
            (408, ErrorSeverity.WARNING, True),
            (429, ErrorSeverity.WARNING, True),
            (400, ErrorSeverity.WARNING, False),
            (302, ErrorSeverity.INFO, False),
        ],
    )
    def test_override_derives_severity_from_range(self, status_code, severity, can_retry):
        """Test override severity and retryability come from the code range."""
        description = ErrorClassifier.classify(status_code, {status_code: "custom"})

        assert description.severity == severity
        assert description.can_retry is can_retry

    def test_override_for_other_code_is_ignored(self):
        """Test overrides only apply to their exact code."""
        description = ErrorClassifier.classify(500, {503: "custom"})

        assert description is STATUS_DESCRIPTIONS[500]


class TestClassifyException:
    """Test classification of failures without a response."""

    def test_timeout(self):
        """Test timeouts map to 408 and are retryable."""
        description = ErrorClassifier.classify_exception(TimedOut(5000))

        assert description is TIMEOUT_ERROR
        assert description.status_code == 408
        assert description.can_retry is True

    def test_transport(self):
        """Test transport failures map to the network copy."""
        description = ErrorClassifier.classify_exception(TransportError(ConnectionError("refused")))

        assert description is NETWORK_ERROR
        assert description.status_code == 0
        assert description.can_retry is True

    def test_other(self):
        """Test anything else maps to the unexpected-error copy."""
        description = ErrorClassifier.classify_exception(UnexpectedFailure(KeyError("x")))

        assert description is UNKNOWN_ERROR
        assert description.status_code == 0
        assert description.user_message == "An unexpected error occurred. Please try again."

    def test_is_transient(self):
        """Test only timeout and transport failures are transient."""
        assert ErrorClassifier.is_transient(TimedOut()) is True
        assert ErrorClassifier.is_transient(TransportError(OSError("down"))) is True
        assert ErrorClassifier.is_transient(UnexpectedFailure(ValueError("bad"))) is False
        assert ErrorClassifier.is_transient(HttpStatusError(503)) is False

    def test_decoding(self):
        """Test undecodable responses map to the parse copy and are not transient."""
        failure = DecodingFailure(ValueError("bad gzip"))
        description = ErrorClassifier.classify_exception(failure)

        assert description is PARSE_ERROR
        assert description.status_code == 0
        assert description.user_message == "Unable to process the server response."
        assert ErrorClassifier.is_transient(failure) is False
