"""Error classifier for httpguard.

Maps HTTP status codes and request failures to user-presentable
descriptions. These tables are the single source of copy and retryability
defaults.
"""

from typing import Dict, Mapping, Optional

from httpguard.core.execution.failures import (
    DecodingFailure,
    RequestFailure,
    TimedOut,
    TransportError,
)
from httpguard.core.retry_config import ErrorSeverity
from httpguard.models.errors import ErrorDescription

INFO = ErrorSeverity.INFO
WARNING = ErrorSeverity.WARNING
ERROR = ErrorSeverity.ERROR


def _entry(code, message, severity, can_retry, label=None, target=None, hint=None):
    return ErrorDescription(
        status_code=code,
        user_message=message,
        severity=severity,
        can_retry=can_retry,
        action_label=label,
        action_target=target,
        hint=hint,
    )


STATUS_DESCRIPTIONS: Dict[int, ErrorDescription] = {
    # 1xx Informational
    100: _entry(100, "Request is being processed...", INFO, False),
    # 2xx Success (never reported, kept for completeness)
    200: _entry(200, "Request completed successfully", INFO, False),
    # 3xx Redirection
    301: _entry(301, "The resource has moved permanently", INFO, False),
    302: _entry(302, "The resource has moved temporarily", INFO, False),
    # 4xx Client errors
    400: _entry(
        400,
        "The information you provided is invalid. Please check and try again.",
        ERROR, False,
        hint="Review your input for any errors",
    ),
    401: _entry(
        401, "You need to log in to access this resource.", WARNING, False,
        "Sign In", "/login", "Please sign in to continue",
    ),
    403: _entry(
        403, "You don't have permission to perform this action.", ERROR, False,
        "Contact Support", "/support", "Contact support if you believe this is an error",
    ),
    404: _entry(
        404, "The requested resource could not be found.", ERROR, False,
        "Go Home", "/", "Check the URL or navigate from the home page",
    ),
    405: _entry(405, "This action is not allowed for this resource.", ERROR, False),
    408: _entry(
        408, "The request took too long to complete.", WARNING, True,
        "Retry", hint="Please try again",
    ),
    409: _entry(
        409, "There was a conflict with your request.", ERROR, False,
        "Refresh", hint="Please refresh the page and try again",
    ),
    410: _entry(410, "This resource is no longer available.", ERROR, False, "Go Back"),
    422: _entry(
        422, "The data you provided could not be processed.", ERROR, False,
        hint="Please check your input and try again",
    ),
    429: _entry(
        429, "You're making requests too quickly. Please slow down.", WARNING, True,
        "Try Again", hint="Wait a moment before trying again",
    ),
    # 5xx Server errors
    500: _entry(
        500, "Something went wrong on our servers.", ERROR, True,
        "Retry", hint="Please try again in a moment",
    ),
    501: _entry(501, "This feature is not yet available.", ERROR, False),
    502: _entry(
        502, "Our service is temporarily unavailable.", ERROR, True,
        "Retry", hint="Please try again",
    ),
    503: _entry(
        503, "Our service is temporarily down for maintenance.", ERROR, True,
        "Retry", hint="Please try again in a few minutes",
    ),
    504: _entry(
        504, "The server took too long to respond.", WARNING, True,
        "Retry", hint="Please try again",
    ),
}

SERVER_ERROR_FALLBACK = _entry(0, "Server error occurred. Please try again later", ERROR, True)
CLIENT_ERROR_FALLBACK = _entry(
    0, "Request failed. Please check your input and try again", ERROR, False
)

# Descriptions for failures that never produced a response
NETWORK_ERROR = _entry(
    0,
    "Unable to connect to the server. Please check your internet connection.",
    ERROR, True, "Retry",
    hint="Verify your internet connection is stable",
)
TIMEOUT_ERROR = _entry(
    408, "The request timed out. Please try again.", WARNING, True,
    "Retry", hint="Check your connection speed",
)
PARSE_ERROR = _entry(0, "Unable to process the server response.", ERROR, True, "Retry")
UNKNOWN_ERROR = _entry(0, "An unexpected error occurred. Please try again.", ERROR, True, "Retry")


class ErrorClassifier:
    """Classifies failures into user-presentable descriptions.

    Static methods for stateless classification.
    """

    @staticmethod
    def classify(
        status_code: int, custom_overrides: Optional[Mapping[int, str]] = None
    ) -> ErrorDescription:
        """Describe an HTTP status code.

        Args:
            status_code: HTTP status code of the failed response
            custom_overrides: Optional status code -> message overrides

        Returns:
            ErrorDescription for the code
        """
        if custom_overrides and status_code in custom_overrides:
            if status_code >= 500:
                severity = ERROR
            elif status_code >= 400:
                severity = WARNING
            else:
                severity = INFO
            return ErrorDescription(
                status_code=status_code,
                user_message=custom_overrides[status_code],
                severity=severity,
                can_retry=status_code >= 500 or status_code in (408, 429),
            )

        description = STATUS_DESCRIPTIONS.get(status_code)
        if description is not None:
            return description

        # Fallback based on status code range
        if status_code >= 500:
            fallback = SERVER_ERROR_FALLBACK
        elif status_code >= 400:
            fallback = CLIENT_ERROR_FALLBACK
        else:
            fallback = UNKNOWN_ERROR
        return fallback.model_copy(update={"status_code": status_code})

    @staticmethod
    def classify_exception(failure: RequestFailure) -> ErrorDescription:
        """Describe a failure that did not come from a response status.

        Priority: timeout, transport, undecodable response, then anything else.
        """
        if isinstance(failure, TimedOut):
            return TIMEOUT_ERROR
        if isinstance(failure, TransportError):
            return NETWORK_ERROR
        if isinstance(failure, DecodingFailure):
            return PARSE_ERROR
        return UNKNOWN_ERROR

    @staticmethod
    def is_transient(failure: RequestFailure) -> bool:
        """Whether an exception-shaped failure is worth retrying."""
        return isinstance(failure, (TimedOut, TransportError))
