"""httpguard: retry, classification and notification for outgoing HTTP calls."""

from httpguard.core.execution import (
    DecodingFailure,
    ErrorClassifier,
    HttpStatusError,
    RequestFailure,
    RetryingRequestExecutor,
    TimedOut,
    TransportError,
    UnexpectedFailure,
)
from httpguard.core.retry_config import ErrorSeverity, NotificationSettings, RetryPolicy
from httpguard.models.errors import ErrorContext, ErrorDescription

__all__ = [
    "DecodingFailure",
    "ErrorClassifier",
    "ErrorContext",
    "ErrorDescription",
    "ErrorSeverity",
    "HttpStatusError",
    "NotificationSettings",
    "RequestFailure",
    "RetryPolicy",
    "RetryingRequestExecutor",
    "TimedOut",
    "TransportError",
    "UnexpectedFailure",
]
