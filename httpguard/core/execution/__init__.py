"""Execution module for httpguard.

Provides failure classification and the retrying request executor.
"""

from httpguard.core.execution.error_classifier import ErrorClassifier
from httpguard.core.execution.error_handler import RetryingRequestExecutor
from httpguard.core.execution.failures import (
    DecodingFailure,
    HttpStatusError,
    RequestFailure,
    TimedOut,
    TransportError,
    UnexpectedFailure,
)
from httpguard.core.execution.notifier import NotificationChannel
from httpguard.core.execution.throttle import NotificationThrottle

__all__ = [
    "DecodingFailure",
    "ErrorClassifier",
    "HttpStatusError",
    "NotificationChannel",
    "NotificationThrottle",
    "RequestFailure",
    "RetryingRequestExecutor",
    "TimedOut",
    "TransportError",
    "UnexpectedFailure",
]
