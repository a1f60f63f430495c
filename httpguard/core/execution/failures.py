"""Request failure types for httpguard.

The issuing layer raises one of these tagged variants so that classification
never depends on error text.
"""

import asyncio
from typing import Any, Optional


class RequestFailure(Exception):
    """Base class for every failure the executor surfaces.

    ``context`` is populated with the ErrorContext when the failure becomes
    terminal.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context = None

    @property
    def status_code(self) -> int:
        return 0


class HttpStatusError(RequestFailure):
    """The server answered with a non-success status."""

    def __init__(self, status_code: int, response: Any = None, reason: str = ""):
        super().__init__(f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}")
        self._status_code = status_code
        self.response = response
        self.reason = reason

    @property
    def status_code(self) -> int:
        return self._status_code


class TimedOut(RequestFailure):
    """The attempt exceeded its deadline and was cancelled."""

    def __init__(self, timeout_ms: Optional[float] = None):
        text = f"Request timed out after {timeout_ms:g} ms" if timeout_ms else "Request timed out"
        super().__init__(text)
        self.timeout_ms = timeout_ms

    @property
    def status_code(self) -> int:
        return 408


class TransportError(RequestFailure):
    """The issuing call failed before producing a response."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class DecodingFailure(RequestFailure):
    """A response arrived but its body could not be decoded."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


class UnexpectedFailure(RequestFailure):
    """Any other exception raised by the issuing call."""

    def __init__(self, cause: Exception):
        super().__init__(str(cause) or type(cause).__name__)
        self.cause = cause


def as_failure(error: Exception) -> RequestFailure:
    """Normalize an exception raised by an issuing call into a tagged variant.

    Only exception types are inspected, never messages.
    """
    if isinstance(error, RequestFailure):
        return error
    if isinstance(error, (asyncio.TimeoutError, TimeoutError)):
        return TimedOut()
    if isinstance(error, OSError):
        return TransportError(error)
    return UnexpectedFailure(error)
