"""Error description models for httpguard.

ErrorDescription is what the classifier produces; ErrorContext adds the
request details of a terminal failure and is what the notification sink and
the caller receive.
"""

from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from httpguard.core.retry_config import ErrorSeverity


class ErrorDescription(BaseModel):
    """User-presentable classification of a failure."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=0, description="HTTP status, 0 for non-HTTP failures")
    user_message: str
    severity: ErrorSeverity
    can_retry: bool = Field(..., description="Policy hint, not whether a retry happened")
    action_label: Optional[str] = None
    action_target: Optional[str] = Field(
        None, description="Route to navigate to; None with a label means reissue"
    )
    hint: Optional[str] = None


class ErrorContext(ErrorDescription):
    """A terminal failure, ready for presentation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    message: str = Field(..., description="Raw underlying error text")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    url: str
    method: str
    retry_count: int = Field(0, ge=0)
    original_error: Optional[Exception] = None

    @classmethod
    def from_description(
        cls,
        description: ErrorDescription,
        *,
        message: str,
        url: str,
        method: str,
        retry_count: int = 0,
        original_error: Optional[Exception] = None,
    ) -> "ErrorContext":
        return cls(
            **description.model_dump(),
            message=message,
            url=url,
            method=method.upper(),
            retry_count=retry_count,
            original_error=original_error,
        )

    @property
    def dedup_key(self) -> Tuple[int, str, str]:
        """Key used to throttle repeated notifications."""
        return (self.status_code, self.url, self.method)
