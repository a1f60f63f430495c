"""Retry configuration for httpguard.

RetryPolicy and NotificationSettings are immutable values. The executor keeps
the current value in a cell and swaps it on update, so a running retry loop
sees the new value at its next decision point.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RETRYABLE_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})

# Upper bound for the random jitter added to every backoff delay
JITTER_CEILING_MS = 1000.0


class ErrorSeverity(str, Enum):
    """How loudly a failure should be presented.

    - INFO: informational or redirect codes
    - WARNING: user-recoverable (sign in, slow down, retry later)
    - ERROR: the request failed
    - CRITICAL: reserved for callers reporting manually
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    Delays are in milliseconds. ``max_retries`` counts retries after the
    first attempt, so a budget of 3 means at most 4 attempts.
    """

    max_retries: int = 3
    base_delay_ms: float = 1000
    max_delay_ms: float = 30000
    backoff_factor: float = 2.0  # exponential backoff multiplier
    retryable_status_codes: frozenset = DEFAULT_RETRYABLE_STATUS_CODES
    enable_retry: bool = True
    timeout_ms: float = 10000
    custom_messages: Mapping[int, str] = field(default_factory=dict)

    def backoff_ms(self, attempt: int) -> float:
        """Exponential part of the delay before retrying after ``attempt``."""
        return min(
            self.base_delay_ms * (self.backoff_factor**attempt),
            self.max_delay_ms,
        )


@dataclass(frozen=True)
class NotificationSettings:
    """Presentation flags for the notification channel."""

    show_notifications: bool = True
    debug_mode: bool = False


_POLICY_FIELDS = frozenset(f.name for f in fields(RetryPolicy))
_SETTINGS_FIELDS = frozenset(f.name for f in fields(NotificationSettings))


class PolicyUpdate(BaseModel):
    """Validated partial update of RetryPolicy and NotificationSettings."""

    model_config = ConfigDict(extra="forbid")

    max_retries: Optional[int] = Field(None, ge=0)
    base_delay_ms: Optional[float] = Field(None, ge=0)
    max_delay_ms: Optional[float] = Field(None, ge=0)
    backoff_factor: Optional[float] = Field(None, ge=1)
    retryable_status_codes: Optional[Set[int]] = None
    enable_retry: Optional[bool] = None
    timeout_ms: Optional[float] = Field(None, gt=0)
    custom_messages: Optional[Dict[int, str]] = None
    show_notifications: Optional[bool] = None
    debug_mode: Optional[bool] = None

    def split(self) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Return (policy changes, settings changes) for the fields that were set."""
        changes = self.model_dump(exclude_unset=True)
        # Explicit None means "leave unchanged"
        changes = {k: v for k, v in changes.items() if v is not None}
        if "retryable_status_codes" in changes:
            changes["retryable_status_codes"] = frozenset(changes["retryable_status_codes"])
        policy_changes = {k: v for k, v in changes.items() if k in _POLICY_FIELDS}
        settings_changes = {k: v for k, v in changes.items() if k in _SETTINGS_FIELDS}
        return policy_changes, settings_changes
