"""Notification channel for httpguard.

Single path through which terminal failures and manual reports reach the
presentation layer.
"""

from typing import Callable, Optional

from httpguard.core.logging import logger
from httpguard.core.retry_config import NotificationSettings
from httpguard.models.errors import ErrorContext

NotificationSink = Callable[[ErrorContext], None]


class NotificationChannel:
    """Delivers ErrorContext values to a sink according to NotificationSettings."""

    def __init__(
        self,
        sink: Optional[NotificationSink] = None,
        settings: Optional[NotificationSettings] = None,
    ):
        self.sink = sink
        self.settings = settings if settings is not None else NotificationSettings()

    @property
    def delivers(self) -> bool:
        """Whether a published context would reach the sink."""
        return self.settings.show_notifications and self.sink is not None

    def publish(self, context: ErrorContext) -> bool:
        """Hand ``context`` to the sink.

        Returns:
            True if the sink was invoked
        """
        if self.settings.debug_mode:
            logger.warning(
                "error_reported",
                status_code=context.status_code,
                url=context.url,
                method=context.method,
                message=context.message,
                user_message=context.user_message,
                severity=context.severity.value,
                can_retry=context.can_retry,
                retry_count=context.retry_count,
                action_label=context.action_label,
            )

        if not self.delivers:
            return False

        try:
            self.sink(context)
        except Exception:
            # Sinks must not raise; fail open so the caller still gets its failure
            logger.exception(
                "notification_sink_failed",
                status_code=context.status_code,
                url=context.url,
                method=context.method,
            )
            return False
        return True
