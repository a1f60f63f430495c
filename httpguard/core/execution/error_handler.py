"""Retrying request executor for httpguard.

Wraps a request-issuing coroutine function with per-attempt timeouts,
exponential backoff with jitter, failure classification and deduplicated
notifications.
"""

import asyncio
import random
from dataclasses import replace
from typing import Any, Awaitable, Callable, Mapping, Optional

from httpguard.config import Config
from httpguard.core.execution.error_classifier import ErrorClassifier
from httpguard.core.execution.failures import (
    HttpStatusError,
    RequestFailure,
    TimedOut,
    as_failure,
)
from httpguard.core.execution.notifier import NotificationChannel, NotificationSink
from httpguard.core.execution.throttle import NotificationThrottle
from httpguard.core.logging import logger
from httpguard.core.retry_config import (
    JITTER_CEILING_MS,
    NotificationSettings,
    PolicyUpdate,
    RetryPolicy,
)
from httpguard.models.errors import ErrorContext

Issue = Callable[[], Awaitable[Any]]


def _is_success(response: Any) -> bool:
    return response.is_success


def _status_code_of(response: Any) -> int:
    status_code = getattr(response, "status_code", None)
    return status_code if status_code is not None else response.status


async def _release_response(response: Any, terminal: bool) -> None:
    """Free a failed response.

    Retried responses are closed unread. The terminal response is read first so
    callers can inspect its body through ``HttpStatusError.response``.
    """
    if terminal and hasattr(response, "aread"):
        try:
            await response.aread()
        except Exception as e:
            logger.warning("failed_response_unread", error=str(e))
    if hasattr(response, "aclose"):
        await response.aclose()


class RetryingRequestExecutor:
    """Retry-and-classification engine around an issuing coroutine function.

    The policy lives in a cell that every decision point reads, so
    ``update_policy`` reaches loops that are already running. Concurrent
    ``execute`` calls share only the policy cell and the throttle.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        notify: Optional[NotificationSink] = None,
        *,
        settings: Optional[NotificationSettings] = None,
        throttle: Optional[NotificationThrottle] = None,
        success_predicate: Optional[Callable[[Any], bool]] = None,
        status_code_of: Optional[Callable[[Any], int]] = None,
        release_response: Optional[Callable[[Any, bool], Awaitable[None]]] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ):
        """Initialize the executor.

        Args:
            policy: Initial RetryPolicy (defaults from the environment)
            notify: Sink receiving terminal ErrorContext values
            settings: Initial NotificationSettings (defaults from the environment)
            throttle: Deduplication window for notifications
            success_predicate: Decides whether a response is a success
                (defaults to ``response.is_success``)
            status_code_of: Reads the status of a failed response
                (defaults to ``status_code``, then ``status``)
            release_response: ``release(response, terminal)`` coroutine freeing a
                failed response (defaults to reading the terminal one and closing both)
            sleep: Coroutine used for backoff delays, in seconds
            jitter: ``jitter(low, high)`` returning extra delay in milliseconds
        """
        self._policy = policy if policy is not None else Config.default_policy()
        if settings is None:
            settings = Config.default_settings()
        self.channel = NotificationChannel(notify, settings)
        self.throttle = throttle if throttle is not None else NotificationThrottle()
        self._is_success = success_predicate if success_predicate is not None else _is_success
        self._status_code_of = status_code_of if status_code_of is not None else _status_code_of
        self._release = release_response if release_response is not None else _release_response
        self._sleep = sleep
        self._jitter = jitter
        self._installed = False
        self._disposed = False

    @property
    def policy(self) -> RetryPolicy:
        """Current effective policy."""
        return self._policy

    @property
    def settings(self) -> NotificationSettings:
        """Current notification settings."""
        return self.channel.settings

    def update_policy(self, changes: Optional[Mapping[str, Any]] = None, **kwargs) -> RetryPolicy:
        """Apply a partial update to the policy and notification settings.

        Accepts any subset of RetryPolicy fields plus ``show_notifications``
        and ``debug_mode``.

        Raises:
            pydantic.ValidationError: If a field is unknown or out of range
        """
        update = PolicyUpdate(**{**dict(changes or {}), **kwargs})
        policy_changes, settings_changes = update.split()

        if policy_changes:
            self._policy = replace(self._policy, **policy_changes)
        if settings_changes:
            self.channel.settings = replace(self.channel.settings, **settings_changes)

        logger.info(
            "retry_policy_updated",
            fields=sorted([*policy_changes, *settings_changes]),
        )
        return self._policy

    async def execute(
        self,
        issue: Issue,
        url: str,
        method: str = "GET",
        *,
        timeout_ms: Optional[float] = None,
        max_retries: Optional[int] = None,
    ) -> Any:
        """Issue a request, retrying transient failures.

        Args:
            issue: Zero-argument coroutine function performing one attempt
            url: Target, used for classification and deduplication
            method: HTTP method
            timeout_ms: Per-call deadline for each attempt
            max_retries: Per-call retry budget

        Returns:
            The first successful response

        Raises:
            RequestFailure: The terminal failure, with ``context`` populated
        """
        method = method.upper()
        attempt = 0

        while True:
            timeout = timeout_ms if timeout_ms is not None else self._policy.timeout_ms
            cause = None

            try:
                response = await asyncio.wait_for(self._attempt(issue), timeout / 1000)
            except asyncio.TimeoutError:
                # wait_for has already cancelled the in-flight attempt
                failure = TimedOut(timeout)
            except Exception as e:
                cause = e
                failure = as_failure(e)
            else:
                if self._is_success(response):
                    return response
                failure = HttpStatusError(
                    self._status_code_of(response),
                    response,
                    getattr(response, "reason_phrase", ""),
                )

            policy = self._policy
            retrying = self._should_retry(policy, failure, attempt, max_retries)
            if isinstance(failure, HttpStatusError):
                await self._release(failure.response, not retrying)

            if retrying:
                delay_ms = self._delay_ms(policy, attempt)
                logger.info(
                    "request_retry_scheduled",
                    url=url,
                    method=method,
                    attempt=attempt,
                    status_code=failure.status_code,
                    failure=type(failure).__name__,
                    delay_ms=round(delay_ms, 1),
                )
                await self._sleep(delay_ms / 1000)
                attempt += 1
                continue

            context = self._terminal_context(policy, failure, url, method, attempt)
            failure.context = context
            logger.warning(
                "request_failed",
                url=url,
                method=method,
                status_code=context.status_code,
                failure=type(failure).__name__,
                retry_count=attempt,
            )
            self._notify(context)

            if cause is not None and cause is not failure:
                raise failure from cause
            raise failure

    async def _attempt(self, issue: Issue) -> Any:
        try:
            return await issue()
        except (asyncio.TimeoutError, TimeoutError) as e:
            # Raised by the issuing call itself, before the deadline
            raise TimedOut() from e

    def report(self, context: ErrorContext) -> bool:
        """Send a hand-built ErrorContext through the notification path.

        Bypasses retry and deduplication.
        """
        return self.channel.publish(context)

    def report_status(
        self, status_code: int, message: str, url: str = "", method: str = "GET"
    ) -> bool:
        """Report a failure that did not come from a request, by status code.

        The user-facing copy comes from the classifier, honoring
        ``custom_messages``.
        """
        description = ErrorClassifier.classify(status_code, self._policy.custom_messages)
        context = ErrorContext.from_description(
            description, message=message, url=url, method=method
        )
        return self.report(context)

    def install(self) -> None:
        """Intercept every ``httpx.AsyncClient`` request through this executor."""
        if self._disposed:
            logger.warning("interceptor_install_ignored", reason="executor disposed")
            return
        from httpguard.integrations.httpx.client import HttpxInterceptor

        self._installed = HttpxInterceptor.install(self) or self._installed

    def dispose(self) -> None:
        """Undo ``install`` and clear the throttle. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True

        if self._installed:
            from httpguard.integrations.httpx.client import HttpxInterceptor

            if HttpxInterceptor.active_executor() is self:
                HttpxInterceptor.restore()
            self._installed = False
        self.throttle.clear()

    def _should_retry(
        self,
        policy: RetryPolicy,
        failure: RequestFailure,
        attempt: int,
        max_retries: Optional[int],
    ) -> bool:
        budget = max_retries if max_retries is not None else policy.max_retries
        if not policy.enable_retry or attempt >= budget:
            return False

        if isinstance(failure, HttpStatusError):
            return failure.status_code in policy.retryable_status_codes
        return ErrorClassifier.is_transient(failure)

    def _delay_ms(self, policy: RetryPolicy, attempt: int) -> float:
        """Backoff plus jitter in [0, JITTER_CEILING_MS)."""
        jitter = self._jitter(0.0, JITTER_CEILING_MS) % JITTER_CEILING_MS
        return policy.backoff_ms(attempt) + jitter

    def _terminal_context(
        self,
        policy: RetryPolicy,
        failure: RequestFailure,
        url: str,
        method: str,
        retry_count: int,
    ) -> ErrorContext:
        if isinstance(failure, HttpStatusError):
            description = ErrorClassifier.classify(failure.status_code, policy.custom_messages)
            original = None
        else:
            description = ErrorClassifier.classify_exception(failure)
            original = getattr(failure, "cause", None)
            if original is None:
                original = failure

        return ErrorContext.from_description(
            description,
            message=failure.message,
            url=url,
            method=method,
            retry_count=retry_count,
            original_error=original,
        )

    def _notify(self, context: ErrorContext) -> bool:
        if not self.channel.delivers:
            # Nothing reaches the sink, so the key must not start a window
            return self.channel.publish(context)
        if not self.throttle.should_notify(context.dedup_key):
            logger.debug(
                "error_notification_suppressed",
                status_code=context.status_code,
                url=context.url,
                method=context.method,
            )
            return False
        return self.channel.publish(context)
