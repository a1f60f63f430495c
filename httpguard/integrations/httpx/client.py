"""httpx adapter for httpguard.

Provides the issuing primitive for the executor, either injected
(GuardedClient) or installed process-wide (HttpxInterceptor).
"""

import functools
from contextlib import asynccontextmanager
from typing import Optional

import httpx

from httpguard.core.execution.failures import DecodingFailure, TimedOut, TransportError
from httpguard.core.logging import logger

# Per-request options carried in httpx request extensions
SKIP_EXTENSION = "httpguard.skip"
TIMEOUT_EXTENSION = "httpguard.timeout_ms"
RETRIES_EXTENSION = "httpguard.max_retries"


@asynccontextmanager
async def translate_errors():
    """Re-raise httpx exceptions as httpguard failure variants."""
    try:
        yield
    except httpx.TimeoutException as e:
        raise TimedOut() from e
    except httpx.TransportError as e:
        raise TransportError(e) from e
    except httpx.DecodingError as e:
        raise DecodingFailure(e) from e


class GuardedClient:
    """httpx.AsyncClient wrapper routing every request through an executor.

    The client is injected and stays owned by the caller.
    """

    def __init__(self, client: httpx.AsyncClient, executor):
        """Initialize GuardedClient.

        Args:
            client: httpx.AsyncClient used for every attempt
            executor: RetryingRequestExecutor driving retries
        """
        self.client = client
        self.executor = executor

    async def request(
        self,
        method: str,
        url: str,
        *,
        timeout_ms: Optional[float] = None,
        max_retries: Optional[int] = None,
        **kwargs,
    ) -> httpx.Response:
        """Send a request with retry and classification.

        Extra keyword arguments go to ``httpx.AsyncClient.request``.

        Raises:
            RequestFailure: The terminal failure
        """
        # Keep an installed interceptor from retrying the same request again
        kwargs["extensions"] = {**(kwargs.get("extensions") or {}), SKIP_EXTENSION: True}

        async def issue():
            async with translate_errors():
                return await self.client.request(method, url, **kwargs)

        return await self.executor.execute(
            issue, str(url), method, timeout_ms=timeout_ms, max_retries=max_retries
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def put(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, **kwargs)

    async def patch(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("PATCH", url, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)


class HttpxInterceptor:
    """Process-wide replacement of ``httpx.AsyncClient.send``.

    Installation is idempotent: while installed, further installs are
    no-ops and never wrap twice. ``restore`` puts back the exact function
    that was in place before the first install.
    """

    _original_send = None
    _executor = None

    @classmethod
    def install(cls, executor) -> bool:
        """Route ``httpx.AsyncClient.send`` through ``executor``.

        Returns:
            True if this call installed the interceptor
        """
        if cls._original_send is not None:
            logger.debug("interceptor_already_installed")
            return False

        original = httpx.AsyncClient.send

        @functools.wraps(original)
        async def send(client, request, **kwargs):
            return await cls._send(original, client, request, **kwargs)

        cls._original_send = original
        cls._executor = executor
        httpx.AsyncClient.send = send
        logger.info("interceptor_installed")
        return True

    @classmethod
    def restore(cls) -> bool:
        """Put back the original ``send``.

        Returns:
            True if something was restored
        """
        if cls._original_send is None:
            return False

        httpx.AsyncClient.send = cls._original_send
        cls._original_send = None
        cls._executor = None
        logger.info("interceptor_restored")
        return True

    @classmethod
    def is_installed(cls) -> bool:
        return cls._original_send is not None

    @classmethod
    def active_executor(cls):
        return cls._executor

    @classmethod
    async def _send(cls, original, client, request: httpx.Request, **kwargs) -> httpx.Response:
        extensions = request.extensions
        executor = cls._executor
        if executor is None or extensions.get(SKIP_EXTENSION):
            return await original(client, request, **kwargs)

        async def issue():
            async with translate_errors():
                return await original(client, request, **kwargs)

        return await executor.execute(
            issue,
            str(request.url),
            request.method,
            timeout_ms=extensions.get(TIMEOUT_EXTENSION),
            max_retries=extensions.get(RETRIES_EXTENSION),
        )
