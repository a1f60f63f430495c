"""httpx integration for httpguard."""

from httpguard.integrations.httpx.client import GuardedClient, HttpxInterceptor, translate_errors

__all__ = ["GuardedClient", "HttpxInterceptor", "translate_errors"]
