"""Shared fixtures for httpguard tests."""

import httpx
import pytest

from httpguard.integrations.httpx.client import HttpxInterceptor
from support import FakeClock, RecordingSleep


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifications():
    return []


@pytest.fixture(autouse=True)
def restore_httpx():
    original = httpx.AsyncClient.send
    yield
    HttpxInterceptor.restore()
    httpx.AsyncClient.send = original
