"""Test doubles shared by httpguard tests."""

import httpx

URL = "https://api.example.com/items"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeClock:
    """Monotonic clock advanced by hand, in seconds."""

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_response(status_code, method="GET", url=URL):
    return httpx.Response(status_code, request=httpx.Request(method, url))


def scripted(*outcomes, method="GET", url=URL):
    """Build an issuing coroutine function that plays back ``outcomes``.

    Integers become responses with that status, exceptions are raised.
    The last outcome repeats once the script runs out.
    """
    calls = []

    async def issue():
        outcome = outcomes[min(len(calls), len(outcomes) - 1)]
        calls.append(outcome)
        if isinstance(outcome, BaseException):
            raise outcome
        return make_response(outcome, method, url)

    issue.calls = calls
    return issue
