"""Shared test doubles for upstream HTTP services"""

from typing import Callable, List

import httpx

PAYOS_URL = "https://payos.test"
LISTING_URL = "https://listing.test/v2/banks"
IP_URL = "https://ip.test/?format=json"
CHECKSUM_KEY = "test-checksum-key"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeClock:
    """Manually advanced clock for TTL tests"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class Recorder:
    """Wraps a handler and keeps every request it saw"""

    def __init__(self, handler: Handler):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> List[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]


def not_found(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404, json={"code": "404", "desc": "Not found"})
