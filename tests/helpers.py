import json
from typing import Any, Callable, List, Tuple

import httpx

from video_agent.config import Settings
from video_agent.services.replicate_client import ReplicateClient

Reply = Tuple[int, Any]


def make_settings(**overrides) -> Settings:
    values = {
        "replicate_api_token": "test-token",
        "replicate_api_base_url": "https://replicate.test/v1",
        "replicate_model_version": "test-version",
        "poll_interval_seconds": 3.5,
        "generation_timeout_seconds": 55,
        "poll_fetch_retries": 0,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class FakeClock:
    """Monotonic clock that only moves when the poller sleeps."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingTransport:
    """Wraps a handler in an httpx.MockTransport and keeps every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []
        self._handler = handler
        self.transport = httpx.MockTransport(self._record)

    def _record(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def client_factory(self, settings: Settings) -> ReplicateClient:
        return ReplicateClient.from_settings(settings, transport=self.transport)

    @property
    def status_fetches(self) -> int:
        return sum(1 for request in self.requests if request.method == "GET")

    def created_body(self) -> dict:
        return json.loads(self.requests[0].content)


def prediction(status: str, output=None, error=None, prediction_id: str = "pred-123") -> dict:
    return {"id": prediction_id, "status": status, "output": output, "error": error}


def scripted_handler(create: Reply, *polls: Reply) -> Callable[[httpx.Request], httpx.Response]:
    """Answer the create call with ``create`` and status fetches with ``polls`` in order.

    Each reply is a ``(status_code, json_body)`` pair. The last poll reply
    repeats once the script runs out.
    """
    remaining = list(polls)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            status_code, body = create
        elif len(remaining) > 1:
            status_code, body = remaining.pop(0)
        else:
            status_code, body = remaining[0]
        return httpx.Response(status_code, json=body)

    return handler
