"""Shared fixtures: a gateway client backed by scripted httpx transports."""

import httpx
import pytest

from momocollect.common.gateway import GatewayClient


class RecordingSleep:
    """Stand-in for time.sleep that only remembers how long it was asked to wait."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class ScriptedGateway:
    """Replays a fixed list of status answers and records every request."""

    def __init__(self, status_answers=None, collect_answer=None) -> None:
        self.status_answers = list(status_answers or [])
        self.collect_answer = collect_answer
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            answer = self.collect_answer
        else:
            answer = self.status_answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    @property
    def status_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]


def status_response(status: str, **extra) -> httpx.Response:
    body = {"reference": "ref-123", "status": status, "amount": 100, "currency": "XAF"}
    body.update(extra)
    return httpx.Response(200, json=body)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def make_gateway():
    clients: list[GatewayClient] = []

    def factory(handler) -> GatewayClient:
        client = GatewayClient(
            base_url="https://gateway.test",
            api_key="test-key",
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
