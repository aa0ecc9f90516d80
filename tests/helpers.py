"""Shared test utilities."""

from __future__ import annotations

import asyncio
import dataclasses
import hashlib
import hmac
import json
import typing as typ

import falcon.testing
import httpx

from leaderboard_relay.api.app import AppDependencies, create_app
from leaderboard_relay.dispatch import RepositoryDispatchClient

if typ.TYPE_CHECKING:
    from leaderboard_relay.config import RelayConfig

T = typ.TypeVar("T")

WEBHOOK_SECRET = "test-webhook-secret"
TRIGGER_TOKEN = "test-token-123"


def run_async(coro_func: typ.Callable[[], typ.Coroutine[typ.Any, typ.Any, T]]) -> T:
    """Execute an async callable within the test context."""
    return asyncio.run(coro_func())


def sign(body: bytes, secret: str) -> str:
    """Return the ``x-hub-signature-256`` header GitHub would send."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


@dataclasses.dataclass(slots=True)
class DispatchRecorder:
    """Fake dispatch endpoint recording every request it receives."""

    status_code: int = 204
    response_text: str = ""
    requests: list[httpx.Request] = dataclasses.field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        """Record ``request`` and answer with the configured status."""
        self.requests.append(request)
        return httpx.Response(status_code=self.status_code, text=self.response_text)

    def http_client(self) -> httpx.AsyncClient:
        """Return an ``httpx.AsyncClient`` routed to this recorder."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    @property
    def last_json(self) -> dict[str, typ.Any]:
        """Decode the body of the most recent request."""
        return json.loads(self.requests[-1].content.decode("utf-8"))


def build_client(
    config: RelayConfig, recorder: DispatchRecorder
) -> falcon.testing.TestClient:
    """Build a Falcon test client whose dispatches reach ``recorder``."""
    dispatch_client = RepositoryDispatchClient(
        config, http_client=recorder.http_client()
    )
    app = create_app(AppDependencies(config=config, dispatch_client=dispatch_client))
    return falcon.testing.TestClient(app)
