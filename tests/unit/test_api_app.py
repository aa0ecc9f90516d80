"""HTTP-level tests for the relay's Falcon application.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import json

import falcon
import falcon.asgi
import falcon.constants
import falcon.testing
import pytest

from leaderboard_relay.api.app import AppDependencies, create_app
from leaderboard_relay.config import RelayConfig
from tests.helpers import (
    TRIGGER_TOKEN,
    WEBHOOK_SECRET,
    DispatchRecorder,
    build_client,
    sign,
)

_INSTALLATION = {
    "action": "created",
    "installation": {
        "id": 12345,
        "account": {"login": "test-org", "type": "Organization"},
    },
    "repositories": [{"id": 1, "name": "test-repo", "full_name": "test-org/test-repo"}],
}


def _delivery(
    client: falcon.testing.TestClient,
    *,
    event: str | None,
    body: bytes,
    signature: str | None,
) -> falcon.testing.Result:
    headers = {"content-type": "application/json"}
    if event is not None:
        headers["x-github-event"] = event
    if signature is not None:
        headers["x-hub-signature-256"] = signature
    return client.simulate_post("/", body=body, headers=headers)


def _signed(
    client: falcon.testing.TestClient, event: str, payload: object
) -> falcon.testing.Result:
    body = json.dumps(payload).encode("utf-8")
    return _delivery(
        client, event=event, body=body, signature=sign(body, WEBHOOK_SECRET)
    )


class TestCreateApp:
    """Tests for create_app() route registration."""

    def test_returns_falcon_app(self, relay_config: RelayConfig) -> None:
        """create_app() returns a Falcon ASGI App."""
        app = create_app(AppDependencies(config=relay_config))
        assert isinstance(app, falcon.asgi.App), "expected Falcon ASGI App"

    def test_has_health_route(self, client: falcon.testing.TestClient) -> None:
        """The app responds to /health."""
        result = client.simulate_get("/health")
        assert result.status == falcon.HTTP_200, "expected HTTP 200 from /health"
        assert result.json == {"status": "ok"}, "wrong /health body"

    def test_has_ready_route(self, client: falcon.testing.TestClient) -> None:
        """The app responds to /ready."""
        result = client.simulate_get("/ready")
        assert result.json == {"status": "ready"}, "wrong /ready body"


class TestNonPostRequests:
    """Non-POST requests to the webhook endpoint."""

    @pytest.mark.parametrize(
        "method",
        [
            "GET",
            "PUT",
            "PATCH",
            "DELETE",
            "OPTIONS",
            "TRACE",
            "CONNECT",
            "PROPFIND",
        ],
    )
    def test_acknowledged_with_ok(
        self, client: falcon.testing.TestClient, method: str
    ) -> None:
        """Any non-POST method answers 200 'ok'."""
        result = client.simulate_request(method, "/")
        assert result.status_code == 200, f"{method} should not be refused"
        assert result.text == "ok"

    def test_head_acknowledged(self, client: falcon.testing.TestClient) -> None:
        """HEAD answers 200; Falcon strips the body."""
        result = client.simulate_head("/")
        assert result.status_code == 200

    def test_every_routed_method_except_post_acknowledged(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """No method Falcon routes falls through to a 405."""
        refused = [
            method
            for method in falcon.constants.COMBINED_METHODS
            if method not in {"POST", "HEAD"}
            and client.simulate_request(method, "/").status_code != 200
        ]
        assert refused == [], f"methods refused: {refused}"
        assert recorder.requests == [], "no outbound call expected"

    def test_ignores_headers_and_body(self, client: falcon.testing.TestClient) -> None:
        """Signature headers on a GET are not checked."""
        result = client.simulate_get(
            "/",
            headers={"x-github-event": "push", "x-hub-signature-256": "sha256=bad"},
        )
        assert result.status_code == 200
        assert result.text == "ok"


class TestRejectedDeliveries:
    """Deliveries rejected by authentication."""

    def test_missing_event_header(self, client: falcon.testing.TestClient) -> None:
        """A missing x-github-event is a 400 even with a valid signature."""
        body = b"{}"
        result = _delivery(
            client, event=None, body=body, signature=sign(body, WEBHOOK_SECRET)
        )
        assert result.status_code == 400
        assert result.text == "missing x-github-event header"
        assert result.headers["content-type"].startswith("text/plain")

    def test_missing_signature_header(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """A missing signature is a 401 even for a relayed event."""
        result = _delivery(
            client,
            event="installation",
            body=json.dumps(_INSTALLATION).encode(),
            signature=None,
        )
        assert result.status_code == 401
        assert result.text == "missing x-hub-signature-256 header"
        assert recorder.requests == [], "no outbound call expected"

    def test_invalid_signature(self, client: falcon.testing.TestClient) -> None:
        """A signature that does not match is a 401."""
        result = _delivery(
            client,
            event="installation",
            body=b'{"action":"created"}',
            signature="sha256=invalid-signature",
        )
        assert result.status_code == 401
        assert result.text == "invalid signature"

    def test_empty_secret_rejects_everything(self, recorder: DispatchRecorder) -> None:
        """An unset webhook secret never bypasses verification."""
        client = build_client(
            RelayConfig(webhook_secret="", trigger_token=TRIGGER_TOKEN), recorder
        )
        body = b'{"action":"created"}'
        result = _delivery(
            client, event="installation", body=body, signature=sign(body, "")
        )
        assert result.status_code == 401
        assert result.text == "invalid signature"
        assert recorder.requests == [], "no outbound call expected"


class TestVerifiedDeliveries:
    """Correctly signed deliveries."""

    def test_unrelayed_event_is_ignored(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """A push event is acknowledged without dispatching."""
        result = _signed(client, "push", {"ref": "refs/heads/main"})
        assert result.status_code == 200
        assert result.text == "event ignored"
        assert recorder.requests == [], "no outbound call expected"

    def test_missing_trigger_token(self, recorder: DispatchRecorder) -> None:
        """A relayed event without a trigger token is a 500."""
        client = build_client(
            RelayConfig(webhook_secret=WEBHOOK_SECRET, trigger_token=""), recorder
        )
        result = _signed(client, "installation", _INSTALLATION)
        assert result.status_code == 500
        assert result.text == "missing AUTOMATION_REPO_TRIGGER_TOKEN"
        assert recorder.requests == [], "no outbound call expected"

    def test_dispatched(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """A relayed event is forwarded and the downstream status reported."""
        result = _signed(client, "installation", _INSTALLATION)
        assert result.status_code == 200
        assert result.text == "dispatched: 204"
        assert recorder.last_json == {
            "event_type": "leaderboard-bot-installed",
            "client_payload": {"github_event": "installation", "payload": _INSTALLATION},
        }

    def test_installation_repositories_dispatched(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """installation_repositories events are relayed too."""
        payload = {
            "action": "added",
            "repositories_added": [{"id": 2, "name": "b", "full_name": "o/b"}],
        }
        result = _signed(client, "installation_repositories", payload)
        assert result.text == "dispatched: 204"
        assert recorder.last_json["client_payload"]["github_event"] == (
            "installation_repositories"
        )

    def test_downstream_failure(self, relay_config: RelayConfig) -> None:
        """A downstream 401 becomes a 500 naming the status."""
        recorder = DispatchRecorder(status_code=401, response_text="Bad credentials")
        client = build_client(relay_config, recorder)
        result = _signed(client, "installation", _INSTALLATION)
        assert result.status_code == 500
        assert result.text == "dispatch failed: 401"
        assert len(recorder.requests) == 1, "exactly one attempt expected"

    def test_malformed_body_is_server_error(
        self, client: falcon.testing.TestClient, recorder: DispatchRecorder
    ) -> None:
        """A signed body that is not JSON fails as an unhandled 500."""
        body = b"not json"
        result = _delivery(
            client,
            event="installation",
            body=body,
            signature=sign(body, WEBHOOK_SECRET),
        )
        assert result.status_code == 500
        assert "not json" not in result.text, "internal details must not leak"
        assert recorder.requests == [], "no outbound call expected"
