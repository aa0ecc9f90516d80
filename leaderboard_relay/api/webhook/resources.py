"""Falcon resource receiving GitHub App webhook deliveries.

Every HTTP method is routed to the relay. Only POST is treated as a
delivery; the relay acknowledges the others with ``ok`` so the endpoint
doubles as a liveness check.

Usage
-----
::

    app.add_route("/", WebhookResource(relay))

"""

from __future__ import annotations

import typing as typ

import falcon.constants

from leaderboard_relay.api.errors import write_relay_response
from leaderboard_relay.auth import InboundWebhook

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from leaderboard_relay.relay import WebhookRelay

__all__ = ["WebhookResource"]


class WebhookResource:
    """Relay each request to ``WebhookRelay`` and write its response."""

    def __init__(self, relay: WebhookRelay) -> None:
        """Initialise the resource with the request pipeline."""
        self._relay = relay

    async def _relay_request(self, req: Request, resp: Response) -> None:
        body = await req.stream.read()
        request = InboundWebhook.from_headers(req.method, req.headers, body)
        write_relay_response(resp, await self._relay.handle(request))

    async def on_post(self, req: Request, resp: Response) -> None:
        """Handle a webhook delivery."""
        await self._relay_request(req, resp)

    async def on_get(self, req: Request, resp: Response) -> None:
        """Acknowledge a liveness check."""
        await self._relay_request(req, resp)


# Every method Falcon routes, including WebDAV verbs, reaches the relay.
for _method in falcon.constants.COMBINED_METHODS:
    if _method not in {"GET", "POST"}:
        setattr(WebhookResource, f"on_{_method.lower()}", WebhookResource.on_get)
del _method
