"""Request pipeline joining authentication and dispatch.

``WebhookRelay.handle`` maps one inbound request to one ``RelayResponse``.
Failures are raised as ``RelayError`` subclasses and carry their own status
and body; the API layer turns them into responses.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from http import HTTPStatus

from leaderboard_relay.auth import authenticate
from leaderboard_relay.dispatch import EventDispatcher
from leaderboard_relay.observability import RelayEventLogger

if typ.TYPE_CHECKING:
    from leaderboard_relay.auth import InboundWebhook
    from leaderboard_relay.config import RelayConfig
    from leaderboard_relay.dispatch import RepositoryDispatchClient
    from leaderboard_relay.errors import RelayError

__all__ = ["RelayResponse", "WebhookRelay"]


@dc.dataclass(frozen=True, slots=True)
class RelayResponse:
    """Status and plain-text body returned to the webhook sender."""

    status: HTTPStatus
    body: str

    @classmethod
    def from_error(cls, error: RelayError) -> RelayResponse:
        """Build the response for a relay failure."""
        return cls(status=error.status, body=error.body)


class WebhookRelay:
    """Authenticate a request and, when it is a delivery, dispatch it."""

    def __init__(
        self,
        config: RelayConfig,
        *,
        dispatch_client: RepositoryDispatchClient | None = None,
        event_logger: RelayEventLogger | None = None,
    ) -> None:
        """Initialise the relay.

        Parameters
        ----------
        config
            Process-wide credentials and limits.
        dispatch_client
            Outbound client; a default one targeting GitHub is built when
            omitted.
        event_logger
            Receives structured relay events.

        """
        self._config = config
        self._events = event_logger or RelayEventLogger()
        self._dispatcher = EventDispatcher(
            config,
            client=dispatch_client,
            event_logger=self._events,
        )

    async def handle(self, request: InboundWebhook) -> RelayResponse:
        """Process one request.

        Raises
        ------
        RelayError
            For every rejected or failed delivery.

        """
        auth = authenticate(
            request,
            secret=self._config.webhook_secret,
            event_logger=self._events,
        )
        if auth.event_type is None:
            return RelayResponse(status=HTTPStatus.OK, body=auth.acknowledgement or "")

        result = await self._dispatcher.dispatch(auth.event_type, auth.body)
        return RelayResponse(status=HTTPStatus.OK, body=result.message)
