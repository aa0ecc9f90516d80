"""Forward installation events to the automation repository.

Verified deliveries for ``installation`` and ``installation_repositories``
are re-sent as a ``repository_dispatch`` to the automation repository,
where a GitHub Actions workflow performs the actual setup. Other event types
are acknowledged and dropped.

The outbound call is made exactly once per delivery. Retrying is left to
GitHub, which redelivers webhooks that fail.

Usage
-----
Relay a verified delivery::

    dispatcher = EventDispatcher(config)
    result = await dispatcher.dispatch("installation", body)

Inject a transport in tests::

    client = RepositoryDispatchClient(
        config, http_client=httpx.AsyncClient(transport=transport)
    )
    dispatcher = EventDispatcher(config, client=client)

"""

from __future__ import annotations

import enum
import typing as typ

import httpx
import msgspec

from leaderboard_relay.config import (
    DISPATCH_EVENT_TYPE,
    DISPATCH_URL,
    DISPATCH_USER_AGENT,
)
from leaderboard_relay.errors import ConfigurationError, DownstreamError
from leaderboard_relay.observability import RelayEventLogger

if typ.TYPE_CHECKING:
    from leaderboard_relay.config import RelayConfig

__all__ = [
    "RELAYED_EVENT_TYPES",
    "ClientPayload",
    "DispatchOutcome",
    "DispatchPayload",
    "DispatchResult",
    "EventDispatcher",
    "EventEnvelope",
    "RepositoryDispatchClient",
    "build_dispatch_payload",
    "parse_envelope",
]

# Parsed webhook body, forwarded without schema enforcement
EventEnvelope: typ.TypeAlias = dict[str, typ.Any]

RELAYED_EVENT_TYPES: frozenset[str] = frozenset(
    {"installation", "installation_repositories"}
)

_GITHUB_MEDIA_TYPE = "application/vnd.github+json"


class ClientPayload(msgspec.Struct, kw_only=True, frozen=True):
    """The ``client_payload`` object of a repository dispatch.

    Attributes
    ----------
    github_event
        The ``x-github-event`` value of the original delivery.
    payload
        The full parsed delivery body.

    """

    github_event: str
    payload: EventEnvelope


class DispatchPayload(msgspec.Struct, kw_only=True, frozen=True):
    """Request body sent to the ``/dispatches`` endpoint."""

    event_type: str
    client_payload: ClientPayload


class DispatchOutcome(enum.StrEnum):
    """Terminal states of a successful dispatch attempt."""

    IGNORED = "ignored"
    DISPATCHED = "dispatched"


class DispatchResult(msgspec.Struct, kw_only=True, frozen=True):
    """Result of relaying one delivery.

    ``status_code`` holds the downstream status for ``DISPATCHED`` and is
    ``None`` for ``IGNORED``.
    """

    outcome: DispatchOutcome
    status_code: int | None = None

    @property
    def message(self) -> str:
        """Return the response body reported to the webhook sender."""
        if self.outcome is DispatchOutcome.IGNORED:
            return "event ignored"
        return f"dispatched: {self.status_code}"


def parse_envelope(body: bytes) -> EventEnvelope:
    """Decode a delivery body into an event envelope.

    Raises
    ------
    msgspec.DecodeError
        If the body is not JSON or is not a JSON object.

    """
    return msgspec.json.decode(body, type=dict[str, typ.Any])


def build_dispatch_payload(event_type: str, envelope: EventEnvelope) -> DispatchPayload:
    """Wrap a delivery in the automation repository's dispatch payload."""
    return DispatchPayload(
        event_type=DISPATCH_EVENT_TYPE,
        client_payload=ClientPayload(github_event=event_type, payload=envelope),
    )


class RepositoryDispatchClient:
    """POST dispatch payloads to the automation repository.

    When no ``http_client`` is supplied a fresh ``httpx.AsyncClient`` is
    opened and closed around each call, so nothing outlives a request.
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
        url: str = DISPATCH_URL,
    ) -> None:
        """Initialise the client with relay configuration."""
        self._config = config
        self._http_client = http_client
        self._url = url

    def _headers(self) -> dict[str, str]:
        return {
            "authorization": f"token {self._config.trigger_token}",
            "accept": _GITHUB_MEDIA_TYPE,
            "content-type": "application/json",
            "user-agent": DISPATCH_USER_AGENT,
        }

    async def send(self, payload: DispatchPayload) -> httpx.Response:
        """Send ``payload`` once and return the downstream response.

        The response body is read before returning so callers can inspect
        it after the connection is released.
        """
        content = msgspec.json.encode(payload)
        if self._http_client is not None:
            return await self._post(self._http_client, content)

        async with httpx.AsyncClient(timeout=self._config.dispatch_timeout_s) as client:
            return await self._post(client, content)

    async def _post(self, client: httpx.AsyncClient, content: bytes) -> httpx.Response:
        response = await client.post(self._url, content=content, headers=self._headers())
        await response.aread()
        return response


class EventDispatcher:
    """Turn a verified delivery into an ignore or a repository dispatch."""

    def __init__(
        self,
        config: RelayConfig,
        *,
        client: RepositoryDispatchClient | None = None,
        event_logger: RelayEventLogger | None = None,
    ) -> None:
        """Initialise the dispatcher with configuration and collaborators."""
        self._config = config
        self._client = client or RepositoryDispatchClient(config)
        self._events = event_logger or RelayEventLogger()

    async def dispatch(self, event_type: str, body: bytes) -> DispatchResult:
        """Relay one verified delivery.

        The body is parsed before the event type is checked, so a malformed
        body fails even for event types that would be ignored.

        Parameters
        ----------
        event_type
            Value of the delivery's ``x-github-event`` header.
        body
            Raw delivery body.

        Returns
        -------
        DispatchResult
            ``IGNORED`` for event types that are not relayed, otherwise
            ``DISPATCHED`` with the downstream status.

        Raises
        ------
        msgspec.DecodeError
            If the body is not a JSON object.
        ConfigurationError
            If no trigger token is configured.
        DownstreamError
            If the dispatch endpoint answers with a non-2xx status.

        """
        envelope = parse_envelope(body)

        if event_type not in RELAYED_EVENT_TYPES:
            self._events.log_event_ignored(event_type=event_type)
            return DispatchResult(outcome=DispatchOutcome.IGNORED)

        if not self._config.trigger_token:
            self._events.log_token_missing(event_type=event_type)
            raise ConfigurationError.missing_trigger_token()

        response = await self._client.send(build_dispatch_payload(event_type, envelope))

        if not response.is_success:
            self._events.log_dispatch_failed(
                event_type=event_type,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise DownstreamError(response.status_code)

        self._events.log_dispatch_completed(
            event_type=event_type,
            envelope=envelope,
            status_code=response.status_code,
        )
        return DispatchResult(
            outcome=DispatchOutcome.DISPATCHED,
            status_code=response.status_code,
        )
