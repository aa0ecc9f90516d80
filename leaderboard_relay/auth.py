"""Authenticate inbound GitHub App webhook deliveries.

Only POST requests are deliveries. Anything else is a liveness check and is
acknowledged without looking at headers or body. A POST must name its event
type and carry an ``x-hub-signature-256`` header that matches the
HMAC-SHA256 of the raw body under the configured secret.

Usage
-----
>>> request = InboundWebhook.from_headers("GET", {}, b"")
>>> authenticate(request, secret="s3cret").acknowledgement
'ok'

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from leaderboard_relay.errors import AuthenticationError, ClientInputError
from leaderboard_relay.observability import RelayEventLogger
from leaderboard_relay.signature import verify_signature

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = [
    "ACKNOWLEDGEMENT",
    "EVENT_HEADER",
    "SIGNATURE_HEADER",
    "AuthResult",
    "InboundWebhook",
    "authenticate",
]

EVENT_HEADER = "x-github-event"
SIGNATURE_HEADER = "x-hub-signature-256"
ACKNOWLEDGEMENT = "ok"

_DELIVERY_METHOD = "POST"


@dc.dataclass(frozen=True, slots=True)
class InboundWebhook:
    """An HTTP request as received by the relay.

    Attributes
    ----------
    method
        Upper-case HTTP method.
    headers
        Header mapping with lower-case names.
    body
        Raw request body, exactly as signed by GitHub.

    """

    method: str
    headers: cabc.Mapping[str, str]
    body: bytes

    @classmethod
    def from_headers(
        cls,
        method: str,
        headers: cabc.Mapping[str, str],
        body: bytes,
    ) -> InboundWebhook:
        """Build a request, normalizing method and header-name case."""
        return cls(
            method=method.upper(),
            headers={name.lower(): value for name, value in headers.items()},
            body=body,
        )

    def header(self, name: str) -> str | None:
        """Return a header value by case-insensitive name."""
        return self.headers.get(name.lower())


@dc.dataclass(frozen=True, slots=True)
class AuthResult:
    """Outcome of a successful authentication.

    Exactly one shape is populated: ``acknowledgement`` for requests that
    are not deliveries, or ``event_type`` and ``body`` for a verified
    delivery.
    """

    event_type: str | None = None
    body: bytes = b""
    acknowledgement: str | None = None


def authenticate(
    request: InboundWebhook,
    *,
    secret: str,
    event_logger: RelayEventLogger | None = None,
) -> AuthResult:
    """Decide whether ``request`` is a genuine webhook delivery.

    Parameters
    ----------
    request
        The inbound request.
    secret
        Webhook secret. When empty the misconfiguration is logged and the
        signature can never match.
    event_logger
        Receives rejection and configuration events.

    Returns
    -------
    AuthResult
        An acknowledgement for non-POST requests, otherwise the verified
        event type and raw body.

    Raises
    ------
    ClientInputError
        If ``x-github-event`` is absent.
    AuthenticationError
        If the signature header is absent or does not match.

    """
    if request.method != _DELIVERY_METHOD:
        return AuthResult(acknowledgement=ACKNOWLEDGEMENT)

    events = event_logger or RelayEventLogger()

    event_type = request.header(EVENT_HEADER)
    if not event_type:
        raise ClientInputError.missing_event_header()

    signature = request.header(SIGNATURE_HEADER)
    if signature is None:
        error = AuthenticationError.missing_signature_header()
        events.log_webhook_rejected(error, event_type=event_type)
        raise error

    if not secret:
        events.log_secret_missing()

    if not verify_signature(request.body, signature, secret):
        error = AuthenticationError.invalid_signature()
        events.log_webhook_rejected(error, event_type=event_type)
        raise error

    return AuthResult(event_type=event_type, body=request.body)
