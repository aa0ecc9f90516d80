"""Falcon error handler for relay failures.

``RelayError`` already knows its status and caller-facing body, so one
handler covers the whole taxonomy. Exceptions outside the taxonomy are left
to Falcon's default handler, which answers with a generic 500.

Usage
-----
::

    app.add_error_handler(RelayError, handle_relay_error)

"""

from __future__ import annotations

import typing as typ

import falcon

from leaderboard_relay.relay import RelayResponse

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from leaderboard_relay.errors import RelayError

__all__ = ["handle_relay_error", "write_relay_response"]


def write_relay_response(resp: Response, relay_response: RelayResponse) -> None:
    """Copy a ``RelayResponse`` onto a Falcon response as plain text."""
    resp.status = relay_response.status
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = relay_response.body


async def handle_relay_error(
    _req: Request,
    resp: Response,
    ex: RelayError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a ``RelayError`` to its status and plain-text body.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and body are set.
    ex
        The relay failure.
    _params
        URI template parameters (unused).

    """
    write_relay_response(resp, RelayResponse.from_error(ex))
