"""Error taxonomy for the webhook relay.

Every failure the relay reports to its caller is a ``RelayError`` subclass.
Each instance carries the HTTP status and the plain-text body returned to
GitHub, so the API layer maps errors to responses without inspecting them.

Usage
-----
Raise a specific failure from a pipeline stage::

    raise AuthenticationError.invalid_signature()

Translate it into a response::

    resp.status = exc.status
    resp.text = exc.body

"""

from __future__ import annotations

from http import HTTPStatus

__all__ = [
    "AuthenticationError",
    "ClientInputError",
    "ConfigurationError",
    "DownstreamError",
    "RelayConfigError",
    "RelayError",
]


class RelayError(Exception):
    """Base class for failures surfaced to the webhook sender.

    Attributes
    ----------
    status
        HTTP status returned to the caller.
    body
        Human-readable response body. Never contains internal details.

    """

    def __init__(self, body: str, *, status: HTTPStatus) -> None:
        """Initialise with the response body and status."""
        self.status = status
        self.body = body
        super().__init__(body)


class ClientInputError(RelayError):
    """Raised when the delivery is missing information the caller controls."""

    @classmethod
    def missing_event_header(cls) -> ClientInputError:
        """Return an error for a delivery without ``x-github-event``."""
        return cls("missing x-github-event header", status=HTTPStatus.BAD_REQUEST)


class AuthenticationError(RelayError):
    """Raised when a delivery cannot be proven to come from GitHub."""

    def __init__(self, body: str, *, reason: str) -> None:
        """Initialise with the response body and a short log reason."""
        self.reason = reason
        super().__init__(body, status=HTTPStatus.UNAUTHORIZED)

    @classmethod
    def missing_signature_header(cls) -> AuthenticationError:
        """Return an error for a delivery without ``x-hub-signature-256``."""
        return cls("missing x-hub-signature-256 header", reason="missing_signature")

    @classmethod
    def invalid_signature(cls) -> AuthenticationError:
        """Return an error for a signature that does not match the body."""
        return cls("invalid signature", reason="invalid_signature")


class ConfigurationError(RelayError):
    """Raised when the operator has not supplied a required credential."""

    @classmethod
    def missing_trigger_token(cls) -> ConfigurationError:
        """Return an error when ``AUTOMATION_REPO_TRIGGER_TOKEN`` is empty."""
        return cls(
            "missing AUTOMATION_REPO_TRIGGER_TOKEN",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )


class DownstreamError(RelayError):
    """Raised when the dispatch endpoint answers with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        """Initialise with the downstream HTTP status code."""
        self.status_code = status_code
        super().__init__(
            f"dispatch failed: {status_code}",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
        )


class RelayConfigError(ValueError):
    """Raised when relay configuration read from the environment is invalid."""

    @classmethod
    def invalid_timeout(cls, raw: str) -> RelayConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(
            f"LEADERBOARD_RELAY_DISPATCH_TIMEOUT_S must be a positive number, "
            f"got: {raw!r}"
        )

    @classmethod
    def invalid_port(cls, raw: str) -> RelayConfigError:
        """Return an error for a port outside the TCP range."""
        return cls(f"LEADERBOARD_RELAY_PORT must be an integer 1-65535, got: {raw!r}")
