"""Process-wide configuration for the webhook relay.

Configuration is loaded once at startup and passed explicitly to the
authenticator and dispatcher. Both credentials may be empty: an empty secret
makes every signature unmatchable, and an empty trigger token fails each
recognised delivery with a configuration error.

Usage
-----
Load configuration from the environment:

>>> import os
>>> os.environ["GITHUB_WEBHOOK_SECRET"] = "s3cret"
>>> config = RelayConfig.from_env()
>>> config.webhook_secret
's3cret'

"""

from __future__ import annotations

import dataclasses as dc
import math
import os

from leaderboard_relay.errors import RelayConfigError

__all__ = [
    "DISPATCH_EVENT_TYPE",
    "DISPATCH_OWNER",
    "DISPATCH_REPO",
    "DISPATCH_URL",
    "DISPATCH_USER_AGENT",
    "RelayConfig",
    "ServerConfig",
]

# Downstream repository_dispatch target
DISPATCH_OWNER = "rithviknishad"
DISPATCH_REPO = "leaderboard-bot"
DISPATCH_URL = f"https://api.github.com/repos/{DISPATCH_OWNER}/{DISPATCH_REPO}/dispatches"
DISPATCH_EVENT_TYPE = "leaderboard-bot-installed"
DISPATCH_USER_AGENT = "leaderboard-bot-worker"

_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - bind all interfaces for container
_DEFAULT_PORT = 8080
_MIN_PORT = 1
_MAX_PORT = 65535


@dc.dataclass(frozen=True, slots=True, repr=False)
class RelayConfig:
    """Credentials and limits shared by every request.

    Attributes
    ----------
    webhook_secret
        HMAC key configured in the GitHub App settings. Empty when unset.
    trigger_token
        Token sent to the dispatch endpoint. Empty when unset.
    dispatch_timeout_s
        Timeout applied to the single outbound dispatch call.

    """

    webhook_secret: str = ""
    trigger_token: str = ""
    dispatch_timeout_s: float = _DEFAULT_TIMEOUT_S

    def __repr__(self) -> str:
        """Describe the configuration without revealing credentials."""
        return (
            f"RelayConfig(webhook_secret_set={bool(self.webhook_secret)}, "
            f"trigger_token_set={bool(self.trigger_token)}, "
            f"dispatch_timeout_s={self.dispatch_timeout_s})"
        )

    @staticmethod
    def _parse_timeout(raw: str | None) -> float:
        if raw is None or not raw.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            value = float(raw)
        except ValueError as exc:
            raise RelayConfigError.invalid_timeout(raw) from exc
        if not math.isfinite(value) or value <= 0:
            raise RelayConfigError.invalid_timeout(raw)
        return value

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Create configuration from environment variables.

        Reads ``GITHUB_WEBHOOK_SECRET``, ``AUTOMATION_REPO_TRIGGER_TOKEN``
        and ``LEADERBOARD_RELAY_DISPATCH_TIMEOUT_S``. Missing credentials
        become empty strings.

        Raises
        ------
        RelayConfigError
            If the dispatch timeout is not a positive number.

        """
        return cls(
            webhook_secret=os.environ.get("GITHUB_WEBHOOK_SECRET", ""),
            trigger_token=os.environ.get("AUTOMATION_REPO_TRIGGER_TOKEN", ""),
            dispatch_timeout_s=cls._parse_timeout(
                os.environ.get("LEADERBOARD_RELAY_DISPATCH_TIMEOUT_S")
            ),
        )


@dc.dataclass(frozen=True, slots=True)
class ServerConfig:
    """Listener settings for the Granian server.

    ``log_level`` is kept as given; ``configure_logging`` normalizes it and
    reports unknown names.
    """

    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    log_level: str = "INFO"

    @staticmethod
    def _parse_port(raw: str | None) -> int:
        if raw is None or not raw.strip():
            return _DEFAULT_PORT
        try:
            port = int(raw)
        except ValueError as exc:
            raise RelayConfigError.invalid_port(raw) from exc
        if not _MIN_PORT <= port <= _MAX_PORT:
            raise RelayConfigError.invalid_port(raw)
        return port

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Read ``LEADERBOARD_RELAY_HOST``, ``_PORT`` and ``_LOG_LEVEL``.

        Raises
        ------
        RelayConfigError
            If the port is not an integer in the TCP range.

        """
        return cls(
            host=os.environ.get("LEADERBOARD_RELAY_HOST") or _DEFAULT_HOST,
            port=cls._parse_port(os.environ.get("LEADERBOARD_RELAY_PORT")),
            log_level=os.environ.get("LEADERBOARD_RELAY_LOG_LEVEL", "INFO"),
        )
