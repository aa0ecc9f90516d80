"""Relay runtime entrypoint for container deployments.

``create_app`` is the Granian factory target
(``leaderboard_relay.runtime:create_app``). It reads ``RelayConfig`` from the
environment once, at process start. ``main`` reads ``ServerConfig`` for the
listener and logging, then hands the factory to Granian.

Configuration is driven by environment variables:

- ``GITHUB_WEBHOOK_SECRET``: webhook HMAC key
- ``AUTOMATION_REPO_TRIGGER_TOKEN``: token for the dispatch endpoint
- ``LEADERBOARD_RELAY_DISPATCH_TIMEOUT_S``: outbound timeout (default ``20``)
- ``LEADERBOARD_RELAY_HOST``: bind address (default ``0.0.0.0``)
- ``LEADERBOARD_RELAY_PORT``: listen port (default ``8080``)
- ``LEADERBOARD_RELAY_LOG_LEVEL``: log level (default ``INFO``)

Run the service directly with ``python -m leaderboard_relay.runtime``.
"""

from __future__ import annotations

import typing as typ

from leaderboard_relay.config import RelayConfig, ServerConfig
from leaderboard_relay.errors import RelayConfigError
from leaderboard_relay.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "load_server_config", "main"]

logger = get_logger(__name__)


def load_server_config() -> ServerConfig:
    """Read listener settings, exiting with status 1 when they are invalid."""
    try:
        return ServerConfig.from_env()
    except RelayConfigError as exc:
        log_error(logger, "%s", exc)
        raise SystemExit(1) from exc


def create_app() -> falcon.asgi.App:
    """Build the Falcon ASGI application from environment configuration."""
    from leaderboard_relay.api.app import AppDependencies
    from leaderboard_relay.api.app import create_app as _create_api_app

    config = RelayConfig.from_env()
    if not config.webhook_secret:
        log_warning(
            logger,
            "GITHUB_WEBHOOK_SECRET is empty; every delivery will be rejected",
        )
    return _create_api_app(AppDependencies(config=config))


def main() -> None:
    """Start the relay server using Granian."""
    from granian import Granian
    from granian.constants import Interfaces

    server_config = load_server_config()
    level, invalid_level = configure_logging(server_config.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid LEADERBOARD_RELAY_LOG_LEVEL %r, falling back to %s",
            server_config.log_level,
            level,
        )

    log_info(
        logger,
        "Starting leaderboard relay on %s:%d (log_level=%s)",
        server_config.host,
        server_config.port,
        level,
    )
    Granian(
        "leaderboard_relay.runtime:create_app",
        address=server_config.host,
        port=server_config.port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
