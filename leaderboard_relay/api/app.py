"""Application factory for the relay's Falcon ASGI application.

Usage
-----
Build an app from explicit configuration::

    from leaderboard_relay.api.app import AppDependencies, create_app
    from leaderboard_relay.config import RelayConfig

    app = create_app(AppDependencies(config=RelayConfig.from_env()))

Inject the outbound client in tests::

    deps = AppDependencies(config=config, dispatch_client=client)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from leaderboard_relay.api.errors import handle_relay_error
from leaderboard_relay.api.health.resources import HealthResource, ReadyResource
from leaderboard_relay.api.webhook.resources import WebhookResource
from leaderboard_relay.errors import RelayError
from leaderboard_relay.relay import WebhookRelay

if typ.TYPE_CHECKING:
    from leaderboard_relay.config import RelayConfig
    from leaderboard_relay.dispatch import RepositoryDispatchClient
    from leaderboard_relay.observability import RelayEventLogger

__all__ = ["WEBHOOK_ROUTE", "AppDependencies", "create_app"]

WEBHOOK_ROUTE = "/"


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    config
        Process-wide relay configuration.
    dispatch_client
        Outbound dispatch client. A default client targeting GitHub is used
        when ``None``.
    event_logger
        Structured event logger. A default logger is used when ``None``.

    """

    config: RelayConfig
    dispatch_client: RepositoryDispatchClient | None = None
    event_logger: RelayEventLogger | None = None


def create_app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    Registers the webhook resource at ``/``, the ``/health`` and ``/ready``
    probes, and the ``RelayError`` handler.

    Parameters
    ----------
    dependencies
        Configuration and optional collaborators.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    relay = WebhookRelay(
        dependencies.config,
        dispatch_client=dependencies.dispatch_client,
        event_logger=dependencies.event_logger,
    )

    app = falcon.asgi.App()

    app.add_route(WEBHOOK_ROUTE, WebhookResource(relay))
    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource())

    app.add_error_handler(RelayError, handle_relay_error)

    return app
