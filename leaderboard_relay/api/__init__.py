"""Falcon ASGI surface of the webhook relay.

Usage
-----
Build the application::

    from leaderboard_relay.api import create_app

    app = create_app(AppDependencies(config=RelayConfig.from_env()))

Public API
----------
create_app
    Application factory registering the webhook route, the health probes
    and the relay error handler.
"""

from leaderboard_relay.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
