"""GitHub App webhook relay for the leaderboard bot.

Verified ``installation`` and ``installation_repositories`` deliveries are
forwarded to the automation repository as a ``repository_dispatch``.
"""

from leaderboard_relay.config import RelayConfig
from leaderboard_relay.relay import RelayResponse, WebhookRelay

__all__ = ["RelayConfig", "RelayResponse", "WebhookRelay"]
