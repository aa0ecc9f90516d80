"""Structured log events for the webhook relay.

Every event is a single femtologging line of the form
``[relay.event.type] key=value ...`` so log aggregators can parse it.
Credentials never appear in these messages.

Usage
-----
>>> event_logger = RelayEventLogger()
>>> event_logger.log_event_ignored(event_type="push")

"""

from __future__ import annotations

import enum
import typing as typ

from leaderboard_relay.logging import get_logger, log_error, log_info, log_warning

if typ.TYPE_CHECKING:
    from leaderboard_relay.errors import AuthenticationError

logger = get_logger(__name__)

# Downstream bodies can be large HTML error pages
_BODY_PREVIEW_LIMIT = 500


class RelayEventType(enum.StrEnum):
    """Structured log event types emitted while relaying a delivery."""

    WEBHOOK_REJECTED = "relay.webhook.rejected"
    SECRET_MISSING = "relay.config.secret_missing"
    TOKEN_MISSING = "relay.config.token_missing"
    EVENT_IGNORED = "relay.event.ignored"
    DISPATCH_COMPLETED = "relay.dispatch.completed"
    DISPATCH_FAILED = "relay.dispatch.failed"


def _installation_summary(envelope: typ.Mapping[str, typ.Any]) -> tuple[object, object]:
    """Return ``(installation_id, account_login)`` when present."""
    installation = envelope.get("installation")
    if not isinstance(installation, dict):
        return (None, None)
    account = installation.get("account")
    login = account.get("login") if isinstance(account, dict) else None
    return (installation.get("id"), login)


class RelayEventLogger:
    """Emit relay events via femtologging.

    Rejections and a missing webhook secret are WARNING. A missing trigger
    token and downstream failures are ERROR.
    """

    def log_webhook_rejected(
        self, error: AuthenticationError, *, event_type: str | None
    ) -> None:
        """Log a delivery that failed signature checks."""
        log_warning(
            logger,
            "[%s] reason=%s event_type=%s",
            RelayEventType.WEBHOOK_REJECTED,
            error.reason,
            event_type,
        )

    def log_secret_missing(self) -> None:
        """Log that ``GITHUB_WEBHOOK_SECRET`` is not configured."""
        log_warning(
            logger,
            "[%s] GITHUB_WEBHOOK_SECRET is not configured",
            RelayEventType.SECRET_MISSING,
        )

    def log_token_missing(self, *, event_type: str) -> None:
        """Log that ``AUTOMATION_REPO_TRIGGER_TOKEN`` is not configured."""
        log_error(
            logger,
            "[%s] AUTOMATION_REPO_TRIGGER_TOKEN is not configured event_type=%s",
            RelayEventType.TOKEN_MISSING,
            event_type,
        )

    def log_event_ignored(self, *, event_type: str) -> None:
        """Log a verified delivery whose event type is not relayed."""
        log_info(
            logger,
            "[%s] event_type=%s",
            RelayEventType.EVENT_IGNORED,
            event_type,
        )

    def log_dispatch_completed(
        self,
        *,
        event_type: str,
        envelope: typ.Mapping[str, typ.Any],
        status_code: int,
    ) -> None:
        """Log a successful repository dispatch."""
        installation_id, account = _installation_summary(envelope)
        log_info(
            logger,
            "[%s] event_type=%s action=%s installation_id=%s account=%s "
            "status=%d",
            RelayEventType.DISPATCH_COMPLETED,
            event_type,
            envelope.get("action"),
            installation_id,
            account,
            status_code,
        )

    def log_dispatch_failed(
        self, *, event_type: str, status_code: int, response_text: str
    ) -> None:
        """Log a non-2xx answer from the dispatch endpoint."""
        log_error(
            logger,
            "[%s] event_type=%s status=%d body=%s",
            RelayEventType.DISPATCH_FAILED,
            event_type,
            status_code,
            response_text[:_BODY_PREVIEW_LIMIT],
        )
