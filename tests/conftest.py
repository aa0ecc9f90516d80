"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import typing as typ
from unittest import mock

import pytest

from leaderboard_relay.config import RelayConfig
from leaderboard_relay.observability import RelayEventLogger
from tests.helpers import (
    TRIGGER_TOKEN,
    WEBHOOK_SECRET,
    DispatchRecorder,
    build_client,
)

if typ.TYPE_CHECKING:
    import falcon.testing


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return configuration with both credentials set."""
    return RelayConfig(webhook_secret=WEBHOOK_SECRET, trigger_token=TRIGGER_TOKEN)


@pytest.fixture
def recorder() -> DispatchRecorder:
    """Return a fake dispatch endpoint answering 204."""
    return DispatchRecorder()


@pytest.fixture
def client(
    relay_config: RelayConfig, recorder: DispatchRecorder
) -> falcon.testing.TestClient:
    """Return a test client for the fully configured relay."""
    return build_client(relay_config, recorder)


@pytest.fixture
def event_logger() -> mock.MagicMock:
    """Return a mock standing in for the structured event logger."""
    return mock.MagicMock(spec=RelayEventLogger)
