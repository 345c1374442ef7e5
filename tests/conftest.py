"""Shared pytest fixtures and configuration for the fabric-snapshot test suite.

Guidelines
----------
* No peer binary is ever executed — ``subprocess.run`` is mocked at the
  infra boundary.
* questionary is mocked; no test needs a terminal.
* Tests must not depend on the developer's own configuration file.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fabric_snapshot.core.models import ServiceResult
from fabric_snapshot.core.protocols import ChannelService


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Point config lookup at a file that does not exist yet."""
    config_path = tmp_path / "config.toml"
    monkeypatch.setenv("FABRIC_SNAPSHOT_CONFIG", str(config_path))
    monkeypatch.delenv("FABRIC_SNAPSHOT_PEER_ADDRESS", raising=False)
    monkeypatch.delenv("FABRIC_SNAPSHOT_CHANNELS", raising=False)
    return config_path


@pytest.fixture
def config_file(_isolated_config: Path) -> Path:
    """Path of the config file the CLI will read; write to it to configure."""
    return _isolated_config


@pytest.fixture
def channel_service() -> MagicMock:
    """A mock channel service whose methods all succeed with no output."""
    service = MagicMock(spec=ChannelService)
    service.submit_snapshot_request.return_value = ServiceResult()
    service.list_pending_snapshots.return_value = ServiceResult()
    service.cancel_snapshot_request.return_value = ServiceResult()
    service.join_by_snapshot.return_value = ServiceResult()
    return service
