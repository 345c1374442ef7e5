"""Configuration for the snapshot command.

The configuration is an explicit :class:`SnapshotConfig` value passed to
the argument parser, the interactive prompts and the peer adapter.
Nothing reads ambient state after :func:`load_config` returns.

Lookup order for the file: ``--config`` flag, ``FABRIC_SNAPSHOT_CONFIG``
environment variable, then ``~/.fabric_snapshot/config.toml``.  A missing
file yields the defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fabric_snapshot.exceptions import ConfigError

DEFAULT_CONFIG_PATH = Path.home() / ".fabric_snapshot" / "config.toml"
CONFIG_PATH_ENV_VAR = "FABRIC_SNAPSHOT_CONFIG"
PEER_ADDRESS_ENV_VAR = "FABRIC_SNAPSHOT_PEER_ADDRESS"
CHANNELS_ENV_VAR = "FABRIC_SNAPSHOT_CHANNELS"
DEFAULT_COMMAND_TIMEOUT = 300.0


@dataclass(frozen=True)
class SnapshotConfig:
    channels: tuple[str, ...] = ()
    peer_command: str = "peer"
    peer_address: str | None = None
    msp_id: str | None = None
    msp_config_path: str | None = None
    tls_enabled: bool = False
    tls_root_cert_file: str | None = None
    command_timeout: float | None = DEFAULT_COMMAND_TIMEOUT
    """Seconds before a peer command is abandoned; ``None`` waits forever."""
    source: Path | None = None
    """File the values were read from, ``None`` when defaults were used."""


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path:
        return Path(path).expanduser()
    env_path = os.getenv(CONFIG_PATH_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def _load_toml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:  # Python 3.11+
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _to_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "1", "yes", "on"}:
            return True
        if lowered in {"false", "0", "no", "off"}:
            return False
    raise ConfigError(f"{field_name} must be a boolean")


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


def _to_channels(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list):
        items = value
    else:
        raise ConfigError("channels must be a list of channel names")
    channels: list[str] = []
    for item in items:
        if not isinstance(item, str):
            raise ConfigError("channels must be a list of channel names")
        name = item.strip()
        if name and name not in channels:
            channels.append(name)
    return tuple(channels)


def _to_timeout(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError("command_timeout must be a number of seconds")
    if value < 0:
        raise ConfigError("command_timeout must not be negative")
    return float(value) if value > 0 else None


def load_config(path: str | Path | None = None) -> SnapshotConfig:
    config_path = resolve_config_path(path)
    if config_path.exists():
        parsed = _load_toml(config_path)
        source_path: Path | None = config_path
    else:
        parsed = {}
        source_path = None

    section = parsed.get("snapshot")
    if isinstance(section, dict):
        source = section
    elif section is None:
        source = parsed
    else:
        raise ConfigError("[snapshot] must be a table")

    env_channels = os.getenv(CHANNELS_ENV_VAR)
    channels = _to_channels(env_channels if env_channels else source.get("channels", []))

    peer_command = str(source.get("peer_command", "peer")).strip()
    if not peer_command:
        raise ConfigError("peer_command must not be empty")

    env_peer_address = os.getenv(PEER_ADDRESS_ENV_VAR)
    peer_address = _optional_str(env_peer_address or source.get("peer_address"))

    tls_enabled = _to_bool(source.get("tls_enabled", False), "tls_enabled")
    tls_root_cert_file = _optional_str(source.get("tls_root_cert_file"))
    if tls_enabled and tls_root_cert_file is None:
        raise ConfigError("tls_root_cert_file is required when tls_enabled is true")

    return SnapshotConfig(
        channels=channels,
        peer_command=peer_command,
        peer_address=peer_address,
        msp_id=_optional_str(source.get("msp_id")),
        msp_config_path=_optional_str(source.get("msp_config_path")),
        tls_enabled=tls_enabled,
        tls_root_cert_file=tls_root_cert_file,
        command_timeout=_to_timeout(source.get("command_timeout", DEFAULT_COMMAND_TIMEOUT)),
        source=source_path,
    )
