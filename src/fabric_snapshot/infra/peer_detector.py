"""Infrastructure: ``peer`` binary detection and install guidance.

Locates the executable named by the configured peer command on the
system PATH and suggests how to obtain it when missing.

Rules
-----
* Detection via :func:`shutil.which` only; the binary is never run here.
* No ``print()``: callers handle user-facing output.
"""

from __future__ import annotations

import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path

from fabric_snapshot.exceptions import ConfigError

INSTALL_COMMANDS: tuple[str, ...] = (
    "curl -sSLO https://raw.githubusercontent.com/hyperledger/fabric/main/scripts/install-fabric.sh",
    "bash install-fabric.sh binary",
)


# ---------------------------------------------------------------------------
# Detection result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class PeerStatus:
    """Result of a peer binary probe.

    Attributes
    ----------
    found : bool
        Whether the executable was located.
    path : Path | None
        Absolute path to the executable, or ``None``.
    executable : str
        Name of the first word of the peer command (``peer``, ``docker`` ...).
    install_commands : tuple[str, ...]
        Suggested shell commands for installing the Fabric binaries.
        Empty when the executable is already present.
    """

    found: bool
    path: Path | None
    executable: str
    install_commands: tuple[str, ...]


# ---------------------------------------------------------------------------
# Detection logic
# ---------------------------------------------------------------------------

def split_peer_command(peer_command: str) -> list[str]:
    """Split the configured peer command into argv words."""
    try:
        words = shlex.split(peer_command)
    except ValueError as exc:
        raise ConfigError(f"peer_command is not a valid command line: {exc}") from exc
    if not words:
        raise ConfigError("peer_command must not be empty")
    return words


def detect_peer(peer_command: str = "peer") -> PeerStatus:
    """Probe the system for the executable that runs *peer_command*.

    Returns a :class:`PeerStatus` regardless of whether it is present.
    """
    executable = split_peer_command(peer_command)[0]
    result = shutil.which(executable)

    if result is not None:
        return PeerStatus(
            found=True,
            path=Path(result).resolve(),
            executable=executable,
            install_commands=(),
        )

    commands = INSTALL_COMMANDS if Path(executable).name == "peer" else ()
    return PeerStatus(
        found=False,
        path=None,
        executable=executable,
        install_commands=commands,
    )


def missing_peer_hint(executable: str) -> str:
    """Return the operator hint shown when *executable* cannot be run."""
    if Path(executable).name != "peer":
        return "Check peer_command in your configuration."
    lines = ["Install the Fabric binaries with:"]
    lines.extend(f"  {cmd}" for cmd in INSTALL_COMMANDS)
    return "\n".join(lines)
