"""``peer`` CLI backed implementation of :class:`~fabric_snapshot.core.protocols.ChannelService`.

This module is the **only** place in the codebase that runs the Fabric
peer binary.  Subprocess failures are caught here and re-raised as
:class:`~fabric_snapshot.exceptions.ServiceError` subclasses — nothing
raw escapes the infrastructure boundary.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Sequence

from fabric_snapshot.config import SnapshotConfig
from fabric_snapshot.core.models import ServiceResult
from fabric_snapshot.exceptions import PeerNotFoundError, ServiceError, ServiceTimeoutError
from fabric_snapshot.infra.peer_detector import missing_peer_hint, split_peer_command

logger = logging.getLogger(__name__)

# Lines of stderr kept in the error message when a command fails.
_STDERR_TAIL_LINES = 5


class PeerChannelService:
    """Concrete :class:`ChannelService` that shells out to ``peer``.

    Usage::

        service = PeerChannelService(load_config())
        result = service.list_pending_snapshots("mychannel")

    The peer identity (address, MSP, TLS) is taken from *config* and
    handed to the child process through the ``CORE_PEER_*`` environment
    variables the peer binary reads.
    """

    def __init__(self, config: SnapshotConfig) -> None:
        self._config = config
        self._base_command: list[str] = split_peer_command(config.peer_command)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def submit_snapshot_request(
        self, channel_name: str, block_number: int,
    ) -> ServiceResult:
        return self._run(
            [
                "snapshot", "submitrequest",
                "-c", channel_name,
                "-b", str(block_number),
                *self._connection_args(),
            ],
        )

    def list_pending_snapshots(self, channel_name: str) -> ServiceResult:
        return self._run(
            ["snapshot", "listpending", "-c", channel_name, *self._connection_args()],
        )

    def cancel_snapshot_request(
        self, channel_name: str, block_number: int,
    ) -> ServiceResult:
        return self._run(
            [
                "snapshot", "cancelrequest",
                "-c", channel_name,
                "-b", str(block_number),
                *self._connection_args(),
            ],
        )

    def join_by_snapshot(self, snapshot_path: str) -> ServiceResult:
        return self._run(["channel", "joinbysnapshot", "--snapshotpath", snapshot_path])

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------

    def _connection_args(self) -> list[str]:
        """Flags the ``peer snapshot`` sub-commands need to reach the peer."""
        args: list[str] = []
        if self._config.peer_address:
            args += ["--peerAddress", self._config.peer_address]
        if self._config.tls_enabled and self._config.tls_root_cert_file:
            args += ["--tlsRootCertFile", self._config.tls_root_cert_file]
        return args

    def _build_env(self) -> dict[str, str]:
        env = dict(os.environ)
        overrides = {
            "CORE_PEER_ADDRESS": self._config.peer_address,
            "CORE_PEER_LOCALMSPID": self._config.msp_id,
            "CORE_PEER_MSPCONFIGPATH": self._config.msp_config_path,
            "CORE_PEER_TLS_ROOTCERT_FILE": self._config.tls_root_cert_file,
        }
        env.update({key: value for key, value in overrides.items() if value})
        env["CORE_PEER_TLS_ENABLED"] = "true" if self._config.tls_enabled else "false"
        return env

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _run(self, args: Sequence[str]) -> ServiceResult:
        """Run the peer command with *args* and capture its stdout.

        Raises
        ------
        PeerNotFoundError
            When the peer executable does not exist.
        ServiceTimeoutError
            When the command exceeds ``command_timeout``.
        ServiceError
            When the command exits with a non-zero status.
        """
        command = [*self._base_command, *args]
        logger.debug("running: %s", shlex.join(command))

        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self._build_env(),
                timeout=self._config.command_timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise PeerNotFoundError(
                f"{self._base_command[0]} is not installed or not on PATH.",
                hint=missing_peer_hint(self._base_command[0]),
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ServiceTimeoutError(
                f"{shlex.join(command[:len(self._base_command) + 2])} timed out "
                f"after {self._config.command_timeout:g}s",
                hint="Raise command_timeout in the configuration, or set it to 0 to wait indefinitely.",
            ) from exc
        except OSError as exc:
            raise ServiceError(f"Could not run {self._base_command[0]}: {exc}") from exc

        logger.debug("exit status %d", proc.returncode)
        if proc.returncode != 0:
            raise ServiceError(_failure_message(proc))

        return ServiceResult(stdout=proc.stdout or None)


def _failure_message(proc: subprocess.CompletedProcess[str]) -> str:
    """Summarise a failed command from the tail of its stderr."""
    lines = [line for line in (proc.stderr or "").splitlines() if line.strip()]
    if lines:
        return "\n".join(lines[-_STDERR_TAIL_LINES:])
    return f"peer exited with status {proc.returncode}"
