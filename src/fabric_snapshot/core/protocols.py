"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations.
"""

from __future__ import annotations

from typing import Protocol

from fabric_snapshot.core.models import ServiceResult


class ChannelService(Protocol):
    """Contract for channel-management backends.

    One method per snapshot operation.  Each call blocks until the
    external action completes.  Implementations must map all
    backend-specific failures to
    :class:`~fabric_snapshot.exceptions.ServiceError` subclasses.
    """

    def submit_snapshot_request(
        self, channel_name: str, block_number: int,
    ) -> ServiceResult:
        """Request a snapshot of *channel_name* at *block_number*."""
        ...  # pragma: no cover

    def list_pending_snapshots(self, channel_name: str) -> ServiceResult:
        """List the pending snapshot requests of *channel_name*."""
        ...  # pragma: no cover

    def cancel_snapshot_request(
        self, channel_name: str, block_number: int,
    ) -> ServiceResult:
        """Cancel the pending request for *block_number* on *channel_name*."""
        ...  # pragma: no cover

    def join_by_snapshot(self, snapshot_path: str) -> ServiceResult:
        """Join the peer to a channel using the snapshot at *snapshot_path*."""
        ...  # pragma: no cover
