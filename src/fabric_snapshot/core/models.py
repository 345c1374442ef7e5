"""Domain models for fabric-snapshot.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  Each snapshot operation has its own
request type carrying exactly the fields that operation requires, so a
request object can never exist half-filled.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


# ---------------------------------------------------------------------------
# Operation tags
# ---------------------------------------------------------------------------

class Operation(str, enum.Enum):
    """The four snapshot lifecycle operations."""

    SUBMIT = "submit"
    LIST_PENDING = "listPending"
    JOIN = "join"
    CANCEL = "cancel"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        """Return the flag values in declaration order."""
        return tuple(member.value for member in cls)


REQUIRED_FIELDS: dict[Operation, tuple[str, ...]] = {
    Operation.SUBMIT: ("channel_name", "block"),
    Operation.LIST_PENDING: ("channel_name",),
    Operation.CANCEL: ("channel_name", "block"),
    Operation.JOIN: ("snapshot_path",),
}
"""Required :class:`InvocationOptions` attributes per operation."""


# ---------------------------------------------------------------------------
# Parsed command-line options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class InvocationOptions:
    """Flags of a single ``snapshot`` invocation, after type coercion only."""

    interactive: bool = False
    block: int | None = None
    channel_name: str | None = None
    snapshot_path: str | None = None
    operation: str | None = None
    """Raw operation tag; validated by the dispatcher, not here."""


# ---------------------------------------------------------------------------
# Validated requests (one per operation)
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SubmitSnapshotRequest:
    """Ask the peer to take a snapshot of *channel_name* at *block_number*."""

    channel_name: str
    block_number: int

    operation = Operation.SUBMIT


@dataclass(frozen=True, slots=True)
class ListPendingSnapshots:
    """List snapshot requests of *channel_name* that have not completed."""

    channel_name: str

    operation = Operation.LIST_PENDING


@dataclass(frozen=True, slots=True)
class CancelSnapshotRequest:
    """Withdraw a pending snapshot request."""

    channel_name: str
    block_number: int

    operation = Operation.CANCEL


@dataclass(frozen=True, slots=True)
class JoinBySnapshot:
    """Join the peer to a channel from the snapshot at *snapshot_path*."""

    snapshot_path: str

    operation = Operation.JOIN


OperationRequest = Union[
    SubmitSnapshotRequest,
    ListPendingSnapshots,
    CancelSnapshotRequest,
    JoinBySnapshot,
]


# ---------------------------------------------------------------------------
# Service result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ServiceResult:
    """Outcome of a channel service call.

    ``stdout`` is ``None`` when the service produced no textual output.
    """

    stdout: str | None = None
