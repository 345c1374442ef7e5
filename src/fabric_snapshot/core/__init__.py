"""Core / service layer — validation, dispatch and result normalisation.

Rules
-----
* No ``print()`` calls.
* No subprocess or filesystem I/O.
* No imports from ``cli`` or ``infra``.
"""

from fabric_snapshot.core.dispatcher import OperationDispatcher, validate_block_number
from fabric_snapshot.core.models import (
    CancelSnapshotRequest,
    InvocationOptions,
    JoinBySnapshot,
    ListPendingSnapshots,
    Operation,
    OperationRequest,
    ServiceResult,
    SubmitSnapshotRequest,
)
from fabric_snapshot.core.protocols import ChannelService
from fabric_snapshot.core.reporter import normalize_output

__all__: list[str] = [
    "CancelSnapshotRequest",
    "ChannelService",
    "InvocationOptions",
    "JoinBySnapshot",
    "ListPendingSnapshots",
    "Operation",
    "OperationDispatcher",
    "OperationRequest",
    "ServiceResult",
    "SubmitSnapshotRequest",
    "normalize_output",
    "validate_block_number",
]
