"""Operation dispatcher — turns parsed flags into exactly one service call.

The dispatcher validates :class:`~fabric_snapshot.core.models.InvocationOptions`
against the required-field table of the selected operation, builds the
matching request object, and forwards it to a
:class:`~fabric_snapshot.core.protocols.ChannelService` injected at
construction time.

Guarantees
----------
* The channel service is never called when validation fails.
* Exactly one service method is called per :meth:`OperationDispatcher.run`.
* No retries. A failing call propagates unchanged.
"""

from __future__ import annotations

import logging

from fabric_snapshot.core.models import (
    REQUIRED_FIELDS,
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
from fabric_snapshot.exceptions import (
    InvalidFieldError,
    MissingOperationError,
    MissingRequiredFieldError,
    UnknownOperationError,
)

logger = logging.getLogger(__name__)

_MISSING_FIELD_MESSAGES: dict[Operation, str] = {
    Operation.SUBMIT: "Channel name and block number are needed!",
    Operation.LIST_PENDING: "Channel name is needed!",
    Operation.CANCEL: "Channel name and block number are needed!",
    Operation.JOIN: "Snapshot path is needed!",
}

_FLAG_NAMES: dict[str, str] = {
    "channel_name": "--channelName",
    "block": "--block",
    "snapshot_path": "--snapshotPath",
}


class OperationDispatcher:
    """Validate options and route them to the channel service.

    Parameters
    ----------
    service:
        Any object satisfying the :class:`ChannelService` protocol.
    """

    def __init__(self, service: ChannelService) -> None:
        self._service: ChannelService = service

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, options: InvocationOptions) -> ServiceResult:
        """Resolve *options* into a request and execute it once."""
        request = self.resolve(options)
        return self.dispatch(request)

    @staticmethod
    def resolve(options: InvocationOptions) -> OperationRequest:
        """Build the validated request for *options*.

        Raises
        ------
        MissingOperationError
            If no operation was given.
        MissingRequiredFieldError
            If the operation lacks one of its required fields.
        InvalidFieldError
            If a block number is not a positive integer.
        UnknownOperationError
            If the operation tag is not one of the four known values.
        """
        if not options.operation:
            raise MissingOperationError()

        try:
            operation = Operation(options.operation)
        except ValueError:
            raise UnknownOperationError(options.operation) from None

        missing = [
            name
            for name in REQUIRED_FIELDS[operation]
            if getattr(options, name) in (None, "")
        ]
        if missing:
            raise MissingRequiredFieldError(
                _MISSING_FIELD_MESSAGES[operation],
                operation=operation.value,
                fields=missing,
                hint="Missing: " + ", ".join(_FLAG_NAMES[name] for name in missing),
            )

        if operation is Operation.JOIN:
            return JoinBySnapshot(snapshot_path=str(options.snapshot_path))

        channel_name = str(options.channel_name)
        if operation is Operation.LIST_PENDING:
            return ListPendingSnapshots(channel_name=channel_name)

        block_number = validate_block_number(options.block)
        if operation is Operation.SUBMIT:
            return SubmitSnapshotRequest(channel_name=channel_name, block_number=block_number)
        return CancelSnapshotRequest(channel_name=channel_name, block_number=block_number)

    def dispatch(self, request: OperationRequest) -> ServiceResult:
        """Call the service method matching *request*'s type."""
        logger.debug("dispatching %s", type(request).__name__)
        if isinstance(request, SubmitSnapshotRequest):
            return self._service.submit_snapshot_request(
                channel_name=request.channel_name,
                block_number=request.block_number,
            )
        if isinstance(request, ListPendingSnapshots):
            return self._service.list_pending_snapshots(
                channel_name=request.channel_name,
            )
        if isinstance(request, CancelSnapshotRequest):
            return self._service.cancel_snapshot_request(
                channel_name=request.channel_name,
                block_number=request.block_number,
            )
        if isinstance(request, JoinBySnapshot):
            return self._service.join_by_snapshot(
                snapshot_path=request.snapshot_path,
            )
        raise TypeError(f"Unsupported request type: {type(request).__name__}")


# ---------------------------------------------------------------------------
# Field validation (shared with the interactive prompts)
# ---------------------------------------------------------------------------

def validate_block_number(value: object) -> int:
    """Return *value* as a positive ``int`` or raise :class:`InvalidFieldError`.

    Accepts integral floats (argparse ``type=float`` style input) and
    numeric strings.  Booleans are rejected.
    """
    if isinstance(value, bool):
        raise InvalidFieldError(f"Block number must be an integer, got {value!r}.")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidFieldError(f"Block number must be an integer, got {value!r}.")
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidFieldError(
                f"Block number must be an integer, got {value!r}.",
            ) from None
    if not isinstance(value, int):
        raise InvalidFieldError(f"Block number must be an integer, got {value!r}.")
    if value <= 0:
        raise InvalidFieldError(
            f"Block number must be greater than 0, got {value}.",
            hint="Snapshots are taken at a committed block height of 1 or more.",
        )
    return value
