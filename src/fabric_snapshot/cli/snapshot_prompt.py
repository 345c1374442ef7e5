"""Interactive snapshot flow for the CLI layer.

The operator first picks an operation, then answers the questions for
that operation's fields::

    submitRequest   -> channel name, block number
    listPending     -> channel name
    cancelRequest   -> channel name, block number
    joinBySnapshot  -> snapshot path

The answers form a complete request, so it is dispatched without the
flag validation used in direct mode.  Cancelling any prompt (Ctrl+C or
Esc, for which questionary's ``ask()`` returns ``None``) ends the flow
without calling the channel service and without an error.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from fabric_snapshot.config import SnapshotConfig
from fabric_snapshot.core.dispatcher import OperationDispatcher, validate_block_number
from fabric_snapshot.core.models import (
    CancelSnapshotRequest,
    JoinBySnapshot,
    ListPendingSnapshots,
    Operation,
    OperationRequest,
    ServiceResult,
    SubmitSnapshotRequest,
)
from fabric_snapshot.exceptions import EnvironmentError, InvalidFieldError

OPERATION_CHOICES: tuple[tuple[str, Operation], ...] = (
    ("submitRequest", Operation.SUBMIT),
    ("listPending", Operation.LIST_PENDING),
    ("joinBySnapshot", Operation.JOIN),
    ("cancelRequest", Operation.CANCEL),
)


class PromptCancelled(Exception):
    """The operator aborted a prompt.  Never leaves this module."""


def _import_questionary() -> Any:
    """Import questionary lazily for interactive prompts."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "questionary is not installed. Install with: pip install questionary",
        ) from exc
    return questionary


def _ask(question: Any) -> Any:
    """Run *question* and raise :class:`PromptCancelled` on abort."""
    answer = question.ask()
    if answer is None:
        raise PromptCancelled()
    return answer


# ---------------------------------------------------------------------------
# Validators (questionary convention: True or an error message)
# ---------------------------------------------------------------------------

def _validate_block_input(text: str) -> bool | str:
    if not text.strip():
        return "Block number is required"
    try:
        validate_block_number(text)
    except InvalidFieldError as exc:
        return str(exc)
    return True


def _channel_validator(channels: Sequence[str]) -> Callable[[str], bool | str]:
    def validate(text: str) -> bool | str:
        name = text.strip()
        if not name:
            return "Channel name is required"
        if channels and name not in channels:
            return f"Unknown channel. Choose one of: {', '.join(channels)}"
        return True

    return validate


def _validate_snapshot_path(text: str) -> bool | str:
    return True if text.strip() else "Snapshot path is required"


# ---------------------------------------------------------------------------
# Individual prompts
# ---------------------------------------------------------------------------

def prompt_operation(questionary: Any) -> Operation:
    choices = [
        questionary.Choice(title=title, value=operation)
        for title, operation in OPERATION_CHOICES
    ]
    return _ask(questionary.select("What is the operation type?", choices=choices))


def prompt_channel_name(questionary: Any, channels: Sequence[str]) -> str:
    message = "What is your channel name?"
    validate = _channel_validator(channels)
    if channels:
        question = questionary.autocomplete(message, choices=list(channels), validate=validate)
    else:
        question = questionary.text(message, validate=validate)
    return str(_ask(question)).strip()


def prompt_block_number(questionary: Any) -> int:
    answer = _ask(questionary.text("What is the block number?", validate=_validate_block_input))
    return validate_block_number(answer)


def prompt_snapshot_path(questionary: Any) -> str:
    answer = _ask(
        questionary.path(
            "What is your snapshot path?",
            only_directories=True,
            validate=_validate_snapshot_path,
        ),
    )
    return str(answer).strip()


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------

def collect_request(config: SnapshotConfig) -> OperationRequest | None:
    """Ask for an operation and its fields.

    Returns ``None`` if the operator cancelled at any step.
    """
    questionary = _import_questionary()
    try:
        operation = prompt_operation(questionary)

        if operation is Operation.JOIN:
            return JoinBySnapshot(snapshot_path=prompt_snapshot_path(questionary))

        channel_name = prompt_channel_name(questionary, config.channels)
        if operation is Operation.LIST_PENDING:
            return ListPendingSnapshots(channel_name=channel_name)

        block_number = prompt_block_number(questionary)
        if operation is Operation.SUBMIT:
            return SubmitSnapshotRequest(channel_name=channel_name, block_number=block_number)
        return CancelSnapshotRequest(channel_name=channel_name, block_number=block_number)
    except PromptCancelled:
        return None


def run_interactive_mode(
    dispatcher: OperationDispatcher,
    config: SnapshotConfig,
) -> ServiceResult | None:
    """Collect a request interactively and dispatch it.

    Returns ``None`` without touching the service when cancelled.
    """
    request = collect_request(config)
    if request is None:
        return None
    return dispatcher.dispatch(request)
