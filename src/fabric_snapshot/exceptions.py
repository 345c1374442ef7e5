"""Custom exception hierarchy for fabric-snapshot.

All exceptions that cross layer boundaries must inherit from
:class:`FabricSnapshotError`.  Raw subprocess or OS errors must never
propagate beyond the infrastructure layer — they are caught and
re-raised as a typed subclass defined here.

Hierarchy
---------
FabricSnapshotError
├── ParamsError
│   ├── MissingOperationError
│   ├── MissingRequiredFieldError
│   ├── InvalidFieldError
│   └── UnknownOperationError
├── ServiceError
│   ├── PeerNotFoundError
│   └── ServiceTimeoutError
├── ConfigError
├── EnvironmentError
└── ProcessError
"""

from __future__ import annotations

from collections.abc import Sequence

PROCESS_ERROR_PREFIX: str = "[x] Process Error: "


class FabricSnapshotError(Exception):
    """Base exception for all fabric-snapshot errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Argument validation ---------------------------------------------------

class ParamsError(FabricSnapshotError):
    """Raised when a required flag or operation is missing or unrecognised.

    Always detected before the channel service is called.
    """


class MissingOperationError(ParamsError):
    """Raised when neither ``--operation`` nor ``--interactive`` is given."""

    def __init__(self) -> None:
        super().__init__(
            "Operation type is needed!",
            hint="Pass --operation (submit, listPending, join, cancel) or use --interactive.",
        )


class MissingRequiredFieldError(ParamsError):
    """Raised when the chosen operation lacks one of its required fields."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        fields: Sequence[str],
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.operation: str = operation
        self.fields: tuple[str, ...] = tuple(fields)


class InvalidFieldError(ParamsError):
    """Raised when a field is present but holds an unusable value."""


class UnknownOperationError(ParamsError):
    """Raised when the operation tag matches none of the known operations."""

    def __init__(self, operation: str) -> None:
        super().__init__("Unknown Operation Type!", hint=f"Got {operation!r}.")
        self.operation: str = operation


# --- Channel service -------------------------------------------------------

class ServiceError(FabricSnapshotError):
    """Raised when the channel service fails to execute an operation."""


class PeerNotFoundError(ServiceError):
    """Raised when the ``peer`` binary cannot be located."""


class ServiceTimeoutError(ServiceError):
    """Raised when a peer command exceeds the configured timeout."""


# --- Configuration / environment -------------------------------------------

class ConfigError(FabricSnapshotError):
    """Raised when the configuration file or overrides are invalid."""


class EnvironmentError(FabricSnapshotError):
    """Raised when a required runtime dependency is not available."""


# --- Process boundary ------------------------------------------------------

class ProcessError(FabricSnapshotError):
    """Uniform wrapper raised by the ``snapshot`` command for any failure.

    This is the only error type that leaves the command handler.
    """

    @classmethod
    def wrap(cls, exc: BaseException) -> ProcessError:
        """Build a ``ProcessError`` carrying *exc*'s message and hint."""
        hint = exc.hint if isinstance(exc, FabricSnapshotError) else None
        return cls(f"{PROCESS_ERROR_PREFIX}{exc}", hint=hint)
