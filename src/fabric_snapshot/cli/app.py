"""CLI application entry point and command routing for fabric-snapshot.

This module is the **sole error boundary** for the entire application.
The ``snapshot`` handler wraps every known failure in a
:class:`~fabric_snapshot.exceptions.ProcessError`; :func:`cli` renders it
via Rich and returns a well-defined exit code.

Architecture notes
------------------
* No business logic lives here — validation and dispatch belong to the
  core layer, execution to the infrastructure layer.
* Console messages go to stderr through the Rich console proxy; command
  results are printed to stdout.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys

from fabric_snapshot.cli import exit_codes
from fabric_snapshot.cli.console import console, escape_markup
from fabric_snapshot.config import SnapshotConfig, load_config
from fabric_snapshot.core.models import InvocationOptions, Operation, ServiceResult
from fabric_snapshot.core.reporter import normalize_output
from fabric_snapshot.exceptions import FabricSnapshotError, ProcessError
from fabric_snapshot.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_global_options(parser: argparse.ArgumentParser, *, suppress: bool = False) -> None:
    # Sub-commands repeat the global options without defaults, so a value
    # given before the sub-command is not reset by the sub-parser.
    parser.add_argument(
        "--config",
        default=argparse.SUPPRESS if suppress else None,
        metavar="PATH",
        help="Configuration file (default: ~/.fabric_snapshot/config.toml).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress else False,
        help="Log peer commands and dispatch decisions to stderr.",
    )


def _build_parser(config: SnapshotConfig) -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    ``--channelName`` choices come from *config*, so the configuration
    must be loaded before the full parser is built.
    """
    parser = argparse.ArgumentParser(
        prog="fabric-snapshot",
        description="Manage Hyperledger Fabric channel snapshots.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command")

    snapshot = subparsers.add_parser(
        "snapshot",
        help="Take, list, cancel or join from a channel snapshot.",
        description="Take, list, cancel or join from a channel snapshot.",
    )
    _add_global_options(snapshot, suppress=True)
    snapshot.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Answer questions instead of passing flags.",
    )
    snapshot.add_argument(
        "-b",
        "--block",
        type=int,
        default=None,
        help="Block number of the snapshot to submit or cancel.",
    )
    snapshot.add_argument(
        "-c",
        "--channelName",
        dest="channel_name",
        choices=list(config.channels) or None,
        default=None,
        help="Name of the channel to snapshot.",
    )
    snapshot.add_argument(
        "-p",
        "--snapshotPath",
        dest="snapshot_path",
        default=None,
        help="Snapshot directory to join the channel from.",
    )
    snapshot.add_argument(
        "-o",
        "--operation",
        choices=Operation.values(),
        default=None,
        help="Operation to perform.",
    )

    doctor = subparsers.add_parser(
        "doctor",
        help="Check the local environment.",
        description="Check the local environment.",
    )
    _add_global_options(doctor, suppress=True)
    return parser


def _preparse(argv: list[str] | None) -> argparse.Namespace:
    """Read only the global options, ignoring everything else."""
    preparser = argparse.ArgumentParser(add_help=False)
    _add_global_options(preparser)
    known, _ = preparser.parse_known_args(argv)
    return known


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def resolve_options(args: argparse.Namespace) -> InvocationOptions:
    """Turn parsed ``snapshot`` flags into :class:`InvocationOptions`."""
    return InvocationOptions(
        interactive=bool(args.interactive),
        block=args.block,
        channel_name=args.channel_name,
        snapshot_path=args.snapshot_path,
        operation=args.operation,
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def report_result(result: ServiceResult) -> None:
    """Print the normalised service output to stdout, if there is any."""
    text = normalize_output(result)
    if text is not None:
        print(text)


def _handle_snapshot(options: InvocationOptions, config: SnapshotConfig) -> int:
    """Run one snapshot operation, interactively or from flags.

    Raises
    ------
    ProcessError
        For any validation, configuration or service failure.
    """
    from fabric_snapshot.cli.snapshot_prompt import run_interactive_mode
    from fabric_snapshot.core.dispatcher import OperationDispatcher
    from fabric_snapshot.infra.peer_provider import PeerChannelService

    try:
        dispatcher = OperationDispatcher(PeerChannelService(config))
        if options.interactive:
            result = run_interactive_mode(dispatcher, config)
        else:
            result = dispatcher.run(options)
    except FabricSnapshotError as exc:
        raise ProcessError.wrap(exc) from exc

    if result is None:
        logger.debug("interactive flow cancelled by operator")
        return exit_codes.SUCCESS

    report_result(result)
    return exit_codes.SUCCESS


def _handle_doctor(config: SnapshotConfig) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from fabric_snapshot.cli.doctor import run_doctor

    return run_doctor(config)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the fabric-snapshot CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    global_opts = _preparse(argv)
    _configure_logging(global_opts.verbose)
    config = load_config(global_opts.config)

    parser = _build_parser(config)
    args = parser.parse_args(argv)

    if args.command == "snapshot":
        return _handle_snapshot(resolve_options(args), config)
    if args.command == "doctor":
        return _handle_doctor(config)

    parser.print_help()
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except FabricSnapshotError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape_markup(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape_markup(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape_markup(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
