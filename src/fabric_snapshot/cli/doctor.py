"""``fabric-snapshot doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can run snapshot operations: the peer
binary must be reachable and the configuration should name the peer and
its channels.

This module lives in the CLI layer — it may import from ``infra`` and
``config``, and it renders via Rich.
"""

from __future__ import annotations

import platform
import sys

from fabric_snapshot.cli import exit_codes
from fabric_snapshot.cli.console import console, escape_markup
from fabric_snapshot.config import SnapshotConfig
from fabric_snapshot.exceptions import ConfigError
from fabric_snapshot.infra.peer_detector import detect_peer
from fabric_snapshot.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _peer_check(config: SnapshotConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the peer binary row."""
    try:
        status_obj = detect_peer(config.peer_command)
    except ConfigError as exc:
        return "peer", str(exc), "[red]FAIL[/red]"
    if status_obj.found:
        path_str = str(status_obj.path) if status_obj.path else "found"
        return "peer", path_str, "[green]OK[/green]"
    return "peer", f"{status_obj.executable} not found", "[red]FAIL[/red]"


def _config_check(config: SnapshotConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the configuration file row."""
    if config.source is not None:
        return "Config", str(config.source), "[green]OK[/green]"
    return "Config", "no file found, using defaults", "[yellow]WARN[/yellow]"


def _peer_address_check(config: SnapshotConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the peer address row."""
    if config.peer_address:
        tls = "TLS" if config.tls_enabled else "no TLS"
        return "Peer address", f"{config.peer_address} ({tls})", "[green]OK[/green]"
    return "Peer address", "not set (peer defaults apply)", "[yellow]WARN[/yellow]"


def _channels_check(config: SnapshotConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the configured channels row."""
    if config.channels:
        return "Channels", ", ".join(config.channels), "[green]OK[/green]"
    return "Channels", "none configured (any name accepted)", "[yellow]WARN[/yellow]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, "[green]OK[/green]"


def _version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the fabric-snapshot version row."""
    return "fabric-snapshot", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nfabric-snapshot doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<38} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<16} {value:<38} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(config: SnapshotConfig) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = [
        _version_check(),
        _python_version_check(),
        _peer_check(config),
        _config_check(config),
        _peer_address_check(config),
        _channels_check(config),
        _os_check(),
    ]
    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="fabric-snapshot doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=16)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, escape_markup(value), status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    try:
        peer_status = detect_peer(config.peer_command)
    except ConfigError:
        peer_status = None
    if peer_status is not None and not peer_status.found and peer_status.install_commands:
        if rich_available:
            console.print("[yellow]The peer binary is not installed.[/yellow]")
            console.print("Install the Fabric binaries with:\n")
            for cmd in peer_status.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
            console.print()
        else:
            print("The peer binary is not installed.", file=sys.stderr)
            print("Install the Fabric binaries with:\n", file=sys.stderr)
            for cmd in peer_status.install_commands:
                print(f"  {cmd}", file=sys.stderr)
            print(file=sys.stderr)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
