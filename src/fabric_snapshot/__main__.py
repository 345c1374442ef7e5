"""Allow ``python -m fabric_snapshot`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m fabric_snapshot`` behaves identically to the
``fabric-snapshot`` console script.
"""

from __future__ import annotations

from fabric_snapshot.cli.app import cli

if __name__ == "__main__":
    cli()
