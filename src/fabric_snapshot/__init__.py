"""fabric-snapshot — channel snapshot lifecycle commands for Fabric peers.

Resolves flag-based or interactive input into exactly one snapshot
operation and executes it through the ``peer`` CLI.
"""

from fabric_snapshot.version import __version__

__all__: list[str] = ["__version__"]
