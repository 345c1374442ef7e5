"""Infrastructure layer — external system integration.

This layer wraps all interaction with the Fabric ``peer`` binary and
the operating system.  Every raw subprocess exception is caught here
and re-raised as a :class:`~fabric_snapshot.exceptions.ServiceError`
subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
"""

from fabric_snapshot.infra.peer_detector import PeerStatus, detect_peer, missing_peer_hint
from fabric_snapshot.infra.peer_provider import PeerChannelService

__all__: list[str] = [
    "PeerChannelService",
    "PeerStatus",
    "detect_peer",
    "missing_peer_hint",
]
