"""Result reporter — normalise service output for display.

The peer binary may emit Windows line endings when it runs inside a
container or over a remote shell.  Every ``\\r\\n`` pair is stripped
(not converted), so ``"a\\r\\nb\\r\\n"`` renders as ``"ab"``.
"""

from __future__ import annotations

from fabric_snapshot.core.models import ServiceResult

CRLF: str = "\r\n"


def normalize_output(result: ServiceResult) -> str | None:
    """Return the displayable output of *result*, or ``None`` if it has none."""
    if result.stdout is None:
        return None
    return result.stdout.replace(CRLF, "")
