from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:  # import for type checking only
    from taskboard.realtime.auth import Identity


@dataclass(frozen=True)
class Connection:
    """One authenticated socket. Lives from handshake to disconnect."""

    sid: str
    identity: Identity


@dataclass(frozen=True)
class Outbound:
    """A message to deliver: ``event`` with ``payload`` to each recipient sid."""

    event: str
    payload: Any
    recipients: tuple[str, ...]
