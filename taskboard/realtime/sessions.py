"""Per-process session state for the realtime server.

``SessionManager`` owns the live connections and the room table and routes
each inbound event to its handler in ``relay.HANDLERS``. It knows nothing
about Socket.IO: it returns ``Outbound`` messages and the transport delivers
them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

from django.conf import settings

from taskboard.realtime import protocol
from taskboard.realtime.connection import Connection
from taskboard.realtime.connection import Outbound
from taskboard.realtime.policies import get_join_policy
from taskboard.realtime.relay import HANDLERS
from taskboard.realtime.relay import join_target
from taskboard.realtime.rooms import RoomTable
from taskboard.realtime.validation import payload_errors

if TYPE_CHECKING:
    from taskboard.realtime.auth import Identity
    from taskboard.realtime.policies import JoinPolicy

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        *,
        join_policy: JoinPolicy | None = None,
        validate_payloads: bool | None = None,
    ):
        self.rooms = RoomTable()
        self.connections: dict[str, Connection] = {}
        self._join_policy = join_policy
        self._validate_payloads = validate_payloads

    @property
    def join_policy(self) -> JoinPolicy:
        # Resolved lazily so settings overrides apply to the module-level manager.
        if self._join_policy is None:
            return get_join_policy()
        return self._join_policy

    @property
    def validate_payloads(self) -> bool:
        if self._validate_payloads is None:
            return bool(getattr(settings, "REALTIME_VALIDATE_PAYLOADS", False))
        return self._validate_payloads

    def open(self, sid: str, identity: Identity) -> Connection:
        connection = Connection(sid=sid, identity=identity)
        self.connections[sid] = connection
        return connection

    def close(self, sid: str) -> Connection | None:
        """Forget ``sid`` and drop it from every room it joined."""

        self.rooms.discard(sid)
        return self.connections.pop(sid, None)

    def get(self, sid: str) -> Connection | None:
        return self.connections.get(sid)

    async def dispatch(self, sid: str, event: str, payload: Any) -> list[Outbound]:
        connection = self.connections.get(sid)
        if connection is None:
            logger.warning("Event %s from unknown session %s ignored", event, sid)
            return []

        handler = HANDLERS.get(event)
        if handler is None:
            logger.debug("Unhandled event %s from %s", event, sid)
            return []

        policy = self.join_policy
        if event == protocol.JOIN_PROJECT:
            project_id = join_target(payload)
            if project_id is not None and not await policy.allows(
                connection.identity,
                project_id,
            ):
                logger.warning(
                    "User %s denied joining project %s",
                    connection.identity.user_id,
                    project_id,
                )
                return [
                    Outbound(protocol.JOIN_DENIED, {"projectId": project_id}, (sid,)),
                ]
            if sid not in self.connections:
                # Closed while the policy was awaited.
                logger.debug("Dropping join from %s: session closed", sid)
                return []
        elif event != protocol.LEAVE_PROJECT:
            if self.validate_payloads:
                errors = payload_errors(event, payload)
                if errors is not None:
                    logger.debug("Dropping invalid %s from %s: %s", event, sid, errors)
                    return []
            project_id = protocol.project_id_from(payload)
            if (
                policy.restrict_relay
                and project_id is not None
                and not self.rooms.is_member(sid, project_id)
            ):
                logger.warning(
                    "User %s sent %s to project %s without joining it",
                    connection.identity.user_id,
                    event,
                    project_id,
                )
                return []

        return handler(connection, self.rooms, payload)

    def broadcast(
        self,
        project_id: Any,
        event: str,
        payload: Any,
        *,
        exclude: str | None = None,
    ) -> Outbound:
        """Server-initiated message to everyone in a project's room."""

        members = self.rooms.members(str(project_id))
        if exclude is not None:
            members -= {exclude}
        return Outbound(event, payload, tuple(sorted(members)))

    def stats(self) -> dict[str, int]:
        return {
            "connections": len(self.connections),
            "rooms": self.rooms.room_count,
        }
