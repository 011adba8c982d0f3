"""Event handlers for the project rooms.

Every handler has the same shape: ``handler(connection, rooms, payload)``
returning the ``Outbound`` messages to deliver. Handlers never touch the
socket server, so they run the same under test as in production.

Relaying is a plain fan-out: the payload is forwarded as received, plus the
sender's identity, to every other connection in the project's room. Nothing
is persisted and nothing is checked against stored state.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING
from typing import Any

from taskboard.realtime import protocol
from taskboard.realtime.connection import Outbound
from taskboard.realtime.protocol import project_id_from

if TYPE_CHECKING:
    from collections.abc import Callable

    from taskboard.realtime.connection import Connection
    from taskboard.realtime.rooms import RoomTable

    Handler = Callable[[Connection, RoomTable, Any], list[Outbound]]

logger = logging.getLogger(__name__)


def join_target(payload: Any) -> str | None:
    """Project id named by a join/leave payload.

    The client sends the bare id; an object with ``projectId`` is accepted too.
    """

    if isinstance(payload, bool):
        return None
    if isinstance(payload, (str, int)):
        return str(payload) if payload != "" else None
    return project_id_from(payload)


def recipients_for(
    connection: Connection,
    rooms: RoomTable,
    project_id: str,
) -> tuple[str, ...]:
    """Everyone in the project's room except the sender."""

    members = rooms.members(project_id) - {connection.sid}
    return tuple(sorted(members))


def join_project(
    connection: Connection,
    rooms: RoomTable,
    payload: Any,
) -> list[Outbound]:
    project_id = join_target(payload)
    if project_id is None:
        logger.debug("Ignoring join without project id from %s", connection.sid)
        return []
    if rooms.join(connection.sid, project_id):
        logger.debug(
            "User %s joined project %s",
            connection.identity.user_id,
            project_id,
        )
    return []


def leave_project(
    connection: Connection,
    rooms: RoomTable,
    payload: Any,
) -> list[Outbound]:
    project_id = join_target(payload)
    if project_id is None:
        return []
    if rooms.leave(connection.sid, project_id):
        logger.debug(
            "User %s left project %s",
            connection.identity.user_id,
            project_id,
        )
    return []


def relay(
    event: str,
    connection: Connection,
    rooms: RoomTable,
    payload: Any,
) -> list[Outbound]:
    project_id = project_id_from(payload)
    if project_id is None:
        logger.debug("Dropping %s from %s: no projectId", event, connection.sid)
        return []

    recipients = recipients_for(connection, rooms, project_id)
    if not recipients:
        return []

    outbound = dict(payload)
    outbound[protocol.SENDER_FIELDS[event]] = connection.identity.as_payload()
    return [Outbound(event, outbound, recipients)]


def typing(
    event: str,
    connection: Connection,
    rooms: RoomTable,
    payload: Any,
) -> list[Outbound]:
    project_id = project_id_from(payload)
    if project_id is None:
        return []

    recipients = recipients_for(connection, rooms, project_id)
    if not recipients:
        return []

    identity = connection.identity
    outbound: dict[str, Any] = {"userId": identity.user_id}
    if event == protocol.TYPING_START:
        outbound["userName"] = identity.display_name
    outbound["taskId"] = payload.get("taskId")
    return [Outbound(protocol.TYPING_EVENTS[event], outbound, recipients)]


HANDLERS: dict[str, Handler] = {
    protocol.JOIN_PROJECT: join_project,
    protocol.LEAVE_PROJECT: leave_project,
    **{event: partial(relay, event) for event in protocol.SENDER_FIELDS},
    **{event: partial(typing, event) for event in protocol.TYPING_EVENTS},
}
