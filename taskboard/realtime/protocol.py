"""Event names and payload conventions shared with the web client.

The names below are part of the wire contract; renaming any of them breaks
deployed clients.
"""

from __future__ import annotations

from typing import Any

JOIN_PROJECT = "join-project"
LEAVE_PROJECT = "leave-project"

TASK_CREATED = "task-created"
TASK_UPDATED = "task-updated"
TASK_MOVED = "task-moved"
TASK_DELETED = "task-deleted"
COMMENT_ADDED = "comment-added"
COMMENT_UPDATED = "comment-updated"
COMMENT_DELETED = "comment-deleted"
MEMBER_JOINED = "member-joined"
MEMBER_LEFT = "member-left"

TYPING_START = "typing-start"
TYPING_STOP = "typing-stop"
USER_TYPING = "user-typing"
USER_STOPPED_TYPING = "user-stopped-typing"

JOIN_DENIED = "join-denied"

# Relayed events keep their name and gain one field naming the sender.
SENDER_FIELDS: dict[str, str] = {
    TASK_CREATED: "createdBy",
    TASK_UPDATED: "updatedBy",
    TASK_MOVED: "movedBy",
    TASK_DELETED: "deletedBy",
    COMMENT_ADDED: "addedBy",
    COMMENT_UPDATED: "updatedBy",
    COMMENT_DELETED: "deletedBy",
    MEMBER_JOINED: "joinedBy",
    MEMBER_LEFT: "leftBy",
}

TYPING_EVENTS: dict[str, str] = {
    TYPING_START: USER_TYPING,
    TYPING_STOP: USER_STOPPED_TYPING,
}

ROOM_PREFIX = "project-"


def room_for_project(project_id: Any) -> str:
    return f"{ROOM_PREFIX}{project_id}"


def project_id_from(payload: Any) -> str | None:
    """Return the payload's ``projectId`` as a string, if it has one."""

    if not isinstance(payload, dict):
        return None
    project_id = payload.get("projectId")
    if project_id is None or project_id == "":
        return None
    return str(project_id)
