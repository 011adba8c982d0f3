"""Room membership table.

A room is the set of live connections that joined one project. Rooms are not
stored anywhere else: one exists while it has at least one member.

The table is owned by a single ``SessionManager`` and is only touched from the
event loop thread, so it takes no locks.
"""

from __future__ import annotations

from collections import defaultdict

from taskboard.realtime.protocol import room_for_project


class RoomTable:
    def __init__(self) -> None:
        self._members: dict[str, set[str]] = defaultdict(set)
        self._rooms: dict[str, set[str]] = defaultdict(set)

    def join(self, sid: str, project_id: str) -> bool:
        """Add ``sid`` to the project's room. Returns False if already there."""

        room = room_for_project(project_id)
        if sid in self._members.get(room, ()):
            return False
        self._members[room].add(sid)
        self._rooms[sid].add(room)
        return True

    def leave(self, sid: str, project_id: str) -> bool:
        """Remove ``sid`` from the project's room. Returns False if absent."""

        return self._remove(sid, room_for_project(project_id))

    def discard(self, sid: str) -> set[str]:
        """Remove ``sid`` from every room; returns the room names it left."""

        rooms = self._rooms.pop(sid, set())
        for room in rooms:
            members = self._members.get(room)
            if members is None:
                continue
            members.discard(sid)
            if not members:
                del self._members[room]
        return rooms

    def members(self, project_id: str) -> frozenset[str]:
        return frozenset(self._members.get(room_for_project(project_id), ()))

    def rooms_of(self, sid: str) -> frozenset[str]:
        return frozenset(self._rooms.get(sid, ()))

    def is_member(self, sid: str, project_id: str) -> bool:
        return sid in self._members.get(room_for_project(project_id), ())

    @property
    def room_count(self) -> int:
        return len(self._members)

    @property
    def connection_count(self) -> int:
        return len(self._rooms)

    def _remove(self, sid: str, room: str) -> bool:
        members = self._members.get(room)
        if members is None or sid not in members:
            return False
        members.discard(sid)
        if not members:
            del self._members[room]
        rooms = self._rooms.get(sid)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._rooms[sid]
        return True
