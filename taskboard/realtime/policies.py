"""Who may join a project room.

The relay itself never looked at project membership: any authenticated
connection could join any room, then read and inject that project's events.
``REALTIME_JOIN_POLICY`` makes the choice explicit:

- ``open``: keep that behaviour.
- ``members``: only the owner and members of the project may join, and
  relayed events are only accepted from connections inside the room.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Protocol

from channels.db import database_sync_to_async
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from taskboard.projects.models import Project

if TYPE_CHECKING:
    from taskboard.realtime.auth import Identity

logger = logging.getLogger(__name__)


class JoinPolicy(Protocol):
    restrict_relay: bool

    async def allows(self, identity: Identity, project_id: str) -> bool: ...


class OpenJoinPolicy:
    restrict_relay = False

    async def allows(self, identity: Identity, project_id: str) -> bool:
        return True


class ProjectMemberJoinPolicy:
    restrict_relay = True

    async def allows(self, identity: Identity, project_id: str) -> bool:
        return await self._is_member(identity.user_id, project_id)

    @database_sync_to_async
    def _is_member(self, user_id: str, project_id: str) -> bool:
        try:
            project = Project.objects.get(pk=project_id)
        except (Project.DoesNotExist, ValueError):
            logger.debug("Join check for unknown project %s", project_id)
            return False
        return project.has_member(user_id)


JOIN_POLICIES = {
    "open": OpenJoinPolicy,
    "members": ProjectMemberJoinPolicy,
}


def get_join_policy(name: str | None = None) -> JoinPolicy:
    name = name or getattr(settings, "REALTIME_JOIN_POLICY", "open")
    try:
        policy_class = JOIN_POLICIES[name]
    except KeyError as exc:
        msg = f"Unknown REALTIME_JOIN_POLICY {name!r}; expected one of {sorted(JOIN_POLICIES)}"
        raise ImproperlyConfigured(msg) from exc
    return policy_class()
