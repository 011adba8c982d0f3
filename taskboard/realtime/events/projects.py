from __future__ import annotations

from typing import TYPE_CHECKING
from typing import Any

from django.contrib.auth import get_user_model

from taskboard.realtime.socketio import emit_event_to_project
from taskboard.users.api.serializers import IdentitySerializer

if TYPE_CHECKING:  # import for type checking only
    from taskboard.projects.models import Project


def build_member_payload(project: Project, member) -> dict[str, Any]:
    return {
        "projectId": str(project.pk),
        "member": IdentitySerializer(member).data,
    }


def publish_members_changed(
    project: Project,
    event: str,
    member_ids: list[int],
) -> None:
    """Announce members added to or removed from ``project`` to its room.

    Server-initiated, so unlike client relays there is no sender field.
    """

    members = get_user_model().objects.filter(pk__in=member_ids).order_by("pk")
    for member in members:
        emit_event_to_project(project.pk, event, build_member_payload(project, member))
