"""Optional shape checks for inbound relay payloads.

Relaying is pass-through unless ``REALTIME_VALIDATE_PAYLOADS`` is on. When it
is, each event kind must carry the keys the web client sends for it. Unknown
extra keys are allowed and relayed untouched.
"""

from __future__ import annotations

from typing import Any

from rest_framework import serializers

from taskboard.realtime import protocol


class ProjectScopedSerializer(serializers.Serializer):
    projectId = serializers.CharField()  # noqa: N815


class TaskPayloadSerializer(ProjectScopedSerializer):
    task = serializers.DictField()


class TaskMovedSerializer(TaskPayloadSerializer):
    fromColumn = serializers.CharField()  # noqa: N815
    toColumn = serializers.CharField()  # noqa: N815


class TaskDeletedSerializer(ProjectScopedSerializer):
    taskId = serializers.CharField()  # noqa: N815


class CommentPayloadSerializer(ProjectScopedSerializer):
    comment = serializers.DictField()


class CommentDeletedSerializer(ProjectScopedSerializer):
    commentId = serializers.CharField()  # noqa: N815


class MemberPayloadSerializer(ProjectScopedSerializer):
    member = serializers.JSONField()


class TypingSerializer(ProjectScopedSerializer):
    taskId = serializers.CharField(required=False, allow_null=True)  # noqa: N815


PAYLOAD_SERIALIZERS: dict[str, type[serializers.Serializer]] = {
    protocol.TASK_CREATED: TaskPayloadSerializer,
    protocol.TASK_UPDATED: TaskPayloadSerializer,
    protocol.TASK_MOVED: TaskMovedSerializer,
    protocol.TASK_DELETED: TaskDeletedSerializer,
    protocol.COMMENT_ADDED: CommentPayloadSerializer,
    protocol.COMMENT_UPDATED: CommentPayloadSerializer,
    protocol.COMMENT_DELETED: CommentDeletedSerializer,
    protocol.MEMBER_JOINED: MemberPayloadSerializer,
    protocol.MEMBER_LEFT: MemberPayloadSerializer,
    protocol.TYPING_START: TypingSerializer,
    protocol.TYPING_STOP: TypingSerializer,
}


def payload_errors(event: str, payload: Any) -> dict[str, Any] | None:
    """Return serializer errors for ``payload``, or None when it is acceptable.

    Events without a registered serializer are always acceptable.
    """

    serializer_class = PAYLOAD_SERIALIZERS.get(event)
    if serializer_class is None:
        return None
    if not isinstance(payload, dict):
        return {"non_field_errors": ["Expected an object."]}
    serializer = serializer_class(data=payload)
    if serializer.is_valid():
        return None
    return dict(serializer.errors)
