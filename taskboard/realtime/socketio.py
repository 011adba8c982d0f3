"""Socket.IO server for the board clients.

Frontend convention:
- URL base: the site root, Socket.IO path ``settings.SOCKETIO_PATH``
- Auth: ``auth.token`` (JWT access token); ``query.token`` and an
  ``Authorization: Bearer`` header are accepted too

Handlers run one at a time (``async_handlers=False``), so the events of a
single client are relayed in the order they arrived. Nothing is ordered across
clients.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from typing import Any

import socketio
from asgiref.sync import async_to_sync
from django.conf import settings

from taskboard.realtime.auth import authenticate
from taskboard.realtime.auth import extract_token
from taskboard.realtime.exceptions import AuthenticationError
from taskboard.realtime.exceptions import IdentityNotFound
from taskboard.realtime.sessions import SessionManager

if TYPE_CHECKING:
    from collections.abc import Iterable

    from taskboard.realtime.connection import Outbound

logger = logging.getLogger(__name__)


def _cors_allowed_origins() -> str | list[str]:
    origins = list(getattr(settings, "SOCKETIO_CORS_ALLOWED_ORIGINS", ["*"]))
    return "*" if "*" in origins else origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_cors_allowed_origins(),
    async_handlers=False,
    logger=False,
    engineio_logger=False,
)

sessions = SessionManager()


async def deliver(messages: Iterable[Outbound]) -> None:
    for message in messages:
        for recipient in message.recipients:
            await sio.emit(message.event, message.payload, to=recipient)


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg)

    try:
        identity = await authenticate(token)
    except AuthenticationError as exc:
        # Frontend expects "jwt_expired" to trigger a token refresh.
        raise ConnectionRefusedError(str(exc)) from exc
    except IdentityNotFound as exc:
        raise ConnectionRefusedError(str(exc)) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefusedError(msg) from exc

    sessions.open(sid, identity)
    await sio.save_session(sid, {"user_id": identity.user_id})
    logger.info("User %s (%s) connected", identity.display_name, sid)


@sio.event
async def disconnect(sid: str, reason: Any = None):
    connection = sessions.close(sid)
    if connection is not None:
        logger.info(
            "User %s (%s) disconnected",
            connection.identity.display_name,
            sid,
        )


@sio.on("*")
async def relay_event(event: str, sid: str, *args: Any):
    payload = args[0] if args else None
    await deliver(await sessions.dispatch(sid, event, payload))


async def emit_to_project(
    project_id: Any,
    event: str,
    payload: Any,
    *,
    skip_sid: str | None = None,
) -> None:
    """Emit ``event`` to every connection in the project's room."""

    await deliver([sessions.broadcast(project_id, event, payload, exclude=skip_sid)])


def emit_event_to_project(project_id: Any, event: str, payload: Any) -> None:
    """Emit an event to a project room from sync Django code.

    If nobody is in the room this is a no-op.
    """

    async_to_sync(emit_to_project)(project_id, event, payload)
