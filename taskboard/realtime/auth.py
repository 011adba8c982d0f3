"""Handshake authentication for realtime connections.

A client presents a JWT access token when it opens the socket. The token is
checked (signature and expiry) with djangorestframework-simplejwt and its
subject is resolved against the user model. The resulting ``Identity`` stays
attached to the connection until it closes.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt import exceptions as jwt_exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.exceptions import TokenError

from taskboard.realtime.exceptions import AuthenticationError
from taskboard.realtime.exceptions import IdentityNotFound
from taskboard.users.api.serializers import IdentitySerializer

_MISSING_USER_CODES = ("user_not_found", "user_inactive")


@dataclass(frozen=True)
class Identity:
    user_id: str
    display_name: str
    profile: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_user(cls, user) -> Identity:
        return cls(
            user_id=str(user.pk),
            display_name=user.display_name,
            profile=dict(IdentitySerializer(user).data),
        )

    def as_payload(self) -> dict[str, Any]:
        """Sender object attached to relayed events."""

        return dict(self.profile)


def _header_token(scope: dict[str, Any]) -> str | None:
    raw: str | bytes | None = None
    headers = scope.get("headers")
    if isinstance(headers, (list, tuple)):
        for name, value in headers:
            if name in (b"authorization", "authorization"):
                raw = value
                break
    if raw is None:
        raw = scope.get("HTTP_AUTHORIZATION")
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode(errors="ignore")
    if not isinstance(raw, str):
        return None

    parts = raw.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":  # noqa: PLR2004
        return parts[1]
    return None


def extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract the bearer token from a Socket.IO handshake.

    Looks at, in order: ``auth.token`` (socket.io-client ``auth`` option), the
    ``token`` query-string parameter, and an ``Authorization: Bearer`` header.
    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner
    if not isinstance(scope, dict):
        return None

    query_string: str | bytes = ""
    if "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    return _header_token(scope)


def resolve_identity(token: str | None) -> Identity:
    """Validate ``token`` and load the identity it names.

    Raises:
        AuthenticationError: missing, malformed, forged or expired token.
        IdentityNotFound: the token's subject is unknown or inactive.

    """

    if not token:
        msg = "unauthorized"
        raise AuthenticationError(msg)

    jwt_auth = JWTAuthentication()
    try:
        validated = jwt_auth.get_validated_token(token)
    except (InvalidToken, TokenError) as exc:
        expired = "is expired" in str(exc).lower()
        msg = "jwt_expired" if expired else "unauthorized"
        raise AuthenticationError(msg, expired=expired) from exc

    try:
        user = jwt_auth.get_user(validated)
    except InvalidToken as exc:  # token carries no subject claim
        msg = "unauthorized"
        raise AuthenticationError(msg) from exc
    except jwt_exceptions.AuthenticationFailed as exc:
        detail = exc.detail if isinstance(exc.detail, dict) else {}
        if str(detail.get("code", "")) in _MISSING_USER_CODES:
            msg = "user_not_found"
            raise IdentityNotFound(msg) from exc
        msg = "unauthorized"
        raise AuthenticationError(msg) from exc
    except AuthenticationFailed as exc:
        msg = "unauthorized"
        raise AuthenticationError(msg) from exc

    return Identity.from_user(user)


authenticate = database_sync_to_async(resolve_identity)
