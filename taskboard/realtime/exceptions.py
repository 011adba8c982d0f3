from __future__ import annotations


class RealtimeError(Exception):
    """Base class for errors raised by the realtime layer."""


class AuthenticationError(RealtimeError):
    """The handshake credential is missing, malformed, forged or expired."""

    def __init__(self, message: str = "unauthorized", *, expired: bool = False):
        super().__init__(message)
        self.expired = expired


class IdentityNotFound(RealtimeError, LookupError):
    """The token is valid but its subject is not an active user."""
