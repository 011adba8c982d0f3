from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import AccessToken

from taskboard.projects.models import Project
from taskboard.realtime.auth import Identity

if TYPE_CHECKING:
    from collections.abc import Iterable

User = get_user_model()


def create_user(username: str, *, first_name: str = "", last_name: str = "", **extra):
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password="TestPass123!",  # noqa: S106
        first_name=first_name,
        last_name=last_name,
        **extra,
    )


def create_project(name: str, *, owner, members: Iterable | None = None) -> Project:
    project = Project.objects.create(name=name, owner=owner)
    if members:
        project.members.add(*members)
    return project


def access_token_for(user) -> str:
    return str(AccessToken.for_user(user))


def make_identity(user_id: str, username: str, *, name: str = "") -> Identity:
    """Identity without touching the database, for pure handler tests."""

    first, _, last = name.partition(" ")
    return Identity(
        user_id=user_id,
        display_name=name or username,
        profile={
            "id": user_id,
            "username": username,
            "email": f"{username}@example.com",
            "firstName": first,
            "lastName": last,
            "name": name,
        },
    )
