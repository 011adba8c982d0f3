import pytest
from rest_framework import status
from rest_framework.test import APIClient

from taskboard.realtime.auth import resolve_identity
from tests.factories import create_user

pytestmark = pytest.mark.django_db


def obtain_tokens(client, username: str, password: str) -> tuple[str, str]:
    r = client.post(
        "/api/v1/auth/jwt/create/",
        {"username": username, "password": password},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.content
    return r.data["access"], r.data["refresh"]


def test_issued_access_token_opens_a_realtime_identity():
    user = create_user("verifyuser")
    client = APIClient()
    access, _ = obtain_tokens(client, "verifyuser", "TestPass123!")

    identity = resolve_identity(access)

    assert identity.user_id == str(user.pk)


def test_jwt_verify_endpoint():
    create_user("verifyuser")
    client = APIClient()
    access, _ = obtain_tokens(client, "verifyuser", "TestPass123!")

    # Verify should succeed
    r = client.post(
        "/api/v1/auth/jwt/verify/",
        {"token": access},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK

    # Corrupt token should fail
    bad = access[:-2] + "ab"
    r = client.post(
        "/api/v1/auth/jwt/verify/",
        {"token": bad},
        format="json",
    )
    assert r.status_code == status.HTTP_401_UNAUTHORIZED
