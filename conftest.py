import pytest

from tests.factories import access_token_for
from tests.factories import create_user


@pytest.fixture
def user(db):
    return create_user("ada", first_name="Ada", last_name="Lovelace")


@pytest.fixture
def other_user(db):
    return create_user("grace", first_name="Grace", last_name="Hopper")


@pytest.fixture
def access_token(user) -> str:
    return access_token_for(user)
