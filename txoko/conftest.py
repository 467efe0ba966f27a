import pytest
from rest_framework.test import APIClient

from txoko.societies.models import Society
from txoko.users.access import Function
from txoko.users.models import User

TEST_PASSWORD = "TestPass123!"  # noqa: S105 - test credentials only


def make_member(
    society: Society,
    username: str,
    function: str = Function.ORDINARY,
    **extra,
) -> User:
    return User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password=TEST_PASSWORD,
        name=username.title(),
        function=function,
        society=society,
        **extra,
    )


@pytest.fixture
def society(db) -> Society:
    return Society.objects.create(name="Gure Txokoa")


@pytest.fixture
def other_society(db) -> Society:
    return Society.objects.create(name="Beste Txokoa")


@pytest.fixture
def admin(society) -> User:
    return make_member(society, "admin", Function.ADMINISTRATOR)


@pytest.fixture
def treasurer(society) -> User:
    return make_member(society, "treasurer", Function.TREASURER)


@pytest.fixture
def cellarman(society) -> User:
    return make_member(society, "cellarman", Function.CELLARMAN)


@pytest.fixture
def member(society) -> User:
    return make_member(society, "member")


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def auth_client():
    """Return an ``APIClient`` force-authenticated as the given user."""

    def _client(user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client
