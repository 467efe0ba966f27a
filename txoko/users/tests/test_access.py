from types import SimpleNamespace

import pytest
from django.contrib.auth.models import AnonymousUser

from txoko.users import access
from txoko.users.access import AccessLevel
from txoko.users.access import Capability
from txoko.users.access import Function

CHECKS = {
    "admin": access.has_admin_access,
    "treasurer": access.has_treasurer_access,
    "cellarman": access.has_cellarman_access,
    "post": access.can_post_announcements,
}

EXPECTED = {
    Function.ADMINISTRATOR: {
        "admin": True,
        "treasurer": True,
        "cellarman": True,
        "post": True,
    },
    Function.TREASURER: {
        "admin": False,
        "treasurer": True,
        "cellarman": False,
        "post": True,
    },
    Function.CELLARMAN: {
        "admin": False,
        "treasurer": False,
        "cellarman": True,
        "post": True,
    },
    Function.ORDINARY: {
        "admin": False,
        "treasurer": False,
        "cellarman": False,
        "post": False,
    },
}


def _user(function):
    return SimpleNamespace(function=function)


@pytest.mark.parametrize("function", list(Function))
@pytest.mark.parametrize("check", list(CHECKS))
def test_capability_table(function, check):
    assert CHECKS[check](_user(function)) is EXPECTED[function][check]


@pytest.mark.parametrize("check", list(CHECKS))
def test_absent_user_has_no_capability(check):
    assert CHECKS[check](None) is False


@pytest.mark.parametrize("check", list(CHECKS))
def test_anonymous_user_has_no_capability(check):
    assert CHECKS[check](AnonymousUser()) is False


def test_unknown_function_has_no_capability():
    user = _user("superhero")
    assert access.capabilities_for(user) == frozenset()
    assert not any(check(user) for check in CHECKS.values())


def test_administrator_implies_every_capability():
    for function, caps in access.CAPABILITIES.items():
        if Capability.ADMIN in caps:
            assert caps == frozenset(Capability), function


def test_every_function_has_a_table_row():
    assert set(access.CAPABILITIES) == set(Function)
    assert set(access.LEVEL_CAPABILITY) == set(AccessLevel)


def test_missing_table_row_fails_loudly(monkeypatch):
    from django.core.exceptions import ImproperlyConfigured

    trimmed = dict(access.CAPABILITIES)
    trimmed.pop(Function.CELLARMAN)
    monkeypatch.setattr(access, "CAPABILITIES", trimmed)
    with pytest.raises(ImproperlyConfigured, match="sotolaria"):
        access._check_tables()  # noqa: SLF001


@pytest.mark.parametrize(
    ("function", "level", "expected"),
    [
        (Function.CELLARMAN, AccessLevel.TREASURER, False),
        (Function.CELLARMAN, AccessLevel.CELLARMAN, True),
        (Function.TREASURER, "treasurer", True),
        (Function.TREASURER, AccessLevel.ADMIN, False),
        (Function.ORDINARY, None, True),
        (Function.ADMINISTRATOR, "cellarman", True),
    ],
)
def test_has_access(function, level, expected):
    assert access.has_access(_user(function), level) is expected


def test_has_access_without_user():
    assert access.has_access(None, None) is False


def test_role_carries_no_capability():
    associate = SimpleNamespace(function=Function.ORDINARY, role=access.Role.ASSOCIATE)
    assert access.capabilities_for(associate) == frozenset()
