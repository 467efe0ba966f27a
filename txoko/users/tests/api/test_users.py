import pytest
from rest_framework import status

from txoko.conftest import TEST_PASSWORD
from txoko.conftest import make_member
from txoko.users.access import Function
from txoko.users.models import User

pytestmark = pytest.mark.django_db


def test_admin_lists_own_society_only(auth_client, admin, member, other_society):
    make_member(other_society, "stranger")
    r = auth_client(admin).get("/api/v1/users/")
    assert r.status_code == status.HTTP_200_OK, r.data
    usernames = {u["username"] for u in r.data}
    assert usernames == {"admin", "member"}


@pytest.mark.parametrize("fixture", ["treasurer", "cellarman", "member"])
def test_non_admin_cannot_list(request, auth_client, fixture):
    user = request.getfixturevalue(fixture)
    r = auth_client(user).get("/api/v1/users/")
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.data["message"] == "Admin access required"


def test_me_returns_camel_case_fields(auth_client, member, society):
    r = auth_client(member).get("/api/v1/users/me/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["societyId"] == society.id
    assert r.data["function"] == Function.ORDINARY
    assert "linkedMemberName" in r.data


def test_count_counts_active_members(auth_client, member, treasurer):
    treasurer.is_active = False
    treasurer.save()
    r = auth_client(member).get("/api/v1/users/count/")
    assert r.data == {"count": 1}


def test_admin_creates_member_in_own_society(auth_client, admin, society):
    r = auth_client(admin).post(
        "/api/v1/users/",
        {
            "email": "new@example.com",
            "name": "New Member",
            "password": "S3cure-pass!",
            "function": Function.CELLARMAN,
        },
        format="json",
    )
    assert r.status_code == status.HTTP_201_CREATED, r.data
    created = User.objects.get(email="new@example.com")
    assert created.society_id == society.id
    assert created.username == "new@example.com"
    assert created.check_password("S3cure-pass!")


def test_admin_updates_member_function(auth_client, admin, member):
    r = auth_client(admin).patch(
        f"/api/v1/users/{member.id}/",
        {"function": Function.TREASURER},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    member.refresh_from_db()
    assert member.function == Function.TREASURER


def test_cross_society_member_is_not_found(auth_client, admin, other_society):
    stranger = make_member(other_society, "stranger")
    r = auth_client(admin).patch(
        f"/api/v1/users/{stranger.id}/", {"name": "x"}, format="json"
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_toggle_active(auth_client, admin, member):
    r = auth_client(admin).post(f"/api/v1/users/{member.id}/toggle-active/")
    assert r.status_code == status.HTTP_200_OK
    assert r.data["isActive"] is False


def test_admin_cannot_deactivate_self(auth_client, admin):
    r = auth_client(admin).post(f"/api/v1/users/{admin.id}/toggle-active/")
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    admin.refresh_from_db()
    assert admin.is_active


def test_member_edits_own_profile(auth_client, member):
    r = auth_client(member).put(
        f"/api/v1/users/{member.id}/profile/",
        {"name": "Miren", "phone": "600000000"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    assert r.data["name"] == "Miren"
    assert r.data["phone"] == "600000000"


def test_member_cannot_edit_someone_else(auth_client, member, treasurer):
    r = auth_client(member).put(
        f"/api/v1/users/{treasurer.id}/profile/", {"name": "x"}, format="json"
    )
    assert r.status_code == status.HTTP_404_NOT_FOUND


def test_change_password(auth_client, member):
    r = auth_client(member).post(
        "/api/v1/users/change-password/",
        {"currentPassword": TEST_PASSWORD, "newPassword": "An0ther-Secret!"},
        format="json",
    )
    assert r.status_code == status.HTTP_200_OK, r.data
    member.refresh_from_db()
    assert member.check_password("An0ther-Secret!")


def test_change_password_requires_current(auth_client, member):
    r = auth_client(member).post(
        "/api/v1/users/change-password/",
        {"currentPassword": "wrong", "newPassword": "An0ther-Secret!"},
        format="json",
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert "currentPassword" in r.data


def test_user_without_society_is_forbidden(auth_client, db):
    loner = User.objects.create_user(
        username="loner", email="loner@example.com", password=TEST_PASSWORD
    )
    r = auth_client(loner).get("/api/v1/users/count/")
    assert r.status_code == status.HTTP_403_FORBIDDEN
    assert r.data["message"]
