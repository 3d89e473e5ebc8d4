import pytest

from community.models import User, UserRole

pytestmark = pytest.mark.django_db


def test_register_creates_user_with_handle_and_logs_in(client):
    response = client.post(
        "/api/auth/register",
        {"username": "new_member", "password": "longenough1", "confirmation": "longenough1"},
        content_type="application/json",
    )
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "new_member"
    assert body["role"] == "user"
    assert body["anonymous_username"]

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == "new_member"


@pytest.mark.parametrize("payload, message", [
    ({"username": "ab", "password": "longenough1", "confirmation": "longenough1"},
     "Username must be at least 3 characters."),
    ({"username": "bad name!", "password": "longenough1", "confirmation": "longenough1"},
     "Username can only contain letters, numbers, and underscores."),
    ({"username": "okname", "password": "short", "confirmation": "short"},
     "Password must be at least 8 characters."),
    ({"username": "okname", "password": "longenough1", "confirmation": "different1"},
     "Passwords do not match."),
])
def test_register_validation(client, payload, message):
    response = client.post("/api/auth/register", payload, content_type="application/json")
    assert response.status_code == 400
    assert message in response.json()["errors"]
    assert not User.objects.filter(username=payload["username"]).exists()


def test_register_rejects_taken_username(client, user):
    response = client.post(
        "/api/auth/register",
        {"username": "ALICE", "password": "longenough1", "confirmation": "longenough1"},
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Username already taken."


def test_register_rejects_malformed_json(client):
    response = client.post("/api/auth/register", "{not json", content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON body"


def test_login_and_logout(client, user):
    bad = client.post("/api/auth/login", {"username": "alice", "password": "nope"}, content_type="application/json")
    assert bad.status_code == 401

    good = client.post("/api/auth/login", {"username": "alice", "password": "s3cret-pass"}, content_type="application/json")
    assert good.status_code == 200
    assert client.get("/api/auth/me").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_wrong_method_is_405(client):
    response = client.get("/api/auth/login")
    assert response.status_code == 405
    assert response["Allow"] == "POST"


def test_user_role_defaults_to_user(user_client):
    assert user_client.get("/api/user/role").json() == {"role": "user"}


def test_superuser_counts_as_admin(db):
    root = User.objects.create_superuser(username="root", password="s3cret-pass")
    assert root.role == "admin"
    assert root.is_moderator


def test_only_admin_can_grant_roles(mod_client, other_user):
    response = mod_client.post(
        "/api/admin/roles", {"user_id": other_user.id, "role": "moderator"}, content_type="application/json"
    )
    assert response.status_code == 403


def test_admin_grants_and_changes_role(admin_client_, admin_user, other_user):
    response = admin_client_.post(
        "/api/admin/roles", {"user_id": other_user.id, "role": "moderator"}, content_type="application/json"
    )
    assert response.status_code == 200
    assert response.json() == {"user_id": other_user.id, "role": "moderator"}
    role = UserRole.objects.get(user=other_user)
    assert role.granted_by == admin_user

    admin_client_.post("/api/admin/roles", {"user_id": other_user.id, "role": "user"}, content_type="application/json")
    assert UserRole.objects.filter(user=other_user).count() == 1
    assert User.objects.get(pk=other_user.pk).role == "user"


def test_admin_roles_rejects_unknown_role(admin_client_, other_user):
    response = admin_client_.post(
        "/api/admin/roles", {"user_id": other_user.id, "role": "owner"}, content_type="application/json"
    )
    assert response.status_code == 400
