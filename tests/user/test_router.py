"""Tests for user domain router."""

import uuid

from fastapi.testclient import TestClient

from topichub.auth.passwords import verify_password
from topichub.user.directory import UserDirectory
from topichub.user.schemas import UserRecord

# --- GET /users/{id} and /users/telegram/{telegram_id} ---


def test_get_user_by_id(client: TestClient, other_user: UserRecord):
    response = client.get(f"/users/{other_user.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(other_user.id)
    assert data["telegram_id"] == 1002
    assert data["admin"] == {"tier": 0}
    assert data["banned"] == {"status": False, "expires_at": 0}
    assert data["created_at"].endswith("Z")


def test_get_user_never_exposes_password_hash(
    client: TestClient, admin_user: UserRecord
):
    response = client.get(f"/users/{admin_user.id}")

    assert response.status_code == 200
    assert response.json()["admin"] == {"tier": 1}
    assert "password_hash" not in response.text


def test_get_user_not_found(client: TestClient):
    response = client.get(f"/users/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["type"] == "user_not_found"


def test_get_user_malformed_id(client: TestClient):
    response = client.get("/users/not-a-uuid")

    assert response.status_code == 422


def test_get_user_by_telegram_id(client: TestClient, test_user: UserRecord):
    response = client.get("/users/telegram/1001")

    assert response.status_code == 200
    assert response.json()["id"] == str(test_user.id)


def test_get_user_by_unknown_telegram_id(client: TestClient):
    response = client.get("/users/telegram/999999")

    assert response.status_code == 404


# --- PATCH /users/me ---


def test_update_me(client: TestClient):
    response = client.patch("/users/me", json={"first_name": "Patched"})

    assert response.status_code == 200
    assert response.json()["first_name"] == "Patched"
    assert response.json()["username"] is None


def test_requires_identity(unauthenticated_client: TestClient, test_user):
    response = unauthenticated_client.get(f"/users/{test_user.id}")

    assert response.status_code == 401
    assert response.json()["type"] == "not_authenticated"


def test_unknown_identity_is_rejected(client_for, store):
    ghost = UserRecord.model_construct(id=uuid.uuid4())

    response = client_for(ghost).get(f"/users/{ghost.id}")

    assert response.status_code == 401


def test_banned_user_is_forbidden_until_expiry(
    client: TestClient, users: UserDirectory, clock, test_user: UserRecord
):
    users.ban(test_user.id, 5_000)

    assert client.get(f"/users/{test_user.id}").status_code == 403
    clock.advance(5_000)
    assert client.get(f"/users/{test_user.id}").status_code == 200


# --- listing (admin) ---


def test_list_users_requires_admin(client: TestClient):
    response = client.get("/users/")

    assert response.status_code == 403
    assert response.json()["type"] == "admin_required"


def test_list_users(admin_client: TestClient, test_user, admin_user):
    response = admin_client.get("/users/")

    assert response.status_code == 200
    data = response.json()
    assert {u["telegram_id"] for u in data} == {1001, 2001}
    assert all("password_hash" not in u["admin"] for u in data)


def test_list_users_projection(admin_client: TestClient, admin_user: UserRecord):
    response = admin_client.get("/users/", params={"fields": "first_name,admin.tier"})

    assert response.status_code == 200
    assert response.json() == [
        {"id": str(admin_user.id), "first_name": "Ada", "admin": {"tier": 1}}
    ]


def test_list_users_refuses_password_hash(admin_client: TestClient):
    response = admin_client.get("/users/", params={"fields": "admin.password_hash"})

    assert response.status_code == 400


def test_count_users(admin_client: TestClient, test_user, other_user):
    response = admin_client.get("/users/count")

    assert response.json() == {"total": 3}


# --- PUT /users/{id} ---


def test_update_own_department(client: TestClient, test_user: UserRecord):
    department = uuid.uuid4()

    response = client.put(
        f"/users/{test_user.id}", json={"new_department": str(department)}
    )

    assert response.status_code == 200
    assert response.json()["department"] == str(department)


def test_update_own_chat_id(client: TestClient, test_user: UserRecord):
    response = client.put(
        f"/users/{test_user.id}", json={"new_telegram_chat_id": "-100123"}
    )

    assert response.json()["telegram_chat_id"] == "-100123"


def test_update_requires_a_field(client: TestClient, test_user: UserRecord):
    response = client.put(f"/users/{test_user.id}", json={})

    assert response.status_code == 400
    assert response.json()["type"] == "invalid_argument"


def test_update_other_user_needs_admin(client: TestClient, other_user: UserRecord):
    response = client.put(
        f"/users/{other_user.id}", json={"new_telegram_chat_id": "1"}
    )

    assert response.status_code == 403


def test_admin_updates_other_user(admin_client: TestClient, other_user: UserRecord):
    response = admin_client.put(
        f"/users/{other_user.id}", json={"new_telegram_chat_id": "1"}
    )

    assert response.status_code == 200


# --- bans ---


def test_ban_and_unban(admin_client: TestClient, clock, other_user: UserRecord):
    banned = admin_client.post(
        f"/users/{other_user.id}/ban", json={"duration_ms": 60_000}
    )
    unbanned = admin_client.delete(f"/users/{other_user.id}/ban")

    assert banned.json()["banned"] == {
        "status": True,
        "expires_at": clock.now + 60_000,
    }
    assert unbanned.json()["banned"] == {"status": False, "expires_at": 0}


def test_ban_rejects_negative_duration(admin_client: TestClient, other_user):
    response = admin_client.post(
        f"/users/{other_user.id}/ban", json={"duration_ms": -1}
    )

    assert response.status_code == 422


def test_ban_requires_admin(client: TestClient, other_user: UserRecord):
    response = client.post(f"/users/{other_user.id}/ban", json={"duration_ms": 1})

    assert response.status_code == 403


# --- admin tier (super admin) ---


def test_promote_requires_super_admin(admin_client: TestClient, other_user):
    response = admin_client.put(
        f"/users/{other_user.id}/admin", json={"tier": 1, "password": "s3cret-pass"}
    )

    assert response.status_code == 403
    assert response.json()["type"] == "super_admin_required"


def test_promote_and_demote(
    super_admin_client: TestClient, users: UserDirectory, other_user: UserRecord
):
    promoted = super_admin_client.put(
        f"/users/{other_user.id}/admin", json={"tier": 2, "password": "s3cret-pass"}
    )

    assert promoted.status_code == 200
    assert promoted.json()["admin"] == {"tier": 2}
    state = users.get_admin_state(other_user.id)
    assert verify_password("s3cret-pass", state.password_hash)

    demoted = super_admin_client.delete(f"/users/{other_user.id}/admin")

    assert demoted.json()["admin"] == {"tier": 0}
    assert users.get_admin_state(other_user.id).password_hash is None


def test_promote_rejects_unknown_tier(super_admin_client: TestClient, other_user):
    response = super_admin_client.put(
        f"/users/{other_user.id}/admin", json={"tier": 3, "password": "s3cret-pass"}
    )

    assert response.status_code == 422


def test_delete_user(
    super_admin_client: TestClient, users: UserDirectory, other_user: UserRecord
):
    response = super_admin_client.delete(f"/users/{other_user.id}")

    assert response.status_code == 204
    assert users.find_by_id(other_user.id) is None


def test_delete_unknown_user(super_admin_client: TestClient):
    response = super_admin_client.delete(f"/users/{uuid.uuid4()}")

    assert response.status_code == 404


# --- event membership ---


def test_event_membership_lifecycle(client: TestClient, test_user: UserRecord):
    base = f"/users/{test_user.id}/events"

    client.post(base, json={"event_id": "E1"})
    client.post(base, json={"event_id": "E2"})
    added = client.post(base, json={"event_id": "E1"})
    assert [e["event_id"] for e in added.json()["events"]] == ["E1", "E2", "E1"]

    removed = client.delete(f"{base}/E1")
    assert [e["event_id"] for e in removed.json()["events"]] == ["E2"]

    assert client.get(base).json() == [{"event_id": "E2"}]

    cleared = client.delete(base)
    assert cleared.json()["events"] == []


def test_event_membership_of_other_user_needs_admin(
    client: TestClient, other_user: UserRecord
):
    response = client.post(f"/users/{other_user.id}/events", json={"event_id": "E1"})

    assert response.status_code == 403


def test_list_users_by_event(
    admin_client: TestClient, users: UserDirectory, test_user, other_user
):
    users.add_event_membership(test_user.id, "E9")

    response = admin_client.get("/users/events/E9")

    assert [u["id"] for u in response.json()] == [str(test_user.id)]


def test_get_admin_tier(super_admin_client: TestClient, admin_user: UserRecord):
    response = super_admin_client.get(f"/users/{admin_user.id}/admin")

    assert response.json() == {"tier": 1}


def test_get_admin_tier_unknown_user(super_admin_client: TestClient):
    response = super_admin_client.get(f"/users/{uuid.uuid4()}/admin")

    assert response.status_code == 404
