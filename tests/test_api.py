#!/usr/bin/env python
"""
tests/test_api.py - HTTP surface
--------------------------------
Drives the routers through FastAPI's TestClient with the data store
replaced by the in-memory fake.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from app.deps import get_store
from app.models.enums import AdminLevel, CategoryRoleType
from main import app
from tests.conftest import (
    AUXILIAR_ID,
    CATEGORY_ID,
    GROUP_ID,
    PLAIN_MEMBER_ID,
    PRESIDENT_ID,
    SECRETARY_ID,
)

SUPER_ADMIN_CODE = "MB_0608"
SUPERVISOR_CODE = "SV@771"


@pytest.fixture
def client(store):
    store.add_admin(1, AdminLevel.SUPER_ADMIN, SUPER_ADMIN_CODE)
    store.add_admin(2, AdminLevel.ADMIN_SUPERVISOR, SUPERVISOR_CODE)
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, kind, code):
    response = client.post("/auth/login", json={"code": code, "type": kind})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _member_headers(client, member_id):
    return _login(client, "member", f"m-{member_id}")


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_member_login_and_me(client):
    headers = _member_headers(client, SECRETARY_ID)

    response = client.get("/auth/me", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"kind": "member", "admin_id": None, "member_id": SECRETARY_ID, "level": None}


def test_admin_login_and_me(client):
    headers = _login(client, "admin", SUPER_ADMIN_CODE.lower())

    response = client.get("/auth/me", headers=headers)

    assert response.json()["kind"] == "admin"
    assert response.json()["level"] == "super_admin"


def test_login_with_unknown_code(client):
    response = client.post("/auth/login", json={"code": "ZZ-999", "type": "member"})
    assert response.status_code == 401


def test_inactive_member_cannot_log_in(client, store):
    store.add_member(PLAIN_MEMBER_ID, GROUP_ID, is_active=False)

    response = client.post("/auth/login", json={"code": f"M-{PLAIN_MEMBER_ID}", "type": "member"})

    assert response.status_code == 401


def test_requests_without_valid_token_are_rejected(client):
    assert client.get(f"/categories/{CATEGORY_ID}/permissions").status_code in (401, 403)

    response = client.get(
        f"/categories/{CATEGORY_ID}/permissions",
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == 401


def test_secretary_permissions_on_locked_category(client):
    headers = _member_headers(client, SECRETARY_ID)

    response = client.get(f"/categories/{CATEGORY_ID}/permissions", params={"group_id": GROUP_ID}, headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["can_view"] is True
    assert data["can_view_balance"] is True
    assert data["can_edit"] is True
    assert data["role"] == "secretario"
    assert data["permission_level_label"] == "Secretário"
    assert data["is_group_leader"] is False


def test_plain_member_permissions_on_locked_category(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)

    response = client.get(f"/categories/{CATEGORY_ID}/permissions", params={"group_id": GROUP_ID}, headers=headers)

    data = response.json()["data"]
    assert (data["can_view"], data["can_view_balance"], data["can_edit"], data["is_group_leader"]) == (
        True,
        False,
        False,
        False,
    )
    assert data["role"] is None


def test_member_cannot_check_someone_else(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)

    response = client.get(
        f"/categories/{CATEGORY_ID}/permissions",
        params={"group_id": GROUP_ID, "member_id": PRESIDENT_ID},
        headers=headers,
    )

    assert response.json()["data"]["is_group_leader"] is False


def test_lower_admin_can_check_a_member(client):
    headers = _login(client, "admin", SUPERVISOR_CODE)

    response = client.get(
        f"/categories/{CATEGORY_ID}/permissions",
        params={"group_id": GROUP_ID, "member_id": PRESIDENT_ID},
        headers=headers,
    )

    assert response.json()["data"]["is_group_leader"] is True


def test_missing_group_returns_view_only(client):
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.get(f"/categories/{CATEGORY_ID}/permissions", headers=headers)

    data = response.json()["data"]
    assert (data["can_view"], data["can_view_balance"], data["can_edit"]) == (True, False, False)


def test_super_admin_gets_full_access(client):
    headers = _login(client, "admin", SUPER_ADMIN_CODE)

    response = client.get(f"/categories/{CATEGORY_ID}/permissions", params={"group_id": GROUP_ID}, headers=headers)

    data = response.json()["data"]
    assert (data["can_view"], data["can_view_balance"], data["can_edit"]) == (True, True, True)


def test_list_category_leaders(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)

    response = client.get(f"/categories/{CATEGORY_ID}/leaders", headers=headers)

    assert response.status_code == 200
    leaders = response.json()["data"]
    assert {(leader["member_id"], leader["role"]) for leader in leaders} == {
        (SECRETARY_ID, "secretario"),
        (AUXILIAR_ID, "auxiliar"),
    }


def test_unknown_category_leaders(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)
    assert client.get("/categories/999/leaders", headers=headers).status_code == 404


def test_plain_member_cannot_assign_leaders(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": PLAIN_MEMBER_ID, "role": "presidente"},
        headers=headers,
    )

    assert response.status_code == 403


def test_group_president_assigns_category_presidente(client, store):
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": PLAIN_MEMBER_ID, "role": "presidente"},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["role"] == "presidente"
    assert store.calls("add_category_role")[-1][-1] == PRESIDENT_ID


def test_only_one_category_secretario(client):
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": PLAIN_MEMBER_ID, "role": "secretario"},
        headers=headers,
    )

    assert response.status_code == 400
    assert "already has" in response.json()["detail"]


def test_member_holds_one_role_per_category(client):
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": SECRETARY_ID, "role": "auxiliar"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "This member already has a role in this category"


def test_leader_must_belong_to_category_group(client, store):
    store.add_group(GROUP_ID + 1)
    store.add_member(900, GROUP_ID + 1)
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": 900, "role": "auxiliar"},
        headers=headers,
    )

    assert response.status_code == 400


def test_remove_category_leader(client, store):
    headers = _login(client, "admin", SUPER_ADMIN_CODE)
    leader_id = next(r.id for r in store.roles.values() if r.member_id == SECRETARY_ID)

    response = client.delete(f"/categories/{CATEGORY_ID}/leaders/{leader_id}", headers=headers)
    assert response.status_code == 200
    assert leader_id not in store.roles

    response = client.delete(f"/categories/{CATEGORY_ID}/leaders/{leader_id}", headers=headers)
    assert response.status_code == 404


def test_secretary_cannot_unlock_category(client):
    headers = _member_headers(client, SECRETARY_ID)

    response = client.patch(f"/categories/{CATEGORY_ID}/lock", json={"is_locked": False}, headers=headers)

    assert response.status_code == 403


def test_group_leader_unlocks_category(client, store):
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.patch(f"/categories/{CATEGORY_ID}/lock", json={"is_locked": False}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["is_locked"] is False
    assert store.categories[CATEGORY_ID].is_locked is False


def test_generate_group_code(client):
    headers = _login(client, "admin", SUPERVISOR_CODE)

    response = client.post("/codes/group/generate", headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["namespace"] == "group"
    assert 5 <= len(data["code"]) <= 7


def test_generate_code_exhaustion_is_reported(client, store):
    async def always_taken(namespace, code, exclude_id=None):
        return True

    store.code_exists = always_taken
    headers = _login(client, "admin", SUPERVISOR_CODE)

    response = client.post("/codes/member/generate", headers=headers)

    assert response.status_code == 503


def test_check_code(client):
    headers = _login(client, "admin", SUPERVISOR_CODE)

    taken = client.get("/codes/group/check", params={"code": " g7-k2q "}, headers=headers).json()["data"]
    own = client.get(
        "/codes/group/check", params={"code": "G7-K2Q", "exclude_id": GROUP_ID}, headers=headers
    ).json()["data"]

    assert taken == {"namespace": "group", "code": "G7-K2Q", "is_unique": False}
    assert own["is_unique"] is True


def test_unknown_code_namespace(client):
    headers = _login(client, "admin", SUPERVISOR_CODE)
    assert client.post("/codes/admin/generate", headers=headers).status_code == 422


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/codes/member/check"),
        ("post", "/codes/member/generate"),
        ("post", "/codes/group/generate"),
    ],
)
def test_members_cannot_use_code_endpoints(client, store, method, path):
    headers = _member_headers(client, PLAIN_MEMBER_ID)
    params = {"code": f"M-{PRESIDENT_ID}"} if method == "get" else None

    response = client.request(method.upper(), path, params=params, headers=headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Administrator access required"
    assert store.calls("code_exists") == []


def test_leaders_carry_role_description(client):
    headers = _member_headers(client, PLAIN_MEMBER_ID)

    leaders = client.get(f"/categories/{CATEGORY_ID}/leaders", headers=headers).json()["data"]

    secretary = next(leader for leader in leaders if leader["member_id"] == SECRETARY_ID)
    assert secretary["role_label"] == "Secretário"
    assert secretary["role_description"] == "Can create and edit transactions"


def test_concurrent_role_assignment_is_a_bad_request(client, store):
    async def lost_race(*args, **kwargs):
        raise IntegrityError("INSERT INTO category_roles", {}, Exception("duplicate key value"))

    store.add_category_role = lost_race
    headers = _member_headers(client, PRESIDENT_ID)

    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": PLAIN_MEMBER_ID, "role": "auxiliar"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "This member already has a role in this category"


def test_new_leader_after_removal_keeps_existing_roles(client, store):
    headers = _login(client, "admin", SUPER_ADMIN_CODE)
    secretary_leader_id = next(r.id for r in store.roles.values() if r.member_id == SECRETARY_ID)
    auxiliar_leader_id = next(r.id for r in store.roles.values() if r.member_id == AUXILIAR_ID)

    removed = client.delete(f"/categories/{CATEGORY_ID}/leaders/{secretary_leader_id}", headers=headers)
    assert removed.status_code == 200
    response = client.post(
        f"/categories/{CATEGORY_ID}/leaders",
        json={"member_id": PLAIN_MEMBER_ID, "role": "secretario"},
        headers=headers,
    )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["id"] not in (secretary_leader_id, auxiliar_leader_id)
    assert store.roles[auxiliar_leader_id].member_id == AUXILIAR_ID
    assert {(r.member_id, r.role) for r in store.roles.values()} == {
        (AUXILIAR_ID, CategoryRoleType.AUXILIAR),
        (PLAIN_MEMBER_ID, CategoryRoleType.SECRETARIO),
    }
