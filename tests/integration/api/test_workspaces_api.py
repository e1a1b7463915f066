"""Integration tests for Workspaces API."""

import pytest
from httpx import AsyncClient

from tests.conftest import TEST_MEMBER_ID, TEST_USER_ID, Seeder

BASE = "/api/v1/workspaces"


async def _create_workspace(client: AsyncClient, name: str, description: str | None = None) -> int:
    response = await client.post(BASE, json={"name": name, "description": description})
    assert response.status_code == 201
    return response.json()["data"]["id"]


class TestWorkspaceCrud:
    @pytest.mark.asyncio
    async def test_create_workspace(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            BASE, json={"name": "Java Mentoring", "description": "Spring cohort"}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] > 0
        assert data["name"] == "Java Mentoring"
        assert data["description"] == "Spring cohort"
        assert "created_at" in data
        assert "updated_at" in data

    @pytest.mark.asyncio
    async def test_create_workspace_requires_name(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(BASE, json={"name": ""})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_list_workspaces(self, authenticated_client: AsyncClient) -> None:
        first = await _create_workspace(authenticated_client, "Alpha")
        second = await _create_workspace(authenticated_client, "Beta")

        response = await authenticated_client.get(BASE)

        assert response.status_code == 200
        body = response.json()
        assert [w["id"] for w in body["data"]] == [first, second]
        assert body["meta"]["total"] == 2

    @pytest.mark.asyncio
    async def test_get_workspace(self, authenticated_client: AsyncClient) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")

        response = await authenticated_client.get(f"{BASE}/{workspace_id}")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Alpha"

    @pytest.mark.asyncio
    async def test_get_missing_workspace_returns_404(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.get(f"{BASE}/9999")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "WORKSPACE_NOT_FOUND"
        assert body["details"]["workspace_id"] == 9999

    @pytest.mark.asyncio
    async def test_update_uses_path_id(self, authenticated_client: AsyncClient) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")
        other_id = await _create_workspace(authenticated_client, "Beta")

        response = await authenticated_client.put(
            f"{BASE}/{workspace_id}",
            json={"id": other_id, "name": "Renamed", "description": "new"},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == workspace_id
        assert data["name"] == "Renamed"

        untouched = await authenticated_client.get(f"{BASE}/{other_id}")
        assert untouched.json()["data"]["name"] == "Beta"

    @pytest.mark.asyncio
    async def test_update_missing_workspace_returns_404(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.put(f"{BASE}/9999", json={"name": "Ghost"})

        assert response.status_code == 404


class TestRoleAssignments:
    @pytest.mark.asyncio
    async def test_add_user_and_list_roles(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        member_id = await seed.user("ann@example.com")
        workspace_id = await _create_workspace(authenticated_client, "Alpha")

        response = await authenticated_client.post(
            f"{BASE}/{workspace_id}/users",
            json={"user_id": member_id, "role": "examiner"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["id"] == workspace_id

        roles = await authenticated_client.get(f"{BASE}/{workspace_id}/users/{member_id}/roles")
        assert roles.status_code == 200
        assert roles.json()["data"] == ["examiner"]

    @pytest.mark.asyncio
    async def test_duplicate_role_returns_409_with_email(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        member_id = await seed.user("ann@example.com")
        workspace_id = await _create_workspace(authenticated_client, "Alpha")
        payload = {"user_id": member_id, "role": "examiner"}
        await authenticated_client.post(f"{BASE}/{workspace_id}/users", json=payload)

        response = await authenticated_client.post(f"{BASE}/{workspace_id}/users", json=payload)

        assert response.status_code == 409
        body = response.json()
        assert body["error_code"] == "DUPLICATE_ROLE_ASSIGNMENT"
        assert "ann@example.com" in body["message"]

        roles = await authenticated_client.get(f"{BASE}/{workspace_id}/users/{member_id}/roles")
        assert roles.json()["data"] == ["examiner"]

    @pytest.mark.asyncio
    async def test_second_distinct_role_is_allowed(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        member_id = await seed.user("ann@example.com")
        workspace_id = await _create_workspace(authenticated_client, "Alpha")
        await authenticated_client.post(
            f"{BASE}/{workspace_id}/users", json={"user_id": member_id, "role": "examiner"}
        )

        response = await authenticated_client.post(
            f"{BASE}/{workspace_id}/users", json={"user_id": member_id, "role": "examinee"}
        )

        assert response.status_code == 201
        roles = await authenticated_client.get(f"{BASE}/{workspace_id}/users/{member_id}/roles")
        assert sorted(roles.json()["data"]) == ["examinee", "examiner"]

    @pytest.mark.asyncio
    async def test_add_user_with_unknown_role_returns_422(
        self, authenticated_client: AsyncClient
    ) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")

        response = await authenticated_client.post(
            f"{BASE}/{workspace_id}/users", json={"user_id": TEST_USER_ID, "role": "owner"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_add_user_to_missing_workspace_returns_404(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.post(
            f"{BASE}/9999/users", json={"user_id": TEST_USER_ID, "role": "examiner"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_add_unknown_user_returns_404(self, authenticated_client: AsyncClient) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")

        response = await authenticated_client.post(
            f"{BASE}/{workspace_id}/users", json={"user_id": 9999, "role": "examiner"}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "USER_NOT_FOUND"
        roles = await authenticated_client.get(f"{BASE}/{workspace_id}/users/9999/roles")
        assert roles.json()["data"] == []

    @pytest.mark.asyncio
    async def test_listing_roles_twice_returns_same_result(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        member_id = await seed.user("ann@example.com")
        workspace_id = await seed.workspace("Alpha")
        await seed.role(member_id, workspace_id, "examiner")
        await seed.role(member_id, workspace_id, "examinee")
        url = f"{BASE}/{workspace_id}/users/{member_id}/roles"

        first = await authenticated_client.get(url)
        second = await authenticated_client.get(url)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        assert first.json()["data"] == ["examinee", "examiner"]

    @pytest.mark.asyncio
    async def test_revoke_role_from_workspace(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        member_id = await seed.user("ann@example.com")
        alpha = await _create_workspace(authenticated_client, "Alpha")
        beta = await _create_workspace(authenticated_client, "Beta")
        for workspace_id in (alpha, beta):
            await seed.role(member_id, workspace_id, "examiner")

        response = await authenticated_client.delete(
            f"{BASE}/{alpha}/users/{member_id}/roles/examiner"
        )

        assert response.status_code == 204
        alpha_roles = await authenticated_client.get(f"{BASE}/{alpha}/users/{member_id}/roles")
        beta_roles = await authenticated_client.get(f"{BASE}/{beta}/users/{member_id}/roles")
        assert alpha_roles.json()["data"] == []
        assert beta_roles.json()["data"] == ["examiner"]


class TestCallerScopedEndpoints:
    @pytest.mark.asyncio
    async def test_list_my_workspaces(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        alpha = await _create_workspace(authenticated_client, "Alpha")
        await _create_workspace(authenticated_client, "Beta")
        await seed.role(TEST_USER_ID, alpha, "examiner")
        await seed.role(TEST_USER_ID, alpha, "workspace_admin")

        response = await authenticated_client.get(f"{BASE}/mine")

        assert response.status_code == 200
        assert [w["id"] for w in response.json()["data"]] == [alpha]

    @pytest.mark.asyncio
    async def test_active_workspace_from_header(self, authenticated_client: AsyncClient) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")

        response = await authenticated_client.get(
            f"{BASE}/active", headers={"X-Workspace-Id": str(workspace_id)}
        )

        assert response.status_code == 200
        assert response.json()["data"]["id"] == workspace_id

    @pytest.mark.asyncio
    async def test_active_workspace_is_null_without_selection(
        self, authenticated_client: AsyncClient
    ) -> None:
        response = await authenticated_client.get(f"{BASE}/active")

        assert response.status_code == 200
        assert response.json()["data"] is None

    @pytest.mark.asyncio
    async def test_active_roles_include_implicit_global_admin(
        self, authenticated_client: AsyncClient, seed: Seeder
    ) -> None:
        workspace_id = await _create_workspace(authenticated_client, "Alpha")
        await seed.role(TEST_USER_ID, workspace_id, "examiner")

        response = await authenticated_client.get(
            f"{BASE}/active/roles", headers={"X-Workspace-Id": str(workspace_id)}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["active_workspace_id"] == workspace_id
        assert body["assigned_roles"] == ["ROLE_EXAMINER", "ROLE_GLOBAL_ADMIN"]

    @pytest.mark.asyncio
    async def test_context(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.get(
            f"{BASE}/context", headers={"X-Workspace-Id": "12"}
        )

        assert response.status_code == 200
        assert response.json() == {"user_id": TEST_USER_ID, "active_workspace_id": 12}


class TestMemberAccess:
    @pytest.mark.asyncio
    async def test_listing_all_requires_global_admin(self, member_client: AsyncClient) -> None:
        response = await member_client.get(BASE)

        assert response.status_code == 403
        assert response.json()["error_code"] == "INSUFFICIENT_PERMISSIONS"

    @pytest.mark.asyncio
    async def test_creating_requires_global_admin(self, member_client: AsyncClient) -> None:
        response = await member_client.post(BASE, json={"name": "Nope"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_member_sees_own_workspaces(
        self, member_client: AsyncClient, seed: Seeder
    ) -> None:
        workspace_id = await seed.workspace("Alpha")
        await seed.role(TEST_MEMBER_ID, workspace_id, "examinee")

        response = await member_client.get(f"{BASE}/mine")

        assert response.status_code == 200
        assert [w["id"] for w in response.json()["data"]] == [workspace_id]

    @pytest.mark.asyncio
    async def test_member_active_roles_have_no_implicit_roles(
        self, member_client: AsyncClient, seed: Seeder
    ) -> None:
        workspace_id = await seed.workspace("Alpha")
        await seed.role(TEST_MEMBER_ID, workspace_id, "workspace_admin")

        response = await member_client.get(
            f"{BASE}/active/roles", headers={"X-Workspace-Id": str(workspace_id)}
        )

        assert response.json()["assigned_roles"] == ["ROLE_WORKSPACE_ADMIN"]

    @pytest.mark.asyncio
    async def test_member_without_active_workspace(self, member_client: AsyncClient) -> None:
        response = await member_client.get(f"{BASE}/active/roles")

        assert response.json() == {"active_workspace_id": None, "assigned_roles": []}


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_requires_bearer_token(self, client: AsyncClient) -> None:
        response = await client.get(f"{BASE}/mine")

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_rejects_invalid_token(self, client: AsyncClient) -> None:
        response = await client.get(
            f"{BASE}/mine", headers={"Authorization": "Bearer not.a.token"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "INVALID_TOKEN"
