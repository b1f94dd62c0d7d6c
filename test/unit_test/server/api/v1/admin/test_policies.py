"""
API tests for group quota policies.
"""

from httpx import AsyncClient

POLICIES_URL = "/api/v1/admin/policies"


async def test_set_and_list(client: AsyncClient, admin_headers, user_headers):
    response = await client.put(
        f"{POLICIES_URL}/free",
        json={"monthly_project_limit": 5, "monthly_presentation_limit": 1, "description": "무료 체험"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["monthly_project_limit"] == 5

    policies = await client.get(POLICIES_URL, headers=admin_headers)
    assert [p["group_name"] for p in policies.json()] == ["free"]

    info = await client.get("/api/v1/user/policy", headers=user_headers)
    assert info.json()["monthly_limit"] == 5
    assert info.json()["monthly_presentation_limit"] == 1


async def test_update_existing(client: AsyncClient, admin_headers):
    await client.put(f"{POLICIES_URL}/pro", json={"monthly_project_limit": 10}, headers=admin_headers)

    response = await client.put(f"{POLICIES_URL}/pro", json={"monthly_project_limit": 20}, headers=admin_headers)

    assert response.json()["monthly_project_limit"] == 20
    assert len((await client.get(POLICIES_URL, headers=admin_headers)).json()) == 1


async def test_unknown_group(client: AsyncClient, admin_headers):
    response = await client.put(f"{POLICIES_URL}/vip", json={"monthly_project_limit": 1}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "유효하지 않은 그룹입니다"}


async def test_negative_limit(client: AsyncClient, admin_headers):
    response = await client.put(f"{POLICIES_URL}/free", json={"monthly_project_limit": -1}, headers=admin_headers)

    assert response.status_code == 422
