"""
API tests for customer inquiries.
"""

from httpx import AsyncClient

from corporate_advisor.core.models.io.content import InquiryCreate
from corporate_advisor.services.content import InquiryService

INQUIRIES_URL = "/api/v1/inquiries"


async def test_submit_inquiry(client: AsyncClient, notifier, user_headers):
    response = await client.post(
        INQUIRIES_URL,
        json={"category": "billing", "title": "결제 문의", "content": "영수증을 받을 수 있나요?"},
        headers=user_headers,
    )

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["reply"] is None
    notifier.notify_customer_inquiry.assert_awaited_once_with(
        "홍길동", "user@example.com", "결제 문의", "영수증을 받을 수 있나요?", data["id"]
    )


async def test_submit_inquiry_validation(client: AsyncClient, user_headers):
    response = await client.post(INQUIRIES_URL, json={"title": "", "content": "내용"}, headers=user_headers)

    assert response.status_code == 422


async def test_list_own_inquiries(client: AsyncClient, session, other_user, user_headers):
    await InquiryService(session).create(other_user, InquiryCreate(title="다른 사람", content="내용"))
    await client.post(INQUIRIES_URL, json={"title": "내 문의", "content": "내용"}, headers=user_headers)

    response = await client.get(INQUIRIES_URL, headers=user_headers)

    assert response.status_code == 200
    assert [i["title"] for i in response.json()] == ["내 문의"]


async def test_requires_authentication(client: AsyncClient):
    response = await client.get(INQUIRIES_URL)

    assert response.status_code == 401
