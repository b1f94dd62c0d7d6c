"""
API tests for coupon redemption.
"""

from httpx import AsyncClient

from corporate_advisor.core.database.entities import Coupon

REDEEM_URL = "/api/v1/coupons/redeem"


async def test_redeem(client: AsyncClient, session, user_headers):
    session.add(Coupon(code="ABCD-EFGH-1234-5678", plan="expert", duration_days=90))
    await session.commit()

    response = await client.post(REDEEM_URL, json={"code": "abcd-efgh-1234-5678"}, headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "expert"
    assert data["duration_days"] == 90
    assert data["message"] == "EXPERT 플랜 90일 이용권이 등록되었습니다."

    subscription = await client.get("/api/v1/user/subscription", headers=user_headers)
    assert subscription.json()["plan"] == "expert"


async def test_redeem_twice(client: AsyncClient, session, user_headers):
    session.add(Coupon(code="ABCD-EFGH-1234-5678", plan="pro", duration_days=30))
    await session.commit()
    await client.post(REDEEM_URL, json={"code": "ABCD-EFGH-1234-5678"}, headers=user_headers)

    response = await client.post(REDEEM_URL, json={"code": "ABCD-EFGH-1234-5678"}, headers=user_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "이미 사용된 쿠폰입니다. 담당자에게 문의하세요."}


async def test_redeem_unknown_code(client: AsyncClient, user_headers):
    response = await client.post(REDEEM_URL, json={"code": "ZZZZ-ZZZZ-ZZZZ-ZZZZ"}, headers=user_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "유효하지 않은 쿠폰 코드입니다"}


async def test_redeem_requires_authentication(client: AsyncClient):
    response = await client.post(REDEEM_URL, json={"code": "ABCD-EFGH-1234-5678"})

    assert response.status_code == 401
