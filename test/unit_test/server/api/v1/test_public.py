"""
API tests for the unauthenticated content endpoints.
"""

from datetime import timedelta

from httpx import AsyncClient

from corporate_advisor.core.database.base import utc_now
from corporate_advisor.core.models.io.content import (
    AnnouncementCreate,
    BannerCreate,
    PricingPlanCreate,
    SampleReportCreate,
)
from corporate_advisor.services.content import (
    AnnouncementService,
    BannerService,
    PricingPlanService,
    SampleReportService,
)


async def test_pricing_plans(client: AsyncClient, session):
    service = PricingPlanService(session)
    await service.create(PricingPlanCreate(name="standard", display_name="Standard", price=15000, display_order=2))
    await service.create(PricingPlanCreate(name="free", display_name="Free", display_order=1))
    await service.create(PricingPlanCreate(name="legacy", display_name="Legacy", is_active=False))

    response = await client.get("/api/v1/pricing-plans")

    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["free", "standard"]
    assert response.json()[1]["price"] == 15000


async def test_announcements(client: AsyncClient, session):
    service = AnnouncementService(session)
    await service.create(AnnouncementCreate(title="상시", content="내용"))
    await service.create(AnnouncementCreate(title="중요", content="내용", priority=5))
    await service.create(
        AnnouncementCreate(title="종료", content="내용", end_date=utc_now() - timedelta(days=1))
    )

    response = await client.get("/api/v1/announcements")

    assert response.status_code == 200
    assert [a["title"] for a in response.json()] == ["중요", "상시"]


async def test_banners(client: AsyncClient, session):
    service = BannerService(session)
    await service.create(BannerCreate(title="메인", image_url="/main.png", order=1))
    await service.create(BannerCreate(title="숨김", image_url="/hidden.png", is_active=False))

    response = await client.get("/api/v1/banners")

    assert response.status_code == 200
    assert [b["title"] for b in response.json()] == ["메인"]


async def test_empty_content(client: AsyncClient):
    for path in ("/api/v1/pricing-plans", "/api/v1/announcements", "/api/v1/banners"):
        response = await client.get(path)
        assert response.status_code == 200
        assert response.json() == []


async def test_sample_report_images(client: AsyncClient, session):
    service = SampleReportService(session)
    await service.create(SampleReportCreate(image_url="second.png", order=2))
    await service.create(SampleReportCreate(image_url="first.png", order=1))

    response = await client.get("/api/v1/sample-reports")

    assert response.status_code == 200
    assert response.json() == {"images": ["first.png", "second.png"]}
