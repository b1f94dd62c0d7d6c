"""
Public Content Endpoints.

Pricing plans, announcements, banners, sample reports, the service
introduction and legal documents shown without authentication.
"""

from typing import List

from fastapi import APIRouter

from corporate_advisor.core.models.io.content import (
    AnnouncementRead,
    BannerRead,
    LegalDocumentRead,
    PricingPlanRead,
    SampleReportImages,
    ServiceIntroRead,
)
from corporate_advisor.server.services.deps import SessionDep
from corporate_advisor.services.content import (
    AnnouncementService,
    BannerService,
    LegalDocumentService,
    PricingPlanService,
    SampleReportService,
    ServiceIntroService,
)

router = APIRouter()


@router.get(
    "/pricing-plans",
    response_model=List[PricingPlanRead],
    summary="List Pricing Plans",
    description="Active pricing plans in display order.",
)
async def list_pricing_plans(session: SessionDep) -> List[PricingPlanRead]:
    return await PricingPlanService(session).list_active()


@router.get(
    "/announcements",
    response_model=List[AnnouncementRead],
    summary="List Announcements",
    description="Active announcements within their display window, highest priority first.",
)
async def list_announcements(session: SessionDep) -> List[AnnouncementRead]:
    announcements = await AnnouncementService(session).list_visible()
    return [AnnouncementRead.model_validate(a) for a in announcements]


@router.get("/banners", response_model=List[BannerRead], summary="List Banners")
async def list_banners(session: SessionDep) -> List[BannerRead]:
    banners = await BannerService(session).list(active_only=True)
    return [BannerRead.model_validate(b) for b in banners]


@router.get(
    "/sample-reports",
    response_model=SampleReportImages,
    summary="List Sample Report Images",
    description="Image URLs of the sample reports in display order.",
)
async def list_sample_reports(session: SessionDep) -> SampleReportImages:
    return SampleReportImages(images=await SampleReportService(session).image_urls())


@router.get(
    "/service-intro",
    response_model=ServiceIntroRead,
    summary="Get Service Introduction",
    description="Latest service introduction; empty content when none was written yet.",
)
async def get_service_intro(session: SessionDep) -> ServiceIntroRead:
    return await ServiceIntroService(session).get()


@router.get(
    "/legal/{document_type}",
    response_model=LegalDocumentRead,
    summary="Get Legal Document",
    responses={404: {"description": "Document not written yet"}},
)
async def get_legal_document(document_type: str, session: SessionDep) -> LegalDocumentRead:
    return LegalDocumentRead.model_validate(await LegalDocumentService(session).get(document_type))
