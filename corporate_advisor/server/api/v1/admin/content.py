"""
Admin Content Endpoints.

CRUD for pricing plans, AI prompts, announcements, banners and sample
reports, plus editing of the service introduction and legal documents.
"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile, status

from corporate_advisor.core.models.io.content import (
    AnnouncementCreate,
    AnnouncementRead,
    AnnouncementUpdate,
    BannerCreate,
    BannerRead,
    BannerUpdate,
    LegalDocumentRead,
    LegalDocumentUpsert,
    PricingPlanCreate,
    PricingPlanRead,
    PricingPlanUpdate,
    PromptCreate,
    PromptRead,
    PromptUpdate,
    SampleReportCreate,
    SampleReportRead,
    ServiceIntroRead,
    ServiceIntroUpdate,
    UploadedImage,
)
from corporate_advisor.server.services.deps import SessionDep, StorageDep, get_admin_user
from corporate_advisor.services.content import (
    AnnouncementService,
    BannerService,
    LegalDocumentService,
    PricingPlanService,
    PromptAdminService,
    SampleReportService,
    ServiceIntroService,
)
from corporate_advisor.services.projects import IncomingFile

router = APIRouter(dependencies=[Depends(get_admin_user)])


# ---------------------------------------------------------------------
# Pricing plans
# ---------------------------------------------------------------------


@router.get("/pricing-plans", response_model=List[PricingPlanRead], summary="List All Pricing Plans")
async def list_pricing_plans(session: SessionDep) -> List[PricingPlanRead]:
    return await PricingPlanService(session).list_all()


@router.post(
    "/pricing-plans",
    response_model=PricingPlanRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Pricing Plan",
    responses={409: {"description": "Plan name already exists"}},
)
async def create_pricing_plan(data: PricingPlanCreate, session: SessionDep) -> PricingPlanRead:
    return await PricingPlanService(session).create(data)


@router.patch("/pricing-plans/{plan_id}", response_model=PricingPlanRead, summary="Update Pricing Plan")
async def update_pricing_plan(plan_id: str, data: PricingPlanUpdate, session: SessionDep) -> PricingPlanRead:
    return await PricingPlanService(session).update(plan_id, data)


@router.delete("/pricing-plans/{plan_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Pricing Plan")
async def delete_pricing_plan(plan_id: str, session: SessionDep) -> None:
    await PricingPlanService(session).delete(plan_id)


# ---------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------


@router.get("/prompts", response_model=List[PromptRead], summary="List Prompts")
async def list_prompts(session: SessionDep) -> List[PromptRead]:
    prompts = await PromptAdminService(session).list()
    return [PromptRead.model_validate(p) for p in prompts]


@router.get("/prompts/{prompt_id}", response_model=PromptRead, summary="Get Prompt")
async def get_prompt(prompt_id: str, session: SessionDep) -> PromptRead:
    return PromptRead.model_validate(await PromptAdminService(session).get(prompt_id))


@router.post(
    "/prompts",
    response_model=PromptRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Prompt",
    description="Store a prompt template; ``{{name}}`` placeholders are filled at render time.",
    responses={409: {"description": "Prompt name already exists"}},
)
async def create_prompt(data: PromptCreate, session: SessionDep) -> PromptRead:
    return PromptRead.model_validate(await PromptAdminService(session).create(data))


@router.patch("/prompts/{prompt_id}", response_model=PromptRead, summary="Update Prompt")
async def update_prompt(prompt_id: str, data: PromptUpdate, session: SessionDep) -> PromptRead:
    return PromptRead.model_validate(await PromptAdminService(session).update(prompt_id, data))


@router.delete("/prompts/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Prompt")
async def delete_prompt(prompt_id: str, session: SessionDep) -> None:
    await PromptAdminService(session).delete(prompt_id)


# ---------------------------------------------------------------------
# Announcements
# ---------------------------------------------------------------------


@router.get("/announcements", response_model=List[AnnouncementRead], summary="List All Announcements")
async def list_announcements(session: SessionDep) -> List[AnnouncementRead]:
    announcements = await AnnouncementService(session).list_all()
    return [AnnouncementRead.model_validate(a) for a in announcements]


@router.post(
    "/announcements",
    response_model=AnnouncementRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Announcement",
)
async def create_announcement(data: AnnouncementCreate, session: SessionDep) -> AnnouncementRead:
    return AnnouncementRead.model_validate(await AnnouncementService(session).create(data))


@router.patch("/announcements/{announcement_id}", response_model=AnnouncementRead, summary="Update Announcement")
async def update_announcement(
    announcement_id: str, data: AnnouncementUpdate, session: SessionDep
) -> AnnouncementRead:
    return AnnouncementRead.model_validate(await AnnouncementService(session).update(announcement_id, data))


@router.delete(
    "/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Announcement"
)
async def delete_announcement(announcement_id: str, session: SessionDep) -> None:
    await AnnouncementService(session).delete(announcement_id)


# ---------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------


@router.get("/banners", response_model=List[BannerRead], summary="List All Banners")
async def list_banners(session: SessionDep) -> List[BannerRead]:
    return [BannerRead.model_validate(b) for b in await BannerService(session).list()]


@router.post("/banners", response_model=BannerRead, status_code=status.HTTP_201_CREATED, summary="Create Banner")
async def create_banner(data: BannerCreate, session: SessionDep) -> BannerRead:
    return BannerRead.model_validate(await BannerService(session).create(data))


@router.patch("/banners/{banner_id}", response_model=BannerRead, summary="Update Banner")
async def update_banner(banner_id: str, data: BannerUpdate, session: SessionDep) -> BannerRead:
    return BannerRead.model_validate(await BannerService(session).update(banner_id, data))


@router.delete("/banners/{banner_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Banner")
async def delete_banner(banner_id: str, session: SessionDep) -> None:
    await BannerService(session).delete(banner_id)


async def _incoming(file: UploadFile) -> IncomingFile:
    return IncomingFile(filename=file.filename or "image", content_type=file.content_type or "", data=await file.read())


# ---------------------------------------------------------------------
# Sample reports
# ---------------------------------------------------------------------


@router.get("/sample-reports", response_model=List[SampleReportRead], summary="List Sample Reports")
async def list_sample_reports(session: SessionDep) -> List[SampleReportRead]:
    return [SampleReportRead.model_validate(s) for s in await SampleReportService(session).list()]


@router.post(
    "/sample-reports",
    response_model=SampleReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Sample Report",
)
async def create_sample_report(data: SampleReportCreate, session: SessionDep) -> SampleReportRead:
    return SampleReportRead.model_validate(await SampleReportService(session).create(data))


@router.post(
    "/sample-reports/upload",
    response_model=SampleReportRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Sample Report Image",
    description="Store an image (at most 5MB) and register it as a sample report.",
    responses={400: {"description": "Not an image or too large"}},
)
async def upload_sample_report(
    session: SessionDep, storage: StorageDep, file: UploadFile = File(...)
) -> SampleReportRead:
    sample = await SampleReportService(session, storage).upload(await _incoming(file))
    return SampleReportRead.model_validate(sample)


@router.delete("/sample-reports", summary="Delete All Sample Reports")
async def delete_all_sample_reports(session: SessionDep) -> dict:
    deleted = await SampleReportService(session).delete_all()
    return {"message": "모든 샘플 레포트가 삭제되었습니다", "deleted": deleted}


@router.delete(
    "/sample-reports/{sample_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Sample Report"
)
async def delete_sample_report(sample_id: str, session: SessionDep) -> None:
    await SampleReportService(session).delete(sample_id)


# ---------------------------------------------------------------------
# Service introduction
# ---------------------------------------------------------------------


@router.put("/service-intro", response_model=ServiceIntroRead, summary="Save Service Introduction")
async def save_service_intro(data: ServiceIntroUpdate, session: SessionDep) -> ServiceIntroRead:
    return ServiceIntroRead.model_validate(await ServiceIntroService(session).save(data.content))


@router.post(
    "/service-intro/upload",
    response_model=UploadedImage,
    summary="Upload Service Introduction Image",
    responses={400: {"description": "Not an image"}},
)
async def upload_service_intro_image(
    session: SessionDep, storage: StorageDep, file: UploadFile = File(...)
) -> UploadedImage:
    url = await ServiceIntroService(session, storage).upload_image(await _incoming(file))
    return UploadedImage(url=url)


# ---------------------------------------------------------------------
# Legal documents
# ---------------------------------------------------------------------


@router.get("/legal", response_model=List[LegalDocumentRead], summary="List Legal Documents")
async def list_legal_documents(session: SessionDep) -> List[LegalDocumentRead]:
    return [LegalDocumentRead.model_validate(d) for d in await LegalDocumentService(session).list()]


@router.put(
    "/legal",
    response_model=LegalDocumentRead,
    summary="Save Legal Document",
    description="Create or replace the terms of service (``terms``) or the privacy policy (``privacy``).",
    responses={400: {"description": "Unknown document type or missing title/content"}},
)
async def save_legal_document(data: LegalDocumentUpsert, session: SessionDep) -> LegalDocumentRead:
    return LegalDocumentRead.model_validate(await LegalDocumentService(session).upsert(data))
