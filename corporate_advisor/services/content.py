"""
Back-office content: pricing plans, prompts, announcements, banners,
customer inquiries, group policies, sample reports, the service
introduction page and legal documents.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import (
    Announcement,
    Banner,
    GroupPolicy,
    Inquiry,
    LegalDocument,
    PricingPlan,
    Prompt,
    SampleReport,
    ServiceIntro,
    User,
)
from corporate_advisor.core.database.repositories import (
    AnnouncementRepository,
    BannerRepository,
    GroupPolicyRepository,
    InquiryRepository,
    LegalDocumentRepository,
    PricingPlanRepository,
    PromptRepository,
    SampleReportRepository,
    ServiceIntroRepository,
)
from corporate_advisor.core.errors import BadRequestError, ConflictError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import GroupName, InquiryStatus, LegalDocumentType
from corporate_advisor.core.models.io.billing import GroupPolicyUpdate
from corporate_advisor.core.models.io.content import (
    AnnouncementCreate,
    AnnouncementUpdate,
    BannerCreate,
    BannerUpdate,
    InquiryCreate,
    LegalDocumentUpsert,
    PricingPlanCreate,
    PricingPlanRead,
    PricingPlanUpdate,
    PromptCreate,
    PromptUpdate,
    SampleReportCreate,
    ServiceIntroRead,
)
from corporate_advisor.services.notifications import TelegramNotifier
from corporate_advisor.services.projects import IncomingFile, epoch_ms
from corporate_advisor.services.storage import StorageBackend

logger = get_logger(__name__)


def pricing_plan_to_read(plan: PricingPlan) -> PricingPlanRead:
    return PricingPlanRead(
        id=plan.id,
        name=plan.name,
        display_name=plan.display_name,
        price=plan.price,
        period=plan.period,
        description=plan.description,
        features=plan.get_features_list(),
        is_popular=plan.is_popular,
        is_active=plan.is_active,
        display_order=plan.display_order,
    )


def _apply(entity, changes: dict) -> None:
    for key, value in changes.items():
        setattr(entity, key, value)


class PricingPlanService:
    def __init__(self, session: AsyncSession) -> None:
        self.plans = PricingPlanRepository(session)

    async def list_active(self) -> List[PricingPlanRead]:
        return [pricing_plan_to_read(p) for p in await self.plans.list_active()]

    async def list_all(self) -> List[PricingPlanRead]:
        return [pricing_plan_to_read(p) for p in await self.plans.list()]

    async def _get(self, plan_id: str) -> PricingPlan:
        plan = await self.plans.get_by_id(plan_id)
        if plan is None:
            raise NotFoundError("요금제를 찾을 수 없습니다")
        return plan

    async def create(self, data: PricingPlanCreate) -> PricingPlanRead:
        if await self.plans.get_by_name(data.name) is not None:
            raise ConflictError("이미 존재하는 요금제 이름입니다")
        plan = PricingPlan(**data.model_dump(exclude={"features"}))
        plan.set_features_list(data.features)
        return pricing_plan_to_read(await self.plans.create(plan))

    async def update(self, plan_id: str, data: PricingPlanUpdate) -> PricingPlanRead:
        plan = await self._get(plan_id)
        changes = data.model_dump(exclude_unset=True)
        features = changes.pop("features", None)
        _apply(plan, changes)
        if features is not None:
            plan.set_features_list(features)
        return pricing_plan_to_read(await self.plans.update(plan))

    async def delete(self, plan_id: str) -> None:
        if not await self.plans.delete(plan_id):
            raise NotFoundError("요금제를 찾을 수 없습니다")


class PromptAdminService:
    def __init__(self, session: AsyncSession) -> None:
        self.prompts = PromptRepository(session)

    async def list(self) -> List[Prompt]:
        return await self.prompts.list()

    async def get(self, prompt_id: str) -> Prompt:
        prompt = await self.prompts.get_by_id(prompt_id)
        if prompt is None:
            raise NotFoundError("프롬프트를 찾을 수 없습니다")
        return prompt

    async def create(self, data: PromptCreate) -> Prompt:
        if await self.prompts.get_by_name(data.name) is not None:
            raise ConflictError("이미 존재하는 프롬프트 이름입니다")
        prompt = await self.prompts.create(Prompt(**data.model_dump()))
        logger.info(f"Prompt {prompt.name} created")
        return prompt

    async def update(self, prompt_id: str, data: PromptUpdate) -> Prompt:
        prompt = await self.get(prompt_id)
        _apply(prompt, data.model_dump(exclude_unset=True))
        prompt = await self.prompts.update(prompt)
        logger.info(f"Prompt {prompt.name} updated")
        return prompt

    async def delete(self, prompt_id: str) -> None:
        if not await self.prompts.delete(prompt_id):
            raise NotFoundError("프롬프트를 찾을 수 없습니다")


class AnnouncementService:
    def __init__(self, session: AsyncSession) -> None:
        self.announcements = AnnouncementRepository(session)

    async def list_visible(self) -> List[Announcement]:
        return await self.announcements.list_visible(utc_now())

    async def list_all(self) -> List[Announcement]:
        return await self.announcements.list_all()

    async def create(self, data: AnnouncementCreate) -> Announcement:
        return await self.announcements.create(Announcement(**data.model_dump()))

    async def update(self, announcement_id: str, data: AnnouncementUpdate) -> Announcement:
        announcement = await self.announcements.get_by_id(announcement_id)
        if announcement is None:
            raise NotFoundError("공지사항을 찾을 수 없습니다")
        _apply(announcement, data.model_dump(exclude_unset=True))
        return await self.announcements.update(announcement)

    async def delete(self, announcement_id: str) -> None:
        if not await self.announcements.delete(announcement_id):
            raise NotFoundError("공지사항을 찾을 수 없습니다")


class BannerService:
    def __init__(self, session: AsyncSession) -> None:
        self.banners = BannerRepository(session)

    async def list(self, active_only: bool = False) -> List[Banner]:
        return await self.banners.list_ordered(active_only=active_only)

    async def create(self, data: BannerCreate) -> Banner:
        return await self.banners.create(Banner(**data.model_dump()))

    async def update(self, banner_id: str, data: BannerUpdate) -> Banner:
        banner = await self.banners.get_by_id(banner_id)
        if banner is None:
            raise NotFoundError("배너를 찾을 수 없습니다")
        _apply(banner, data.model_dump(exclude_unset=True))
        return await self.banners.update(banner)

    async def delete(self, banner_id: str) -> None:
        if not await self.banners.delete(banner_id):
            raise NotFoundError("배너를 찾을 수 없습니다")


class InquiryService:
    def __init__(self, session: AsyncSession, notifier: Optional[TelegramNotifier] = None) -> None:
        self.inquiries = InquiryRepository(session)
        self.notifier = notifier

    async def create(self, user: User, data: InquiryCreate) -> Inquiry:
        """Store an inquiry and notify the team; a failed notification does not fail the request."""
        inquiry = await self.inquiries.create(
            Inquiry(user_id=user.id, category=data.category, title=data.title, content=data.content)
        )
        if self.notifier is not None:
            sent = await self.notifier.notify_customer_inquiry(
                user.name, user.email, inquiry.title, inquiry.content, inquiry.id
            )
            if not sent:
                logger.info(f"Inquiry {inquiry.id} stored without Telegram notification")
        return inquiry

    async def list_for_user(self, user: User) -> List[Inquiry]:
        return await self.inquiries.list_for_user(user.id)

    async def list_for_admin(self, status: Optional[str] = None) -> List[Inquiry]:
        return await self.inquiries.list_for_admin(status)

    async def reply(self, inquiry_id: str, reply: str) -> Inquiry:
        inquiry = await self.inquiries.get_by_id(inquiry_id)
        if inquiry is None:
            raise NotFoundError("문의를 찾을 수 없습니다")
        inquiry.reply = reply
        inquiry.status = InquiryStatus.ANSWERED.value
        inquiry.replied_at = utc_now()
        return await self.inquiries.update(inquiry)


class GroupPolicyService:
    def __init__(self, session: AsyncSession) -> None:
        self.policies = GroupPolicyRepository(session)

    async def list(self) -> List[GroupPolicy]:
        return await self.policies.list()

    async def upsert(self, group_name: str, data: GroupPolicyUpdate) -> GroupPolicy:
        if group_name not in {g.value for g in GroupName}:
            raise BadRequestError("유효하지 않은 그룹입니다")
        policy = await self.policies.upsert(
            group_name, data.monthly_project_limit, data.monthly_presentation_limit, data.description
        )
        logger.info(
            f"Policy of {group_name} set to {policy.monthly_project_limit} projects / "
            f"{policy.monthly_presentation_limit} presentations"
        )
        return policy


MAX_SAMPLE_IMAGE_SIZE = 5 * 1024 * 1024


def _image_extension(file: IncomingFile, default: str = "png") -> str:
    if not file.content_type.startswith("image/"):
        raise BadRequestError("이미지 파일만 업로드할 수 있습니다")
    _, dot, ext = file.filename.rpartition(".")
    return ext.lower() if dot and ext else default


class SampleReportService:
    def __init__(self, session: AsyncSession, storage: Optional[StorageBackend] = None) -> None:
        self.samples = SampleReportRepository(session)
        self.storage = storage

    async def list(self) -> List[SampleReport]:
        return await self.samples.list()

    async def image_urls(self) -> List[str]:
        return [s.image_url for s in await self.samples.list()]

    async def create(self, data: SampleReportCreate) -> SampleReport:
        return await self.samples.create(SampleReport(**data.model_dump()))

    async def upload(self, file: IncomingFile) -> SampleReport:
        """Store an image and register it as a sample report at order 0."""
        ext = _image_extension(file)
        if len(file.data) > MAX_SAMPLE_IMAGE_SIZE:
            raise BadRequestError("파일 크기는 5MB 이하여야 합니다")
        path = f"sample-reports/sample-report-{epoch_ms()}.{ext}"
        url = await self.storage.upload(path, file.data, file.content_type)
        sample = await self.samples.create(SampleReport(image_url=url, order=0))
        logger.info(f"Sample report image uploaded: {url}")
        return sample

    async def delete(self, sample_id: str) -> None:
        if not await self.samples.delete(sample_id):
            raise NotFoundError("샘플 레포트를 찾을 수 없습니다")

    async def delete_all(self) -> int:
        deleted = await self.samples.delete_all()
        logger.info(f"Deleted {deleted} sample reports")
        return deleted


class ServiceIntroService:
    def __init__(self, session: AsyncSession, storage: Optional[StorageBackend] = None) -> None:
        self.intros = ServiceIntroRepository(session)
        self.storage = storage

    async def get(self) -> ServiceIntroRead:
        intro = await self.intros.get_latest()
        return ServiceIntroRead.model_validate(intro) if intro is not None else ServiceIntroRead()

    async def save(self, content: str) -> ServiceIntro:
        """Replace the page content, creating the page on first save."""
        intro = await self.intros.get_latest()
        if intro is None:
            return await self.intros.create(ServiceIntro(content=content))
        intro.content = content
        return await self.intros.update(intro)

    async def upload_image(self, file: IncomingFile) -> str:
        """Store an image used inside the page and return its URL."""
        ext = _image_extension(file)
        path = f"service-intro/{epoch_ms()}_{uuid.uuid4()}.{ext}"
        return await self.storage.upload(path, file.data, file.content_type)


class LegalDocumentService:
    def __init__(self, session: AsyncSession) -> None:
        self.documents = LegalDocumentRepository(session)

    async def list(self) -> List[LegalDocument]:
        return await self.documents.list()

    async def get(self, document_type: str) -> LegalDocument:
        document = await self.documents.get_by_type(document_type)
        if document is None:
            raise NotFoundError("문서를 찾을 수 없습니다")
        return document

    async def upsert(self, data: LegalDocumentUpsert) -> LegalDocument:
        if data.type not in {t.value for t in LegalDocumentType}:
            raise BadRequestError("유효하지 않은 문서 유형입니다")
        if not data.title or not data.content:
            raise BadRequestError("제목과 내용은 필수입니다")

        version = data.version or "1.0"
        document = await self.documents.get_by_type(data.type)
        if document is None:
            document = await self.documents.create(
                LegalDocument(type=data.type, title=data.title, content=data.content, version=version)
            )
        else:
            document.title = data.title
            document.content = data.content
            document.version = version
            document = await self.documents.update(document)
        logger.info(f"Legal document {document.type} saved as version {document.version}")
        return document
