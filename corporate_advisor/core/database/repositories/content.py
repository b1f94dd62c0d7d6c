"""
Back-office content repositories: pricing plans, prompts, announcements,
banners, sample reports, the service introduction and legal documents.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.content import (
    Announcement,
    Banner,
    LegalDocument,
    PricingPlan,
    Prompt,
    SampleReport,
    ServiceIntro,
)
from .base import SQLModelRepository


class PricingPlanRepository(SQLModelRepository[PricingPlan]):
    """Repository for pricing plans."""

    default_order_by = "display_order"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PricingPlan)

    async def get_by_name(self, name: str) -> Optional[PricingPlan]:
        stmt = select(PricingPlan).where(PricingPlan.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_active(self) -> List[PricingPlan]:
        return await self.list(filters={"is_active": True})


class PromptRepository(SQLModelRepository[Prompt]):
    """Repository for AI prompt templates."""

    default_order_by = "name"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Prompt)

    async def get_by_name(self, name: str) -> Optional[Prompt]:
        stmt = select(Prompt).where(Prompt.name == name)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class AnnouncementRepository(SQLModelRepository[Announcement]):
    """Repository for announcements."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Announcement)

    async def list_all(self) -> List[Announcement]:
        """All announcements, highest priority first, then newest first."""
        stmt = select(Announcement).order_by(Announcement.priority.desc(), Announcement.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_visible(self, now: datetime) -> List[Announcement]:
        """Active announcements whose date window contains ``now``; missing bounds are open."""
        stmt = (
            select(Announcement)
            .where(
                Announcement.is_active.is_(True),
                or_(Announcement.start_date.is_(None), Announcement.start_date <= now),
                or_(Announcement.end_date.is_(None), Announcement.end_date >= now),
            )
            .order_by(Announcement.priority.desc(), Announcement.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class BannerRepository(SQLModelRepository[Banner]):
    """Repository for banners."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Banner)

    async def list_ordered(self, active_only: bool = False) -> List[Banner]:
        stmt = select(Banner).order_by(Banner.order.asc(), Banner.created_at.desc())
        if active_only:
            stmt = stmt.where(Banner.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class SampleReportRepository(SQLModelRepository[SampleReport]):
    """Repository for sample report images."""

    default_order_by = "order"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, SampleReport)

    async def delete_all(self) -> int:
        result = await self.session.execute(delete(SampleReport))
        await self.session.commit()
        return int(result.rowcount or 0)


class ServiceIntroRepository(SQLModelRepository[ServiceIntro]):
    """Repository for the service introduction page."""

    default_order_by = "updated_at"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ServiceIntro)

    async def get_latest(self) -> Optional[ServiceIntro]:
        rows = await self.list(limit=1)
        return rows[0] if rows else None


class LegalDocumentRepository(SQLModelRepository[LegalDocument]):
    """Repository for legal documents."""

    default_order_by = "type"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, LegalDocument)

    async def get_by_type(self, document_type: str) -> Optional[LegalDocument]:
        stmt = select(LegalDocument).where(LegalDocument.type == document_type)
        result = await self.session.execute(stmt)
        return result.scalars().first()
