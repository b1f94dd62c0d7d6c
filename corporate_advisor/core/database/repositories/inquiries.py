"""
Inquiry repository.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import case, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.inquiries import Inquiry
from .base import SQLModelRepository


class InquiryRepository(SQLModelRepository[Inquiry]):
    """Repository for customer-service inquiries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Inquiry)

    async def list_for_user(self, user_id: str) -> List[Inquiry]:
        return await self.list(filters={"user_id": user_id})

    async def list_for_admin(self, status: Optional[str] = None) -> List[Inquiry]:
        """All inquiries with pending ones first, newest first within each status."""
        pending_first = case((Inquiry.status == "pending", 0), else_=1)
        stmt = select(Inquiry).order_by(pending_first, Inquiry.created_at.desc())
        if status:
            stmt = stmt.where(Inquiry.status == status)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(delete(Inquiry).where(Inquiry.user_id == user_id))
