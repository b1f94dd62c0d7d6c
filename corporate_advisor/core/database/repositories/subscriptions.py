"""
Subscription and payment log repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.subscriptions import PaymentLog, Subscription
from .base import SQLModelRepository


class SubscriptionRepository(SQLModelRepository[Subscription]):
    """Repository for user subscriptions (one row per user)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Subscription)

    async def get_by_user(self, user_id: str) -> Optional[Subscription]:
        stmt = select(Subscription).where(Subscription.user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def delete_by_user(self, user_id: str) -> None:
        subscription = await self.get_by_user(user_id)
        if subscription is not None:
            await self.session.delete(subscription)


class PaymentLogRepository(SQLModelRepository[PaymentLog]):
    """Repository for the payment ledger."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PaymentLog)

    async def list_since(self, since: Optional[datetime] = None) -> List[PaymentLog]:
        """Payment logs created at or after ``since`` (all logs when ``None``), newest first."""
        stmt = select(PaymentLog).order_by(PaymentLog.created_at.desc())
        if since is not None:
            stmt = stmt.where(PaymentLog.created_at >= since)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> List[PaymentLog]:
        return await self.list(filters={"user_id": user_id})

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(delete(PaymentLog).where(PaymentLog.user_id == user_id))
