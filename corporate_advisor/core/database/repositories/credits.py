"""
Credit price, credit transaction and initial-credit policy repositories.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.credits import CreditPrice, CreditTransaction, InitialCreditPolicy
from .base import SQLModelRepository


class CreditPriceRepository(SQLModelRepository[CreditPrice]):
    """Repository for credit prices."""

    default_order_by = "action_type"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CreditPrice)

    async def get_by_action(self, action_type: str) -> Optional[CreditPrice]:
        stmt = select(CreditPrice).where(CreditPrice.action_type == action_type)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class CreditTransactionRepository(SQLModelRepository[CreditTransaction]):
    """Repository for credit transactions."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CreditTransaction)

    async def list_for_user(self, user_id: str, limit: int = 100) -> List[CreditTransaction]:
        return await self.list(limit=limit, filters={"user_id": user_id})

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(delete(CreditTransaction).where(CreditTransaction.user_id == user_id))


class InitialCreditPolicyRepository(SQLModelRepository[InitialCreditPolicy]):
    """Repository for initial-credit policies."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, InitialCreditPolicy)

    async def get_active(self) -> Optional[InitialCreditPolicy]:
        stmt = (
            select(InitialCreditPolicy)
            .where(InitialCreditPolicy.is_active.is_(True))
            .order_by(InitialCreditPolicy.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def deactivate_all(self) -> None:
        await self.session.execute(
            update(InitialCreditPolicy).where(InitialCreditPolicy.is_active.is_(True)).values(is_active=False)
        )
