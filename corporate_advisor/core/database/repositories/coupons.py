"""
Coupon repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.coupons import Coupon
from .base import QueryBuilder, SQLModelRepository


class CouponRepository(SQLModelRepository[Coupon]):
    """Repository for coupons."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Coupon)

    async def get_by_code(self, code: str) -> Optional[Coupon]:
        stmt = select(Coupon).where(Coupon.code == code)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def all_codes(self) -> Set[str]:
        result = await self.session.execute(select(Coupon.code))
        return set(result.scalars().all())

    def _filtered(self, stmt, status: Optional[str], batch_id: Optional[str]):
        if status == "unused":
            stmt = stmt.where(Coupon.redeemed_at.is_(None))
        elif status == "used":
            stmt = stmt.where(Coupon.redeemed_at.is_not(None))
        if batch_id:
            stmt = stmt.where(Coupon.batch_id == batch_id)
        return stmt

    async def search(
        self,
        status: Optional[str] = None,
        batch_id: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Coupon]:
        stmt = self._filtered(select(Coupon).order_by(Coupon.created_at.desc()), status, batch_id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_matching(self, status: Optional[str] = None, batch_id: Optional[str] = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(Coupon), status, batch_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def batch_summaries(self) -> List[Dict[str, object]]:
        """Per-batch totals: batch id, plan, duration, coupon count, redeemed count and creation time."""
        stmt = (
            select(
                Coupon.batch_id,
                Coupon.plan,
                Coupon.duration_days,
                func.count(Coupon.id),
                func.count(Coupon.redeemed_at),
                func.min(Coupon.created_at),
            )
            .where(Coupon.batch_id.is_not(None))
            .group_by(Coupon.batch_id, Coupon.plan, Coupon.duration_days)
            .order_by(func.min(Coupon.created_at).desc())
        )
        result = await self.session.execute(stmt)
        return [
            {
                "batch_id": batch_id,
                "plan": plan,
                "duration_days": duration_days,
                "total": total,
                "used": used,
                "created_at": created_at,
            }
            for batch_id, plan, duration_days, total, used, created_at in result.all()
        ]

    async def delete_unredeemed(
        self, batch_id: Optional[str] = None, coupon_ids: Optional[Iterable[str]] = None
    ) -> int:
        """Delete unredeemed coupons of a batch or from an id list; redeemed ones are kept."""
        stmt = delete(Coupon).where(Coupon.redeemed_at.is_(None))
        if batch_id:
            stmt = stmt.where(Coupon.batch_id == batch_id)
        else:
            stmt = stmt.where(Coupon.id.in_(list(coupon_ids or [])))
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def release_for_user(self, user_id: str) -> None:
        """Detach a user from the coupons they redeemed; the coupons stay redeemed."""
        await self.session.execute(update(Coupon).where(Coupon.redeemed_by == user_id).values(redeemed_by=None))

    async def claim(self, coupon_id: str, user_id: str, redeemed_at: datetime, expires_at: datetime) -> bool:
        """Mark an unredeemed coupon as redeemed by ``user_id`` without committing.

        Returns False when another redemption got there first.
        """
        stmt = (
            update(Coupon)
            .where(Coupon.id == coupon_id, Coupon.redeemed_at.is_(None))
            .values(redeemed_by=user_id, redeemed_at=redeemed_at, expires_at=expires_at)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
