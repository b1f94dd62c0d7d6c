"""
Group policy, usage log and presentation log repositories.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.policies import GroupPolicy, PresentationLog, UsageLog
from .base import SQLModelRepository


class GroupPolicyRepository(SQLModelRepository[GroupPolicy]):
    """Repository for group quota policies."""

    default_order_by = "group_name"
    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, GroupPolicy)

    async def get_by_group(self, group_name: str) -> Optional[GroupPolicy]:
        stmt = select(GroupPolicy).where(GroupPolicy.group_name == group_name)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def upsert(
        self,
        group_name: str,
        monthly_project_limit: int,
        monthly_presentation_limit: int,
        description: Optional[str] = None,
    ) -> GroupPolicy:
        """Create or update the policy of a group."""
        policy = await self.get_by_group(group_name)
        if policy is None:
            policy = GroupPolicy(group_name=group_name)
        policy.monthly_project_limit = monthly_project_limit
        policy.monthly_presentation_limit = monthly_presentation_limit
        if description is not None:
            policy.description = description
        return await self.update(policy)


class UsageLogRepository(SQLModelRepository[UsageLog]):
    """Repository for monthly usage counters."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UsageLog)

    async def get_for_month(self, user_id: str, year_month: str) -> Optional[UsageLog]:
        stmt = select(UsageLog).where(UsageLog.user_id == user_id, UsageLog.year_month == year_month)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def increment(self, user_id: str, year_month: str) -> UsageLog:
        """Add one project to the user's counter of the month, creating the row when missing."""
        usage = await self.get_for_month(user_id, year_month)
        if usage is None:
            usage = UsageLog(user_id=user_id, year_month=year_month, project_count=1)
        else:
            usage.project_count += 1
        return await self.update(usage)

    async def list_for_user(self, user_id: str) -> List[UsageLog]:
        return await self.list(filters={"user_id": user_id})

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(delete(UsageLog).where(UsageLog.user_id == user_id))


class PresentationLogRepository(SQLModelRepository[PresentationLog]):
    """Repository for generated presentation records."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PresentationLog)

    async def record(self, user_id: str, project_id: str) -> PresentationLog:
        return await self.create(PresentationLog(user_id=user_id, project_id=project_id))

    async def count_between(self, user_id: str, start: datetime, end: datetime) -> int:
        """Number of decks the user generated within ``[start, end]``."""
        stmt = (
            select(func.count())
            .select_from(PresentationLog)
            .where(
                PresentationLog.user_id == user_id,
                PresentationLog.created_at >= start,
                PresentationLog.created_at <= end,
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def delete_for_user(self, user_id: str) -> None:
        await self.session.execute(delete(PresentationLog).where(PresentationLog.user_id == user_id))
