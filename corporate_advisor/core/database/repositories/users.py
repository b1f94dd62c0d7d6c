"""
User repository.

Data access for user accounts, including the search used by the admin user list.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import User
from .base import QueryBuilder, SQLModelRepository


class UserRepository(SQLModelRepository[User]):
    """Repository for user accounts."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def search(
        self, query: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[User]:
        """List users, optionally filtered by a case-insensitive email/name fragment."""
        stmt = select(User).order_by(User.created_at.desc())
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
