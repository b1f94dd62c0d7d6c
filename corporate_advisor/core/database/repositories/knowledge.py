"""
Chatbot knowledge-base repository.
"""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.knowledge import ChatbotKnowledge
from .base import SQLModelRepository


class ChatbotKnowledgeRepository(SQLModelRepository[ChatbotKnowledge]):
    """Repository for knowledge entries."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ChatbotKnowledge)

    async def list_all(self) -> List[ChatbotKnowledge]:
        """Entries grouped by category and subcategory, newest first inside a group."""
        stmt = select(ChatbotKnowledge).order_by(
            ChatbotKnowledge.category.asc(),
            ChatbotKnowledge.subcategory.asc(),
            ChatbotKnowledge.created_at.desc(),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active(self) -> List[ChatbotKnowledge]:
        stmt = select(ChatbotKnowledge).where(ChatbotKnowledge.is_active.is_(True))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
