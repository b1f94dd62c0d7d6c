"""
Consulting chatbot knowledge-base entity.

Each entry is a sourced question/answer pair the chatbot may quote. Entries
are written by administrators directly or extracted from uploaded PDFs.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ChatbotKnowledge(Base, table=True):
    """Sourced knowledge entry searched by the consulting chatbot.

    Table: chatbot_knowledge
    """

    __tablename__ = "chatbot_knowledge"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    category: str = Field(max_length=100, index=True)
    subcategory: Optional[str] = Field(default=None, max_length=255)
    question: str = Field()
    answer: str = Field()
    source: str = Field(max_length=255)
    source_url: Optional[str] = Field(default=None, max_length=1024)
    # Comma-separated keyword list
    keywords: str = Field(default="")
    is_active: bool = Field(default=True, index=True)
    # ``YYYY-MM`` or ``YYYY-MM-DD`` date the answer was last checked
    last_updated: str = Field(max_length=32)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_keywords_list(self) -> List[str]:
        return [k.strip() for k in self.keywords.split(",") if k.strip()]
