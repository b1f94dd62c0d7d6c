"""
Consulting chatbot I/O models: chat turns and knowledge-base entries.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str
    history: List[ChatMessage] = Field(default_factory=list)


class ChatSource(BaseModel):
    category: str
    source: str
    source_url: Optional[str] = None


class ChatResponse(BaseModel):
    answer: str
    sources: Optional[List[ChatSource]] = None
    has_reliable_source: bool


class KnowledgeRead(BaseModel):
    id: str
    category: str
    subcategory: Optional[str] = None
    question: str
    answer: str
    source: str
    source_url: Optional[str] = None
    keywords: str
    is_active: bool
    last_updated: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class KnowledgeCreate(BaseModel):
    category: str = Field(min_length=1)
    subcategory: Optional[str] = None
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)
    source: str = Field(min_length=1)
    source_url: Optional[str] = None
    keywords: str = Field(min_length=1, description="Comma-separated keywords")
    is_active: bool = True
    last_updated: str = Field(min_length=1)


class KnowledgeUpdate(BaseModel):
    category: Optional[str] = None
    subcategory: Optional[str] = None
    question: Optional[str] = None
    answer: Optional[str] = None
    source: Optional[str] = None
    source_url: Optional[str] = None
    keywords: Optional[str] = None
    is_active: Optional[bool] = None
    last_updated: Optional[str] = None


class PdfIngestResult(BaseModel):
    success: bool = True
    message: str
    entries_count: int
    total_pages: int
    total_characters: int
