"""
Customer-service inquiry entity model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Inquiry(Base, table=True):
    """Question sent by a user to the customer-service team.

    Table: inquiries
    """

    __tablename__ = "inquiries"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    category: str = Field(default="general", max_length=32)
    title: str = Field(max_length=255)
    content: str = Field()
    status: str = Field(default="pending", max_length=16, index=True)
    reply: Optional[str] = Field(default=None)
    replied_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Inquiry(id={self.id}, title={self.title}, status={self.status})"
