"""
User account entity models.

A user owns projects, a single subscription, usage counters, credit
transactions and customer-service inquiries.
"""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class User(Base, table=True):
    """Registered account.

    ``role`` is either ``user`` or ``admin``; ``credits`` is the current
    credit balance, changed only through credit transactions.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    password_hash: str = Field(max_length=255)
    name: str = Field(max_length=100)
    role: str = Field(default="user", max_length=16, index=True)
    credits: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"
