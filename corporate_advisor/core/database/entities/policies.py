"""
Group policy and monthly usage entity models.

Group policies configure the monthly quotas of each user group; usage logs
count the projects a user started in a calendar month and presentation logs
record every generated presentation deck.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class GroupPolicy(Base, table=True):
    """Monthly quota configuration of a user group.

    Table: group_policies
    """

    __tablename__ = "group_policies"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    group_name: str = Field(max_length=16, unique=True, index=True)
    monthly_project_limit: int = Field(default=0, ge=0)
    monthly_presentation_limit: int = Field(default=0, ge=0)
    description: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return (
            f"GroupPolicy(group_name={self.group_name}, "
            f"projects={self.monthly_project_limit}, presentations={self.monthly_presentation_limit})"
        )


class UsageLog(Base, table=True):
    """Number of projects analysed by a user in one ``YYYY-MM`` month.

    Table: usage_logs
    """

    __tablename__ = "usage_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "year_month", name="uq_usage_logs_user_month"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    year_month: str = Field(max_length=7, index=True)
    project_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"UsageLog(user_id={self.user_id}, year_month={self.year_month}, project_count={self.project_count})"


class PresentationLog(Base, table=True):
    """One generated presentation deck, counted against the user's presentation quota.

    Table: presentation_logs
    """

    __tablename__ = "presentation_logs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    # Kept after the project is deleted so the quota is not refunded
    project_id: str = Field(max_length=64, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
