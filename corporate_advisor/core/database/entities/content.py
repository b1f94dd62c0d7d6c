"""
Back-office content entity models.

Pricing plans, AI prompts, announcements, banners, sample reports, the
service introduction and legal documents are managed by
administrators and read by the public API and the analysis pipeline.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import List, Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class PricingPlan(Base, table=True):
    """Plan shown on the pricing page.

    Table: pricing_plans
    """

    __tablename__ = "pricing_plans"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=64, unique=True, index=True)
    display_name: str = Field(max_length=100)
    price: int = Field(default=0, ge=0)
    period: str = Field(default="month", max_length=16)
    description: Optional[str] = Field(default=None)
    # JSON array of feature strings
    features: str = Field(default="[]")
    is_popular: bool = Field(default=False)
    is_active: bool = Field(default=True)
    display_order: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_features_list(self) -> List[str]:
        """Get features as a list."""
        try:
            return json.loads(self.features) if self.features else []
        except (json.JSONDecodeError, TypeError):
            return []

    def set_features_list(self, features: List[str]) -> None:
        """Set features from a list."""
        self.features = json.dumps(features, ensure_ascii=False)


class Prompt(Base, table=True):
    """AI prompt template, looked up by name by the analysis pipeline.

    Table: prompts
    """

    __tablename__ = "prompts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=100, unique=True, index=True)
    description: Optional[str] = Field(default=None)
    content: str = Field()
    category: Optional[str] = Field(default=None, max_length=64)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Announcement(Base, table=True):
    """Site announcement, shown while active and inside its date window.

    Table: announcements
    """

    __tablename__ = "announcements"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=255)
    content: str = Field()
    is_active: bool = Field(default=True)
    priority: int = Field(default=0)
    start_date: Optional[datetime] = Field(default=None)
    end_date: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class Banner(Base, table=True):
    """Landing page banner.

    Table: banners
    """

    __tablename__ = "banners"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=255)
    image_url: str = Field(max_length=1024)
    link_url: Optional[str] = Field(default=None, max_length=1024)
    is_active: bool = Field(default=True)
    order: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class SampleReport(Base, table=True):
    """Sample report image shown on the landing page.

    Table: sample_reports
    """

    __tablename__ = "sample_reports"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    image_url: str = Field(max_length=1024)
    order: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class ServiceIntro(Base, table=True):
    """Rich-text service introduction page; only the latest row is shown.

    Table: service_intros
    """

    __tablename__ = "service_intros"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    content: str = Field(default="")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class LegalDocument(Base, table=True):
    """Terms of service or privacy policy, one row per document type.

    Table: legal_documents
    """

    __tablename__ = "legal_documents"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    type: str = Field(max_length=32, unique=True, index=True)
    title: str = Field(max_length=255)
    content: str = Field()
    version: str = Field(default="1.0", max_length=32)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
