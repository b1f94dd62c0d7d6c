"""
Back-office content I/O models: pricing plans, prompts, announcements,
banners, inquiries, sample reports, the service introduction and legal
documents.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PricingPlanRead(BaseModel):
    id: str
    name: str
    display_name: str
    price: int
    period: str
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    is_popular: bool
    is_active: bool
    display_order: int


class PricingPlanCreate(BaseModel):
    name: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    price: int = Field(default=0, ge=0)
    period: str = "month"
    description: Optional[str] = None
    features: List[str] = Field(default_factory=list)
    is_popular: bool = False
    is_active: bool = True
    display_order: int = 0


class PricingPlanUpdate(BaseModel):
    display_name: Optional[str] = None
    price: Optional[int] = Field(default=None, ge=0)
    period: Optional[str] = None
    description: Optional[str] = None
    features: Optional[List[str]] = None
    is_popular: Optional[bool] = None
    is_active: Optional[bool] = None
    display_order: Optional[int] = None


class PromptRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    content: str
    category: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PromptCreate(BaseModel):
    name: str = Field(min_length=1)
    content: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: bool = True


class PromptUpdate(BaseModel):
    content: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class AnnouncementRead(BaseModel):
    id: str
    title: str
    content: str
    is_active: bool
    priority: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    is_active: bool = True
    priority: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None
    priority: Optional[int] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class BannerRead(BaseModel):
    id: str
    title: str
    image_url: str
    link_url: Optional[str] = None
    is_active: bool
    order: int
    created_at: datetime

    class Config:
        from_attributes = True


class BannerCreate(BaseModel):
    title: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
    link_url: Optional[str] = None
    is_active: bool = True
    order: int = 0


class BannerUpdate(BaseModel):
    title: Optional[str] = None
    image_url: Optional[str] = None
    link_url: Optional[str] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class InquiryCreate(BaseModel):
    category: str = "general"
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


class InquiryRead(BaseModel):
    id: str
    user_id: str
    category: str
    title: str
    content: str
    status: str
    reply: Optional[str] = None
    replied_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class InquiryReply(BaseModel):
    reply: str = Field(min_length=1)


class SampleReportRead(BaseModel):
    id: str
    image_url: str
    order: int
    created_at: datetime

    class Config:
        from_attributes = True


class SampleReportCreate(BaseModel):
    image_url: str = Field(min_length=1)
    order: int = 0


class SampleReportImages(BaseModel):
    images: List[str]


class ServiceIntroRead(BaseModel):
    id: Optional[str] = None
    content: str = ""
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ServiceIntroUpdate(BaseModel):
    content: str


class UploadedImage(BaseModel):
    url: str


class LegalDocumentRead(BaseModel):
    id: str
    type: str
    title: str
    content: str
    version: str
    updated_at: datetime

    class Config:
        from_attributes = True


class LegalDocumentUpsert(BaseModel):
    type: str
    title: str
    content: str
    version: Optional[str] = None
