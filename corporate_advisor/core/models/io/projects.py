"""
Project I/O models.

Schemas for project creation and updates, the project detail view with files
and report, and the results of each analysis pipeline step.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    company_name: str = Field(min_length=1, description="Company name")
    representative: str = Field(min_length=1, description="Company representative")
    business_number: Optional[str] = Field(default=None, description="Business registration number")
    industry: Optional[str] = Field(default=None, description="Industry")
    additional_request: Optional[str] = Field(default=None, description="Extra instructions for the analysis")


class ProjectUpdate(BaseModel):
    additional_request: Optional[str] = None


class ProjectRead(BaseModel):
    """Schema for reading a project."""

    id: str
    user_id: str
    company_name: str
    business_number: Optional[str] = None
    representative: str
    industry: Optional[str] = None
    additional_request: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class FileRead(BaseModel):
    id: str
    filename: str
    file_path: str
    file_type: str
    file_size: int
    created_at: datetime

    class Config:
        from_attributes = True


class ReportRead(BaseModel):
    """Schema for reading a report; slides are decoded from ``analysis_data``."""

    id: str
    report_type: str
    initial_risk_analysis: Optional[str] = None
    text_analysis: Optional[str] = None
    slides: List[Dict[str, Any]] = Field(default_factory=list)
    pdf_url: Optional[str] = None
    meeting_notes: Optional[str] = None
    followup_analysis: Optional[str] = None
    regeneration_count: int = 0
    view_count: int = 0
    created_at: datetime
    updated_at: datetime


class ProjectDetail(ProjectRead):
    files: List[FileRead] = Field(default_factory=list)
    report: Optional[ReportRead] = None


class AnalysisResult(BaseModel):
    """Result of a text analysis step."""

    status: str
    analysis: Optional[str] = None
    message: Optional[str] = None


class DetailedAnalysisStatus(BaseModel):
    status: str = Field(description="not_started, processing or completed")
    text_analysis: Optional[str] = None
    regeneration_count: int = 0


class RegenerateSolutionRequest(BaseModel):
    supplementary_info: str = Field(default="", description="Information the user adds before regenerating")


class SlidesResult(BaseModel):
    slides: List[Dict[str, Any]]


class VisualReportResult(BaseModel):
    pdf_url: str
    slides_count: int
    images_generated: int


class FollowupRequest(BaseModel):
    meeting_notes: str = Field(default="", description="Notes of the meeting with the client")


class FollowupResult(BaseModel):
    followup_analysis: str


class OrderReportResult(BaseModel):
    message: str
    credits_used: int
    remaining_credits: int
