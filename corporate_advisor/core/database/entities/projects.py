"""
Project, file and report entity models.

A project is one company-analysis request. Uploaded documents are ``File``
rows pointing at blob storage paths, and the AI output of every pipeline
stage accumulates on the project's single ``Report``.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Project(Base, table=True):
    """Company-analysis request owned by a user.

    Table: projects
    """

    __tablename__ = "projects"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)

    company_name: str = Field(max_length=255)
    business_number: Optional[str] = Field(default=None, max_length=32)
    representative: str = Field(max_length=100)
    industry: Optional[str] = Field(default=None, max_length=100)
    additional_request: Optional[str] = Field(default=None)

    status: str = Field(default="pending", max_length=16, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Project(id={self.id}, company_name={self.company_name}, status={self.status})"


class ProjectFile(Base, table=True):
    """Uploaded document of a project.

    Table: files
    """

    __tablename__ = "files"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    project_id: str = Field(foreign_key="projects.id", index=True, max_length=64)
    filename: str = Field(max_length=255)
    file_path: str = Field(max_length=512)
    file_type: str = Field(default="application/octet-stream", max_length=128)
    file_size: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"ProjectFile(id={self.id}, filename={self.filename})"


class Report(Base, table=True):
    """AI-generated artifacts of a project (one per project).

    ``analysis_data`` holds the generated slides as a JSON string.

    Table: reports
    """

    __tablename__ = "reports"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    project_id: str = Field(foreign_key="projects.id", unique=True, index=True, max_length=64)
    report_type: str = Field(default="analysis", max_length=16, index=True)

    initial_risk_analysis: Optional[str] = Field(default=None)
    text_analysis: Optional[str] = Field(default=None)
    analysis_data: Optional[str] = Field(default=None)
    pdf_url: Optional[str] = Field(default=None, max_length=1024)
    meeting_notes: Optional[str] = Field(default=None)
    followup_analysis: Optional[str] = Field(default=None)

    regeneration_count: int = Field(default=0)
    view_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def get_slides(self) -> List[Dict[str, Any]]:
        """Get the stored slides as a list."""
        if not self.analysis_data:
            return []
        try:
            data = json.loads(self.analysis_data)
        except (json.JSONDecodeError, TypeError):
            return []
        if isinstance(data, dict):
            data = data.get("slides", [])
        return data if isinstance(data, list) else []

    def set_slides(self, slides: List[Dict[str, Any]]) -> None:
        """Store slides as a JSON string."""
        self.analysis_data = json.dumps({"slides": slides}, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"Report(id={self.id}, project_id={self.project_id}, report_type={self.report_type})"
