"""
Project, file and report repositories.

Besides CRUD these repositories answer the counting queries used by the quota
policy (projects and presentation reports created inside a billing period).
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.projects import Project, ProjectFile, Report
from .base import QueryBuilder, SQLModelRepository


class ProjectRepository(SQLModelRepository[Project]):
    """Repository for projects."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def list_for_user(self, user_id: str) -> List[Project]:
        return await self.list(filters={"user_id": user_id})

    async def list_recent(self, limit: int = 100) -> List[Project]:
        return await self.list(limit=limit)

    async def list_ids_for_user(self, user_id: str) -> List[str]:
        result = await self.session.execute(select(Project.id).where(Project.user_id == user_id))
        return list(result.scalars().all())

    async def count_created_between(self, user_id: str, start: datetime, end: datetime) -> int:
        """Number of projects the user created within ``[start, end]``."""
        stmt = (
            select(func.count())
            .select_from(Project)
            .where(Project.user_id == user_id, Project.created_at >= start, Project.created_at <= end)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())


class ProjectFileRepository(SQLModelRepository[ProjectFile]):
    """Repository for uploaded project files."""

    default_descending = False

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProjectFile)

    async def list_for_project(self, project_id: str) -> List[ProjectFile]:
        return await self.list(filters={"project_id": project_id})

    async def delete_for_project(self, project_id: str) -> None:
        await self.session.execute(delete(ProjectFile).where(ProjectFile.project_id == project_id))


class ReportRepository(SQLModelRepository[Report]):
    """Repository for project reports (one per project)."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Report)

    async def get_by_project(self, project_id: str) -> Optional[Report]:
        stmt = select(Report).where(Report.project_id == project_id)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_or_create(self, project_id: str) -> Report:
        """Return the project's report, staging a new empty one when missing."""
        report = await self.get_by_project(project_id)
        if report is None:
            report = await self.add(Report(project_id=project_id))
        return report

    async def delete_for_project(self, project_id: str) -> None:
        await self.session.execute(delete(Report).where(Report.project_id == project_id))

    async def list_recent(self, limit: Optional[int] = None, report_type: Optional[str] = None) -> List[Report]:
        stmt = self._ordered(select(Report))
        if report_type is not None:
            stmt = stmt.where(Report.report_type == report_type)
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
