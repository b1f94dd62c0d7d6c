"""
Project service.

Project CRUD with owner/admin access checks, document uploads, PDF download,
presentation orders paid with credits and the admin-side visual report upload.
"""

from __future__ import annotations

import os
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.ai.slides import Slide
from corporate_advisor.core.database.entities import Project, ProjectFile, Report, User
from corporate_advisor.core.database.repositories import (
    ProjectFileRepository,
    ProjectRepository,
    ReportRepository,
    UserRepository,
)
from corporate_advisor.core.errors import (
    BadRequestError,
    NotFoundError,
    QuotaExceededError,
    StorageError,
)
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import CreditAction, CreditTransactionType, ProjectStatus
from corporate_advisor.core.models.io.admin import AdminProjectRead
from corporate_advisor.core.models.io.projects import (
    FileRead,
    OrderReportResult,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
    ReportRead,
)
from corporate_advisor.services.credits import CreditService
from corporate_advisor.services.notifications import TelegramNotifier
from corporate_advisor.services.pdf import build_text_pdf
from corporate_advisor.services.policy import PolicyService
from corporate_advisor.services.storage import StorageBackend

logger = get_logger(__name__)

MAX_VISUAL_REPORT_SIZE = 50 * 1024 * 1024
PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class IncomingFile:
    """An uploaded document read from the request."""

    filename: str
    content_type: str
    data: bytes


def epoch_ms() -> int:
    return int(time.time() * 1000)


def project_prefix(project: Project) -> str:
    return f"{project.user_id}/{project.id}"


def report_to_read(report: Report) -> ReportRead:
    return ReportRead(
        id=report.id,
        report_type=report.report_type,
        initial_risk_analysis=report.initial_risk_analysis,
        text_analysis=report.text_analysis,
        slides=report.get_slides(),
        pdf_url=report.pdf_url,
        meeting_notes=report.meeting_notes,
        followup_analysis=report.followup_analysis,
        regeneration_count=report.regeneration_count,
        view_count=report.view_count,
        created_at=report.created_at,
        updated_at=report.updated_at,
    )


class ProjectService:
    def __init__(
        self,
        session: AsyncSession,
        storage: Optional[StorageBackend] = None,
        notifier: Optional[TelegramNotifier] = None,
    ) -> None:
        self.session = session
        self.storage = storage
        self.notifier = notifier
        self.projects = ProjectRepository(session)
        self.files = ProjectFileRepository(session)
        self.reports = ReportRepository(session)
        self.users = UserRepository(session)

    def _require_storage(self) -> StorageBackend:
        if self.storage is None:
            raise StorageError("파일 스토리지가 설정되지 않았습니다")
        return self.storage

    async def get_accessible(self, project_id: str, user: User) -> Project:
        """Load a project owned by ``user``; admins may load any project.

        Projects of other users are reported as missing.
        """
        project = await self.projects.get_by_id(project_id)
        if project is None or (project.user_id != user.id and not user.is_admin):
            raise NotFoundError("프로젝트를 찾을 수 없습니다")
        return project

    async def create(self, user: User, data: ProjectCreate) -> Project:
        check = await PolicyService(self.session).check_project_creation(user.id)
        if not check.allowed:
            raise QuotaExceededError(
                check.reason, current_usage=check.current_usage, limit=check.limit, group_name=check.group_name
            )
        project = await self.projects.create(
            Project(
                user_id=user.id,
                company_name=data.company_name,
                representative=data.representative,
                business_number=data.business_number,
                industry=data.industry,
                additional_request=data.additional_request,
                status=ProjectStatus.PENDING.value,
            )
        )
        logger.info(f"User {user.id} created project {project.id} ({project.company_name})")
        return project

    async def list_for_user(self, user: User) -> List[Project]:
        return await self.projects.list_for_user(user.id)

    async def detail(self, project_id: str, user: User) -> ProjectDetail:
        """Project with files and report; reading the report counts one view."""
        project = await self.get_accessible(project_id, user)
        files = await self.files.list_for_project(project.id)
        report = await self.reports.get_by_project(project.id)
        if report is not None:
            report.view_count += 1
            report = await self.reports.update(report)
        return ProjectDetail(
            **ProjectRead.model_validate(project).model_dump(),
            files=[FileRead.model_validate(f) for f in files],
            report=report_to_read(report) if report is not None else None,
        )

    async def update(self, project_id: str, user: User, data: ProjectUpdate) -> Project:
        project = await self.get_accessible(project_id, user)
        project.additional_request = data.additional_request
        return await self.projects.update(project)

    async def delete(self, project_id: str, user: User) -> None:
        """Delete a project with its files, report and stored objects."""
        project = await self.get_accessible(project_id, user)
        await self.files.delete_for_project(project.id)
        await self.reports.delete_for_project(project.id)
        await self.session.delete(project)
        await self.session.commit()

        if self.storage is not None:
            try:
                removed = await self.storage.delete_prefix(project_prefix(project))
                logger.debug(f"Removed {removed} stored objects of project {project.id}")
            except StorageError as e:
                logger.warning(f"Stored objects of project {project.id} could not be removed: {e.message}")
        logger.info(f"Project {project.id} deleted by {user.id}")

    async def upload_files(self, project_id: str, user: User, files: List[IncomingFile]) -> List[ProjectFile]:
        if not files:
            raise BadRequestError("업로드할 파일이 없습니다")
        project = await self.get_accessible(project_id, user)
        storage = self._require_storage()

        saved: List[ProjectFile] = []
        for incoming in files:
            ext = os.path.splitext(incoming.filename)[1]
            path = f"{project_prefix(project)}/{epoch_ms()}_{uuid.uuid4().hex}{ext}"
            await storage.upload(path, incoming.data, incoming.content_type)
            saved.append(
                await self.files.add(
                    ProjectFile(
                        project_id=project.id,
                        filename=incoming.filename,
                        file_path=path,
                        file_type=incoming.content_type or "application/octet-stream",
                        file_size=len(incoming.data),
                    )
                )
            )
        await self.session.commit()
        logger.info(f"Uploaded {len(saved)} files to project {project.id}")
        return saved

    async def get_pdf(self, project_id: str, user: User) -> Tuple[bytes, str]:
        """Return the stored PDF, or a text report built from the slides when none is stored.

        A report with neither a stored PDF nor slides has nothing to download.
        """
        project = await self.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        if report is None:
            raise NotFoundError("리포트를 찾을 수 없습니다")
        filename = f"{project.company_name}_분석리포트.pdf"

        if report.pdf_url and self.storage is not None:
            try:
                return await self.storage.download(self.storage.path_from_url(report.pdf_url)), filename
            except StorageError as e:
                logger.warning(f"Stored PDF of project {project.id} unreadable, rebuilding: {e.message}")

        slides = [Slide.model_validate(s) for s in report.get_slides()]
        if not slides:
            raise BadRequestError("프레젠테이션이 아직 생성되지 않았습니다. 먼저 슬라이드를 생성해주세요.")
        data = build_text_pdf(
            project.company_name,
            project.representative,
            slides,
            business_number=project.business_number,
            date=project.created_at,
        )
        return data, filename

    async def order_report(self, project_id: str, user: User) -> OrderReportResult:
        """Order a premium presentation, paid with credits."""
        project = await self.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        if report is not None and report.pdf_url:
            raise BadRequestError("이미 프레젠테이션이 생성되었습니다")

        credits = CreditService(self.session)
        price = await credits.get_price(CreditAction.PREMIUM_PRESENTATION.value)

        transaction = await credits.modify_user_credits(
            user.id,
            -price,
            CreditTransactionType.PRESENTATION_COST.value,
            f"고급 프레젠테이션 제작 요청: {project.company_name}",
            related_id=project.id,
        )

        if self.notifier is not None:
            await self.notifier.notify_visual_report_order(
                user.name, user.email, project.id, project.company_name, project.industry
            )
        return OrderReportResult(
            message="프레젠테이션 제작 요청이 접수되었습니다",
            credits_used=price,
            remaining_credits=transaction.balance_after,
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def list_recent_for_admin(self, limit: int = 100) -> List[AdminProjectRead]:
        projects = await self.projects.list_recent(limit=limit)
        emails = {}
        result = []
        for project in projects:
            if project.user_id not in emails:
                owner = await self.users.get_by_id(project.user_id)
                emails[project.user_id] = owner.email if owner else None
            report = await self.reports.get_by_project(project.id)
            result.append(
                AdminProjectRead(
                    id=project.id,
                    company_name=project.company_name,
                    representative=project.representative,
                    status=project.status,
                    user_id=project.user_id,
                    user_email=emails[project.user_id],
                    has_report=report is not None,
                    pdf_url=report.pdf_url if report else None,
                    created_at=project.created_at,
                )
            )
        return result

    async def upload_visual_report(self, project_id: str, admin: User, incoming: IncomingFile) -> Report:
        """Attach an externally produced PDF as the project's visual report."""
        if incoming.content_type != PDF_CONTENT_TYPE:
            raise BadRequestError("PDF 파일만 업로드 가능합니다")
        if len(incoming.data) > MAX_VISUAL_REPORT_SIZE:
            raise BadRequestError("파일 크기는 50MB 이하여야 합니다")
        project = await self.get_accessible(project_id, admin)
        storage = self._require_storage()

        path = f"{project_prefix(project)}/{epoch_ms()}_visual_report.pdf"
        url = await storage.upload(path, incoming.data, PDF_CONTENT_TYPE)
        report = await self.reports.get_or_create(project.id)
        report.pdf_url = url
        report = await self.reports.update(report)
        logger.info(f"Admin {admin.id} uploaded a visual report for project {project.id}")
        return report

    async def delete_visual_report(self, project_id: str, admin: User) -> Report:
        project = await self.get_accessible(project_id, admin)
        report = await self.reports.get_by_project(project.id)
        if report is None or not report.pdf_url:
            raise BadRequestError("삭제할 비주얼 리포트가 없습니다")

        if self.storage is not None:
            try:
                await self.storage.delete(self.storage.path_from_url(report.pdf_url))
            except StorageError as e:
                logger.warning(f"Visual report object of {project.id} could not be removed: {e.message}")
        report.pdf_url = None
        return await self.reports.update(report)
