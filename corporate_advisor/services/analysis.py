"""
Analysis pipeline.

Each step reads the project and its documents, renders a stored prompt,
calls Gemini and persists the result on the project's report:

1. risk analysis (``step1-initial-risk-analysis``)
2. solution analysis with Google Search grounding (``step2-solution-sales-script``),
   optionally regenerated once with supplementary information
3. slide generation (``step3-presentation-generation``)
4. visual report: slide images assembled into a PDF
5. follow-up analysis of meeting notes (``followup_analysis``)
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.ai.gemini import GeminiClient, UploadedFile
from corporate_advisor.ai.slides import Slide, parse_slides, slides_to_dicts
from corporate_advisor.core.database.entities import Project, Report, User
from corporate_advisor.core.database.repositories import (
    ProjectFileRepository,
    ProjectRepository,
    ReportRepository,
)
from corporate_advisor.core.errors import AIServiceError, BadRequestError, QuotaExceededError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import ProjectStatus, PromptName, ReportType
from corporate_advisor.core.models.io.projects import (
    AnalysisResult,
    DetailedAnalysisStatus,
    FollowupResult,
    SlidesResult,
    VisualReportResult,
)
from corporate_advisor.services.pdf import build_visual_pdf
from corporate_advisor.services.policy import PolicyService
from corporate_advisor.services.projects import ProjectService, epoch_ms, project_prefix
from corporate_advisor.services.prompts import (
    PromptService,
    format_additional_request,
    format_file_list,
    format_industry,
)
from corporate_advisor.services.storage import StorageBackend

logger = get_logger(__name__)

MAX_REGENERATIONS = 1
FOLLOWUP_SUMMARY_LIMIT = 5000

SLIDE_IMAGE_PROMPT = """Create a professional 16:9 business presentation slide image for {company_name}.

Slide {number}: {title}

{content}

Use a clean corporate design with a clear title, concise Korean text, and simple icons or charts where helpful."""


class AnalysisService:
    def __init__(self, session: AsyncSession, gemini: GeminiClient, storage: StorageBackend) -> None:
        self.session = session
        self.gemini = gemini
        self.storage = storage
        self.projects = ProjectRepository(session)
        self.files = ProjectFileRepository(session)
        self.reports = ReportRepository(session)
        self.prompts = PromptService(session)
        self.access = ProjectService(session, storage)

    async def _set_status(self, project: Project, status: ProjectStatus) -> Project:
        project.status = status.value
        return await self.projects.update(project)

    async def _upload_documents(self, project: Project) -> List[UploadedFile]:
        """Upload the project's documents to Gemini; documents that fail are skipped."""
        uploaded: List[UploadedFile] = []
        for file in await self.files.list_for_project(project.id):
            try:
                data = await self.storage.download(file.file_path)
                uploaded.append(await self.gemini.upload_file(data, file.file_type, file.filename))
            except Exception as e:
                logger.warning(f"Skipping {file.filename} of project {project.id}: {e}")
        return uploaded

    def _company_variables(self, project: Project, filenames: List[str]) -> dict:
        return {
            "companyName": project.company_name,
            "businessNumber": project.business_number or "",
            "representative": project.representative,
            "industry": format_industry(project.industry),
            "fileList": format_file_list(filenames),
        }

    # ------------------------------------------------------------------
    # Step 1: risk analysis
    # ------------------------------------------------------------------

    async def analyze_risk(self, project_id: str, user: User) -> AnalysisResult:
        project = await self.access.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        first_analysis = report is None or not report.initial_risk_analysis
        policy = PolicyService(self.session)
        if first_analysis:
            check = await policy.check_first_analysis(project.user_id)
            if not check.allowed:
                raise QuotaExceededError(
                    check.reason, current_usage=check.current_usage, limit=check.limit, group_name=check.group_name
                )

        project = await self._set_status(project, ProjectStatus.PROCESSING)
        try:
            uploaded = await self._upload_documents(project)
            variables = self._company_variables(project, [f.display_name for f in uploaded])
            variables["additionalRequest"] = format_additional_request(project.additional_request)
            prompt = await self.prompts.render(PromptName.RISK_ANALYSIS.value, variables)
            analysis = await self.gemini.generate_text(prompt, uploaded, operation="risk_analysis")
        except Exception as e:
            logger.error(f"Risk analysis of project {project.id} failed: {e}")
            await self._set_status(project, ProjectStatus.FAILED)
            raise AIServiceError("현황분석 중 오류가 발생했습니다") from e

        report = await self.reports.get_or_create(project.id)
        report.initial_risk_analysis = analysis
        await self.reports.update(report)
        await self._set_status(project, ProjectStatus.COMPLETED)

        if first_analysis:
            await policy.increment_usage(project.user_id)
        logger.info(f"Risk analysis of project {project.id} completed")
        return AnalysisResult(status="completed", analysis=analysis)

    # ------------------------------------------------------------------
    # Step 2: solution analysis
    # ------------------------------------------------------------------

    async def detailed_analysis_status(self, project_id: str, user: User) -> DetailedAnalysisStatus:
        project = await self.access.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        if report is not None and report.text_analysis:
            status = "completed"
        elif project.status == ProjectStatus.PROCESSING.value:
            status = "processing"
        else:
            status = "not_started"
        return DetailedAnalysisStatus(
            status=status,
            text_analysis=report.text_analysis if report else None,
            regeneration_count=report.regeneration_count if report else 0,
        )

    async def _solution_text(self, project: Project, additional_request: Optional[str]) -> str:
        uploaded = await self._upload_documents(project)
        variables = self._company_variables(project, [f.display_name for f in uploaded])
        variables["additionalRequest"] = format_additional_request(additional_request, heading="추가 정보")
        prompt = await self.prompts.render(PromptName.SOLUTION_ANALYSIS.value, variables)
        return await self.gemini.generate_text(prompt, uploaded, grounded=True, operation="solution_analysis")

    async def detailed_analysis(self, project_id: str, user: User) -> AnalysisResult:
        project = await self.access.get_accessible(project_id, user)
        if project.status == ProjectStatus.PROCESSING.value:
            return AnalysisResult(status="already_processing")
        report = await self.reports.get_by_project(project.id)
        if report is not None and report.text_analysis:
            return AnalysisResult(status="already_completed", analysis=report.text_analysis)

        if await self.files.count(filters={"project_id": project.id}) == 0:
            raise BadRequestError("업로드된 파일이 없습니다")
        report = await self.reports.get_or_create(project.id)
        await self.session.commit()

        project = await self._set_status(project, ProjectStatus.PROCESSING)
        try:
            analysis = await self._solution_text(project, project.additional_request)
        except Exception as e:
            logger.error(f"Solution analysis of project {project.id} failed: {e}")
            await self._set_status(project, ProjectStatus.FAILED)
            raise AIServiceError("AI 분석 중 오류가 발생했습니다") from e

        report.text_analysis = analysis
        await self.reports.update(report)
        await self._set_status(project, ProjectStatus.COMPLETED)
        logger.info(f"Solution analysis of project {project.id} completed")
        return AnalysisResult(status="completed", analysis=analysis)

    async def regenerate_solution(self, project_id: str, user: User, supplementary_info: str) -> AnalysisResult:
        """Regenerate the solution analysis once with information supplied by the user.

        The regeneration is counted before the Gemini call and the count is
        restored when the call fails.
        """
        if not supplementary_info or not supplementary_info.strip():
            raise BadRequestError("보완 정보를 입력해주세요")
        project = await self.access.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        if report is None:
            raise BadRequestError("분석 결과가 없습니다")
        if report.regeneration_count >= MAX_REGENERATIONS:
            raise BadRequestError("솔루션 재생성은 1회만 가능합니다")
        if await self.files.count(filters={"project_id": project.id}) == 0:
            raise BadRequestError("업로드된 파일이 없습니다")

        previous_count = report.regeneration_count
        report.regeneration_count = previous_count + 1
        report = await self.reports.update(report)

        combined = "\n\n".join(
            part for part in (project.additional_request, f"[사용자 보완 정보]\n{supplementary_info}") if part
        )
        try:
            analysis = await self._solution_text(project, combined)
        except Exception as e:
            logger.error(f"Solution regeneration of project {project.id} failed: {e}")
            report.regeneration_count = previous_count
            await self.reports.update(report)
            raise AIServiceError("AI 분석 중 오류가 발생했습니다") from e

        report.text_analysis = analysis
        report.pdf_url = None
        report.analysis_data = None
        await self.reports.update(report)
        logger.info(f"Solution of project {project.id} regenerated by {user.id}")
        return AnalysisResult(status="success", analysis=analysis)

    # ------------------------------------------------------------------
    # Step 3: slides and the visual report
    # ------------------------------------------------------------------

    async def _require_text_analysis(self, project: Project) -> Report:
        report = await self.reports.get_by_project(project.id)
        if report is None or not report.text_analysis:
            raise BadRequestError("텍스트 분석 결과가 없습니다")
        return report

    async def _build_slides(self, project: Project, report: Report) -> List[Slide]:
        try:
            prompt = await self.prompts.render(
                PromptName.PRESENTATION.value,
                {"companyName": project.company_name, "textAnalysis": report.text_analysis},
            )
            text = await self.gemini.generate_text(prompt, json_output=True, operation="presentation")
            slides = parse_slides(text)
        except Exception as e:
            logger.error(f"Slide generation of project {project.id} failed: {e}")
            raise AIServiceError("프레젠테이션 생성 중 오류가 발생했습니다") from e

        report.set_slides(slides_to_dicts(slides))
        await self.reports.update(report)
        return slides

    async def generate_slides(self, project_id: str, user: User) -> SlidesResult:
        project = await self.access.get_accessible(project_id, user)
        report = await self._require_text_analysis(project)
        slides = await self._build_slides(project, report)
        logger.info(f"Generated {len(slides)} slides for project {project.id}")
        return SlidesResult(slides=slides_to_dicts(slides))

    async def generate_visual_report(self, project_id: str, user: User) -> VisualReportResult:
        project = await self.access.get_accessible(project_id, user)
        policy = PolicyService(self.session)
        check = await policy.check_presentation_creation(project.user_id)
        if not check.allowed:
            raise QuotaExceededError(
                check.reason, current_usage=check.current_usage, limit=check.limit, group_name=check.group_name
            )
        report = await self._require_text_analysis(project)
        slides = await self._build_slides(project, report)

        images: List[Optional[str]] = []
        for slide in slides:
            prompt = SLIDE_IMAGE_PROMPT.format(
                company_name=project.company_name,
                number=slide.slide_number,
                title=slide.title,
                content=slide.content,
            )
            images.append(await self.gemini.generate_image(prompt))
        generated = sum(1 for image in images if image)
        if generated == 0:
            raise AIServiceError("비주얼 리포트 생성 중 오류가 발생했습니다")

        pdf = build_visual_pdf(images)
        path = f"{project_prefix(project)}/{epoch_ms()}_visual_report.pdf"
        url = await self.storage.upload(path, pdf, "application/pdf")

        report.pdf_url = url
        report.report_type = ReportType.PRESENTATION.value
        await self.reports.update(report)
        await policy.record_presentation(project.user_id, project.id)
        logger.info(f"Visual report of project {project.id}: {generated}/{len(slides)} slide images")
        return VisualReportResult(pdf_url=url, slides_count=len(slides), images_generated=generated)

    # ------------------------------------------------------------------
    # Follow-up
    # ------------------------------------------------------------------

    async def followup(self, project_id: str, user: User, meeting_notes: str) -> FollowupResult:
        if not meeting_notes or not meeting_notes.strip():
            raise BadRequestError("미팅 내용을 입력해주세요")
        project = await self.access.get_accessible(project_id, user)
        report = await self.reports.get_by_project(project.id)
        if report is None or not report.text_analysis:
            raise BadRequestError("분석 제안서가 없습니다. 먼저 분석을 완료해주세요.")

        summary = report.text_analysis[:FOLLOWUP_SUMMARY_LIMIT]
        if len(report.text_analysis) > FOLLOWUP_SUMMARY_LIMIT:
            summary += "\n... (이하 생략)"

        try:
            prompt = await self.prompts.render(
                PromptName.FOLLOWUP.value,
                {
                    "companyName": project.company_name,
                    "businessNumber": project.business_number or "",
                    "representative": project.representative,
                    "industry": project.industry or "",
                    "textAnalysisSummary": summary,
                    "meetingNotes": meeting_notes,
                },
            )
            analysis = await self.gemini.generate_text(prompt, grounded=True, operation="followup")
        except Exception as e:
            logger.error(f"Follow-up analysis of project {project.id} failed: {e}")
            raise AIServiceError("후속 분석 생성 중 오류가 발생했습니다") from e

        report.meeting_notes = meeting_notes.strip()
        report.followup_analysis = analysis
        await self.reports.update(report)
        return FollowupResult(followup_analysis=analysis)
