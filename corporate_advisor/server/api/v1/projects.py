"""
Project Endpoints.

Project CRUD, document upload and the analysis pipeline: risk analysis,
solution analysis, slides, the visual report, PDF download, follow-up
analysis and premium presentation orders.
"""

from typing import List
from urllib.parse import quote

from fastapi import APIRouter, File, Response, UploadFile, status

from corporate_advisor.core.models.io.projects import (
    AnalysisResult,
    DetailedAnalysisStatus,
    FileRead,
    FollowupRequest,
    FollowupResult,
    OrderReportResult,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
    RegenerateSolutionRequest,
    SlidesResult,
    VisualReportResult,
)
from corporate_advisor.server.services.deps import CurrentUserDep, GeminiDep, NotifierDep, SessionDep, StorageDep
from corporate_advisor.services.analysis import AnalysisService
from corporate_advisor.services.projects import IncomingFile, ProjectService

router = APIRouter()

_NOT_FOUND = {404: {"description": "Project not found"}}


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project",
    description="Create a company-analysis project. The monthly project quota of the user's group is checked first.",
    responses={403: {"description": "Monthly project limit reached"}},
)
async def create_project(data: ProjectCreate, user: CurrentUserDep, session: SessionDep) -> ProjectRead:
    project = await ProjectService(session).create(user, data)
    return ProjectRead.model_validate(project)


@router.get("", response_model=List[ProjectRead], summary="List Projects")
async def list_projects(user: CurrentUserDep, session: SessionDep) -> List[ProjectRead]:
    projects = await ProjectService(session).list_for_user(user)
    return [ProjectRead.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectDetail,
    summary="Get Project",
    description="Project with its files and report. Reading the report counts one view.",
    responses=_NOT_FOUND,
)
async def get_project(project_id: str, user: CurrentUserDep, session: SessionDep) -> ProjectDetail:
    return await ProjectService(session).detail(project_id, user)


@router.patch("/{project_id}", response_model=ProjectRead, summary="Update Project", responses=_NOT_FOUND)
async def update_project(
    project_id: str, data: ProjectUpdate, user: CurrentUserDep, session: SessionDep
) -> ProjectRead:
    project = await ProjectService(session).update(project_id, user, data)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Project",
    description="Delete the project with its files, report and stored objects.",
    responses=_NOT_FOUND,
)
async def delete_project(project_id: str, user: CurrentUserDep, session: SessionDep, storage: StorageDep) -> None:
    await ProjectService(session, storage).delete(project_id, user)


@router.post(
    "/{project_id}/files",
    response_model=List[FileRead],
    status_code=status.HTTP_201_CREATED,
    summary="Upload Files",
    description="Upload one or more documents used by the analysis.",
    responses=_NOT_FOUND,
)
async def upload_files(
    project_id: str,
    user: CurrentUserDep,
    session: SessionDep,
    storage: StorageDep,
    files: List[UploadFile] = File(...),
) -> List[FileRead]:
    incoming = [
        IncomingFile(
            filename=f.filename or "upload",
            content_type=f.content_type or "application/octet-stream",
            data=await f.read(),
        )
        for f in files
    ]
    saved = await ProjectService(session, storage).upload_files(project_id, user, incoming)
    return [FileRead.model_validate(f) for f in saved]


@router.post(
    "/{project_id}/analyze",
    response_model=AnalysisResult,
    summary="Run Risk Analysis",
    description="Upload the project documents to Gemini and generate the initial risk analysis.",
    responses={**_NOT_FOUND, 500: {"description": "Analysis failed"}},
)
async def analyze(
    project_id: str, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep, storage: StorageDep
) -> AnalysisResult:
    return await AnalysisService(session, gemini, storage).analyze_risk(project_id, user)


@router.get(
    "/{project_id}/detailed-analysis",
    response_model=DetailedAnalysisStatus,
    summary="Get Solution Analysis Status",
    responses=_NOT_FOUND,
)
async def get_detailed_analysis(
    project_id: str, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep, storage: StorageDep
) -> DetailedAnalysisStatus:
    return await AnalysisService(session, gemini, storage).detailed_analysis_status(project_id, user)


@router.post(
    "/{project_id}/detailed-analysis",
    response_model=AnalysisResult,
    summary="Run Solution Analysis",
    description="Generate the search-grounded solution analysis and sales script.",
    responses={**_NOT_FOUND, 400: {"description": "No uploaded files"}, 500: {"description": "Analysis failed"}},
)
async def run_detailed_analysis(
    project_id: str, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep, storage: StorageDep
) -> AnalysisResult:
    return await AnalysisService(session, gemini, storage).detailed_analysis(project_id, user)


@router.post(
    "/{project_id}/regenerate-solution",
    response_model=AnalysisResult,
    summary="Regenerate Solution Analysis",
    description="Regenerate the solution analysis once with supplementary information.",
    responses={**_NOT_FOUND, 400: {"description": "Regeneration limit reached or missing input"}},
)
async def regenerate_solution(
    project_id: str,
    data: RegenerateSolutionRequest,
    user: CurrentUserDep,
    session: SessionDep,
    gemini: GeminiDep,
    storage: StorageDep,
) -> AnalysisResult:
    return await AnalysisService(session, gemini, storage).regenerate_solution(
        project_id, user, data.supplementary_info
    )


@router.post(
    "/{project_id}/generate-slides",
    response_model=SlidesResult,
    summary="Generate Slides",
    responses={**_NOT_FOUND, 400: {"description": "No solution analysis"}},
)
async def generate_slides(
    project_id: str, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep, storage: StorageDep
) -> SlidesResult:
    return await AnalysisService(session, gemini, storage).generate_slides(project_id, user)


@router.post(
    "/{project_id}/generate-visual-report",
    response_model=VisualReportResult,
    summary="Generate Visual Report",
    description="Generate slides, render one image per slide and assemble them into a PDF.",
    responses={**_NOT_FOUND, 403: {"description": "Monthly presentation limit reached"}},
)
async def generate_visual_report(
    project_id: str, user: CurrentUserDep, session: SessionDep, gemini: GeminiDep, storage: StorageDep
) -> VisualReportResult:
    return await AnalysisService(session, gemini, storage).generate_visual_report(project_id, user)


@router.get(
    "/{project_id}/pdf",
    summary="Download PDF",
    description="Return the stored report PDF, or a text report built from the slides.",
    response_class=Response,
    responses={
        **_NOT_FOUND,
        200: {"content": {"application/pdf": {}}},
        400: {"description": "No slides generated yet"},
    },
)
async def download_pdf(project_id: str, user: CurrentUserDep, session: SessionDep, storage: StorageDep) -> Response:
    data, filename = await ProjectService(session, storage).get_pdf(project_id, user)
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=\"report.pdf\"; filename*=UTF-8''{quote(filename)}"},
    )


@router.post(
    "/{project_id}/followup",
    response_model=FollowupResult,
    summary="Follow-up Analysis",
    description="Analyse meeting notes against the solution analysis.",
    responses={**_NOT_FOUND, 400: {"description": "Missing notes or solution analysis"}},
)
async def followup(
    project_id: str,
    data: FollowupRequest,
    user: CurrentUserDep,
    session: SessionDep,
    gemini: GeminiDep,
    storage: StorageDep,
) -> FollowupResult:
    return await AnalysisService(session, gemini, storage).followup(project_id, user, data.meeting_notes)


@router.post(
    "/{project_id}/order-report",
    response_model=OrderReportResult,
    summary="Order Premium Presentation",
    description="Pay credits for a presentation produced by the consulting team.",
    responses={**_NOT_FOUND, 400: {"description": "PDF already exists or insufficient credits"}},
)
async def order_report(
    project_id: str, user: CurrentUserDep, session: SessionDep, notifier: NotifierDep
) -> OrderReportResult:
    return await ProjectService(session, notifier=notifier).order_report(project_id, user)
