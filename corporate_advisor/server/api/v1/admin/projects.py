"""
Admin Project Endpoints.

Project overview and management of consultant-produced visual reports.
"""

from typing import List

from fastapi import APIRouter, File, Query, UploadFile

from corporate_advisor.core.models.io.admin import AdminProjectRead
from corporate_advisor.core.models.io.projects import ReportRead
from corporate_advisor.server.services.deps import AdminUserDep, SessionDep, StorageDep
from corporate_advisor.services.projects import IncomingFile, ProjectService, report_to_read

router = APIRouter()


@router.get("", response_model=List[AdminProjectRead], summary="List Projects")
async def list_projects(
    admin: AdminUserDep, session: SessionDep, limit: int = Query(100, ge=1, le=1000)
) -> List[AdminProjectRead]:
    return await ProjectService(session).list_recent_for_admin(limit=limit)


@router.post(
    "/{project_id}/visual-report",
    response_model=ReportRead,
    summary="Upload Visual Report",
    description="Attach a PDF (at most 50MB) as the project's visual report.",
    responses={400: {"description": "Not a PDF or too large"}, 404: {"description": "Project not found"}},
)
async def upload_visual_report(
    project_id: str,
    admin: AdminUserDep,
    session: SessionDep,
    storage: StorageDep,
    file: UploadFile = File(...),
) -> ReportRead:
    incoming = IncomingFile(
        filename=file.filename or "visual_report.pdf",
        content_type=file.content_type or "",
        data=await file.read(),
    )
    report = await ProjectService(session, storage).upload_visual_report(project_id, admin, incoming)
    return report_to_read(report)


@router.delete(
    "/{project_id}/visual-report",
    response_model=ReportRead,
    summary="Delete Visual Report",
    responses={400: {"description": "No visual report"}, 404: {"description": "Project not found"}},
)
async def delete_visual_report(
    project_id: str, admin: AdminUserDep, session: SessionDep, storage: StorageDep
) -> ReportRead:
    report = await ProjectService(session, storage).delete_visual_report(project_id, admin)
    return report_to_read(report)
