"""
Admin Chatbot Knowledge Endpoints.

CRUD for the consulting chatbot's knowledge base and bulk import from PDF.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from corporate_advisor.core.models.io.knowledge import (
    KnowledgeCreate,
    KnowledgeRead,
    KnowledgeUpdate,
    PdfIngestResult,
)
from corporate_advisor.server.services.deps import SessionDep, get_admin_user
from corporate_advisor.services.knowledge import KnowledgeService
from corporate_advisor.services.projects import IncomingFile

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.get("", response_model=List[KnowledgeRead], summary="List Knowledge Entries")
async def list_entries(session: SessionDep) -> List[KnowledgeRead]:
    return [KnowledgeRead.model_validate(e) for e in await KnowledgeService(session).list()]


@router.post(
    "",
    response_model=KnowledgeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Knowledge Entry",
)
async def create_entry(data: KnowledgeCreate, session: SessionDep) -> KnowledgeRead:
    return KnowledgeRead.model_validate(await KnowledgeService(session).create(data))


@router.post(
    "/upload-pdf",
    response_model=PdfIngestResult,
    summary="Import Knowledge From PDF",
    description="Split a text PDF (at most 10MB) into knowledge entries of about 2000 characters each.",
    responses={400: {"description": "Missing fields, not a PDF, too large or no extractable text"}},
)
async def upload_pdf(
    session: SessionDep,
    file: UploadFile = File(...),
    category: str = Form(""),
    source: str = Form(""),
    source_url: Optional[str] = Form(None),
) -> PdfIngestResult:
    incoming = IncomingFile(
        filename=file.filename or "document.pdf",
        content_type=file.content_type or "",
        data=await file.read(),
    )
    return await KnowledgeService(session).ingest_pdf(incoming, category, source, source_url)


@router.get("/{entry_id}", response_model=KnowledgeRead, summary="Get Knowledge Entry")
async def get_entry(entry_id: str, session: SessionDep) -> KnowledgeRead:
    return KnowledgeRead.model_validate(await KnowledgeService(session).get(entry_id))


@router.patch("/{entry_id}", response_model=KnowledgeRead, summary="Update Knowledge Entry")
async def update_entry(entry_id: str, data: KnowledgeUpdate, session: SessionDep) -> KnowledgeRead:
    return KnowledgeRead.model_validate(await KnowledgeService(session).update(entry_id, data))


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete Knowledge Entry")
async def delete_entry(entry_id: str, session: SessionDep) -> None:
    await KnowledgeService(session).delete(entry_id)
