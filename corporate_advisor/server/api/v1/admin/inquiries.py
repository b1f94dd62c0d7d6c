"""
Admin Inquiry Endpoints.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from corporate_advisor.core.models.io.content import InquiryRead, InquiryReply
from corporate_advisor.server.services.deps import SessionDep, get_admin_user
from corporate_advisor.services.content import InquiryService

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.get("", response_model=List[InquiryRead], summary="List Inquiries")
async def list_inquiries(
    session: SessionDep,
    status: Optional[Literal["pending", "answered", "closed"]] = Query(None),
) -> List[InquiryRead]:
    inquiries = await InquiryService(session).list_for_admin(status)
    return [InquiryRead.model_validate(i) for i in inquiries]


@router.post(
    "/{inquiry_id}/reply",
    response_model=InquiryRead,
    summary="Reply to Inquiry",
    description="Store the reply and mark the inquiry as answered.",
    responses={404: {"description": "Inquiry not found"}},
)
async def reply_inquiry(inquiry_id: str, data: InquiryReply, session: SessionDep) -> InquiryRead:
    inquiry = await InquiryService(session).reply(inquiry_id, data.reply)
    return InquiryRead.model_validate(inquiry)
