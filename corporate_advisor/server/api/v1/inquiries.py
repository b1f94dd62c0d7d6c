"""
Customer Inquiry Endpoints.
"""

from typing import List

from fastapi import APIRouter, status

from corporate_advisor.core.models.io.content import InquiryCreate, InquiryRead
from corporate_advisor.server.services.deps import CurrentUserDep, NotifierDep, SessionDep
from corporate_advisor.services.content import InquiryService

router = APIRouter()


@router.post(
    "",
    response_model=InquiryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Inquiry",
    description="Store a customer inquiry and notify the support team on Telegram.",
)
async def create_inquiry(
    data: InquiryCreate, user: CurrentUserDep, session: SessionDep, notifier: NotifierDep
) -> InquiryRead:
    inquiry = await InquiryService(session, notifier).create(user, data)
    return InquiryRead.model_validate(inquiry)


@router.get("", response_model=List[InquiryRead], summary="List My Inquiries")
async def list_inquiries(user: CurrentUserDep, session: SessionDep) -> List[InquiryRead]:
    inquiries = await InquiryService(session).list_for_user(user)
    return [InquiryRead.model_validate(i) for i in inquiries]
