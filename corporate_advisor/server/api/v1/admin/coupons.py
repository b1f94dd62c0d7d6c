"""
Admin Coupon Endpoints.

Batch issuance, listing with batch statistics and deletion of unredeemed
coupons.
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from corporate_advisor.core.models.io.billing import (
    CouponDeleteRequest,
    CouponDeleteResponse,
    CouponGenerateRequest,
    CouponGenerateResponse,
    CouponListResponse,
)
from corporate_advisor.server.services.deps import SessionDep, get_admin_user
from corporate_advisor.services.coupons import CouponService

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.post(
    "/generate",
    response_model=CouponGenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue Coupons",
    description="Issue a batch of unique XXXX-XXXX-XXXX-XXXX coupon codes.",
    responses={400: {"description": "Invalid count, plan or duration"}},
)
async def generate_coupons(data: CouponGenerateRequest, session: SessionDep) -> CouponGenerateResponse:
    return await CouponService(session).generate_batch(data.count, data.plan, data.duration_days, data.note)


@router.get(
    "",
    response_model=CouponListResponse,
    summary="List Coupons",
    description="Paginated coupons filtered by redemption status or batch, with per-batch usage.",
)
async def list_coupons(
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    status: Optional[Literal["used", "unused"]] = Query(None, description="Redemption status"),
    batch_id: Optional[str] = Query(None),
) -> CouponListResponse:
    return await CouponService(session).list_coupons(page=page, limit=limit, status=status, batch_id=batch_id)


@router.delete(
    "",
    response_model=CouponDeleteResponse,
    summary="Delete Coupons",
    description="Delete unredeemed coupons of a batch or of an id list. Redeemed coupons are kept.",
    responses={400: {"description": "Neither batch_id nor coupon_ids given"}},
)
async def delete_coupons(data: CouponDeleteRequest, session: SessionDep) -> CouponDeleteResponse:
    deleted = await CouponService(session).delete_coupons(batch_id=data.batch_id, coupon_ids=data.coupon_ids)
    return CouponDeleteResponse(deleted_count=deleted)
