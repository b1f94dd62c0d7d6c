"""
Coupon Redemption Endpoint.
"""

from fastapi import APIRouter

from corporate_advisor.core.models.io.billing import CouponRedeemRequest, CouponRedeemResponse
from corporate_advisor.server.services.deps import CurrentUserDep, SessionDep
from corporate_advisor.services.coupons import CouponService

router = APIRouter()


@router.post(
    "/redeem",
    response_model=CouponRedeemResponse,
    summary="Redeem Coupon",
    description="Redeem a coupon code for a subscription plan of the coupon's duration.",
    responses={
        400: {"description": "Coupon already used"},
        404: {"description": "Unknown coupon code"},
    },
)
async def redeem_coupon(data: CouponRedeemRequest, user: CurrentUserDep, session: SessionDep) -> CouponRedeemResponse:
    return await CouponService(session).redeem(user.id, data.code)
