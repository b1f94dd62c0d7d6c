"""
User Self-Service Endpoints.

Subscription status and plan changes, quota usage and the credit balance of
the authenticated user.
"""

from typing import List

from fastapi import APIRouter

from corporate_advisor.core.models.io.billing import (
    CreditBalance,
    CreditTransactionRead,
    ScheduleUpgradeRequest,
    SubscriptionRead,
    UserPolicyInfo,
)
from corporate_advisor.server.services.deps import CurrentUserDep, SessionDep
from corporate_advisor.services.credits import CreditService
from corporate_advisor.services.policy import PolicyService
from corporate_advisor.services.subscriptions import SubscriptionService

router = APIRouter()


@router.get(
    "/subscription",
    response_model=SubscriptionRead,
    summary="Get Subscription",
    description="Return the effective subscription; an ended coupon period falls back to the free plan.",
)
async def get_subscription(user: CurrentUserDep, session: SessionDep) -> SubscriptionRead:
    return await SubscriptionService(session).get_effective(user.id)


@router.post(
    "/subscription/downgrade",
    response_model=SubscriptionRead,
    summary="Downgrade to Free",
    description="Cancel the paid plan and return to the free plan immediately.",
    responses={400: {"description": "Already on the free plan"}, 404: {"description": "No subscription"}},
)
async def downgrade(user: CurrentUserDep, session: SessionDep) -> SubscriptionRead:
    return await SubscriptionService(session).downgrade(user.id)


@router.post(
    "/subscription/schedule-upgrade",
    response_model=SubscriptionRead,
    summary="Schedule Upgrade",
    description="Schedule an upgrade applied at the next renewal.",
    responses={400: {"description": "Invalid plan or no billing key"}},
)
async def schedule_upgrade(
    data: ScheduleUpgradeRequest, user: CurrentUserDep, session: SessionDep
) -> SubscriptionRead:
    return await SubscriptionService(session).schedule_upgrade(user.id, data.plan)


@router.delete(
    "/subscription/schedule-upgrade",
    response_model=SubscriptionRead,
    summary="Cancel Scheduled Upgrade",
    responses={400: {"description": "No upgrade scheduled"}},
)
async def cancel_scheduled_upgrade(user: CurrentUserDep, session: SessionDep) -> SubscriptionRead:
    return await SubscriptionService(session).cancel_scheduled_upgrade(user.id)


@router.get(
    "/policy",
    response_model=UserPolicyInfo,
    summary="Get Quota Usage",
    description="Limits, usage and remaining quota of the current billing period.",
)
async def get_policy(user: CurrentUserDep, session: SessionDep) -> UserPolicyInfo:
    return await PolicyService(session).get_user_policy_info(user.id)


@router.get("/credits", response_model=CreditBalance, summary="Get Credit Balance")
async def get_credits(user: CurrentUserDep) -> CreditBalance:
    return CreditBalance(credits=user.credits)


@router.get(
    "/credits/history",
    response_model=List[CreditTransactionRead],
    summary="Get Credit History",
    description="The 100 most recent credit transactions.",
)
async def get_credit_history(user: CurrentUserDep, session: SessionDep) -> List[CreditTransactionRead]:
    transactions = await CreditService(session).history(user.id)
    return [CreditTransactionRead.model_validate(t) for t in transactions]
