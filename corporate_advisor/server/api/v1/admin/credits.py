"""
Admin Credit Endpoints.

Credit prices per action, manual grants and deductions, and the signup bonus
policy.
"""

from typing import List, Optional

from fastapi import APIRouter

from corporate_advisor.core.models.io.billing import (
    CreditAdjustRequest,
    CreditPriceRead,
    CreditPriceUpdate,
    CreditTransactionRead,
    InitialCreditPolicyCreate,
    InitialCreditPolicyRead,
)
from corporate_advisor.server.services.deps import AdminUserDep, SessionDep
from corporate_advisor.services.credits import CreditService

router = APIRouter()


@router.get("/credit-prices", response_model=List[CreditPriceRead], summary="List Credit Prices")
async def list_credit_prices(admin: AdminUserDep, session: SessionDep) -> List[CreditPriceRead]:
    prices = await CreditService(session).list_prices()
    return [CreditPriceRead.model_validate(p) for p in prices]


@router.put(
    "/credit-prices/{action_type}",
    response_model=CreditPriceRead,
    summary="Set Credit Price",
    description="Create or update the credit cost of an action.",
)
async def set_credit_price(
    action_type: str, data: CreditPriceUpdate, admin: AdminUserDep, session: SessionDep
) -> CreditPriceRead:
    price = await CreditService(session).set_price(action_type, data.credits, data.description, data.is_active)
    return CreditPriceRead.model_validate(price)


@router.post(
    "/users/{user_id}/credits",
    response_model=CreditTransactionRead,
    summary="Adjust User Credits",
    description="Grant (positive amount) or deduct (negative amount) credits.",
    responses={400: {"description": "Insufficient credits"}, 404: {"description": "User not found"}},
)
async def adjust_credits(
    user_id: str, data: CreditAdjustRequest, admin: AdminUserDep, session: SessionDep
) -> CreditTransactionRead:
    transaction = await CreditService(session).admin_adjust(admin, user_id, data.amount, data.description)
    return CreditTransactionRead.model_validate(transaction)


@router.get(
    "/initial-credit-policy",
    response_model=Optional[InitialCreditPolicyRead],
    summary="Get Signup Bonus Policy",
)
async def get_initial_credit_policy(admin: AdminUserDep, session: SessionDep) -> Optional[InitialCreditPolicyRead]:
    policy = await CreditService(session).get_initial_policy()
    return InitialCreditPolicyRead.model_validate(policy) if policy else None


@router.post(
    "/initial-credit-policy",
    response_model=InitialCreditPolicyRead,
    summary="Set Signup Bonus Policy",
    description="Replace the active signup bonus; earlier policies are deactivated.",
)
async def set_initial_credit_policy(
    data: InitialCreditPolicyCreate, admin: AdminUserDep, session: SessionDep
) -> InitialCreditPolicyRead:
    policy = await CreditService(session).set_initial_policy(data.credits, data.description)
    return InitialCreditPolicyRead.model_validate(policy)
