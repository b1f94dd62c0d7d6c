"""
Admin Quota Policy Endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends

from corporate_advisor.core.models.io.billing import GroupPolicyRead, GroupPolicyUpdate
from corporate_advisor.server.services.deps import SessionDep, get_admin_user
from corporate_advisor.services.content import GroupPolicyService

router = APIRouter(dependencies=[Depends(get_admin_user)])


@router.get("", response_model=List[GroupPolicyRead], summary="List Group Policies")
async def list_policies(session: SessionDep) -> List[GroupPolicyRead]:
    policies = await GroupPolicyService(session).list()
    return [GroupPolicyRead.model_validate(p) for p in policies]


@router.put(
    "/{group_name}",
    response_model=GroupPolicyRead,
    summary="Set Group Policy",
    description="Create or replace the monthly project and presentation limits of a user group.",
    responses={400: {"description": "Unknown group"}},
)
async def set_policy(group_name: str, data: GroupPolicyUpdate, session: SessionDep) -> GroupPolicyRead:
    policy = await GroupPolicyService(session).upsert(group_name, data)
    return GroupPolicyRead.model_validate(policy)
