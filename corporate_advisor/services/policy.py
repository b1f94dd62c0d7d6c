"""
Quota policy service.

Every user belongs to one group (``free``, ``pro``, ``expert`` or ``admin``)
and each group has a monthly project limit and a monthly presentation limit.
Usage is counted inside a *billing period*:

- ``free`` and ``admin`` users: the calendar month. Project usage is the
  month's ``UsageLog`` counter, which grows on a project's first analysis.
- paid users: the subscription's current period when today falls inside it,
  otherwise the calendar month. Within a subscription period, project usage is
  the number of projects created in the period.

A paid subscription whose period has ended without a billing key (coupon
plans) counts as ``free`` even before it is marked expired.

Presentation usage is the number of decks the user generated in the period.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import Subscription, User
from corporate_advisor.core.database.repositories import (
    GroupPolicyRepository,
    PresentationLogRepository,
    ProjectRepository,
    SubscriptionRepository,
    UsageLogRepository,
    UserRepository,
)
from corporate_advisor.core.errors import NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import GroupName, SubscriptionStatus, UserRole
from corporate_advisor.core.models.io.billing import PolicyCheck, UserPolicyInfo

logger = get_logger(__name__)

# (monthly projects, monthly presentations) used when a group has no stored policy
DEFAULT_LIMITS = {
    GroupName.ADMIN.value: (999999, 999999),
    GroupName.EXPERT.value: (30, 5),
    GroupName.PRO.value: (10, 1),
    GroupName.FREE.value: (3, 0),
}

PAID_GROUPS = (GroupName.PRO.value, GroupName.EXPERT.value)


@dataclass(frozen=True)
class BillingPeriod:
    start: datetime
    end: datetime
    # True when the period is the subscription's own period rather than the calendar month
    from_subscription: bool = False

    @property
    def year_month(self) -> str:
        return self.start.strftime("%Y-%m")


def year_month(now: datetime) -> str:
    return now.strftime("%Y-%m")


def calendar_month(now: datetime) -> Tuple[datetime, datetime]:
    """First and last instant of the month containing ``now``."""
    last_day = calendar.monthrange(now.year, now.month)[1]
    start = datetime(now.year, now.month, 1)
    end = datetime(now.year, now.month, last_day, 23, 59, 59, 999999)
    return start, end


def is_lapsed(subscription: Subscription, now: datetime) -> bool:
    """True when the subscription's period is over and no billing key will renew it."""
    return (
        subscription.current_period_end is not None
        and now > subscription.current_period_end
        and not subscription.billing_key
    )


def get_user_group(user: User, subscription: Optional[Subscription], now: Optional[datetime] = None) -> str:
    """Resolve the policy group of a user."""
    if user.role == UserRole.ADMIN.value:
        return GroupName.ADMIN.value
    if (
        subscription is not None
        and subscription.plan in PAID_GROUPS
        and subscription.status == SubscriptionStatus.ACTIVE.value
        and not is_lapsed(subscription, now or utc_now())
    ):
        return subscription.plan
    return GroupName.FREE.value


def get_billing_period(group: str, subscription: Optional[Subscription], now: datetime) -> BillingPeriod:
    """Compute the billing period in which usage of ``group`` is counted at ``now``."""
    if group in PAID_GROUPS and subscription is not None:
        start, end = subscription.current_period_start, subscription.current_period_end
        if start is not None and end is not None and start <= now <= end:
            return BillingPeriod(start=start, end=end, from_subscription=True)
    start, end = calendar_month(now)
    return BillingPeriod(start=start, end=end)


class PolicyService:
    """Evaluates group quotas for a user."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.policies = GroupPolicyRepository(session)
        self.usage = UsageLogRepository(session)
        self.projects = ProjectRepository(session)
        self.presentations = PresentationLogRepository(session)

    async def get_limits(self, group: str) -> Tuple[int, int]:
        """Return ``(monthly_project_limit, monthly_presentation_limit)`` of a group."""
        policy = await self.policies.get_by_group(group)
        if policy is None:
            return DEFAULT_LIMITS.get(group, DEFAULT_LIMITS[GroupName.FREE.value])
        return policy.monthly_project_limit, policy.monthly_presentation_limit

    async def _context(self, user_id: str, now: Optional[datetime]):
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다")
        now = now or utc_now()
        subscription = await self.subscriptions.get_by_user(user_id)
        group = get_user_group(user, subscription, now)
        period = get_billing_period(group, subscription, now)
        return group, period

    async def project_usage(self, user_id: str, period: BillingPeriod) -> int:
        if period.from_subscription:
            return await self.projects.count_created_between(user_id, period.start, period.end)
        usage = await self.usage.get_for_month(user_id, period.year_month)
        return usage.project_count if usage else 0

    async def presentation_usage(self, user_id: str, period: BillingPeriod) -> int:
        return await self.presentations.count_between(user_id, period.start, period.end)

    def _project_check(self, user_id: str, group: str, current: int, limit: int) -> PolicyCheck:
        if current >= limit:
            logger.info(f"Project quota reached for user {user_id}: {current}/{limit} ({group})")
            return PolicyCheck(
                allowed=False,
                reason=f"이번 달 프로젝트 생성 제한({limit}개)을 초과했습니다. 현재 {current}개 생성됨.",
                current_usage=current,
                limit=limit,
                group_name=group,
            )
        return PolicyCheck(allowed=True, current_usage=current, limit=limit, group_name=group)

    async def check_project_creation(self, user_id: str, now: Optional[datetime] = None) -> PolicyCheck:
        group, period = await self._context(user_id, now)
        limit, _ = await self.get_limits(group)
        current = await self.project_usage(user_id, period)
        return self._project_check(user_id, group, current, limit)

    async def check_first_analysis(self, user_id: str, now: Optional[datetime] = None) -> PolicyCheck:
        """Quota check run before a project's first analysis.

        Calendar-month usage only grows when a project is first analysed, so
        projects created while the counter was below the limit are refused
        here once it has been reached. Inside a subscription period the project
        was already counted when it was created.
        """
        group, period = await self._context(user_id, now)
        limit, _ = await self.get_limits(group)
        if period.from_subscription:
            current = await self.project_usage(user_id, period)
            return PolicyCheck(allowed=True, current_usage=current, limit=limit, group_name=group)
        usage = await self.usage.get_for_month(user_id, period.year_month)
        return self._project_check(user_id, group, usage.project_count if usage else 0, limit)

    async def check_presentation_creation(self, user_id: str, now: Optional[datetime] = None) -> PolicyCheck:
        group, period = await self._context(user_id, now)
        _, limit = await self.get_limits(group)
        current = await self.presentation_usage(user_id, period)
        if current >= limit:
            logger.info(f"Presentation quota reached for user {user_id}: {current}/{limit} ({group})")
            return PolicyCheck(
                allowed=False,
                reason=f"이번 달 PT레포트 생성 제한({limit}개)을 초과했습니다. 현재 {current}개 생성됨.",
                current_usage=current,
                limit=limit,
                group_name=group,
            )
        return PolicyCheck(allowed=True, current_usage=current, limit=limit, group_name=group)

    async def get_user_policy_info(self, user_id: str, now: Optional[datetime] = None) -> UserPolicyInfo:
        group, period = await self._context(user_id, now)
        project_limit, presentation_limit = await self.get_limits(group)
        projects = await self.project_usage(user_id, period)
        presentations = await self.presentation_usage(user_id, period)
        return UserPolicyInfo(
            group_name=group,
            monthly_limit=project_limit,
            monthly_presentation_limit=presentation_limit,
            current_usage=projects,
            current_presentation_usage=presentations,
            remaining=max(0, project_limit - projects),
            remaining_presentation=max(0, presentation_limit - presentations),
            period_start=period.start,
            period_end=period.end,
        )

    async def increment_usage(self, user_id: str, now: Optional[datetime] = None) -> None:
        """Count one analysed project in the user's calendar-month usage log."""
        usage = await self.usage.increment(user_id, year_month(now or utc_now()))
        logger.debug(f"Usage for {user_id} in {usage.year_month}: {usage.project_count}")

    async def record_presentation(self, user_id: str, project_id: str) -> None:
        """Count one generated deck against the user's presentation quota."""
        await self.presentations.record(user_id, project_id)
        logger.debug(f"Presentation of project {project_id} recorded for {user_id}")
