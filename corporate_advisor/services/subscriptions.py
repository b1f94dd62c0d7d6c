"""
Subscription service.

Reads the effective plan of a user, downgrades paid plans to free, and
schedules or cancels plan upgrades applied at the next renewal.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import PaymentLog, Subscription
from corporate_advisor.core.database.repositories import PaymentLogRepository, SubscriptionRepository
from corporate_advisor.core.errors import BadRequestError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import PLAN_ORDER, PaymentStatus, PlanName, SubscriptionStatus
from corporate_advisor.core.models.io.billing import SubscriptionRead
from corporate_advisor.services.policy import is_lapsed

logger = get_logger(__name__)


def to_read(subscription: Optional[Subscription]) -> SubscriptionRead:
    if subscription is None:
        return SubscriptionRead(plan=PlanName.FREE.value, status=SubscriptionStatus.ACTIVE.value)
    return SubscriptionRead(
        plan=subscription.plan,
        status=subscription.status,
        current_period_start=subscription.current_period_start,
        current_period_end=subscription.current_period_end,
        pending_plan=subscription.pending_plan,
        has_billing_key=bool(subscription.billing_key),
    )


class SubscriptionService:
    """Subscription rules of a single user."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.subscriptions = SubscriptionRepository(session)
        self.payments = PaymentLogRepository(session)

    async def get_effective(self, user_id: str, now: Optional[datetime] = None) -> SubscriptionRead:
        """Return the subscription, expiring it first when its period ended without a billing key.

        Coupon-granted plans have a period end but no billing key; once the
        period is over the user falls back to the free plan.
        """
        subscription = await self.subscriptions.get_by_user(user_id)
        now = now or utc_now()
        if (
            subscription is not None
            and is_lapsed(subscription, now)
            and (subscription.plan != PlanName.FREE.value or subscription.status != SubscriptionStatus.EXPIRED.value)
        ):
            logger.info(f"Subscription of {user_id} expired on {subscription.current_period_end}")
            subscription.plan = PlanName.FREE.value
            subscription.status = SubscriptionStatus.EXPIRED.value
            subscription = await self.subscriptions.update(subscription)
        return to_read(subscription)

    async def downgrade(self, user_id: str) -> SubscriptionRead:
        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            raise NotFoundError("구독 정보를 찾을 수 없습니다")
        if subscription.plan == PlanName.FREE.value:
            raise BadRequestError("이미 Free 플랜을 사용 중입니다")

        previous_plan = subscription.plan
        had_billing_key = bool(subscription.billing_key)

        subscription.plan = PlanName.FREE.value
        subscription.status = SubscriptionStatus.ACTIVE.value
        subscription.billing_key = None
        subscription.customer_key = None
        subscription.current_period_start = None
        subscription.current_period_end = None
        subscription.pending_plan = None
        subscription.updated_at = utc_now()
        self.session.add(subscription)

        if had_billing_key:
            await self.payments.add(
                PaymentLog(
                    user_id=user_id,
                    amount=0,
                    currency="KRW",
                    status=PaymentStatus.COMPLETED.value,
                    description=f"{previous_plan.upper()} → Free 플랜 다운그레이드 (정기결제 해지)",
                )
            )
        await self.session.commit()
        logger.info(f"User {user_id} downgraded from {previous_plan} to free")
        return to_read(subscription)

    async def schedule_upgrade(self, user_id: str, target_plan: str) -> SubscriptionRead:
        if target_plan not in (PlanName.PRO.value, PlanName.EXPERT.value):
            raise BadRequestError("유효하지 않은 플랜입니다")
        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            raise NotFoundError("구독 정보를 찾을 수 없습니다")
        if not subscription.billing_key:
            raise BadRequestError("정기결제 정보가 없습니다. 먼저 구독을 시작해주세요.")
        if PLAN_ORDER[target_plan] <= PLAN_ORDER.get(subscription.plan, 0):
            raise BadRequestError("업그레이드만 예약할 수 있습니다")
        if subscription.pending_plan == target_plan:
            raise BadRequestError("이미 해당 플랜으로 변경이 예약되어 있습니다")

        subscription.pending_plan = target_plan
        subscription = await self.subscriptions.update(subscription)
        logger.info(f"User {user_id} scheduled an upgrade to {target_plan}")
        return to_read(subscription)

    async def cancel_scheduled_upgrade(self, user_id: str) -> SubscriptionRead:
        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            raise NotFoundError("구독 정보를 찾을 수 없습니다")
        if not subscription.pending_plan:
            raise BadRequestError("예약된 플랜 변경이 없습니다")
        subscription.pending_plan = None
        subscription = await self.subscriptions.update(subscription)
        return to_read(subscription)

    async def set_plan(self, user_id: str, plan: str) -> Subscription:
        """Admin override of a user's plan; creates the subscription when missing."""
        if plan not in PLAN_ORDER:
            raise BadRequestError("유효하지 않은 플랜입니다")
        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            subscription = Subscription(user_id=user_id)
        subscription.plan = plan
        subscription.status = SubscriptionStatus.ACTIVE.value
        return await self.subscriptions.update(subscription)
