"""
Unit tests for subscription expiry, downgrade and scheduled upgrades.
"""

from datetime import datetime, timedelta

import pytest

from corporate_advisor.core.database.repositories import PaymentLogRepository, SubscriptionRepository
from corporate_advisor.core.errors import BadRequestError, NotFoundError
from corporate_advisor.services.subscriptions import SubscriptionService

NOW = datetime(2026, 2, 14, 12, 0, 0)


async def _set(session, user_id, **fields):
    subscription = await SubscriptionRepository(session).get_by_user(user_id)
    for key, value in fields.items():
        setattr(subscription, key, value)
    session.add(subscription)
    await session.commit()
    return subscription


class TestGetEffective:
    async def test_new_user_is_free(self, session, user):
        result = await SubscriptionService(session).get_effective(user.id)
        assert result.plan == "free"
        assert result.status == "active"

    async def test_ended_coupon_period_falls_back_to_free(self, session, user):
        await _set(session, user.id, plan="pro", current_period_end=NOW - timedelta(days=1))
        result = await SubscriptionService(session).get_effective(user.id, now=NOW)
        assert result.plan == "free"
        assert result.status == "expired"

    async def test_billing_key_keeps_plan(self, session, user):
        await _set(session, user.id, plan="pro", billing_key="bk", current_period_end=NOW - timedelta(days=1))
        result = await SubscriptionService(session).get_effective(user.id, now=NOW)
        assert result.plan == "pro"
        assert result.has_billing_key

    async def test_active_period_is_kept(self, session, user):
        await _set(session, user.id, plan="expert", current_period_end=NOW + timedelta(days=3))
        result = await SubscriptionService(session).get_effective(user.id, now=NOW)
        assert result.plan == "expert"


class TestDowngrade:
    async def test_already_free(self, session, user):
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).downgrade(user.id)

    async def test_no_subscription(self, session):
        with pytest.raises(NotFoundError):
            await SubscriptionService(session).downgrade("missing")

    async def test_downgrade_with_billing_key_logs_payment(self, session, user):
        await _set(session, user.id, plan="pro", billing_key="bk", customer_key="ck", pending_plan="expert")

        result = await SubscriptionService(session).downgrade(user.id)

        assert result.plan == "free"
        assert result.pending_plan is None
        assert not result.has_billing_key
        logs = await PaymentLogRepository(session).list_for_user(user.id)
        assert len(logs) == 1
        assert logs[0].amount == 0
        assert "PRO" in logs[0].description

    async def test_downgrade_without_billing_key_has_no_log(self, session, user):
        await _set(session, user.id, plan="pro")
        await SubscriptionService(session).downgrade(user.id)
        assert await PaymentLogRepository(session).list_for_user(user.id) == []


class TestScheduledUpgrade:
    async def test_requires_billing_key(self, session, user):
        await _set(session, user.id, plan="pro")
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).schedule_upgrade(user.id, "expert")

    async def test_only_upgrades(self, session, user):
        await _set(session, user.id, plan="expert", billing_key="bk")
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).schedule_upgrade(user.id, "pro")

    async def test_invalid_plan(self, session, user):
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).schedule_upgrade(user.id, "free")

    async def test_schedule_and_cancel(self, session, user):
        await _set(session, user.id, plan="pro", billing_key="bk")
        service = SubscriptionService(session)

        scheduled = await service.schedule_upgrade(user.id, "expert")
        assert scheduled.pending_plan == "expert"

        with pytest.raises(BadRequestError):
            await service.schedule_upgrade(user.id, "expert")

        canceled = await service.cancel_scheduled_upgrade(user.id)
        assert canceled.pending_plan is None

    async def test_cancel_without_pending(self, session, user):
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).cancel_scheduled_upgrade(user.id)


class TestSetPlan:
    async def test_admin_sets_plan(self, session, user):
        subscription = await SubscriptionService(session).set_plan(user.id, "expert")
        assert subscription.plan == "expert"
        assert subscription.status == "active"

    async def test_invalid_plan(self, session, user):
        with pytest.raises(BadRequestError):
            await SubscriptionService(session).set_plan(user.id, "platinum")
