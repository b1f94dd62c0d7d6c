"""
Unit tests for coupon code generation, batch issuance, listing, deletion and
redemption.
"""

from datetime import datetime, timedelta
from itertools import cycle
from unittest.mock import AsyncMock

import pytest

from corporate_advisor.core.database.entities import Coupon
from corporate_advisor.core.database.repositories import (
    CouponRepository,
    PaymentLogRepository,
    SubscriptionRepository,
)
from corporate_advisor.core.errors import AdvisorError, BadRequestError, NotFoundError
from corporate_advisor.services.coupons import (
    COUPON_CODE_RE,
    CouponService,
    generate_coupon_code,
    generate_unique_codes,
    normalize_code,
)

NOW = datetime(2026, 3, 1, 9, 0, 0)


class TestCodeGeneration:
    def test_code_format(self):
        for _ in range(20):
            assert COUPON_CODE_RE.match(generate_coupon_code())

    def test_deterministic_choice(self):
        assert generate_coupon_code(choice=lambda chars: "A") == "AAAA-AAAA-AAAA-AAAA"

    def test_unique_codes_skip_existing(self):
        codes = iter(["AAAA-AAAA-AAAA-AAAA", "BBBB-BBBB-BBBB-BBBB", "BBBB-BBBB-BBBB-BBBB", "CCCC-CCCC-CCCC-CCCC"])
        existing = {"AAAA-AAAA-AAAA-AAAA"}

        result = generate_unique_codes(2, existing, generator=lambda: next(codes))

        assert result == ["BBBB-BBBB-BBBB-BBBB", "CCCC-CCCC-CCCC-CCCC"]
        assert "CCCC-CCCC-CCCC-CCCC" in existing

    def test_gives_up_after_max_attempts(self):
        same = cycle(["AAAA-AAAA-AAAA-AAAA"])
        with pytest.raises(AdvisorError):
            generate_unique_codes(1, {"AAAA-AAAA-AAAA-AAAA"}, generator=lambda: next(same))

    def test_normalize_code(self):
        assert normalize_code("  abcd-efgh-1234-5678 ") == "ABCD-EFGH-1234-5678"


class TestGenerateBatch:
    async def test_issues_batch(self, session):
        result = await CouponService(session).generate_batch(5, plan="expert", duration_days=60, note="행사")

        assert result.count == 5
        assert len(set(result.codes)) == 5
        assert result.batch_id.startswith("BATCH-")
        stored = await CouponRepository(session).search(batch_id=result.batch_id)
        assert {c.plan for c in stored} == {"expert"}
        assert {c.duration_days for c in stored} == {60}

    @pytest.mark.parametrize(
        "count, plan, days",
        [(0, "pro", 30), (1001, "pro", 30), (1, "gold", 30), (1, "pro", 0)],
    )
    async def test_rejects_invalid_input(self, session, count, plan, days):
        with pytest.raises(BadRequestError):
            await CouponService(session).generate_batch(count, plan=plan, duration_days=days)


class TestListAndDelete:
    async def test_list_with_batches_and_pagination(self, session, user):
        service = CouponService(session)
        batch = await service.generate_batch(3)
        await service.redeem(user.id, batch.codes[0], now=NOW)

        page = await service.list_coupons(page=1, limit=2)
        assert page.pagination.total == 3
        assert page.pagination.total_pages == 2
        assert len(page.coupons) == 2
        assert page.batches[0].batch_id == batch.batch_id
        assert page.batches[0].total == 3
        assert page.batches[0].used == 1

        used = await service.list_coupons(status="used")
        assert [c.code for c in used.coupons] == [batch.codes[0]]
        unused = await service.list_coupons(status="unused")
        assert unused.pagination.total == 2

    async def test_delete_keeps_redeemed(self, session, user):
        service = CouponService(session)
        batch = await service.generate_batch(3)
        await service.redeem(user.id, batch.codes[0], now=NOW)

        deleted = await service.delete_coupons(batch_id=batch.batch_id)

        assert deleted == 2
        remaining = await CouponRepository(session).search(batch_id=batch.batch_id)
        assert [c.code for c in remaining] == [batch.codes[0]]

    async def test_delete_by_ids(self, session):
        session.add(Coupon(id="c1", code="AAAA-AAAA-AAAA-AAAA"))
        session.add(Coupon(id="c2", code="BBBB-BBBB-BBBB-BBBB"))
        await session.commit()

        assert await CouponService(session).delete_coupons(coupon_ids=["c1"]) == 1
        assert await CouponRepository(session).get_by_code("BBBB-BBBB-BBBB-BBBB") is not None

    async def test_delete_requires_target(self, session):
        with pytest.raises(BadRequestError):
            await CouponService(session).delete_coupons()


class TestRedeem:
    async def test_redeem_grants_subscription(self, session, user):
        session.add(Coupon(code="ABCD-EFGH-1234-5678", plan="pro", duration_days=30))
        await session.commit()

        result = await CouponService(session).redeem(user.id, " abcd-efgh-1234-5678 ", now=NOW)

        assert result.plan == "pro"
        assert result.expires_at == NOW + timedelta(days=30)
        subscription = await SubscriptionRepository(session).get_by_user(user.id)
        assert subscription.plan == "pro"
        assert subscription.status == "active"
        assert subscription.current_period_start == NOW
        assert subscription.current_period_end == NOW + timedelta(days=30)
        logs = await PaymentLogRepository(session).list_for_user(user.id)
        assert logs[0].method == "coupon"
        assert logs[0].amount == 0
        coupon = await CouponRepository(session).get_by_code("ABCD-EFGH-1234-5678")
        assert coupon.redeemed_by == user.id
        assert coupon.is_redeemed

    async def test_unknown_code(self, session, user):
        with pytest.raises(NotFoundError):
            await CouponService(session).redeem(user.id, "ZZZZ-ZZZZ-ZZZZ-ZZZZ")

    async def test_empty_code(self, session, user):
        with pytest.raises(BadRequestError):
            await CouponService(session).redeem(user.id, "   ")

    async def test_code_can_be_used_once(self, session, user, other_user):
        session.add(Coupon(code="ABCD-EFGH-1234-5678"))
        await session.commit()
        service = CouponService(session)
        await service.redeem(user.id, "ABCD-EFGH-1234-5678", now=NOW)

        with pytest.raises(BadRequestError):
            await service.redeem(other_user.id, "ABCD-EFGH-1234-5678", now=NOW)

        subscription = await SubscriptionRepository(session).get_by_user(other_user.id)
        assert subscription.plan == "free"

    async def test_concurrent_redemption_is_rejected(self, session, user, other_user):
        session.add(Coupon(code="ABCD-EFGH-1234-5678", plan="expert", duration_days=90))
        await session.commit()
        service = CouponService(session)
        loaded = await service.coupons.get_by_code("ABCD-EFGH-1234-5678")
        # a copy read before the first redemption committed
        stale = Coupon(id=loaded.id, code=loaded.code, plan=loaded.plan, duration_days=loaded.duration_days)
        await service.redeem(user.id, "ABCD-EFGH-1234-5678", now=NOW)
        service.coupons.get_by_code = AsyncMock(return_value=stale)

        with pytest.raises(BadRequestError) as exc_info:
            await service.redeem(other_user.id, "ABCD-EFGH-1234-5678", now=NOW)

        assert exc_info.value.message.startswith("이미 사용된 쿠폰입니다")
        assert (await SubscriptionRepository(session).get_by_user(other_user.id)).plan == "free"
        assert await PaymentLogRepository(session).list_for_user(other_user.id) == []
        coupon = await CouponRepository(session).get_by_id(loaded.id)
        assert coupon.redeemed_by == user.id


class TestClaim:
    async def test_claim_only_once(self, session, user, other_user):
        coupon = await CouponRepository(session).create(Coupon(code="ABCD-EFGH-1234-5678"))
        repo = CouponRepository(session)

        assert await repo.claim(coupon.id, user.id, NOW, NOW + timedelta(days=30))
        assert not await repo.claim(coupon.id, other_user.id, NOW, NOW + timedelta(days=30))
