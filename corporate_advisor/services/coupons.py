"""
Coupon service.

Coupon codes have the form ``XXXX-XXXX-XXXX-XXXX`` over ``A-Z0-9``.
Administrators issue them in batches; a user redeems a code to receive a
subscription plan for the coupon's number of days.
"""

from __future__ import annotations

import math
import re
import secrets
import string
import time
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import Coupon, PaymentLog, Subscription
from corporate_advisor.core.database.repositories import (
    CouponRepository,
    PaymentLogRepository,
    SubscriptionRepository,
)
from corporate_advisor.core.errors import AdvisorError, BadRequestError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import PLAN_ORDER, PaymentStatus, SubscriptionStatus
from corporate_advisor.core.models.io.billing import (
    CouponBatch,
    CouponGenerateResponse,
    CouponListResponse,
    CouponRead,
    CouponRedeemResponse,
    Pagination,
)

logger = get_logger(__name__)

COUPON_CHARSET = string.ascii_uppercase + string.digits
SEGMENT_LENGTH = 4
SEGMENT_COUNT = 4
MAX_CODE_ATTEMPTS = 100
MAX_BATCH_SIZE = 1000

COUPON_CODE_RE = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


def generate_coupon_code(choice: Callable[[str], str] = secrets.choice) -> str:
    """Return a random ``XXXX-XXXX-XXXX-XXXX`` code."""
    return "-".join(
        "".join(choice(COUPON_CHARSET) for _ in range(SEGMENT_LENGTH)) for _ in range(SEGMENT_COUNT)
    )


def generate_unique_codes(
    count: int, existing: Set[str], generator: Callable[[], str] = generate_coupon_code
) -> List[str]:
    """Generate ``count`` codes absent from ``existing`` and from each other.

    ``existing`` is extended in place with the new codes.

    Raises:
        AdvisorError: when a unique code cannot be found within ``MAX_CODE_ATTEMPTS`` tries.
    """
    codes: List[str] = []
    for _ in range(count):
        for _attempt in range(MAX_CODE_ATTEMPTS):
            code = generator()
            if code not in existing:
                break
        else:
            raise AdvisorError("고유한 쿠폰 코드를 생성하지 못했습니다")
        existing.add(code)
        codes.append(code)
    return codes


def normalize_code(code: str) -> str:
    return code.strip().upper()


class CouponService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.coupons = CouponRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.payments = PaymentLogRepository(session)

    async def generate_batch(
        self, count: int, plan: str = "pro", duration_days: int = 30, note: Optional[str] = None
    ) -> CouponGenerateResponse:
        if not 1 <= count <= MAX_BATCH_SIZE:
            raise BadRequestError(f"쿠폰 개수는 1~{MAX_BATCH_SIZE}개 사이여야 합니다")
        if plan not in PLAN_ORDER:
            raise BadRequestError("유효하지 않은 플랜입니다")
        if duration_days < 1:
            raise BadRequestError("이용 기간은 1일 이상이어야 합니다")

        batch_id = f"BATCH-{int(time.time() * 1000)}"
        existing = await self.coupons.all_codes()
        codes = generate_unique_codes(count, existing)

        for code in codes:
            self.session.add(Coupon(code=code, plan=plan, duration_days=duration_days, batch_id=batch_id, note=note))
        await self.session.commit()

        logger.info(f"Issued {count} {plan} coupons ({duration_days} days) in {batch_id}")
        return CouponGenerateResponse(batch_id=batch_id, count=len(codes), codes=codes)

    async def list_coupons(
        self, page: int = 1, limit: int = 50, status: Optional[str] = None, batch_id: Optional[str] = None
    ) -> CouponListResponse:
        page = max(page, 1)
        limit = max(limit, 1)
        coupons = await self.coupons.search(status=status, batch_id=batch_id, limit=limit, offset=(page - 1) * limit)
        total = await self.coupons.count_matching(status=status, batch_id=batch_id)
        batches = await self.coupons.batch_summaries()
        return CouponListResponse(
            coupons=[CouponRead.model_validate(c) for c in coupons],
            pagination=Pagination(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit)),
            batches=[CouponBatch(**b) for b in batches],
        )

    async def delete_coupons(self, batch_id: Optional[str] = None, coupon_ids: Optional[Iterable[str]] = None) -> int:
        """Delete the unredeemed coupons of a batch or of an id list."""
        coupon_ids = list(coupon_ids or [])
        if not batch_id and not coupon_ids:
            raise BadRequestError("삭제할 쿠폰을 지정해주세요")
        deleted = await self.coupons.delete_unredeemed(batch_id=batch_id, coupon_ids=coupon_ids)
        logger.info(f"Deleted {deleted} unredeemed coupons (batch={batch_id}, ids={len(coupon_ids)})")
        return deleted

    async def redeem(self, user_id: str, code: str, now: Optional[datetime] = None) -> CouponRedeemResponse:
        """Redeem a coupon for a user.

        The coupon, the subscription and the zero-amount payment log are
        written in one transaction; a rejected redemption changes nothing.
        """
        code = normalize_code(code)
        if not code:
            raise BadRequestError("쿠폰 코드를 입력해주세요")
        coupon = await self.coupons.get_by_code(code)
        if coupon is None:
            raise NotFoundError("유효하지 않은 쿠폰 코드입니다")
        if coupon.is_redeemed:
            raise BadRequestError("이미 사용된 쿠폰입니다. 담당자에게 문의하세요.")

        now = now or utc_now()
        expires_at = now + timedelta(days=coupon.duration_days)

        if not await self.coupons.claim(coupon.id, user_id, now, expires_at):
            logger.warning(f"Coupon {code} was redeemed concurrently")
            raise BadRequestError("이미 사용된 쿠폰입니다. 담당자에게 문의하세요.")

        subscription = await self.subscriptions.get_by_user(user_id)
        if subscription is None:
            subscription = Subscription(user_id=user_id)
        subscription.plan = coupon.plan
        subscription.status = SubscriptionStatus.ACTIVE.value
        subscription.current_period_start = now
        subscription.current_period_end = expires_at
        subscription.updated_at = now
        self.session.add(subscription)

        self.session.add(
            PaymentLog(
                user_id=user_id,
                amount=0,
                currency="KRW",
                status=PaymentStatus.COMPLETED.value,
                method="coupon",
                description=f"쿠폰 등록: {coupon.plan.upper()} 플랜 {coupon.duration_days}일 이용권 ({code})",
            )
        )

        await self.session.commit()

        logger.info(f"User {user_id} redeemed coupon {code} ({coupon.plan}, {coupon.duration_days} days)")
        return CouponRedeemResponse(
            message=f"{coupon.plan.upper()} 플랜 {coupon.duration_days}일 이용권이 등록되었습니다.",
            plan=coupon.plan,
            duration_days=coupon.duration_days,
            expires_at=expires_at,
        )
