"""
Revenue statistics over the payment ledger.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import PaymentLog
from corporate_advisor.core.database.repositories import PaymentLogRepository
from corporate_advisor.core.errors import BadRequestError
from corporate_advisor.core.models.enums import PaymentStatus
from corporate_advisor.core.models.io.admin import MethodStats, MonthlyRevenue, RevenueReport, StatusTotal

PERIODS = ("all", "month", "year")


def period_start(period: str, now: datetime) -> Optional[datetime]:
    if period == "month":
        return datetime(now.year, now.month, 1)
    if period == "year":
        return datetime(now.year, 1, 1)
    return None


def summarize(logs: List[PaymentLog], period: str) -> RevenueReport:
    """Aggregate payment logs; only completed payments count as revenue."""
    by_status: Dict[str, StatusTotal] = {}
    monthly: Dict[str, MonthlyRevenue] = {}
    by_method: Dict[str, MethodStats] = defaultdict(lambda: MethodStats(method="", count=0, amount=0))
    total = 0

    for log in logs:
        status_total = by_status.setdefault(log.status, StatusTotal())
        status_total.count += 1
        status_total.amount += log.amount
        if log.status != PaymentStatus.COMPLETED.value:
            continue

        total += log.amount
        month = log.created_at.strftime("%Y-%m")
        bucket = monthly.setdefault(month, MonthlyRevenue(month=month, amount=0, count=0))
        bucket.amount += log.amount
        bucket.count += 1

        method = log.method or "unknown"
        stats = by_method[method]
        stats.method = method
        stats.count += 1
        stats.amount += log.amount

    return RevenueReport(
        period=period,
        total_revenue=total,
        by_status=by_status,
        monthly=[monthly[key] for key in sorted(monthly)],
        by_method=sorted(by_method.values(), key=lambda s: s.amount, reverse=True),
    )


class RevenueService:
    def __init__(self, session: AsyncSession) -> None:
        self.payments = PaymentLogRepository(session)

    async def report(self, period: str = "all", now: Optional[datetime] = None) -> RevenueReport:
        if period not in PERIODS:
            raise BadRequestError("유효하지 않은 기간입니다")
        logs = await self.payments.list_since(period_start(period, now or utc_now()))
        return summarize(logs, period)
