"""
Admin-only I/O models: user management, project overview and revenue.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel

from .auth import UserRead
from .billing import SubscriptionRead


class AdminUserRead(UserRead):
    plan: str = "free"
    subscription_status: Optional[str] = None
    project_count: int = 0


class AdminUserDetail(AdminUserRead):
    subscription: Optional[SubscriptionRead] = None
    monthly_usage: Dict[str, int] = {}


class AdminUserUpdate(BaseModel):
    role: Optional[str] = None
    plan: Optional[str] = None


class AdminProjectRead(BaseModel):
    id: str
    company_name: str
    representative: str
    status: str
    user_id: str
    user_email: Optional[str] = None
    has_report: bool = False
    pdf_url: Optional[str] = None
    created_at: datetime


class StatusTotal(BaseModel):
    count: int = 0
    amount: int = 0


class MonthlyRevenue(BaseModel):
    month: str
    amount: int
    count: int


class MethodStats(BaseModel):
    method: str
    count: int
    amount: int


class RevenueReport(BaseModel):
    period: str
    total_revenue: int
    by_status: Dict[str, StatusTotal]
    monthly: List[MonthlyRevenue]
    by_method: List[MethodStats]
