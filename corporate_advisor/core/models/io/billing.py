"""
Billing I/O models: subscriptions, coupons, credits and quota policies.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator


# ---------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------


class SubscriptionRead(BaseModel):
    plan: str
    status: str
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    pending_plan: Optional[str] = None
    has_billing_key: bool = False


class ScheduleUpgradeRequest(BaseModel):
    plan: str


class MessageResponse(BaseModel):
    message: str


# ---------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------


class CouponGenerateRequest(BaseModel):
    """Schema for issuing a batch of coupons."""

    count: int = Field(ge=1, le=1000, description="Number of coupons to issue")
    plan: str = Field(default="pro", description="Plan granted on redemption")
    duration_days: int = Field(default=30, ge=1, description="Days of subscription granted")
    note: Optional[str] = None


class CouponGenerateResponse(BaseModel):
    batch_id: str
    count: int
    codes: List[str]


class CouponRead(BaseModel):
    id: str
    code: str
    plan: str
    duration_days: int
    batch_id: Optional[str] = None
    note: Optional[str] = None
    redeemed_by: Optional[str] = None
    redeemed_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CouponBatch(BaseModel):
    batch_id: str
    plan: str
    duration_days: int
    total: int
    used: int
    created_at: Optional[datetime] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class CouponListResponse(BaseModel):
    coupons: List[CouponRead]
    pagination: Pagination
    batches: List[CouponBatch]


class CouponDeleteRequest(BaseModel):
    batch_id: Optional[str] = None
    coupon_ids: Optional[List[str]] = None


class CouponDeleteResponse(BaseModel):
    deleted_count: int


class CouponRedeemRequest(BaseModel):
    code: str


class CouponRedeemResponse(BaseModel):
    message: str
    plan: str
    duration_days: int
    expires_at: datetime


# ---------------------------------------------------------------------
# Credits
# ---------------------------------------------------------------------


class CreditBalance(BaseModel):
    credits: int


class CreditTransactionRead(BaseModel):
    id: str
    amount: int
    type: str
    description: Optional[str] = None
    balance_after: int
    created_at: datetime

    class Config:
        from_attributes = True


class CreditPriceRead(BaseModel):
    action_type: str
    credits: int
    description: Optional[str] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class CreditPriceUpdate(BaseModel):
    credits: int = Field(ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class CreditAdjustRequest(BaseModel):
    """Admin grant (positive amount) or deduction (negative amount)."""

    amount: int
    description: Optional[str] = None

    @model_validator(mode="after")
    def _non_zero(self) -> "CreditAdjustRequest":
        if self.amount == 0:
            raise ValueError("amount must not be zero")
        return self


class InitialCreditPolicyRead(BaseModel):
    id: str
    credits: int
    description: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class InitialCreditPolicyCreate(BaseModel):
    credits: int = Field(ge=0)
    description: Optional[str] = None


# ---------------------------------------------------------------------
# Quota policies
# ---------------------------------------------------------------------


class GroupPolicyRead(BaseModel):
    group_name: str
    monthly_project_limit: int
    monthly_presentation_limit: int
    description: Optional[str] = None

    class Config:
        from_attributes = True


class GroupPolicyUpdate(BaseModel):
    monthly_project_limit: int = Field(ge=0)
    monthly_presentation_limit: int = Field(default=0, ge=0)
    description: Optional[str] = None


class PolicyCheck(BaseModel):
    """Outcome of a quota check."""

    allowed: bool
    reason: Optional[str] = None
    current_usage: int
    limit: int
    group_name: str


class UserPolicyInfo(BaseModel):
    group_name: str
    monthly_limit: int
    monthly_presentation_limit: int
    current_usage: int
    current_presentation_usage: int
    remaining: int
    remaining_presentation: int
    period_start: datetime
    period_end: datetime


RevenuePeriod = Literal["all", "month", "year"]
