"""
Subscription and payment entity models.

Each user has at most one subscription row describing the current plan and
billing period. Payment logs form an append-only ledger used by the revenue
report; coupon redemptions and downgrades write zero-amount entries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Subscription(Base, table=True):
    """Plan and billing period of a user.

    Table: subscriptions
    """

    __tablename__ = "subscriptions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True, index=True, max_length=64)
    plan: str = Field(default="free", max_length=16)
    status: str = Field(default="active", max_length=16)
    current_period_start: Optional[datetime] = Field(default=None)
    current_period_end: Optional[datetime] = Field(default=None)
    billing_key: Optional[str] = Field(default=None, max_length=255)
    customer_key: Optional[str] = Field(default=None, max_length=255)
    # Plan applied at the next renewal
    pending_plan: Optional[str] = Field(default=None, max_length=16)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Subscription(user_id={self.user_id}, plan={self.plan}, status={self.status})"


class PaymentLog(Base, table=True):
    """Entry of the payment ledger.

    Table: payment_logs
    """

    __tablename__ = "payment_logs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    amount: int = Field(default=0)
    currency: str = Field(default="KRW", max_length=8)
    status: str = Field(default="completed", max_length=16, index=True)
    method: Optional[str] = Field(default=None, max_length=32)
    description: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"PaymentLog(id={self.id}, user_id={self.user_id}, amount={self.amount}, status={self.status})"
