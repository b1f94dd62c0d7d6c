"""
Coupon entity model.

Coupons are issued in batches by administrators and grant a subscription plan
for a fixed number of days once redeemed.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Coupon(Base, table=True):
    """Redeemable coupon code (``XXXX-XXXX-XXXX-XXXX``).

    Table: coupons
    """

    __tablename__ = "coupons"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    code: str = Field(max_length=19, unique=True, index=True)
    plan: str = Field(default="pro", max_length=16)
    duration_days: int = Field(default=30, ge=1)
    batch_id: Optional[str] = Field(default=None, max_length=64, index=True)
    note: Optional[str] = Field(default=None)

    redeemed_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64, index=True)
    redeemed_at: Optional[datetime] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    @property
    def is_redeemed(self) -> bool:
        return self.redeemed_at is not None

    def __repr__(self) -> str:
        return f"Coupon(code={self.code}, plan={self.plan}, redeemed={self.is_redeemed})"
