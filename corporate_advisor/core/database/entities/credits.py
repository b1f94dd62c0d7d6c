"""
Credit entity models.

Credits are an internal balance spent on premium actions. Prices are
configured per action, every balance change is recorded as a transaction, and
an initial-credit policy decides the balance granted at sign-up.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class CreditPrice(Base, table=True):
    """Credit cost of one action type.

    Table: credit_prices
    """

    __tablename__ = "credit_prices"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    action_type: str = Field(max_length=64, unique=True, index=True)
    credits: int = Field(default=0, ge=0)
    description: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True)

    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})


class CreditTransaction(Base, table=True):
    """Signed change of a user's credit balance.

    Table: credit_transactions
    """

    __tablename__ = "credit_transactions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    amount: int = Field()
    type: str = Field(max_length=32, index=True)
    description: Optional[str] = Field(default=None)
    balance_after: int = Field()
    # project or payment the change belongs to
    related_id: Optional[str] = Field(default=None, max_length=64)
    admin_id: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"CreditTransaction(user_id={self.user_id}, amount={self.amount}, type={self.type})"


class InitialCreditPolicy(Base, table=True):
    """Credits granted to new accounts; only one policy is active at a time.

    Table: initial_credit_policies
    """

    __tablename__ = "initial_credit_policies"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    credits: int = Field(default=0, ge=0)
    description: Optional[str] = Field(default=None)
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now)
