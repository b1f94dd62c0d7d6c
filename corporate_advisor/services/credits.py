"""
Credit service.

Every balance change goes through ``modify_user_credits`` so that the user's
balance and the transaction ledger always move together.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database.entities import CreditPrice, CreditTransaction, InitialCreditPolicy, User
from corporate_advisor.core.database.repositories import (
    CreditPriceRepository,
    CreditTransactionRepository,
    InitialCreditPolicyRepository,
    UserRepository,
)
from corporate_advisor.core.errors import BadRequestError, InsufficientCreditsError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import DEFAULT_CREDIT_PRICES, CreditTransactionType

logger = get_logger(__name__)


class CreditService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.prices = CreditPriceRepository(session)
        self.transactions = CreditTransactionRepository(session)
        self.initial_policies = InitialCreditPolicyRepository(session)

    async def modify_user_credits(
        self,
        user_id: str,
        amount: int,
        type: str,
        description: Optional[str] = None,
        related_id: Optional[str] = None,
        admin_id: Optional[str] = None,
        commit: bool = True,
    ) -> CreditTransaction:
        """Add (positive ``amount``) or deduct (negative ``amount``) credits.

        Raises:
            NotFoundError: unknown user
            InsufficientCreditsError: the balance would become negative
        """
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다")
        new_balance = user.credits + amount
        if new_balance < 0:
            raise InsufficientCreditsError()

        user.credits = new_balance
        self.session.add(user)
        transaction = await self.transactions.add(
            CreditTransaction(
                user_id=user_id,
                amount=amount,
                type=type,
                description=description,
                balance_after=new_balance,
                related_id=related_id,
                admin_id=admin_id,
            )
        )
        if commit:
            await self.session.commit()
        logger.info(f"Credits of {user_id} changed by {amount} ({type}), balance {new_balance}")
        return transaction

    async def get_price(self, action_type: str) -> int:
        """Credit cost of an action; unconfigured or inactive prices fall back to the defaults."""
        price = await self.prices.get_by_action(action_type)
        if price is None or not price.is_active:
            return DEFAULT_CREDIT_PRICES.get(action_type, 0)
        return price.credits

    async def list_prices(self) -> List[CreditPrice]:
        return await self.prices.list()

    async def set_price(
        self, action_type: str, credits: int, description: Optional[str] = None, is_active: Optional[bool] = None
    ) -> CreditPrice:
        if credits < 0:
            raise BadRequestError("크레딧 가격은 0 이상이어야 합니다")
        price = await self.prices.get_by_action(action_type)
        if price is None:
            price = CreditPrice(action_type=action_type)
        price.credits = credits
        if description is not None:
            price.description = description
        if is_active is not None:
            price.is_active = is_active
        return await self.prices.update(price)

    async def history(self, user_id: str, limit: int = 100) -> List[CreditTransaction]:
        return await self.transactions.list_for_user(user_id, limit=limit)

    async def admin_adjust(
        self, admin: User, user_id: str, amount: int, description: Optional[str] = None
    ) -> CreditTransaction:
        type = CreditTransactionType.ADMIN_GRANT if amount > 0 else CreditTransactionType.ADMIN_DEDUCT
        return await self.modify_user_credits(
            user_id,
            amount,
            type.value,
            description or ("관리자 지급" if amount > 0 else "관리자 차감"),
            admin_id=admin.id,
        )

    async def get_initial_policy(self) -> Optional[InitialCreditPolicy]:
        return await self.initial_policies.get_active()

    async def set_initial_policy(self, credits: int, description: Optional[str] = None) -> InitialCreditPolicy:
        """Replace the active initial-credit policy."""
        await self.initial_policies.deactivate_all()
        return await self.initial_policies.create(
            InitialCreditPolicy(credits=credits, description=description, is_active=True)
        )

    async def grant_signup_bonus(self, user_id: str, commit: bool = True) -> Optional[CreditTransaction]:
        policy = await self.initial_policies.get_active()
        if policy is None or policy.credits <= 0:
            return None
        return await self.modify_user_credits(
            user_id,
            policy.credits,
            CreditTransactionType.SIGNUP_BONUS.value,
            policy.description or "가입 축하 크레딧",
            commit=commit,
        )
