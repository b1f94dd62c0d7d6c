"""
User accounts: registration, login and administration.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from corporate_advisor.core.database.entities import Subscription, User
from corporate_advisor.core.database.repositories import (
    CouponRepository,
    CreditTransactionRepository,
    InquiryRepository,
    PaymentLogRepository,
    PresentationLogRepository,
    ProjectRepository,
    SubscriptionRepository,
    UsageLogRepository,
    UserRepository,
)
from corporate_advisor.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from corporate_advisor.core.logging_config import get_logger
from corporate_advisor.core.models.enums import PlanName, SubscriptionStatus, UserRole
from corporate_advisor.core.models.io.admin import AdminUserDetail, AdminUserRead, AdminUserUpdate
from corporate_advisor.core.models.io.auth import RegisterRequest, UserRead
from corporate_advisor.server.core.security import hash_password, verify_password
from corporate_advisor.services.credits import CreditService
from corporate_advisor.services.projects import ProjectService
from corporate_advisor.services.storage import StorageBackend
from corporate_advisor.services.subscriptions import SubscriptionService, to_read

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: AsyncSession, storage: Optional[StorageBackend] = None) -> None:
        self.session = session
        self.storage = storage
        self.users = UserRepository(session)
        self.subscriptions = SubscriptionRepository(session)
        self.projects = ProjectRepository(session)
        self.usage = UsageLogRepository(session)

    async def register(self, data: RegisterRequest) -> User:
        """Create an account with a free subscription and the signup credit bonus."""
        if await self.users.get_by_email(data.email) is not None:
            raise ConflictError("이미 등록된 이메일입니다")

        user = await self.users.add(
            User(email=data.email, name=data.name.strip(), password_hash=hash_password(data.password))
        )
        self.session.add(
            Subscription(user_id=user.id, plan=PlanName.FREE.value, status=SubscriptionStatus.ACTIVE.value)
        )
        await CreditService(self.session).grant_signup_bonus(user.id, commit=False)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("이미 등록된 이메일입니다") from e
        await self.session.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.users.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("이메일 또는 비밀번호가 올바르지 않습니다")
        return user

    async def get(self, user_id: str) -> User:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다")
        return user

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def _admin_read(self, user: User) -> AdminUserRead:
        subscription = await self.subscriptions.get_by_user(user.id)
        return AdminUserRead(
            **UserRead.model_validate(user).model_dump(),
            plan=subscription.plan if subscription else PlanName.FREE.value,
            subscription_status=subscription.status if subscription else None,
            project_count=await self.projects.count(filters={"user_id": user.id}),
        )

    async def list_for_admin(
        self, query: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[AdminUserRead]:
        users = await self.users.search(query, limit=limit, offset=offset)
        return [await self._admin_read(user) for user in users]

    async def detail_for_admin(self, user_id: str) -> AdminUserDetail:
        user = await self.get(user_id)
        base = await self._admin_read(user)
        subscription = await self.subscriptions.get_by_user(user.id)
        usage = await self.usage.list_for_user(user.id)
        return AdminUserDetail(
            **base.model_dump(),
            subscription=to_read(subscription),
            monthly_usage={log.year_month: log.project_count for log in usage},
        )

    async def update_by_admin(self, user_id: str, data: AdminUserUpdate) -> AdminUserRead:
        user = await self.get(user_id)
        if data.role is not None:
            if data.role not in (UserRole.USER.value, UserRole.ADMIN.value):
                raise BadRequestError("유효하지 않은 역할입니다")
            user.role = data.role
            user = await self.users.update(user)
        if data.plan is not None:
            await SubscriptionService(self.session).set_plan(user.id, data.plan)
        logger.info(f"User {user.id} updated by admin (role={data.role}, plan={data.plan})")
        return await self._admin_read(user)

    async def delete_by_admin(self, user_id: str, admin: User) -> None:
        """Delete a user together with everything they own."""
        if user_id == admin.id:
            raise BadRequestError("자기 자신은 삭제할 수 없습니다")
        user = await self.get(user_id)

        projects = ProjectService(self.session, self.storage)
        for project in await self.projects.list_for_user(user.id):
            await projects.delete(project.id, admin)

        await self.subscriptions.delete_by_user(user.id)
        await self.usage.delete_for_user(user.id)
        await PresentationLogRepository(self.session).delete_for_user(user.id)
        await PaymentLogRepository(self.session).delete_for_user(user.id)
        await CreditTransactionRepository(self.session).delete_for_user(user.id)
        await InquiryRepository(self.session).delete_for_user(user.id)
        await CouponRepository(self.session).release_for_user(user.id)
        await self.session.flush()
        await self.session.delete(user)
        await self.session.commit()
        logger.info(f"User {user_id} deleted by admin {admin.id}")
