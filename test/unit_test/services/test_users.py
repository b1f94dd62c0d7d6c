"""
Unit tests for registration, login and user administration.
"""

import pytest

from corporate_advisor.core.database.entities import Coupon, InitialCreditPolicy, Inquiry
from corporate_advisor.core.database.repositories import (
    CouponRepository,
    CreditTransactionRepository,
    ProjectRepository,
    SubscriptionRepository,
    UserRepository,
)
from corporate_advisor.core.errors import AuthenticationError, BadRequestError, ConflictError, NotFoundError
from corporate_advisor.core.models.io.admin import AdminUserUpdate
from corporate_advisor.core.models.io.auth import RegisterRequest
from corporate_advisor.core.models.io.projects import ProjectCreate
from corporate_advisor.services.coupons import CouponService
from corporate_advisor.services.policy import PolicyService
from corporate_advisor.services.projects import IncomingFile, ProjectService
from corporate_advisor.services.users import UserService


class TestRegister:
    async def test_register_creates_free_subscription(self, session):
        user = await UserService(session).register(
            RegisterRequest(email=" New@Example.com ", password="secret123", name=" 이영희 ")
        )

        assert user.email == "new@example.com"
        assert user.name == "이영희"
        assert user.password_hash != "secret123"
        subscription = await SubscriptionRepository(session).get_by_user(user.id)
        assert subscription.plan == "free"
        assert user.credits == 0

    async def test_register_grants_signup_bonus(self, session):
        session.add(InitialCreditPolicy(credits=1000, description="신규 회원 웰컴 크레딧"))
        await session.commit()

        user = await UserService(session).register(
            RegisterRequest(email="bonus@example.com", password="secret123", name="이영희")
        )

        assert user.credits == 1000
        history = await CreditTransactionRepository(session).list_for_user(user.id)
        assert [t.type for t in history] == ["signup_bonus"]

    async def test_duplicate_email(self, session, user):
        with pytest.raises(ConflictError):
            await UserService(session).register(
                RegisterRequest(email="USER@example.com", password="secret123", name="중복")
            )


class TestAuthenticate:
    async def test_valid_credentials(self, session, user):
        assert (await UserService(session).authenticate("user@example.com", "secret123")).id == user.id

    @pytest.mark.parametrize("email, password", [("user@example.com", "wrong"), ("nobody@example.com", "secret123")])
    async def test_invalid_credentials(self, session, user, email, password):
        with pytest.raises(AuthenticationError):
            await UserService(session).authenticate(email, password)


class TestAdmin:
    async def test_list_and_search(self, session, user, other_user):
        service = UserService(session)

        assert {u.email for u in await service.list_for_admin()} == {"user@example.com", "other@example.com"}
        found = await service.list_for_admin(query="OTHER")
        assert [u.email for u in found] == ["other@example.com"]
        assert found[0].plan == "free"

    async def test_detail(self, session, user):
        await PolicyService(session).increment_usage(user.id)

        detail = await UserService(session).detail_for_admin(user.id)

        assert detail.subscription.plan == "free"
        assert sum(detail.monthly_usage.values()) == 1

    async def test_update_role_and_plan(self, session, user):
        updated = await UserService(session).update_by_admin(user.id, AdminUserUpdate(role="admin", plan="expert"))

        assert updated.role == "admin"
        assert updated.plan == "expert"

    async def test_update_rejects_unknown_role(self, session, user):
        with pytest.raises(BadRequestError):
            await UserService(session).update_by_admin(user.id, AdminUserUpdate(role="owner"))

    async def test_delete_cascades(self, session, storage, user, admin):
        project = await ProjectService(session, storage).create(
            user, ProjectCreate(company_name="테스트 주식회사", representative="홍길동")
        )
        await ProjectService(session, storage).upload_files(
            project.id, user, [IncomingFile("a.pdf", "application/pdf", b"%PDF")]
        )
        session.add(Coupon(code="ABCD-EFGH-1234-5678"))
        session.add(Inquiry(user_id=user.id, title="문의", content="내용"))
        await session.commit()
        await CouponService(session).redeem(user.id, "ABCD-EFGH-1234-5678")

        await UserService(session, storage).delete_by_admin(user.id, admin)

        assert await UserRepository(session).get_by_id(user.id) is None
        assert await ProjectRepository(session).list_for_user(user.id) == []
        assert await SubscriptionRepository(session).get_by_user(user.id) is None
        coupon = await CouponRepository(session).get_by_code("ABCD-EFGH-1234-5678")
        assert coupon.redeemed_by is None
        assert list((storage.root / user.id).rglob("*.pdf")) == []

    async def test_cannot_delete_self(self, session, admin):
        with pytest.raises(BadRequestError):
            await UserService(session).delete_by_admin(admin.id, admin)

    async def test_delete_unknown(self, session, admin):
        with pytest.raises(NotFoundError):
            await UserService(session).delete_by_admin("missing", admin)
