"""
Unit tests for group resolution, billing periods and quota checks.
"""

from datetime import datetime, timedelta

from corporate_advisor.core.database.entities import GroupPolicy, PresentationLog, Project, Report, Subscription, User
from corporate_advisor.core.database.repositories import SubscriptionRepository
from corporate_advisor.services.policy import (
    DEFAULT_LIMITS,
    PolicyService,
    calendar_month,
    get_billing_period,
    get_user_group,
)

NOW = datetime(2026, 2, 14, 12, 0, 0)


def _user(role: str = "user") -> User:
    return User(email="a@b.c", password_hash="x", name="테스트", role=role)


class TestGetUserGroup:
    def test_admin_role_wins(self):
        assert get_user_group(_user("admin"), Subscription(user_id="u", plan="expert")) == "admin"

    def test_active_paid_plan(self):
        assert get_user_group(_user(), Subscription(user_id="u", plan="pro", status="active")) == "pro"

    def test_inactive_paid_plan_is_free(self):
        assert get_user_group(_user(), Subscription(user_id="u", plan="expert", status="canceled")) == "free"

    def test_no_subscription_is_free(self):
        assert get_user_group(_user(), None) == "free"

    def test_ended_period_without_billing_key_is_free(self):
        subscription = Subscription(
            user_id="u", plan="pro", status="active", current_period_end=NOW - timedelta(days=30)
        )
        assert get_user_group(_user(), subscription, NOW) == "free"

    def test_ended_period_with_billing_key_keeps_plan(self):
        subscription = Subscription(
            user_id="u",
            plan="expert",
            status="active",
            billing_key="bk_1",
            current_period_end=NOW - timedelta(days=1),
        )
        assert get_user_group(_user(), subscription, NOW) == "expert"


class TestBillingPeriod:
    def test_calendar_month_bounds(self):
        start, end = calendar_month(NOW)
        assert start == datetime(2026, 2, 1)
        assert end == datetime(2026, 2, 28, 23, 59, 59, 999999)

    def test_paid_group_inside_subscription_period(self):
        subscription = Subscription(
            user_id="u", plan="pro", current_period_start=datetime(2026, 1, 20), current_period_end=datetime(2026, 2, 20)
        )
        period = get_billing_period("pro", subscription, NOW)
        assert period.from_subscription
        assert period.start == datetime(2026, 1, 20)

    def test_paid_group_outside_period_uses_calendar_month(self):
        subscription = Subscription(
            user_id="u", plan="pro", current_period_start=datetime(2025, 12, 1), current_period_end=datetime(2026, 1, 1)
        )
        period = get_billing_period("pro", subscription, NOW)
        assert not period.from_subscription
        assert period.year_month == "2026-02"

    def test_free_group_ignores_subscription_period(self):
        subscription = Subscription(
            user_id="u", plan="free", current_period_start=datetime(2026, 1, 20), current_period_end=datetime(2026, 2, 20)
        )
        assert not get_billing_period("free", subscription, NOW).from_subscription


class TestPolicyService:
    async def test_default_limits_when_no_policy(self, session):
        assert await PolicyService(session).get_limits("pro") == DEFAULT_LIMITS["pro"]

    async def test_stored_policy_overrides_default(self, session):
        session.add(GroupPolicy(group_name="free", monthly_project_limit=7, monthly_presentation_limit=2))
        await session.commit()
        assert await PolicyService(session).get_limits("free") == (7, 2)

    async def test_free_project_quota_counts_usage_log(self, session, user):
        policy = PolicyService(session)
        for _ in range(3):
            await policy.increment_usage(user.id, now=NOW)

        check = await policy.check_project_creation(user.id, now=NOW)

        assert not check.allowed
        assert check.current_usage == 3
        assert check.limit == 3
        assert "3개" in check.reason

    async def test_usage_of_other_month_is_ignored(self, session, user):
        policy = PolicyService(session)
        await policy.increment_usage(user.id, now=NOW - timedelta(days=40))
        check = await policy.check_project_creation(user.id, now=NOW)
        assert check.allowed
        assert check.current_usage == 0

    async def test_paid_quota_counts_projects_in_subscription_period(self, session, user):
        subscription = await SubscriptionRepository(session).get_by_user(user.id)
        subscription.plan = "pro"
        subscription.current_period_start = NOW - timedelta(days=5)
        subscription.current_period_end = NOW + timedelta(days=25)
        session.add(subscription)
        session.add(Project(user_id=user.id, company_name="A", representative="R", created_at=NOW - timedelta(days=1)))
        session.add(Project(user_id=user.id, company_name="B", representative="R", created_at=NOW - timedelta(days=9)))
        await session.commit()

        check = await PolicyService(session).check_project_creation(user.id, now=NOW)

        assert check.group_name == "pro"
        assert check.current_usage == 1
        assert check.limit == 10
        assert check.allowed

    async def test_free_users_cannot_create_presentations(self, session, user):
        check = await PolicyService(session).check_presentation_creation(user.id, now=NOW)
        assert not check.allowed
        assert check.limit == 0

    async def test_presentation_usage_counts_generated_decks(self, session, user):
        session.add(GroupPolicy(group_name="free", monthly_project_limit=3, monthly_presentation_limit=1))
        session.add(PresentationLog(user_id=user.id, project_id="p1", created_at=NOW - timedelta(days=1)))
        await session.commit()

        check = await PolicyService(session).check_presentation_creation(user.id, now=NOW)

        assert check.current_usage == 1
        assert not check.allowed

    async def test_deck_of_an_old_project_counts_in_the_current_month(self, session, user):
        session.add(GroupPolicy(group_name="free", monthly_project_limit=3, monthly_presentation_limit=1))
        project = Project(user_id=user.id, company_name="A", representative="R", created_at=NOW - timedelta(days=90))
        session.add(project)
        await session.flush()
        session.add(Report(project_id=project.id, created_at=NOW - timedelta(days=90)))
        await session.commit()
        policy = PolicyService(session)

        await policy.record_presentation(user.id, project.id)

        check = await policy.check_presentation_creation(user.id)
        assert check.current_usage == 1
        assert not check.allowed

    async def test_regenerated_decks_count_each_time(self, session, user):
        session.add(GroupPolicy(group_name="free", monthly_project_limit=3, monthly_presentation_limit=5))
        await session.commit()
        policy = PolicyService(session)

        await policy.record_presentation(user.id, "p1")
        await policy.record_presentation(user.id, "p1")

        info = await policy.get_user_policy_info(user.id)
        assert info.current_presentation_usage == 2
        assert info.remaining_presentation == 3

    async def test_user_policy_info(self, session, user):
        policy = PolicyService(session)
        await policy.increment_usage(user.id, now=NOW)

        info = await policy.get_user_policy_info(user.id, now=NOW)

        assert info.group_name == "free"
        assert info.monthly_limit == 3
        assert info.current_usage == 1
        assert info.remaining == 2
        assert info.remaining_presentation == 0
        assert info.period_start == datetime(2026, 2, 1)

    async def test_admin_has_admin_limits(self, session, admin):
        info = await PolicyService(session).get_user_policy_info(admin.id, now=NOW)
        assert info.group_name == "admin"
        assert info.monthly_limit == 999999

    async def test_first_analysis_is_refused_once_the_month_is_used_up(self, session, user):
        policy = PolicyService(session)
        for _ in range(3):
            assert (await policy.check_first_analysis(user.id, now=NOW)).allowed
            await policy.increment_usage(user.id, now=NOW)

        check = await policy.check_first_analysis(user.id, now=NOW)

        assert not check.allowed
        assert check.current_usage == 3

    async def test_first_analysis_inside_subscription_period_is_allowed(self, session, user):
        subscription = await SubscriptionRepository(session).get_by_user(user.id)
        subscription.plan = "pro"
        subscription.current_period_start = NOW - timedelta(days=5)
        subscription.current_period_end = NOW + timedelta(days=25)
        session.add(subscription)
        for name in "ABC":
            session.add(Project(user_id=user.id, company_name=name, representative="R", created_at=NOW))
        await session.commit()

        check = await PolicyService(session).check_first_analysis(user.id, now=NOW)

        assert check.allowed
        assert check.current_usage == 3

    async def test_lapsed_coupon_plan_gets_free_limits(self, session, user):
        subscription = await SubscriptionRepository(session).get_by_user(user.id)
        subscription.plan = "pro"
        subscription.status = "active"
        subscription.current_period_start = NOW - timedelta(days=60)
        subscription.current_period_end = NOW - timedelta(days=30)
        session.add(subscription)
        await session.commit()

        info = await PolicyService(session).get_user_policy_info(user.id, now=NOW)

        assert info.group_name == "free"
        assert info.monthly_limit == 3
