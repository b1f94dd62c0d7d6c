"""
Unit tests for the generic repository and the domain-specific queries.
"""

from datetime import datetime, timedelta

from sqlmodel import select

from corporate_advisor.core.database import utc_now
from corporate_advisor.core.database.entities import Coupon, PresentationLog, Project, Report, User
from corporate_advisor.core.database.repositories import (
    CouponRepository,
    GroupPolicyRepository,
    PresentationLogRepository,
    ProjectRepository,
    ReportRepository,
    UsageLogRepository,
    UserRepository,
)
from corporate_advisor.core.database.repositories.base import QueryBuilder


async def _owner(session, email="owner@example.com") -> User:
    return await UserRepository(session).create(User(email=email, password_hash="x", name="소유자"))


class TestSQLModelRepository:
    async def test_create_and_get(self, session):
        repo = UserRepository(session)

        user = await repo.create(User(email="a@example.com", password_hash="x", name="에이"))

        assert (await repo.get_by_id(user.id)).email == "a@example.com"
        assert await repo.get_by_id("missing") is None

    async def test_update_touches_updated_at(self, session):
        repo = UserRepository(session)
        user = await repo.create(User(email="a@example.com", password_hash="x", name="에이"))
        user.updated_at = datetime(2020, 1, 1)

        user.name = "비"
        updated = await repo.update(user)

        assert updated.name == "비"
        assert updated.updated_at > datetime(2020, 1, 1)

    async def test_delete(self, session):
        repo = UserRepository(session)
        user = await repo.create(User(email="a@example.com", password_hash="x", name="에이"))

        assert await repo.delete(user.id) is True
        assert await repo.delete(user.id) is False

    async def test_list_newest_first_with_filters_and_paging(self, session):
        owner = await _owner(session)
        repo = ProjectRepository(session)
        base = datetime(2026, 1, 1)
        for i in range(3):
            await repo.create(
                Project(user_id=owner.id, company_name=f"회사{i}", representative="대표", created_at=base + timedelta(i))
            )

        assert [p.company_name for p in await repo.list()] == ["회사2", "회사1", "회사0"]
        assert [p.company_name for p in await repo.list(limit=1, offset=1)] == ["회사1"]
        assert await repo.list(filters={"user_id": "nobody"}) == []
        assert await repo.count(filters={"user_id": owner.id}) == 3

    def test_query_builder_skips_none_and_unknown_filters(self):
        stmt = QueryBuilder.apply_filters(select(User), User, {"role": None, "unknown": "x"})

        assert "WHERE" not in str(stmt)


class TestCouponRepository:
    async def test_search_and_summaries(self, session):
        owner = await _owner(session)
        repo = CouponRepository(session)
        await repo.create(Coupon(code="AAAA-AAAA-AAAA-AAAA", batch_id="b1"))
        await repo.create(
            Coupon(code="BBBB-BBBB-BBBB-BBBB", batch_id="b1", redeemed_by=owner.id, redeemed_at=datetime(2026, 1, 2))
        )
        await repo.create(Coupon(code="CCCC-CCCC-CCCC-CCCC"))

        assert [c.code for c in await repo.search(status="used")] == ["BBBB-BBBB-BBBB-BBBB"]
        assert await repo.count_matching(status="unused") == 2
        assert await repo.count_matching(batch_id="b1") == 2
        assert await repo.all_codes() == {"AAAA-AAAA-AAAA-AAAA", "BBBB-BBBB-BBBB-BBBB", "CCCC-CCCC-CCCC-CCCC"}

        summaries = await repo.batch_summaries()
        assert len(summaries) == 1
        assert summaries[0]["total"] == 2
        assert summaries[0]["used"] == 1

    async def test_delete_unredeemed_by_ids(self, session):
        owner = await _owner(session)
        repo = CouponRepository(session)
        free = await repo.create(Coupon(code="AAAA-AAAA-AAAA-AAAA"))
        used = await repo.create(
            Coupon(code="BBBB-BBBB-BBBB-BBBB", redeemed_by=owner.id, redeemed_at=datetime(2026, 1, 2))
        )

        deleted = await repo.delete_unredeemed(coupon_ids=[free.id, used.id])

        assert deleted == 1
        assert await repo.get_by_code("BBBB-BBBB-BBBB-BBBB") is not None


class TestPolicyRepositories:
    async def test_group_policy_upsert(self, session):
        repo = GroupPolicyRepository(session)

        await repo.upsert("pro", 10, 1, "Pro 플랜")
        policy = await repo.upsert("pro", 20, 2)

        assert policy.monthly_project_limit == 20
        assert policy.description == "Pro 플랜"
        assert await repo.count() == 1

    async def test_usage_increment(self, session):
        owner = await _owner(session)
        repo = UsageLogRepository(session)

        await repo.increment(owner.id, "2026-03")
        usage = await repo.increment(owner.id, "2026-03")
        await repo.increment(owner.id, "2026-04")

        assert usage.project_count == 2
        assert len(await repo.list_for_user(owner.id)) == 2


class TestReportRepository:
    async def test_get_or_create_returns_existing_report(self, session):
        owner = await _owner(session)
        project = await ProjectRepository(session).create(
            Project(user_id=owner.id, company_name="회사", representative="대표")
        )
        repo = ReportRepository(session)

        report = await repo.get_or_create(project.id)
        await session.commit()

        assert (await repo.get_or_create(project.id)).id == report.id


class TestPresentationLogRepository:
    async def test_counts_decks_inside_window(self, session):
        owner = await _owner(session)
        other = await _owner(session, "other@example.com")
        repo = PresentationLogRepository(session)
        await repo.create(PresentationLog(user_id=owner.id, project_id="p1", created_at=datetime(2026, 3, 2)))
        await repo.create(PresentationLog(user_id=owner.id, project_id="p1", created_at=datetime(2026, 3, 20)))
        await repo.create(PresentationLog(user_id=owner.id, project_id="p2", created_at=datetime(2026, 4, 1)))
        await repo.create(PresentationLog(user_id=other.id, project_id="p3", created_at=datetime(2026, 3, 5)))

        assert await repo.count_between(owner.id, datetime(2026, 3, 1), datetime(2026, 3, 31)) == 2

    async def test_delete_for_user(self, session):
        owner = await _owner(session)
        repo = PresentationLogRepository(session)
        await repo.record(owner.id, "p1")

        await repo.delete_for_user(owner.id)
        await session.commit()

        assert await repo.count_between(owner.id, datetime(2000, 1, 1), datetime(2100, 1, 1)) == 0


class TestTimestamps:
    async def test_timestamps_are_stored_as_naive_utc(self, session):
        user = await _owner(session)

        stored = (await session.execute(select(User.created_at).where(User.id == user.id))).scalar_one()

        assert utc_now().tzinfo is None
        assert stored.tzinfo is None
        assert utc_now() - stored < timedelta(minutes=1)


class TestEntities:
    def test_report_slides_round_trip(self):
        report = Report(project_id="p1")
        report.set_slides([{"slide_number": 1, "title": "요약"}])

        assert report.get_slides() == [{"slide_number": 1, "title": "요약"}]

    def test_report_slides_tolerate_bad_data(self):
        assert Report(project_id="p1", analysis_data="not json").get_slides() == []
        assert Report(project_id="p1", analysis_data='[{"slide_number": 1}]').get_slides() == [{"slide_number": 1}]

    def test_flags(self):
        assert User(email="a", password_hash="x", name="a", role="admin").is_admin
        assert not Coupon(code="A").is_redeemed
