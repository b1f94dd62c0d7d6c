"""
Unit tests for project CRUD, uploads, PDF download and presentation orders.
"""

import pytest

from corporate_advisor.core.database.entities import CreditPrice, GroupPolicy, Report
from corporate_advisor.core.database.repositories import (
    CreditTransactionRepository,
    ProjectFileRepository,
    ProjectRepository,
    ReportRepository,
)
from corporate_advisor.core.errors import BadRequestError, NotFoundError, QuotaExceededError
from corporate_advisor.core.models.io.projects import ProjectCreate, ProjectUpdate
from corporate_advisor.services.credits import CreditService
from corporate_advisor.services.policy import PolicyService
from corporate_advisor.services.projects import IncomingFile, ProjectService


def _project_data(**overrides) -> ProjectCreate:
    data = {"company_name": "테스트 주식회사", "representative": "홍길동", "industry": "제조업"}
    data.update(overrides)
    return ProjectCreate(**data)


@pytest.fixture
def service(session, storage, notifier):
    return ProjectService(session, storage, notifier)


class TestCrud:
    async def test_create_and_list(self, service, user):
        project = await service.create(user, _project_data())

        assert project.status == "pending"
        assert [p.id for p in await service.list_for_user(user)] == [project.id]

    async def test_create_blocked_by_quota(self, service, session, user):
        session.add(GroupPolicy(group_name="free", monthly_project_limit=1, monthly_presentation_limit=0))
        await session.commit()
        await PolicyService(session).increment_usage(user.id)

        with pytest.raises(QuotaExceededError) as exc_info:
            await service.create(user, _project_data())

        assert exc_info.value.status_code == 403
        assert exc_info.value.extra["limit"] == 1

    async def test_other_users_project_is_hidden(self, service, user, other_user, admin):
        project = await service.create(user, _project_data())

        with pytest.raises(NotFoundError):
            await service.get_accessible(project.id, other_user)
        assert (await service.get_accessible(project.id, admin)).id == project.id

    async def test_detail_counts_views(self, service, session, user):
        project = await service.create(user, _project_data())
        session.add(Report(project_id=project.id, initial_risk_analysis="리스크"))
        await session.commit()

        await service.detail(project.id, user)
        detail = await service.detail(project.id, user)

        assert detail.report.view_count == 2
        assert detail.report.initial_risk_analysis == "리스크"
        assert detail.files == []

    async def test_update_additional_request(self, service, user):
        project = await service.create(user, _project_data())

        updated = await service.update(project.id, user, ProjectUpdate(additional_request="수출 중심으로"))

        assert updated.additional_request == "수출 중심으로"

    async def test_delete_removes_files_and_objects(self, service, session, storage, user):
        project = await service.create(user, _project_data())
        saved = await service.upload_files(project.id, user, [IncomingFile("a.pdf", "application/pdf", b"%PDF")])
        session.add(Report(project_id=project.id))
        await session.commit()

        await service.delete(project.id, user)

        assert await ProjectRepository(session).get_by_id(project.id) is None
        assert await ProjectFileRepository(session).list_for_project(project.id) == []
        assert await ReportRepository(session).get_by_project(project.id) is None
        assert not (storage.root / saved[0].file_path).exists()


class TestUploads:
    async def test_upload_files(self, service, storage, user):
        project = await service.create(user, _project_data())

        saved = await service.upload_files(
            project.id,
            user,
            [
                IncomingFile("재무제표.pdf", "application/pdf", b"%PDF-1.4"),
                IncomingFile("notes.txt", "text/plain", b"hello"),
            ],
        )

        assert [f.filename for f in saved] == ["재무제표.pdf", "notes.txt"]
        assert saved[0].file_path.startswith(f"{user.id}/{project.id}/")
        assert saved[0].file_path.endswith(".pdf")
        assert saved[1].file_size == 5
        assert await storage.download(saved[1].file_path) == b"hello"

    async def test_upload_requires_files(self, service, user):
        project = await service.create(user, _project_data())

        with pytest.raises(BadRequestError):
            await service.upload_files(project.id, user, [])


class TestPdf:
    async def test_stored_pdf_is_returned(self, service, session, storage, user):
        project = await service.create(user, _project_data())
        url = await storage.upload(f"{user.id}/{project.id}/report.pdf", b"%PDF-stored", "application/pdf")
        session.add(Report(project_id=project.id, pdf_url=url))
        await session.commit()

        data, filename = await service.get_pdf(project.id, user)

        assert data == b"%PDF-stored"
        assert filename == "테스트 주식회사_분석리포트.pdf"

    async def test_text_report_built_from_slides(self, service, session, user):
        project = await service.create(user, _project_data())
        report = Report(project_id=project.id)
        report.set_slides([{"slide_number": 1, "title": "요약", "content": "- 성장"}])
        session.add(report)
        await session.commit()

        data, _ = await service.get_pdf(project.id, user)

        assert data.startswith(b"%PDF")

    async def test_report_without_slides_or_pdf(self, service, session, user):
        project = await service.create(user, _project_data())
        session.add(Report(project_id=project.id, text_analysis="솔루션 분석"))
        await session.commit()

        with pytest.raises(BadRequestError) as exc_info:
            await service.get_pdf(project.id, user)

        assert "슬라이드" in exc_info.value.message

    async def test_missing_report(self, service, user):
        project = await service.create(user, _project_data())

        with pytest.raises(NotFoundError):
            await service.get_pdf(project.id, user)


class TestOrderReport:
    async def test_order_pays_credits_and_notifies(self, service, session, notifier, user):
        session.add(CreditPrice(action_type="premium_presentation", credits=50))
        await session.commit()
        await CreditService(session).modify_user_credits(user.id, 120, "admin_grant")
        project = await service.create(user, _project_data())

        result = await service.order_report(project.id, user)

        assert result.credits_used == 50
        assert result.remaining_credits == 70
        notifier.notify_visual_report_order.assert_awaited_once_with(
            user.name, user.email, project.id, "테스트 주식회사", "제조업"
        )
        history = await CreditTransactionRepository(session).list_for_user(user.id)
        assert any(t.related_id == project.id and t.amount == -50 for t in history)

    async def test_default_price_when_none_configured(self, service, session, user):
        await CreditService(session).modify_user_credits(user.id, 120, "admin_grant")
        project = await service.create(user, _project_data())

        result = await service.order_report(project.id, user)

        assert result.credits_used == 50
        assert result.remaining_credits == 70

    async def test_insufficient_credits(self, service, session, notifier, user):
        session.add(CreditPrice(action_type="premium_presentation", credits=50))
        await session.commit()
        project = await service.create(user, _project_data())

        with pytest.raises(BadRequestError) as exc_info:
            await service.order_report(project.id, user)

        assert exc_info.value.message == "크레딧이 부족합니다"
        notifier.notify_visual_report_order.assert_not_awaited()

    async def test_existing_pdf_blocks_order(self, service, session, user):
        project = await service.create(user, _project_data())
        session.add(Report(project_id=project.id, pdf_url="uploads/x.pdf"))
        await session.commit()

        with pytest.raises(BadRequestError):
            await service.order_report(project.id, user)


class TestVisualReportAdmin:
    async def test_upload_and_delete(self, service, storage, user, admin):
        project = await service.create(user, _project_data())

        report = await service.upload_visual_report(
            project.id, admin, IncomingFile("deck.pdf", "application/pdf", b"%PDF-deck")
        )
        assert report.pdf_url.startswith(f"uploads/{user.id}/{project.id}/")
        assert await storage.download(storage.path_from_url(report.pdf_url)) == b"%PDF-deck"

        report = await service.delete_visual_report(project.id, admin)
        assert report.pdf_url is None

    async def test_rejects_non_pdf(self, service, user, admin):
        project = await service.create(user, _project_data())

        with pytest.raises(BadRequestError):
            await service.upload_visual_report(project.id, admin, IncomingFile("a.png", "image/png", b"png"))

    async def test_delete_without_report(self, service, user, admin):
        project = await service.create(user, _project_data())

        with pytest.raises(BadRequestError):
            await service.delete_visual_report(project.id, admin)

    async def test_recent_projects_for_admin(self, service, session, user):
        project = await service.create(user, _project_data())
        session.add(Report(project_id=project.id, pdf_url="uploads/x.pdf"))
        await session.commit()

        rows = await service.list_recent_for_admin()

        assert rows[0].user_email == "user@example.com"
        assert rows[0].has_report is True
