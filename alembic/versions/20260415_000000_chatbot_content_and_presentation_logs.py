"""Chatbot knowledge base, site content pages and presentation logs

Revision ID: 20260415_000000
Revises: 20260301_000000
Create Date: 2026-04-15 00:00:00.000000

Adds:
- presentation_logs, one row per generated presentation deck
- chatbot_knowledge, the consulting chatbot's sourced knowledge base
- sample_reports, service_intros and legal_documents
- Starter knowledge entries on corporate tax and business succession

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union
from uuid import uuid4

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260415_000000"
down_revision: Union[str, None] = "20260301_000000"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(64), nullable=False)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create the new tables and seed the knowledge base."""

    op.create_table(
        "presentation_logs",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("project_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_presentation_logs_user_id", "presentation_logs", ["user_id"])
    op.create_index("ix_presentation_logs_project_id", "presentation_logs", ["project_id"])
    op.create_index("ix_presentation_logs_created_at", "presentation_logs", ["created_at"])

    op.create_table(
        "chatbot_knowledge",
        _id(),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("subcategory", sa.String(255), nullable=True),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("source", sa.String(255), nullable=False),
        sa.Column("source_url", sa.String(1024), nullable=True),
        sa.Column("keywords", sa.Text(), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_updated", sa.String(32), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chatbot_knowledge_category", "chatbot_knowledge", ["category"])
    op.create_index("ix_chatbot_knowledge_is_active", "chatbot_knowledge", ["is_active"])

    op.create_table(
        "sample_reports",
        _id(),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "service_intros",
        _id(),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "legal_documents",
        _id(),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("version", sa.String(32), nullable=False, server_default="1.0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_legal_documents_type", "legal_documents", ["type"], unique=True)

    _seed_knowledge()


def _seed_knowledge() -> None:
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    knowledge = sa.table(
        "chatbot_knowledge",
        sa.column("id", sa.String),
        sa.column("category", sa.String),
        sa.column("subcategory", sa.String),
        sa.column("question", sa.Text),
        sa.column("answer", sa.Text),
        sa.column("source", sa.String),
        sa.column("source_url", sa.String),
        sa.column("keywords", sa.Text),
        sa.column("is_active", sa.Boolean),
        sa.column("last_updated", sa.String),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    entries = [
        (
            "법인세",
            "세율",
            "법인세 세율은 어떻게 되나요?",
            "2024년 기준 법인세 세율은 다음과 같습니다:\n"
            "- 과세표준 2억원 이하: 9%\n"
            "- 과세표준 2억원 초과 ~ 200억원 이하: 19%\n"
            "- 과세표준 200억원 초과 ~ 3,000억원 이하: 21%\n"
            "- 과세표준 3,000억원 초과: 24%\n\n"
            "※ 중소기업의 경우 2억원 이하 구간에 대해 특례세율 적용 가능",
            "국세청, 법인세법 제55조",
            "법인세, 세율, 과세표준, 중소기업",
        ),
        (
            "법인세",
            "신고기한",
            "법인세 신고 기한은 언제인가요?",
            "법인세 신고·납부 기한:\n"
            "- 12월 결산법인: 다음해 3월 31일까지\n"
            "- 3월 결산법인: 6월 30일까지\n"
            "- 6월 결산법인: 9월 30일까지\n"
            "- 9월 결산법인: 12월 31일까지\n\n"
            "※ 사업연도 종료일이 속하는 달의 말일부터 3개월 이내",
            "국세청, 법인세법 제60조",
            "법인세, 신고, 기한, 결산",
        ),
        (
            "법인세",
            "중간예납",
            "법인세 중간예납은 무엇인가요?",
            "법인세 중간예납:\n"
            "- 사업연도가 6개월을 초과하는 법인은 중간예납 의무가 있습니다\n"
            "- 납부기한: 사업연도 개시일부터 6개월이 되는 날로부터 2개월 이내\n"
            "- 계산방법:\n"
            "  1) 직전 사업연도 산출세액 × 6/12\n"
            "  2) 또는 당해 사업연도 6개월간 실적 기준 계산\n\n"
            "※ 중소기업은 직전 사업연도 법인세가 50만원 이하인 경우 면제",
            "국세청, 법인세법 제63조",
            "법인세, 중간예납, 납부, 중소기업",
        ),
        (
            "가업승계",
            "가업상속공제",
            "가업상속공제란 무엇인가요?",
            "가업상속공제 제도:\n"
            "- 중소기업 또는 매출액 5,000억원 미만 중견기업의 가업을 상속받는 경우 적용\n"
            "- 공제한도:\n"
            "  - 가업영위기간 10년 이상: 300억원\n"
            "  - 가업영위기간 20년 이상: 400억원\n"
            "  - 가업영위기간 30년 이상: 600억원\n\n"
            "주요 요건:\n"
            "1. 피상속인 요건: 10년 이상 계속 경영, 50% 이상 지분 보유\n"
            "2. 상속인 요건: 상속개시일 전 2년 이상 가업 종사\n"
            "3. 사후관리: 7년간 업종유지, 고용유지, 지분유지 등",
            "국세청, 상속세 및 증여세법 제18조",
            "가업승계, 상속공제, 중소기업, 중견기업, 사후관리",
        ),
    ]
    op.bulk_insert(
        knowledge,
        [
            {
                "id": uuid4().hex,
                "category": category,
                "subcategory": subcategory,
                "question": question,
                "answer": answer,
                "source": source,
                "source_url": "https://www.nts.go.kr",
                "keywords": keywords,
                "is_active": True,
                "last_updated": "2024-01-01",
                "created_at": now,
                "updated_at": now,
            }
            for category, subcategory, question, answer, source, keywords in entries
        ],
    )


def downgrade() -> None:
    """Drop the tables added by this revision."""
    op.drop_table("legal_documents")
    op.drop_table("service_intros")
    op.drop_table("sample_reports")
    op.drop_table("chatbot_knowledge")
    op.drop_table("presentation_logs")
