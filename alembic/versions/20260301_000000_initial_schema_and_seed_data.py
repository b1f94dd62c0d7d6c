"""Initial schema and seed data for Corporate AI Advisor

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables and seeds default data
for the Corporate AI Advisor service. This includes:
- Accounts, subscriptions, payment logs, coupons and credits
- Projects, uploaded files and reports
- Quota policies per user group and monthly usage
- Back-office content (pricing plans, prompts, announcements, banners, inquiries)
- Default group policies, pricing plans, credit prices, signup bonus and AI prompts

Revision format: YYYYMMDD_HHMMSS_description

"""

import json
from datetime import datetime, timezone
from typing import Sequence, Union
from uuid import uuid4

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
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
    """Create all tables and seed initial data."""

    # Create users table
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="user"),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    # Create subscriptions table
    op.create_table(
        "subscriptions",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("plan", sa.String(16), nullable=False, server_default="free"),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("current_period_start", sa.DateTime(), nullable=True),
        sa.Column("current_period_end", sa.DateTime(), nullable=True),
        sa.Column("billing_key", sa.String(255), nullable=True),
        sa.Column("customer_key", sa.String(255), nullable=True),
        sa.Column("pending_plan", sa.String(16), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_subscriptions_user_id", "subscriptions", ["user_id"], unique=True)

    # Create payment_logs table
    op.create_table(
        "payment_logs",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(8), nullable=False, server_default="KRW"),
        sa.Column("status", sa.String(16), nullable=False, server_default="completed"),
        sa.Column("method", sa.String(32), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_payment_logs_user_id", "payment_logs", ["user_id"])
    op.create_index("ix_payment_logs_status", "payment_logs", ["status"])
    op.create_index("ix_payment_logs_created_at", "payment_logs", ["created_at"])

    # Create coupons table
    op.create_table(
        "coupons",
        _id(),
        sa.Column("code", sa.String(19), nullable=False),
        sa.Column("plan", sa.String(16), nullable=False, server_default="pro"),
        sa.Column("duration_days", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("batch_id", sa.String(64), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("redeemed_by", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("redeemed_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_coupons_code", "coupons", ["code"], unique=True)
    op.create_index("ix_coupons_batch_id", "coupons", ["batch_id"])
    op.create_index("ix_coupons_redeemed_by", "coupons", ["redeemed_by"])
    op.create_index("ix_coupons_created_at", "coupons", ["created_at"])

    # Create credit tables
    op.create_table(
        "credit_prices",
        _id(),
        sa.Column("action_type", sa.String(64), nullable=False),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_credit_prices_action_type", "credit_prices", ["action_type"], unique=True)

    op.create_table(
        "credit_transactions",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("related_id", sa.String(64), nullable=True),
        sa.Column("admin_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_credit_transactions_user_id", "credit_transactions", ["user_id"])
    op.create_index("ix_credit_transactions_type", "credit_transactions", ["type"])
    op.create_index("ix_credit_transactions_created_at", "credit_transactions", ["created_at"])

    op.create_table(
        "initial_credit_policies",
        _id(),
        sa.Column("credits", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_initial_credit_policies_is_active", "initial_credit_policies", ["is_active"])

    # Create quota tables
    op.create_table(
        "group_policies",
        _id(),
        sa.Column("group_name", sa.String(16), nullable=False),
        sa.Column("monthly_project_limit", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("monthly_presentation_limit", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_group_policies_group_name", "group_policies", ["group_name"], unique=True)

    op.create_table(
        "usage_logs",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("year_month", sa.String(7), nullable=False),
        sa.Column("project_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "year_month", name="uq_usage_logs_user_month"),
    )
    op.create_index("ix_usage_logs_user_id", "usage_logs", ["user_id"])
    op.create_index("ix_usage_logs_year_month", "usage_logs", ["year_month"])

    # Create project tables
    op.create_table(
        "projects",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("business_number", sa.String(32), nullable=True),
        sa.Column("representative", sa.String(100), nullable=False),
        sa.Column("industry", sa.String(100), nullable=True),
        sa.Column("additional_request", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_projects_user_id", "projects", ["user_id"])
    op.create_index("ix_projects_status", "projects", ["status"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])

    op.create_table(
        "files",
        _id(),
        sa.Column("project_id", sa.String(64), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("filename", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(512), nullable=False),
        sa.Column("file_type", sa.String(128), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_files_project_id", "files", ["project_id"])

    op.create_table(
        "reports",
        _id(),
        sa.Column("project_id", sa.String(64), sa.ForeignKey("projects.id"), nullable=False),
        sa.Column("report_type", sa.String(16), nullable=False, server_default="analysis"),
        sa.Column("initial_risk_analysis", sa.Text(), nullable=True),
        sa.Column("text_analysis", sa.Text(), nullable=True),
        sa.Column("analysis_data", sa.Text(), nullable=True),
        sa.Column("pdf_url", sa.String(1024), nullable=True),
        sa.Column("meeting_notes", sa.Text(), nullable=True),
        sa.Column("followup_analysis", sa.Text(), nullable=True),
        sa.Column("regeneration_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_reports_project_id", "reports", ["project_id"], unique=True)
    op.create_index("ix_reports_report_type", "reports", ["report_type"])
    op.create_index("ix_reports_created_at", "reports", ["created_at"])

    # Create back-office content tables
    op.create_table(
        "pricing_plans",
        _id(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("period", sa.String(16), nullable=False, server_default="month"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("features", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("is_popular", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_pricing_plans_name", "pricing_plans", ["name"], unique=True)

    op.create_table(
        "prompts",
        _id(),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_prompts_name", "prompts", ["name"], unique=True)

    op.create_table(
        "announcements",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("start_date", sa.DateTime(), nullable=True),
        sa.Column("end_date", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "banners",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=False),
        sa.Column("link_url", sa.String(1024), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "inquiries",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("category", sa.String(32), nullable=False, server_default="general"),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("reply", sa.Text(), nullable=True),
        sa.Column("replied_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_inquiries_user_id", "inquiries", ["user_id"])
    op.create_index("ix_inquiries_status", "inquiries", ["status"])
    op.create_index("ix_inquiries_created_at", "inquiries", ["created_at"])

    _seed_data()


def _seed_data() -> None:
    """Seed default policies, plans, prices and prompts."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    group_policies = sa.table(
        "group_policies",
        sa.column("id", sa.String),
        sa.column("group_name", sa.String),
        sa.column("monthly_project_limit", sa.Integer),
        sa.column("monthly_presentation_limit", sa.Integer),
        sa.column("description", sa.Text),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        group_policies,
        [
            {
                "id": uuid4().hex,
                "group_name": name,
                "monthly_project_limit": projects,
                "monthly_presentation_limit": presentations,
                "description": description,
                "created_at": now,
                "updated_at": now,
            }
            for name, projects, presentations, description in [
                ("admin", 999999, 999999, "관리자 - 무제한"),
                ("expert", 30, 5, "Expert 플랜"),
                ("pro", 10, 1, "Pro 플랜"),
                ("free", 3, 0, "무료 플랜"),
            ]
        ],
    )

    pricing_plans = sa.table(
        "pricing_plans",
        sa.column("id", sa.String),
        sa.column("name", sa.String),
        sa.column("display_name", sa.String),
        sa.column("price", sa.Integer),
        sa.column("period", sa.String),
        sa.column("description", sa.Text),
        sa.column("features", sa.Text),
        sa.column("is_popular", sa.Boolean),
        sa.column("is_active", sa.Boolean),
        sa.column("display_order", sa.Integer),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        pricing_plans,
        [
            {
                "id": uuid4().hex,
                "name": "free",
                "display_name": "Free",
                "price": 0,
                "period": "month",
                "description": "무료로 시작하기",
                "features": json.dumps(["월 3회 분석", "PDF 다운로드", "기본 지원"], ensure_ascii=False),
                "is_popular": False,
                "is_active": True,
                "display_order": 0,
                "created_at": now,
                "updated_at": now,
            },
            {
                "id": uuid4().hex,
                "name": "standard",
                "display_name": "Standard",
                "price": 15000,
                "period": "month",
                "description": "지금 시작하기",
                "features": json.dumps(
                    ["월 30회 분석", "PDF 다운로드", "우선 지원", "프리미엄 기능"], ensure_ascii=False
                ),
                "is_popular": True,
                "is_active": True,
                "display_order": 1,
                "created_at": now,
                "updated_at": now,
            },
        ],
    )

    credit_prices = sa.table(
        "credit_prices",
        sa.column("id", sa.String),
        sa.column("action_type", sa.String),
        sa.column("credits", sa.Integer),
        sa.column("description", sa.Text),
        sa.column("is_active", sa.Boolean),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        credit_prices,
        [
            {
                "id": uuid4().hex,
                "action_type": "basic_analysis",
                "credits": 10,
                "description": "기본 분석",
                "is_active": True,
                "updated_at": now,
            },
            {
                "id": uuid4().hex,
                "action_type": "premium_presentation",
                "credits": 50,
                "description": "고급 프레젠테이션 제작",
                "is_active": True,
                "updated_at": now,
            },
        ],
    )

    initial_credit_policies = sa.table(
        "initial_credit_policies",
        sa.column("id", sa.String),
        sa.column("credits", sa.Integer),
        sa.column("description", sa.Text),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime),
    )
    op.bulk_insert(
        initial_credit_policies,
        [
            {
                "id": uuid4().hex,
                "credits": 1000,
                "description": "신규 회원 웰컴 크레딧",
                "is_active": True,
                "created_at": now,
            }
        ],
    )

    prompts = sa.table(
        "prompts",
        sa.column("id", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("content", sa.Text),
        sa.column("category", sa.String),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime),
        sa.column("updated_at", sa.DateTime),
    )
    op.bulk_insert(
        prompts,
        [
            {
                "id": uuid4().hex,
                "name": name,
                "description": description,
                "content": content,
                "category": category,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
            for name, description, category, content in DEFAULT_PROMPTS
        ],
    )


RISK_ANALYSIS_PROMPT = """당신은 기업 경영 컨설턴트입니다. 첨부된 기업 자료를 분석하여 현황과 리스크를 진단해주세요.

[회사 정보]
- 회사명: {{companyName}}
- 사업자번호: {{businessNumber}}
- 대표자: {{representative}}
{{industry}}

[첨부 자료]
{{fileList}}
{{additionalRequest}}
## 작성해야 할 섹션:

## 1. 기업 현황 요약
## 2. 재무 리스크
## 3. 운영 및 인사 리스크
## 4. 법률 및 규제 리스크
## 5. 우선 대응이 필요한 과제

마크다운 형식(##, ###, -, **)으로 구체적으로 작성해주세요."""

SOLUTION_ANALYSIS_PROMPT = """당신은 B2B 영업 컨설턴트입니다. 첨부된 기업 자료와 최신 정부 지원사업 및 시장 정보를 검색하여 솔루션 제안서와 영업 스크립트를 작성해주세요.

[회사 정보]
- 회사명: {{companyName}}
- 사업자번호: {{businessNumber}}
- 대표자: {{representative}}
{{industry}}

[첨부 자료]
{{fileList}}
{{additionalRequest}}
## 작성해야 할 섹션:

## 1. 핵심 문제 정의
## 2. 맞춤형 솔루션 제안
## 3. 활용 가능한 정부 지원사업
## 4. 기대 효과 및 ROI
## 5. 영업 스크립트

마크다운 형식(##, ###, -, **)으로 구체적으로 작성해주세요."""

PRESENTATION_PROMPT = """다음 분석 제안서를 바탕으로 {{companyName}}을(를) 위한 10장 내외의 프레젠테이션을 구성해주세요.

[분석 제안서]
{{textAnalysis}}

반드시 아래 JSON 형식으로만 응답하세요:
{"slides": [{"slide_number": 1, "title": "제목", "content": "## 소제목\\n- 핵심 내용", "speaker_notes": "발표자 노트", "chart_type": "none"}]}

chart_type은 bar, line, pie, none 중 하나입니다."""

FOLLOWUP_PROMPT = """당신은 전문 B2B 영업 컨설턴트입니다. 아래 정보를 바탕으로 후속 미팅 대응 전략을 제안해주세요.

[회사 정보]
- 회사명: {{companyName}}
- 사업자번호: {{businessNumber}}
- 대표자: {{representative}}
{{#if industry}}- 업종: {{industry}}{{/if}}

[기존 분석 제안서 내용 요약]
{{textAnalysisSummary}}

[고객 미팅 결과]
{{meetingNotes}}

## 작성해야 할 섹션:

## 1. 미팅 결과 분석
## 2. 고객 우려사항 대응 전략
## 3. 후속 액션 플랜
## 4. 제안 조정 사항
## 5. 협상 전략

마크다운 형식(##, ###, -, **)으로 실용적이고 구체적인 조언을 작성해주세요."""

DEFAULT_PROMPTS = [
    ("step1-initial-risk-analysis", "1단계: 기업 현황 및 리스크 분석", "analysis", RISK_ANALYSIS_PROMPT),
    ("step2-solution-sales-script", "2단계: 솔루션 제안 및 영업 스크립트", "analysis", SOLUTION_ANALYSIS_PROMPT),
    ("step3-presentation-generation", "3단계: 프레젠테이션 슬라이드 생성", "presentation", PRESENTATION_PROMPT),
    ("followup_analysis", "후속 미팅 분석", "followup", FOLLOWUP_PROMPT),
]


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("inquiries")
    op.drop_table("banners")
    op.drop_table("announcements")
    op.drop_table("prompts")
    op.drop_table("pricing_plans")
    op.drop_table("reports")
    op.drop_table("files")
    op.drop_table("projects")
    op.drop_table("usage_logs")
    op.drop_table("group_policies")
    op.drop_table("initial_credit_policies")
    op.drop_table("credit_transactions")
    op.drop_table("credit_prices")
    op.drop_table("coupons")
    op.drop_table("payment_logs")
    op.drop_table("subscriptions")
    op.drop_table("users")
