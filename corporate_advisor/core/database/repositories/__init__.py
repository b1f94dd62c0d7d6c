"""
Database repository layer using SQLModel.

Each module provides async data access for the entities of one business
domain, built on the shared ``SQLModelRepository`` in ``base``.

Modules:
- base: repository interface, generic CRUD implementation and QueryBuilder
- users: user accounts
- subscriptions: subscriptions and the payment ledger
- projects: projects, files and reports
- policies: group policies, monthly usage counters and presentation logs
- coupons: coupons
- credits: credit prices, transactions and initial-credit policies
- content: pricing plans, prompts, announcements, banners, sample reports,
  the service introduction and legal documents
- knowledge: chatbot knowledge base
- inquiries: customer-service inquiries
"""

from .content import (
    AnnouncementRepository,
    BannerRepository,
    LegalDocumentRepository,
    PricingPlanRepository,
    PromptRepository,
    SampleReportRepository,
    ServiceIntroRepository,
)
from .coupons import CouponRepository
from .credits import CreditPriceRepository, CreditTransactionRepository, InitialCreditPolicyRepository
from .inquiries import InquiryRepository
from .knowledge import ChatbotKnowledgeRepository
from .policies import GroupPolicyRepository, PresentationLogRepository, UsageLogRepository
from .projects import ProjectFileRepository, ProjectRepository, ReportRepository
from .subscriptions import PaymentLogRepository, SubscriptionRepository
from .users import UserRepository

__all__ = [
    "AnnouncementRepository",
    "BannerRepository",
    "ChatbotKnowledgeRepository",
    "CouponRepository",
    "CreditPriceRepository",
    "CreditTransactionRepository",
    "GroupPolicyRepository",
    "InitialCreditPolicyRepository",
    "InquiryRepository",
    "LegalDocumentRepository",
    "PaymentLogRepository",
    "PresentationLogRepository",
    "PricingPlanRepository",
    "ProjectFileRepository",
    "ProjectRepository",
    "PromptRepository",
    "ReportRepository",
    "SampleReportRepository",
    "ServiceIntroRepository",
    "SubscriptionRepository",
    "UsageLogRepository",
    "UserRepository",
]
