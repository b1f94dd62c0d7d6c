"""
Database entity models.

Each module groups the tables of one business domain:

- users: user accounts
- subscriptions: subscription plans and the payment ledger
- projects: projects, uploaded files and AI reports
- policies: group quota policies, monthly usage counters and presentation logs
- coupons: redeemable subscription coupons
- credits: credit prices, transactions and the initial-credit policy
- content: pricing plans, AI prompts, announcements, banners, sample reports,
  the service introduction and legal documents
- knowledge: consulting chatbot knowledge base
- inquiries: customer-service inquiries
"""

from .content import Announcement, Banner, LegalDocument, PricingPlan, Prompt, SampleReport, ServiceIntro
from .coupons import Coupon
from .credits import CreditPrice, CreditTransaction, InitialCreditPolicy
from .inquiries import Inquiry
from .knowledge import ChatbotKnowledge
from .policies import GroupPolicy, PresentationLog, UsageLog
from .projects import Project, ProjectFile, Report
from .subscriptions import PaymentLog, Subscription
from .users import User

__all__ = [
    "Announcement",
    "Banner",
    "ChatbotKnowledge",
    "Coupon",
    "CreditPrice",
    "CreditTransaction",
    "GroupPolicy",
    "InitialCreditPolicy",
    "Inquiry",
    "LegalDocument",
    "PaymentLog",
    "PresentationLog",
    "PricingPlan",
    "Project",
    "ProjectFile",
    "Prompt",
    "Report",
    "SampleReport",
    "ServiceIntro",
    "Subscription",
    "UsageLog",
    "User",
]
