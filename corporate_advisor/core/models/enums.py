"""Enumerations shared by entities, schemas and services."""

from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class PlanName(str, Enum):
    FREE = "free"
    PRO = "pro"
    EXPERT = "expert"


# Ordering used by scheduled upgrades
PLAN_ORDER = {PlanName.FREE.value: 0, PlanName.PRO.value: 1, PlanName.EXPERT.value: 2}


class GroupName(str, Enum):
    FREE = "free"
    PRO = "pro"
    EXPERT = "expert"
    ADMIN = "admin"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELED = "canceled"


class ProjectStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ReportType(str, Enum):
    ANALYSIS = "analysis"
    PRESENTATION = "presentation"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class InquiryStatus(str, Enum):
    PENDING = "pending"
    ANSWERED = "answered"
    CLOSED = "closed"


class LegalDocumentType(str, Enum):
    TERMS = "terms"
    PRIVACY = "privacy"


class CreditTransactionType(str, Enum):
    SIGNUP_BONUS = "signup_bonus"
    ADMIN_GRANT = "admin_grant"
    ADMIN_DEDUCT = "admin_deduct"
    PRESENTATION_COST = "presentation_cost"


class CreditAction(str, Enum):
    BASIC_ANALYSIS = "basic_analysis"
    PREMIUM_PRESENTATION = "premium_presentation"


DEFAULT_CREDIT_PRICES = {
    CreditAction.BASIC_ANALYSIS.value: 10,
    CreditAction.PREMIUM_PRESENTATION.value: 50,
}


class PromptName(str, Enum):
    RISK_ANALYSIS = "step1-initial-risk-analysis"
    SOLUTION_ANALYSIS = "step2-solution-sales-script"
    PRESENTATION = "step3-presentation-generation"
    FOLLOWUP = "followup_analysis"
