"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from agencyops.models.automation_rule import AutomationRule
from agencyops.models.base import Base
from agencyops.models.bonus_rule import BonusRule
from agencyops.models.client import Client, FinancialTransaction
from agencyops.models.content_publication import ContentPublication
from agencyops.models.enums import (
    ActionType,
    CalculationPeriod,
    ConditionType,
    KpiUnit,
    MetricSource,
    PayrollStatus,
    ReferralTransactionStatus,
    RewardType,
    SchemeTargetType,
    TriggerType,
)
from agencyops.models.notification import Notification
from agencyops.models.organization import Organization
from agencyops.models.payroll_record import PayrollRecord
from agencyops.models.project import Project, ProjectRenewal
from agencyops.models.promo_code import PromoCode
from agencyops.models.referral_registration import ReferralRegistration
from agencyops.models.referral_transaction import ReferralTransaction
from agencyops.models.salary_scheme import SalaryScheme
from agencyops.models.task import Task
from agencyops.models.user import User


__all__ = [
    "ActionType",
    "AutomationRule",
    "Base",
    "BonusRule",
    "CalculationPeriod",
    "Client",
    "ConditionType",
    "ContentPublication",
    "FinancialTransaction",
    "KpiUnit",
    "MetricSource",
    "Notification",
    "Organization",
    "PayrollRecord",
    "PayrollStatus",
    "Project",
    "ProjectRenewal",
    "PromoCode",
    "ReferralRegistration",
    "ReferralTransaction",
    "ReferralTransactionStatus",
    "RewardType",
    "SalaryScheme",
    "SchemeTargetType",
    "Task",
    "TriggerType",
    "User",
]
