"""
Services.

Business logic layer.
"""

from agencyops.services.automation import (
    ActionDispatcher,
    ActionResult,
    AutomationRuleEngine,
    evaluate_conditions,
    replace_variables,
    replace_variables_in_object,
)
from agencyops.services.base_service import BaseService, transaction
from agencyops.services.notification import NotificationService
from agencyops.services.payroll import (
    BonusCalculator,
    ContentPayrollCalculator,
    KpiCalculator,
    PayrollAggregator,
    PayrollRecordService,
    PayrollRunContext,
    SalarySchemeResolver,
)
from agencyops.services.referral import (
    AffiliateStatisticsManager,
    PromoCodeManager,
    ReferralChainManager,
    ReferralEarningsManager,
    get_reward_tier,
)


__all__ = [
    # Base Service Infrastructure
    "BaseService",
    "transaction",
    # Referral
    "AffiliateStatisticsManager",
    "PromoCodeManager",
    "ReferralChainManager",
    "ReferralEarningsManager",
    "get_reward_tier",
    # Automation
    "ActionDispatcher",
    "ActionResult",
    "AutomationRuleEngine",
    "evaluate_conditions",
    "replace_variables",
    "replace_variables_in_object",
    # Payroll
    "BonusCalculator",
    "ContentPayrollCalculator",
    "KpiCalculator",
    "PayrollAggregator",
    "PayrollRecordService",
    "PayrollRunContext",
    "SalarySchemeResolver",
    # Notifications
    "NotificationService",
]
