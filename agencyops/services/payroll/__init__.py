"""
Payroll services package.

- salary_scheme_resolver: Scheme and base salary resolution
- kpi_calculator: Task KPI earnings
- content_payroll: Content publication earnings
- bonus_calculator: Rule based bonuses
- payroll_aggregator: Monthly payroll per user
- payroll_record_service: Payroll snapshots and their lifecycle
- run_context: Per-run user cache
"""

from agencyops.services.payroll.bonus_calculator import (
    BonusCalculationDetail,
    BonusCalculationResult,
    BonusCalculator,
    MetricValue,
)
from agencyops.services.payroll.content_payroll import (
    ContentPayrollCalculator,
    ContentPayrollDetail,
    ContentPayrollResult,
    ContentSyncCallback,
    is_smm_role,
    normalize_content_type,
)
from agencyops.services.payroll.kpi_calculator import (
    KpiCalculator,
    KpiDetail,
    KpiResult,
)
from agencyops.services.payroll.payroll_aggregator import (
    PayrollAggregator,
    UserPayrollStats,
)
from agencyops.services.payroll.payroll_record_service import PayrollRecordService
from agencyops.services.payroll.run_context import PayrollRunContext
from agencyops.services.payroll.salary_scheme_resolver import SalarySchemeResolver


__all__ = [
    "BonusCalculationDetail",
    "BonusCalculationResult",
    "BonusCalculator",
    "ContentPayrollCalculator",
    "ContentPayrollDetail",
    "ContentPayrollResult",
    "ContentSyncCallback",
    "KpiCalculator",
    "KpiDetail",
    "KpiResult",
    "MetricValue",
    "PayrollAggregator",
    "PayrollRecordService",
    "PayrollRunContext",
    "SalarySchemeResolver",
    "UserPayrollStats",
    "is_smm_role",
    "normalize_content_type",
]
