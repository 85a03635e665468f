"""
Salary scheme resolution.

A user-specific scheme wins over the scheme of the user's job title.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from agencyops.models.enums import KpiUnit, SchemeTargetType
from agencyops.models.salary_scheme import SalaryScheme
from agencyops.models.user import User


class SalarySchemeResolver:
    """Picks the salary scheme and base salary of a user."""

    @staticmethod
    def resolve_scheme(
        user: User, schemes: Iterable[SalaryScheme]
    ) -> SalaryScheme | None:
        """
        Get the scheme that applies to a user.

        Args:
            user: Employee
            schemes: Organization's salary schemes

        Returns:
            User scheme, else job title scheme, else None
        """
        user_scheme = None
        job_title_scheme = None

        for scheme in schemes:
            if (
                user_scheme is None
                and scheme.target_type == SchemeTargetType.USER.value
                and scheme.target_id == str(user.id)
            ):
                user_scheme = scheme
            elif (
                job_title_scheme is None
                and scheme.target_type == SchemeTargetType.JOB_TITLE.value
                and scheme.target_id == user.job_title
            ):
                job_title_scheme = scheme

        return user_scheme or job_title_scheme

    @staticmethod
    def resolve_base_salary(user: User, scheme: SalaryScheme | None) -> Decimal:
        """Scheme base salary, else the user's own salary, else 0."""
        if scheme is not None and scheme.base_salary:
            return Decimal(scheme.base_salary)
        if user.salary:
            return Decimal(user.salary)
        return Decimal("0")

    @staticmethod
    def kpi_rules(scheme: SalaryScheme | None) -> list[dict[str, Any]]:
        """KPI rules of a scheme, empty when there is no scheme."""
        if scheme is None:
            return []
        return list(scheme.kpi_rules or [])

    @staticmethod
    def find_rule(
        scheme: SalaryScheme | None, task_type: str
    ) -> dict[str, Any] | None:
        """First KPI rule of the scheme for a task type."""
        for rule in SalarySchemeResolver.kpi_rules(scheme):
            if rule.get("taskType") == task_type:
                return rule
        return None

    @staticmethod
    def rule_rate(rule: dict[str, Any]) -> Decimal:
        """Rate of a KPI rule as Decimal."""
        return Decimal(str(rule.get("value") or 0))

    @staticmethod
    def rule_unit(rule: dict[str, Any]) -> str:
        """Unit of a KPI rule, ``task`` when absent."""
        return rule.get("unit") or KpiUnit.TASK.value
