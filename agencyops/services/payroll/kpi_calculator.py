"""
Task KPI calculation.

Pays completed tasks of a month at the rates of the user's salary scheme.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from agencyops.config.business_constants import TASK_STATUS_DONE
from agencyops.models.enums import KpiUnit
from agencyops.models.salary_scheme import SalaryScheme
from agencyops.models.task import Task
from agencyops.models.user import User
from agencyops.services.payroll.salary_scheme_resolver import SalarySchemeResolver
from agencyops.utils.datetime_utils import month_bounds, to_date


@dataclass
class KpiDetail:
    """Earnings for one task type."""

    task_type: str
    count: int
    quantity: Decimal
    unit: str
    rate: Decimal
    total: Decimal

    def as_payment(self) -> dict:
        """JSON-friendly form stored on payroll records."""
        return {
            "taskType": self.task_type,
            "count": self.count,
            "quantity": str(self.quantity),
            "unit": self.unit,
            "rate": str(self.rate),
            "total": str(self.total),
        }


@dataclass
class KpiResult:
    """Task KPI for one user and month."""

    total: Decimal = Decimal("0")
    details: list[KpiDetail] = field(default_factory=list)
    completed_tasks: list[Task] = field(default_factory=list)


class KpiCalculator:
    """Calculates task KPI earnings."""

    @staticmethod
    def completed_tasks(
        user: User, tasks: Iterable[Task], month: str
    ) -> list[Task]:
        """
        Tasks of a user finished inside a month.

        The completion date is completed_at, or the deadline for tasks
        closed without one.
        """
        first_day, last_day = month_bounds(month)
        completed = []

        for task in tasks:
            if task.assignee_id != user.id or task.status != TASK_STATUS_DONE:
                continue

            completion_date = to_date(task.completed_at or task.deadline)
            if completion_date is None:
                continue

            if first_day <= completion_date <= last_day:
                completed.append(task)

        return completed

    def calculate(
        self,
        user: User,
        tasks: Iterable[Task],
        scheme: SalaryScheme | None,
        month: str,
    ) -> KpiResult:
        """
        Calculate KPI earnings for a month.

        Each rule pays ``count * rate`` for the "task" unit and
        ``sum(estimated_hours) * rate`` for the "hour" unit. Task types
        without completed tasks are left out of the details.

        Args:
            user: Employee
            tasks: Candidate tasks, filtered here
            scheme: Resolved salary scheme
            month: "YYYY-MM"

        Returns:
            KpiResult
        """
        completed = self.completed_tasks(user, tasks, month)
        result = KpiResult(completed_tasks=completed)

        for rule in SalarySchemeResolver.kpi_rules(scheme):
            task_type = rule.get("taskType")
            of_type = [task for task in completed if task.type == task_type]
            if not of_type:
                continue

            unit = SalarySchemeResolver.rule_unit(rule)
            rate = SalarySchemeResolver.rule_rate(rule)
            if unit == KpiUnit.HOUR.value:
                quantity = sum(
                    (Decimal(task.estimated_hours or 0) for task in of_type),
                    Decimal("0"),
                )
            else:
                quantity = Decimal(len(of_type))

            total = quantity * rate
            result.total += total
            result.details.append(
                KpiDetail(
                    task_type=task_type,
                    count=len(of_type),
                    quantity=quantity,
                    unit=unit,
                    rate=rate,
                    total=total,
                )
            )

        return result
