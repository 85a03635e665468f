"""
Payroll aggregation.

Combines base salary, task KPI, content earnings and bonuses of a user
for a month. A failing bonus or content calculation counts as zero and
never fails the whole payroll.
"""

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.project import Project
from agencyops.models.salary_scheme import SalaryScheme
from agencyops.models.task import Task
from agencyops.models.user import User
from agencyops.repositories.project_repository import ProjectRepository
from agencyops.repositories.salary_scheme_repository import SalarySchemeRepository
from agencyops.repositories.task_repository import TaskRepository
from agencyops.repositories.user_repository import UserRepository
from agencyops.services.base_service import BaseService
from agencyops.services.payroll.bonus_calculator import (
    BonusCalculationDetail,
    BonusCalculator,
)
from agencyops.services.payroll.content_payroll import (
    ContentPayrollCalculator,
    ContentPayrollDetail,
)
from agencyops.services.payroll.kpi_calculator import KpiCalculator, KpiDetail
from agencyops.services.payroll.run_context import PayrollRunContext
from agencyops.services.payroll.salary_scheme_resolver import SalarySchemeResolver
from agencyops.utils.datetime_utils import parse_month


@dataclass
class UserPayrollStats:
    """Payroll of one user for one month."""

    user_id: uuid.UUID
    month: str
    base_salary: Decimal
    kpi_earned: Decimal
    bonuses_earned: Decimal
    total_earnings: Decimal
    task_kpi: Decimal = Decimal("0")
    content_earnings: Decimal = Decimal("0")
    details: list[KpiDetail] = field(default_factory=list)
    content_details: list[ContentPayrollDetail] = field(default_factory=list)
    bonus_details: list[BonusCalculationDetail] = field(default_factory=list)


class PayrollAggregator(BaseService):
    """
    Payroll aggregator.

    Usage:
        aggregator = PayrollAggregator(session)
        stats = await aggregator.calculate_user_stats(
            user, tasks, projects, schemes, "2026-03"
        )
    """

    def __init__(
        self,
        session: AsyncSession,
        bonus_calculator: BonusCalculator | None = None,
        content_calculator: ContentPayrollCalculator | None = None,
    ) -> None:
        """
        Initialize payroll aggregator.

        Args:
            session: Async database session
            bonus_calculator: Bonus collaborator
            content_calculator: Content payroll collaborator
        """
        super().__init__(session)
        self.kpi_calculator = KpiCalculator()
        self.bonus_calculator = bonus_calculator or BonusCalculator(session)
        self.content_calculator = content_calculator or ContentPayrollCalculator(session)

    async def calculate_user_stats(
        self,
        user: User,
        tasks: Iterable[Task],
        projects: Iterable[Project],
        salary_schemes: Iterable[SalaryScheme],
        month: str,
        context: PayrollRunContext | None = None,
    ) -> UserPayrollStats:
        """
        Calculate payroll of a user for a month.

        Args:
            user: Employee
            tasks: Organization tasks
            projects: Organization projects
            salary_schemes: Organization salary schemes
            month: "YYYY-MM"
            context: Run context shared across users of one run

        Returns:
            UserPayrollStats

        Raises:
            ValidationError: Invalid month
        """
        parse_month(month)
        projects = list(projects)

        scheme = SalarySchemeResolver.resolve_scheme(user, salary_schemes)
        base_salary = SalarySchemeResolver.resolve_base_salary(user, scheme)
        kpi = self.kpi_calculator.calculate(user, tasks, scheme, month)

        content_total = Decimal("0")
        content_details: list[ContentPayrollDetail] = []
        try:
            content = await self.content_calculator.calculate(
                user, projects, scheme, month, context
            )
            content_total = content.total_earnings
            content_details = content.details
        except Exception as e:
            self.logger.error(
                f"Error calculating content payroll: {e}",
                extra={"user_id": str(user.id), "month": month},
            )

        bonuses_earned = Decimal("0")
        bonus_details: list[BonusCalculationDetail] = []
        try:
            bonuses = await self.bonus_calculator.calculate_bonuses_for_user(user, month)
            bonuses_earned = bonuses.total_bonus
            bonus_details = bonuses.details
        except Exception as e:
            self.logger.error(
                f"Error calculating bonuses: {e}",
                extra={"user_id": str(user.id), "month": month},
            )

        kpi_earned = kpi.total + content_total

        return UserPayrollStats(
            user_id=user.id,
            month=month,
            base_salary=base_salary,
            kpi_earned=kpi_earned,
            bonuses_earned=bonuses_earned,
            total_earnings=base_salary + kpi_earned + bonuses_earned,
            task_kpi=kpi.total,
            content_earnings=content_total,
            details=kpi.details,
            content_details=content_details,
            bonus_details=bonus_details,
        )

    async def calculate_for_users(
        self,
        users: Iterable[User],
        tasks: Iterable[Task],
        projects: Iterable[Project],
        salary_schemes: Iterable[SalaryScheme],
        month: str,
    ) -> dict[uuid.UUID, UserPayrollStats]:
        """Calculate payroll for several users sharing one run context."""
        users = list(users)
        tasks = list(tasks)
        projects = list(projects)
        salary_schemes = list(salary_schemes)

        context = PayrollRunContext(self.session)
        context.remember(users)

        results = {}
        for user in users:
            results[user.id] = await self.calculate_user_stats(
                user, tasks, projects, salary_schemes, month, context
            )

        self.logger.info(
            "Payroll calculated",
            extra={"month": month, "users": len(results)},
        )
        return results

    async def calculate_month(
        self, organization_id: uuid.UUID, month: str
    ) -> dict[uuid.UUID, UserPayrollStats]:
        """Load an organization's data and calculate payroll for every member."""
        parse_month(month)
        users = await UserRepository(self.session).get_by_organization(organization_id)
        tasks = await TaskRepository(self.session).get_by_organization(organization_id)
        projects = await ProjectRepository(self.session).find_by(
            organization_id=organization_id
        )
        schemes = await SalarySchemeRepository(self.session).get_by_organization(
            organization_id
        )

        return await self.calculate_for_users(users, tasks, projects, schemes, month)
