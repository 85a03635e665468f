"""
Content payroll calculation.

Pays SMM specialists for published content at the rates of their salary
scheme. Two attribution policies exist:

- direct_assignment: every publication is credited to its assignee
- team_share: project content facts are split evenly between the SMM
  members of the project team
"""

import uuid
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import (
    CONTENT_TYPE_LABELS,
    SMM_TITLE_MARKERS,
)
from agencyops.config.settings import settings
from agencyops.models.project import Project
from agencyops.models.salary_scheme import SalaryScheme
from agencyops.models.user import User
from agencyops.repositories.content_publication_repository import (
    ContentPublicationRepository,
)
from agencyops.services.payroll.run_context import PayrollRunContext
from agencyops.services.payroll.salary_scheme_resolver import SalarySchemeResolver
from agencyops.utils.datetime_utils import (
    month_bounds,
    month_datetime_bounds,
    to_date,
)


DIRECT_ASSIGNMENT = "direct_assignment"
TEAM_SHARE = "team_share"

CENTS = Decimal("0.01")
QUANTITY_PRECISION = Decimal("0.0001")


def normalize_content_type(metric_key: str) -> str:
    """Map a content metric key to its KPI task type, or return it unchanged."""
    key = metric_key.lower()
    for fragments, label, require_all in CONTENT_TYPE_LABELS:
        matches = (fragment in key for fragment in fragments)
        if all(matches) if require_all else any(matches):
            return label
    return metric_key


def is_smm_role(job_title: str | None) -> bool:
    """Whether a job title belongs to a content specialist."""
    title = (job_title or "").lower()
    return any(marker in title for marker in SMM_TITLE_MARKERS)


class ContentSyncCallback(Protocol):
    """Refreshes project content from an external source before payroll."""

    async def __call__(self, project: Project, start: date, end: date) -> None:
        ...


@dataclass
class ContentPayrollDetail:
    """Earnings for one content type on one project."""

    project_id: uuid.UUID
    project_name: str | None
    content_type: str
    quantity: Decimal
    rate: Decimal
    total: Decimal
    share_percentage: Decimal


@dataclass
class ContentPayrollResult:
    """Content earnings of one user for a month."""

    total_earnings: Decimal = Decimal("0")
    details: list[ContentPayrollDetail] = field(default_factory=list)
    policy: str = DIRECT_ASSIGNMENT


def _overlaps_month(project: Project, first_day: date, last_day: date) -> bool:
    start = to_date(project.start_date)
    end = to_date(project.end_date)
    if start is None or end is None:
        return False
    return start <= last_day and end >= first_day


class ContentPayrollCalculator:
    """
    Content payroll calculator.

    Usage:
        calculator = ContentPayrollCalculator(session)
        result = await calculator.calculate(user, projects, scheme, "2026-03")
    """

    def __init__(
        self,
        session: AsyncSession,
        policy: str | None = None,
        content_sync: ContentSyncCallback | None = None,
    ) -> None:
        """
        Initialize content payroll calculator.

        Args:
            session: Async database session
            policy: Attribution policy, settings.content_payroll_policy by default
            content_sync: Optional collaborator refreshing project content
        """
        self.session = session
        self.policy = policy or settings.content_payroll_policy
        self.content_sync = content_sync
        self.publication_repo = ContentPublicationRepository(session)

    async def calculate(
        self,
        user: User,
        projects: Iterable[Project],
        scheme: SalaryScheme | None,
        month: str,
        context: PayrollRunContext | None = None,
    ) -> ContentPayrollResult:
        """
        Calculate content earnings of a user for a month.

        Args:
            user: Employee
            projects: Organization projects
            scheme: Resolved salary scheme
            month: "YYYY-MM"
            context: Run context holding the user cache

        Returns:
            ContentPayrollResult, empty without a scheme or KPI rules
        """
        if not SalarySchemeResolver.kpi_rules(scheme):
            logger.debug(
                "Content payroll skipped: no KPI rules",
                extra={"user_id": str(user.id), "month": month},
            )
            return ContentPayrollResult(policy=self.policy)

        first_day, last_day = month_bounds(month)
        member_projects = [
            project
            for project in projects
            if user.id in (project.team_ids or [])
            and _overlaps_month(project, first_day, last_day)
        ]

        await self._sync_content(member_projects, first_day, last_day)

        if self.policy == TEAM_SHARE:
            result = await self._team_share(
                user, member_projects, scheme, context or PayrollRunContext(self.session)
            )
        else:
            result = await self._direct_assignment(user, projects, scheme, month)

        logger.debug(
            "Content payroll calculated",
            extra={
                "user_id": str(user.id),
                "month": month,
                "policy": self.policy,
                "total": str(result.total_earnings),
            },
        )
        return result

    async def _sync_content(
        self, projects: list[Project], first_day: date, last_day: date
    ) -> None:
        if self.content_sync is None:
            return

        for project in projects:
            try:
                await self.content_sync(project, first_day, last_day)
            except Exception as e:
                logger.warning(
                    f"Content sync failed, using stored content: {e}",
                    extra={"project_id": str(project.id)},
                )

    async def _direct_assignment(
        self,
        user: User,
        projects: Iterable[Project],
        scheme: SalaryScheme | None,
        month: str,
    ) -> ContentPayrollResult:
        start, end = month_datetime_bounds(month)
        publications = await self.publication_repo.get_by_user(user.id, start, end)
        project_names = {project.id: project.name for project in projects}

        counts: dict[tuple[uuid.UUID, str], int] = defaultdict(int)
        for publication in publications:
            content_type = normalize_content_type(publication.content_type)
            counts[(publication.project_id, content_type)] += 1

        result = ContentPayrollResult(policy=DIRECT_ASSIGNMENT)
        for (project_id, content_type), count in counts.items():
            rule = SalarySchemeResolver.find_rule(scheme, content_type)
            if rule is None:
                continue

            rate = SalarySchemeResolver.rule_rate(rule)
            total = (Decimal(count) * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
            result.details.append(
                ContentPayrollDetail(
                    project_id=project_id,
                    project_name=project_names.get(project_id),
                    content_type=content_type,
                    quantity=Decimal(count),
                    rate=rate,
                    total=total,
                    share_percentage=Decimal("100"),
                )
            )
            result.total_earnings += total

        return result

    async def _team_share(
        self,
        user: User,
        projects: list[Project],
        scheme: SalaryScheme | None,
        context: PayrollRunContext,
    ) -> ContentPayrollResult:
        result = ContentPayrollResult(policy=TEAM_SHARE)

        for project in projects:
            if not project.content_metrics:
                continue

            team = await context.get_users(project.team_ids or [])
            smm_ids = [member.id for member in team if is_smm_role(member.job_title)]
            if user.id not in smm_ids:
                continue

            share = Decimal(1) / Decimal(len(smm_ids))

            for metric_key, metric in project.content_metrics.items():
                fact = Decimal(str((metric or {}).get("fact") or 0))
                if fact == 0:
                    continue

                content_type = normalize_content_type(metric_key)
                rule = SalarySchemeResolver.find_rule(scheme, content_type)
                if rule is None:
                    continue

                rate = SalarySchemeResolver.rule_rate(rule)
                quantity = fact * share
                total = (quantity * rate).quantize(CENTS, rounding=ROUND_HALF_UP)
                result.details.append(
                    ContentPayrollDetail(
                        project_id=project.id,
                        project_name=project.name,
                        content_type=content_type,
                        quantity=quantity.quantize(QUANTITY_PRECISION),
                        rate=rate,
                        total=total,
                        share_percentage=(share * 100).quantize(CENTS),
                    )
                )
                result.total_earnings += total

        return result
