"""
Bonus calculation.

Evaluates the active bonus rules of a user and of the user's job title
against metrics measured for the month (or its quarter).
"""

import uuid
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.config.business_constants import BONUS_METRIC_LABELS
from agencyops.models.bonus_rule import BonusRule
from agencyops.models.enums import (
    CalculationPeriod,
    ConditionType,
    MetricSource,
    RewardType,
    SchemeTargetType,
)
from agencyops.models.user import User
from agencyops.repositories.bonus_rule_repository import BonusRuleRepository
from agencyops.repositories.client_repository import (
    ClientRepository,
    FinancialTransactionRepository,
)
from agencyops.repositories.project_repository import (
    ProjectRenewalRepository,
    ProjectRepository,
)
from agencyops.repositories.task_repository import TaskRepository
from agencyops.utils.datetime_utils import month_datetime_bounds, period_bounds


CENTS = Decimal("0.01")

THRESHOLD_OPERATORS = {
    ">=": lambda value, threshold: value >= threshold,
    "<=": lambda value, threshold: value <= threshold,
    ">": lambda value, threshold: value > threshold,
    "<": lambda value, threshold: value < threshold,
    "=": lambda value, threshold: value == threshold,
}


def _decimal(value: object) -> Decimal:
    return Decimal(str(value if value is not None else 0))


@dataclass
class MetricValue:
    """Measured metric and the base a percent reward applies to."""

    value: Decimal
    base_amount: Decimal


@dataclass
class BonusCalculationDetail:
    """Outcome of one bonus rule."""

    rule_id: uuid.UUID
    rule_name: str
    metric_source: str
    base_value: Decimal
    condition_met: bool
    reward_amount: Decimal
    description: str


@dataclass
class BonusCalculationResult:
    """Bonuses of one user for a month."""

    total_bonus: Decimal = Decimal("0")
    details: list[BonusCalculationDetail] = field(default_factory=list)
    period: str = ""


class BonusCalculator:
    """
    Bonus rule calculator.

    Rule evaluation is pure (evaluate_bonus_condition, calculate_reward);
    metrics are read from the database.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize bonus calculator."""
        self.session = session
        self.rule_repo = BonusRuleRepository(session)
        self.task_repo = TaskRepository(session)
        self.client_repo = ClientRepository(session)
        self.finance_repo = FinancialTransactionRepository(session)
        self.project_repo = ProjectRepository(session)
        self.renewal_repo = ProjectRenewalRepository(session)

    @staticmethod
    def evaluate_bonus_condition(
        rule: BonusRule, metric_value: Decimal
    ) -> tuple[bool, Decimal]:
        """
        Decide whether a rule pays for a metric value.

        Args:
            rule: Bonus rule
            metric_value: Measured metric

        Returns:
            Tuple of (condition_met, reward_value)
        """
        value = _decimal(metric_value)

        if rule.condition_type == ConditionType.ALWAYS.value:
            return True, _decimal(rule.reward_value)

        if rule.condition_type == ConditionType.THRESHOLD.value:
            threshold = _decimal(rule.threshold_value)
            operator = rule.threshold_operator or ">="
            compare = THRESHOLD_OPERATORS.get(operator)
            if compare is None:
                logger.warning(
                    f"Unknown threshold operator: {operator}",
                    extra={"rule_id": str(rule.id)},
                )
                return False, Decimal("0")

            met = compare(value, threshold)
            return met, _decimal(rule.reward_value) if met else Decimal("0")

        if rule.condition_type == ConditionType.TIERED.value:
            for tier in rule.tiered_config or []:
                lower = _decimal(tier.get("min"))
                upper = tier.get("max")
                if value >= lower and (upper is None or value <= _decimal(upper)):
                    return True, _decimal(tier.get("reward"))
            return False, Decimal("0")

        logger.warning(
            f"Unknown bonus condition type: {rule.condition_type}",
            extra={"rule_id": str(rule.id)},
        )
        return False, Decimal("0")

    @staticmethod
    def calculate_reward(
        rule: BonusRule, base_amount: Decimal, reward_value: Decimal
    ) -> Decimal:
        """Percent of the base for percent rewards, the value itself otherwise."""
        if rule.reward_type == RewardType.PERCENT.value:
            return (_decimal(base_amount) * _decimal(reward_value) / 100).quantize(
                CENTS, rounding=ROUND_HALF_UP
            )
        return _decimal(reward_value)

    async def get_rules_for_user(self, user: User) -> list[BonusRule]:
        """Active rules owned by the user, then by the user's job title."""
        user_rules = await self.rule_repo.get_active_by_owner(
            user.organization_id, SchemeTargetType.USER.value, str(user.id)
        )
        job_title_rules = await self.rule_repo.get_active_by_owner(
            user.organization_id, SchemeTargetType.JOB_TITLE.value, user.job_title
        )
        return [*user_rules, *job_title_rules]

    async def get_metric_value(
        self, rule: BonusRule, user: User, month: str
    ) -> MetricValue:
        """
        Measure the metric a rule is based on.

        Sales and retention are measured over the month for monthly rules
        and over the calendar quarter otherwise. Sources without a
        measurement yield 0.
        """
        period = (
            CalculationPeriod.MONTHLY.value
            if rule.calculation_period == CalculationPeriod.MONTHLY.value
            else CalculationPeriod.QUARTERLY.value
        )

        if rule.metric_source == MetricSource.SALES_REVENUE.value:
            start, end = period_bounds(month, period)
            client_ids = await self.client_repo.get_ids_by_manager(
                user.organization_id, user.id
            )
            revenue = await self.finance_repo.sum_verified_income(
                client_ids, start, end
            )
            return MetricValue(value=revenue, base_amount=revenue)

        if rule.metric_source == MetricSource.PROJECT_RETENTION.value:
            return await self._retention(rule, user, month, period)

        if rule.metric_source == MetricSource.TASKS_COMPLETED.value:
            start, end = month_datetime_bounds(month)
            completed = Decimal(
                await self.task_repo.count_completed(user.id, start, end)
            )
            return MetricValue(value=completed, base_amount=completed)

        return MetricValue(value=Decimal("0"), base_amount=Decimal("0"))

    async def _retention(
        self, rule: BonusRule, user: User, month: str, period: str
    ) -> MetricValue:
        start, end = period_bounds(month, period)
        projects = await self.project_repo.get_ended_for_member(
            user.organization_id, user.id, start.date(), end.date()
        )
        if not projects:
            return MetricValue(
                value=Decimal("0"),
                base_amount=Decimal("0") if rule.apply_to_base else Decimal("1"),
            )

        renewals = await self.renewal_repo.get_for_projects(
            [project.id for project in projects], start, end
        )
        renewed = {renewal.project_id for renewal in renewals}
        rate = (Decimal(len(renewed)) / Decimal(len(projects)) * 100).quantize(
            CENTS, rounding=ROUND_HALF_UP
        )
        revenue = sum(
            (_decimal(renewal.renewed_amount) for renewal in renewals), Decimal("0")
        )

        return MetricValue(
            value=rate,
            base_amount=revenue if rule.apply_to_base else Decimal("1"),
        )

    async def calculate_bonuses_for_user(
        self, user: User, month: str
    ) -> BonusCalculationResult:
        """
        Calculate all bonuses of a user for a month.

        A rule that fails is logged and left out; the other rules still
        count.

        Args:
            user: Employee
            month: "YYYY-MM"

        Returns:
            BonusCalculationResult
        """
        result = BonusCalculationResult(period=month)

        for rule in await self.get_rules_for_user(user):
            try:
                metric = await self.get_metric_value(rule, user, month)
                met, reward_value = self.evaluate_bonus_condition(rule, metric.value)
                reward = (
                    self.calculate_reward(rule, metric.base_amount, reward_value)
                    if met
                    else Decimal("0")
                )
            except Exception as e:
                logger.error(
                    f"Error calculating bonus for rule {rule.id}: {e}",
                    extra={"rule_id": str(rule.id), "user_id": str(user.id)},
                )
                continue

            result.details.append(
                BonusCalculationDetail(
                    rule_id=rule.id,
                    rule_name=rule.name,
                    metric_source=BONUS_METRIC_LABELS.get(
                        rule.metric_source, rule.metric_source
                    ),
                    base_value=metric.value,
                    condition_met=met,
                    reward_amount=reward,
                    description=rule.description or "",
                )
            )
            if met:
                result.total_bonus += reward

        return result
