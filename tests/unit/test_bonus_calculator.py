"""
Unit tests for bonus calculation.

Tests cover:
- Always / threshold / tiered conditions
- Percent and fixed rewards
- Metric sources and measurement periods
- Per-rule failure isolation
"""

import uuid
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from agencyops.services.payroll.bonus_calculator import BonusCalculator


def make_rule(
    condition_type="always",
    reward_type="fixed_amount",
    reward_value=Decimal("100"),
    metric_source="manual_kpi",
    threshold_value=None,
    threshold_operator=None,
    tiered_config=None,
    calculation_period="monthly",
    apply_to_base=False,
    name="Monthly bonus",
):
    """Bonus rule object."""
    rule = MagicMock()
    rule.id = uuid.uuid4()
    rule.name = name
    rule.description = None
    rule.condition_type = condition_type
    rule.reward_type = reward_type
    rule.reward_value = reward_value
    rule.metric_source = metric_source
    rule.threshold_value = threshold_value
    rule.threshold_operator = threshold_operator
    rule.tiered_config = tiered_config
    rule.calculation_period = calculation_period
    rule.apply_to_base = apply_to_base
    return rule


@pytest.fixture
def calculator(mock_session):
    """Create BonusCalculator with mocked repositories."""
    calculator = BonusCalculator(mock_session)
    calculator.rule_repo = AsyncMock()
    calculator.task_repo = AsyncMock()
    calculator.client_repo = AsyncMock()
    calculator.finance_repo = AsyncMock()
    calculator.project_repo = AsyncMock()
    calculator.renewal_repo = AsyncMock()
    return calculator


class TestEvaluateBonusCondition:
    """Test BonusCalculator.evaluate_bonus_condition."""

    def test_always(self):
        met, value = BonusCalculator.evaluate_bonus_condition(
            make_rule(), Decimal("0")
        )

        assert met is True
        assert value == Decimal("100")

    def test_threshold_default_operator(self):
        rule = make_rule(condition_type="threshold", threshold_value=Decimal("1000"))

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("1000"))[0]
        met, value = BonusCalculator.evaluate_bonus_condition(rule, Decimal("999"))
        assert met is False
        assert value == Decimal("0")

    def test_threshold_strict_operator(self):
        rule = make_rule(
            condition_type="threshold",
            threshold_value=Decimal("10"),
            threshold_operator=">",
        )

        assert not BonusCalculator.evaluate_bonus_condition(rule, Decimal("10"))[0]
        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("11"))[0]

    def test_threshold_missing_value_is_zero(self):
        rule = make_rule(condition_type="threshold")

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("0"))[0]

    def test_unknown_threshold_operator(self):
        rule = make_rule(
            condition_type="threshold",
            threshold_value=Decimal("0"),
            threshold_operator="!=",
        )

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("5")) == (
            False,
            Decimal("0"),
        )

    def test_tiered(self):
        rule = make_rule(
            condition_type="tiered",
            tiered_config=[
                {"min": 0, "max": 50, "reward": 0},
                {"min": 50.01, "max": 80, "reward": 5},
                {"min": 80.01, "max": None, "reward": 10},
            ],
        )

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("75")) == (
            True,
            Decimal("5"),
        )
        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("95")) == (
            True,
            Decimal("10"),
        )

    def test_tiered_no_band(self):
        rule = make_rule(
            condition_type="tiered",
            tiered_config=[{"min": 10, "max": 20, "reward": 5}],
        )

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("5"))[0] is False

    def test_unknown_condition_type(self):
        rule = make_rule(condition_type="sometimes")

        assert BonusCalculator.evaluate_bonus_condition(rule, Decimal("5"))[0] is False


class TestCalculateReward:
    """Test BonusCalculator.calculate_reward."""

    def test_percent_of_base(self):
        rule = make_rule(reward_type="percent")

        reward = BonusCalculator.calculate_reward(
            rule, Decimal("12345.67"), Decimal("5")
        )

        assert reward == Decimal("617.28")

    def test_fixed_amount(self):
        reward = BonusCalculator.calculate_reward(
            make_rule(), Decimal("12345.67"), Decimal("300")
        )

        assert reward == Decimal("300")


class TestGetMetricValue:
    """Test metric measurement."""

    @pytest.mark.asyncio
    async def test_sales_revenue_monthly(self, calculator, make_user):
        user = make_user()
        client_ids = [uuid.uuid4()]
        calculator.client_repo.get_ids_by_manager.return_value = client_ids
        calculator.finance_repo.sum_verified_income.return_value = Decimal("5000")

        metric = await calculator.get_metric_value(
            make_rule(metric_source="sales_revenue"), user, "2026-03"
        )

        assert metric.value == Decimal("5000")
        assert metric.base_amount == Decimal("5000")
        args = calculator.finance_repo.sum_verified_income.await_args.args
        assert args[0] == client_ids
        assert args[1].date() == date(2026, 3, 1)
        assert args[2].date() == date(2026, 3, 31)

    @pytest.mark.asyncio
    async def test_sales_revenue_quarterly(self, calculator, make_user):
        calculator.client_repo.get_ids_by_manager.return_value = []
        calculator.finance_repo.sum_verified_income.return_value = Decimal("0")

        await calculator.get_metric_value(
            make_rule(metric_source="sales_revenue", calculation_period="quarterly"),
            make_user(),
            "2026-05",
        )

        args = calculator.finance_repo.sum_verified_income.await_args.args
        assert args[1].date() == date(2026, 4, 1)
        assert args[2].date() == date(2026, 6, 30)

    @pytest.mark.asyncio
    async def test_retention_rate(self, calculator, make_user):
        projects = [MagicMock(id=uuid.uuid4()) for _ in range(4)]
        renewals = [
            MagicMock(project_id=projects[0].id, renewed_amount=Decimal("1000")),
            MagicMock(project_id=projects[0].id, renewed_amount=Decimal("500")),
            MagicMock(project_id=projects[1].id, renewed_amount=Decimal("700")),
            MagicMock(project_id=projects[2].id, renewed_amount=Decimal("300")),
        ]
        calculator.project_repo.get_ended_for_member.return_value = projects
        calculator.renewal_repo.get_for_projects.return_value = renewals

        metric = await calculator.get_metric_value(
            make_rule(metric_source="project_retention", apply_to_base=True),
            make_user(),
            "2026-03",
        )

        assert metric.value == Decimal("75.00")
        assert metric.base_amount == Decimal("2500")

    @pytest.mark.asyncio
    async def test_retention_without_projects(self, calculator, make_user):
        calculator.project_repo.get_ended_for_member.return_value = []

        metric = await calculator.get_metric_value(
            make_rule(metric_source="project_retention"), make_user(), "2026-03"
        )

        assert metric.value == Decimal("0")
        assert metric.base_amount == Decimal("1")
        calculator.renewal_repo.get_for_projects.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tasks_completed(self, calculator, make_user):
        user = make_user()
        calculator.task_repo.count_completed.return_value = 7

        metric = await calculator.get_metric_value(
            make_rule(metric_source="tasks_completed"), user, "2026-03"
        )

        assert metric.value == Decimal("7")
        assert calculator.task_repo.count_completed.await_args.args[0] == user.id

    @pytest.mark.asyncio
    async def test_unmeasured_source_is_zero(self, calculator, make_user):
        metric = await calculator.get_metric_value(
            make_rule(metric_source="cpl_efficiency"), make_user(), "2026-03"
        )

        assert metric.value == Decimal("0")


class TestCalculateBonusesForUser:
    """Test BonusCalculator.calculate_bonuses_for_user."""

    @pytest.mark.asyncio
    async def test_user_and_job_title_rules_summed(self, calculator, make_user):
        user = make_user(job_title="Sales")
        calculator.rule_repo.get_active_by_owner.side_effect = [
            [make_rule(reward_value=Decimal("100"))],
            [
                make_rule(
                    condition_type="threshold",
                    metric_source="tasks_completed",
                    threshold_value=Decimal("10"),
                    reward_value=Decimal("50"),
                ),
                make_rule(reward_value=Decimal("25")),
            ],
        ]
        calculator.task_repo.count_completed.return_value = 3

        result = await calculator.calculate_bonuses_for_user(user, "2026-03")

        assert result.total_bonus == Decimal("125")
        assert result.period == "2026-03"
        assert [d.condition_met for d in result.details] == [True, False, True]
        assert result.details[1].metric_source == "Выполненные задачи"

        owner_calls = calculator.rule_repo.get_active_by_owner.await_args_list
        assert owner_calls[0].args == (user.organization_id, "user", str(user.id))
        assert owner_calls[1].args == (user.organization_id, "jobTitle", "Sales")

    @pytest.mark.asyncio
    async def test_failing_rule_skipped(self, calculator, make_user):
        calculator.rule_repo.get_active_by_owner.side_effect = [
            [make_rule(metric_source="sales_revenue")],
            [make_rule(reward_value=Decimal("40"))],
        ]
        calculator.client_repo.get_ids_by_manager.side_effect = RuntimeError("db")

        result = await calculator.calculate_bonuses_for_user(make_user(), "2026-03")

        assert result.total_bonus == Decimal("40")
        assert len(result.details) == 1
