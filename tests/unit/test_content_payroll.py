"""
Unit tests for content payroll.

Tests cover:
- Content type normalization and SMM role detection
- Direct assignment of publications
- Even split between SMM team members
- Content sync failures
"""

import uuid
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from agencyops.services.payroll.content_payroll import (
    ContentPayrollCalculator,
    is_smm_role,
    normalize_content_type,
)
from agencyops.services.payroll.run_context import PayrollRunContext


CONTENT_RULES = [
    {"taskType": "Post", "value": 50},
    {"taskType": "Reels Production", "value": 100},
]


def make_publication(project_id, content_type):
    """Published content item."""
    publication = MagicMock()
    publication.project_id = project_id
    publication.content_type = content_type
    return publication


@pytest.fixture
def smm_scheme(make_scheme):
    """Salary scheme of SMM specialists."""
    return make_scheme("jobTitle", "SMM", kpi_rules=CONTENT_RULES)


class TestHelpers:
    """Test normalization helpers."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("posts", "Post"),
            ("Reels", "Reels Production"),
            ("stories", "Stories "),
            ("Карусель", "Карусель"),
            ("ведение на двух языках", "Ведение на 2 языках"),
            ("ведение", "ведение"),
            ("giveaway", "giveaway"),
        ],
    )
    def test_normalize_content_type(self, key, expected):
        assert normalize_content_type(key) == expected

    def test_smm_role(self):
        assert is_smm_role("Senior SMM")
        assert is_smm_role("Контент-менеджер")
        assert not is_smm_role("Designer")
        assert not is_smm_role(None)


class TestDirectAssignment:
    """Test the direct_assignment policy."""

    @pytest.fixture
    def calculator(self, mock_session):
        calculator = ContentPayrollCalculator(mock_session, policy="direct_assignment")
        calculator.publication_repo = AsyncMock()
        return calculator

    @pytest.mark.asyncio
    async def test_publications_credited_to_assignee(
        self, calculator, make_user, make_project, smm_scheme
    ):
        user = make_user(job_title="SMM")
        project = make_project([user.id])
        calculator.publication_repo.get_by_user.return_value = [
            make_publication(project.id, "post"),
            make_publication(project.id, "posts"),
            make_publication(project.id, "reels"),
            make_publication(project.id, "giveaway"),
        ]

        result = await calculator.calculate(user, [project], smm_scheme, "2026-03")

        assert result.policy == "direct_assignment"
        assert result.total_earnings == Decimal("200.00")
        by_type = {d.content_type: d for d in result.details}
        assert by_type["Post"].quantity == Decimal("2")
        assert by_type["Post"].total == Decimal("100.00")
        assert by_type["Post"].project_name == "Coffee House"
        assert by_type["Reels Production"].share_percentage == Decimal("100")
        assert "giveaway" not in by_type

        args = calculator.publication_repo.get_by_user.await_args.args
        assert args[0] == user.id
        assert args[1].date() == date(2026, 3, 1)
        assert args[2].date() == date(2026, 3, 31)

    @pytest.mark.asyncio
    async def test_no_kpi_rules_no_content_pay(
        self, calculator, make_user, make_project, make_scheme
    ):
        user = make_user(job_title="SMM")
        scheme = make_scheme("jobTitle", "SMM", kpi_rules=[])

        result = await calculator.calculate(
            user, [make_project([user.id])], scheme, "2026-03"
        )

        assert result.total_earnings == Decimal("0")
        calculator.publication_repo.get_by_user.assert_not_awaited()


class TestTeamShare:
    """Test the team_share policy."""

    @pytest.fixture
    def calculator(self, mock_session):
        return ContentPayrollCalculator(mock_session, policy="team_share")

    @pytest.fixture
    def run_context(self, mock_session):
        context = PayrollRunContext(mock_session)
        context.user_repo = AsyncMock()
        return context

    @pytest.mark.asyncio
    async def test_facts_split_between_smm_members(
        self, calculator, run_context, make_user, make_project, smm_scheme
    ):
        """Two SMM members share 10 posts and 3 reels; the designer does not count."""
        user = make_user(job_title="SMM")
        colleague = make_user(job_title="SMM", name="Oleg")
        designer = make_user(job_title="Designer", name="Ira")
        run_context.remember([user, colleague, designer])
        project = make_project(
            [user.id, colleague.id, designer.id],
            content_metrics={"posts": {"fact": 10}, "reels": {"fact": 3}},
        )

        result = await calculator.calculate(
            user, [project], smm_scheme, "2026-03", run_context
        )

        assert result.total_earnings == Decimal("400.00")
        by_type = {d.content_type: d for d in result.details}
        assert by_type["Post"].quantity == Decimal("5.0000")
        assert by_type["Post"].total == Decimal("250.00")
        assert by_type["Reels Production"].total == Decimal("150.00")
        assert by_type["Post"].share_percentage == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_uneven_split_rounded_to_cents(
        self, calculator, run_context, make_user, make_project, smm_scheme
    ):
        team = [make_user(job_title="SMM", name=str(i)) for i in range(3)]
        run_context.remember(team)
        project = make_project(
            [member.id for member in team],
            content_metrics={"posts": {"fact": 10}},
        )

        result = await calculator.calculate(
            team[0], [project], smm_scheme, "2026-03", run_context
        )

        assert result.total_earnings == Decimal("166.67")
        assert result.details[0].share_percentage == Decimal("33.33")

    @pytest.mark.asyncio
    async def test_projects_outside_month_or_team_ignored(
        self, calculator, run_context, make_user, make_project, smm_scheme
    ):
        user = make_user(job_title="SMM")
        run_context.remember([user])
        finished = make_project(
            [user.id],
            content_metrics={"posts": {"fact": 4}},
            start_date=date(2025, 1, 1),
            end_date=date(2026, 2, 28),
        )
        foreign = make_project(
            [uuid.uuid4()], content_metrics={"posts": {"fact": 4}}
        )

        result = await calculator.calculate(
            user, [finished, foreign], smm_scheme, "2026-03", run_context
        )

        assert result.total_earnings == Decimal("0")
        assert result.details == []

    @pytest.mark.asyncio
    async def test_sync_failure_uses_stored_content(
        self, mock_session, run_context, make_user, make_project, smm_scheme
    ):
        sync = AsyncMock(side_effect=RuntimeError("instagram unavailable"))
        calculator = ContentPayrollCalculator(
            mock_session, policy="team_share", content_sync=sync
        )
        user = make_user(job_title="SMM")
        run_context.remember([user])
        project = make_project([user.id], content_metrics={"posts": {"fact": 2}})

        result = await calculator.calculate(
            user, [project], smm_scheme, "2026-03", run_context
        )

        sync.assert_awaited_once_with(project, date(2026, 3, 1), date(2026, 3, 31))
        assert result.total_earnings == Decimal("100.00")
