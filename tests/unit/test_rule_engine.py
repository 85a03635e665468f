"""
Unit tests for the automation rule engine.

Tests cover:
- Conditions gating execution
- Execution bookkeeping
- Failure isolation between rules
- Enabling/disabling rules
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from agencyops.services.automation.actions import ActionResult, ActionStatus
from agencyops.services.automation.rule_engine import AutomationRuleEngine


DISPATCHER = "agencyops.services.automation.rule_engine.ActionDispatcher"


@pytest.fixture
def engine(mock_session):
    """Create AutomationRuleEngine with mocked repository."""
    engine = AutomationRuleEngine(mock_session)
    engine.rule_repo = AsyncMock()
    return engine


@pytest.fixture
def dispatcher():
    """Dispatcher returned by the patched ActionDispatcher class."""
    dispatcher = MagicMock()
    dispatcher.execute_action = AsyncMock(
        return_value=ActionResult("create_task", ActionStatus.EXECUTED)
    )
    return dispatcher


def make_rule(condition_config=None, action_type="create_task"):
    """Automation rule object."""
    rule = MagicMock()
    rule.id = uuid.uuid4()
    rule.condition_config = condition_config or {}
    rule.action_type = action_type
    rule.action_config = {"title": "Call {{client_name}}"}
    return rule


class TestTriggerRules:
    """Test AutomationRuleEngine.trigger_rules."""

    @pytest.mark.asyncio
    async def test_matching_rule_executes_and_is_recorded(
        self, engine, dispatcher, organization_id, mock_session
    ):
        rule = make_rule({"amount": {"operator": "greater_than", "value": 10}})
        engine.rule_repo.get_active_by_trigger.return_value = [rule]
        context = {"amount": 15, "client_name": "Ivan"}

        with patch(DISPATCHER, return_value=dispatcher):
            executions = await engine.trigger_rules(
                organization_id, "payment_received", context
            )

        assert len(executions) == 1
        assert executions[0].conditions_met is True
        assert executions[0].result.executed
        dispatcher.execute_action.assert_awaited_once_with(
            "create_task", rule.action_config, context
        )
        engine.rule_repo.record_execution.assert_awaited_once()
        assert engine.rule_repo.record_execution.await_args.args[0] == rule.id
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unmet_conditions_skip_rule(
        self, engine, dispatcher, organization_id
    ):
        rule = make_rule({"amount": {"operator": "greater_than", "value": 10}})
        engine.rule_repo.get_active_by_trigger.return_value = [rule]

        with patch(DISPATCHER, return_value=dispatcher):
            executions = await engine.trigger_rules(
                organization_id, "payment_received", {"amount": 5}
            )

        assert executions[0].conditions_met is False
        dispatcher.execute_action.assert_not_awaited()
        engine.rule_repo.record_execution.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failing_rule_does_not_stop_others(
        self, engine, dispatcher, organization_id, mock_session
    ):
        failing, healthy = make_rule(), make_rule()
        engine.rule_repo.get_active_by_trigger.return_value = [failing, healthy]
        dispatcher.execute_action.side_effect = [
            RuntimeError("boom"),
            ActionResult("create_task", ActionStatus.EXECUTED),
        ]

        with patch(DISPATCHER, return_value=dispatcher):
            executions = await engine.trigger_rules(
                organization_id, "client_created", {}
            )

        assert executions[0].error == "boom"
        assert executions[1].error is None
        assert executions[1].result.executed
        mock_session.rollback.assert_awaited_once()
        engine.rule_repo.record_execution.assert_awaited_once()
        assert engine.rule_repo.record_execution.await_args.args[0] == healthy.id

    @pytest.mark.asyncio
    async def test_rules_loaded_for_organization_and_trigger(
        self, engine, dispatcher, organization_id
    ):
        engine.rule_repo.get_active_by_trigger.return_value = []

        with patch(DISPATCHER, return_value=dispatcher) as dispatcher_cls:
            executions = await engine.trigger_rules(organization_id, "task_completed")

        assert executions == []
        engine.rule_repo.get_active_by_trigger.assert_awaited_once_with(
            organization_id, "task_completed"
        )
        assert dispatcher_cls.call_args.args[1] == organization_id


class TestSetRuleActive:
    """Test AutomationRuleEngine.set_rule_active."""

    @pytest.mark.asyncio
    async def test_toggle_own_rule(self, engine, organization_id, mock_session):
        rule = make_rule()
        rule.organization_id = organization_id
        engine.rule_repo.get_by_id.return_value = rule

        assert await engine.set_rule_active(organization_id, rule.id, False) is True
        engine.rule_repo.update.assert_awaited_once_with(rule.id, is_active=False)
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_foreign_rule_rejected(self, engine, organization_id):
        rule = make_rule()
        rule.organization_id = uuid.uuid4()
        engine.rule_repo.get_by_id.return_value = rule

        assert await engine.set_rule_active(organization_id, rule.id, True) is False
        engine.rule_repo.update.assert_not_awaited()
