"""
Automation rule engine.

Runs the active rules of an organization for a trigger event.
"""

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from agencyops.models.automation_rule import AutomationRule
from agencyops.models.enums import TriggerType
from agencyops.repositories.automation_rule_repository import (
    AutomationRuleRepository,
)
from agencyops.services.automation.actions import (
    ActionDispatcher,
    ActionResult,
    MessageSender,
)
from agencyops.services.automation.conditions import evaluate_conditions
from agencyops.services.base_service import BaseService, transaction
from agencyops.utils.datetime_utils import utc_now


@dataclass
class RuleExecution:
    """Outcome of one rule for one event."""

    rule_id: uuid.UUID
    conditions_met: bool
    result: ActionResult | None = None
    error: str | None = None


class AutomationRuleEngine(BaseService):
    """
    Automation rule engine.

    Rules are independent: an error in one is logged and the next rule
    still runs.
    """

    def __init__(
        self,
        session: AsyncSession,
        message_sender: MessageSender | None = None,
    ) -> None:
        """
        Initialize rule engine.

        Args:
            session: Async database session
            message_sender: Messaging collaborator passed to dispatchers
        """
        super().__init__(session)
        self.rule_repo = AutomationRuleRepository(session)
        self.message_sender = message_sender

    async def trigger_rules(
        self,
        organization_id: uuid.UUID,
        trigger_type: str | TriggerType,
        context: dict[str, Any] | None = None,
    ) -> list[RuleExecution]:
        """
        Run every active rule listening to a trigger.

        A rule whose conditions hold executes its action and gets its
        execution counter bumped atomically.

        Args:
            organization_id: Organization the event belongs to
            trigger_type: Event kind
            context: Event data

        Returns:
            One RuleExecution per loaded rule
        """
        context = context or {}
        trigger = (
            trigger_type.value
            if isinstance(trigger_type, TriggerType)
            else trigger_type
        )
        rules = await self.rule_repo.get_active_by_trigger(organization_id, trigger)
        dispatcher = ActionDispatcher(
            self.session, organization_id, self.message_sender
        )

        executions = []
        for rule in rules:
            executions.append(await self._run_rule(rule, dispatcher, context))

        self.logger.info(
            "Automation rules triggered",
            extra={
                "organization_id": str(organization_id),
                "trigger_type": trigger,
                "rules": len(rules),
                "executed": sum(1 for e in executions if e.conditions_met and not e.error),
            },
        )
        return executions

    async def _run_rule(
        self,
        rule: AutomationRule,
        dispatcher: ActionDispatcher,
        context: dict[str, Any],
    ) -> RuleExecution:
        try:
            if not evaluate_conditions(rule.condition_config, context):
                return RuleExecution(rule_id=rule.id, conditions_met=False)

            result = await dispatcher.execute_action(
                rule.action_type, rule.action_config, context
            )
            await self.rule_repo.record_execution(rule.id, utc_now())
            await self.commit()
            return RuleExecution(rule_id=rule.id, conditions_met=True, result=result)
        except Exception as e:
            await self.rollback()
            self.logger.error(
                f"Failed to execute rule {rule.id}: {e}",
                extra={"rule_id": str(rule.id), "action_type": rule.action_type},
            )
            return RuleExecution(rule_id=rule.id, conditions_met=True, error=str(e))

    async def get_rules(self, organization_id: uuid.UUID) -> list[AutomationRule]:
        """Get all rules of an organization."""
        return await self.rule_repo.find_by(organization_id=organization_id)

    @transaction
    async def set_rule_active(
        self, organization_id: uuid.UUID, rule_id: uuid.UUID, is_active: bool
    ) -> bool:
        """
        Enable or disable a rule.

        Returns:
            True if the rule belongs to the organization
        """
        rule = await self.rule_repo.get_by_id(rule_id)
        if not rule or rule.organization_id != organization_id:
            return False

        await self.rule_repo.update(rule_id, is_active=is_active)
        return True
