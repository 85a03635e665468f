"""
Automation services package.

- conditions: Rule condition evaluation
- templating: ``{{key}}`` substitution
- actions: Action dispatch by ActionType
- rule_engine: Trigger handling for stored rules
"""

from agencyops.services.automation.actions import (
    ActionDispatcher,
    ActionResult,
    ActionStatus,
    LoggingMessageSender,
    MessageSender,
)
from agencyops.services.automation.conditions import (
    evaluate_condition,
    evaluate_conditions,
)
from agencyops.services.automation.rule_engine import (
    AutomationRuleEngine,
    RuleExecution,
)
from agencyops.services.automation.templating import (
    replace_variables,
    replace_variables_in_object,
)


__all__ = [
    "ActionDispatcher",
    "ActionResult",
    "ActionStatus",
    "AutomationRuleEngine",
    "LoggingMessageSender",
    "MessageSender",
    "RuleExecution",
    "evaluate_condition",
    "evaluate_conditions",
    "replace_variables",
    "replace_variables_in_object",
]
