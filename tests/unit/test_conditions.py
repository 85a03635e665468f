"""
Unit tests for condition evaluation.
"""

import pytest

from agencyops.services.automation.conditions import (
    evaluate_condition,
    evaluate_conditions,
)


class TestEvaluateConditions:
    """Test evaluate_conditions."""

    @pytest.mark.parametrize("config", [None, {}])
    def test_empty_config_holds(self, config):
        assert evaluate_conditions(config, {"amount": 1}) is True

    def test_greater_than(self):
        config = {"amount": {"operator": "greater_than", "value": 10}}

        assert evaluate_conditions(config, {"amount": 15}) is True
        assert evaluate_conditions(config, {"amount": 5}) is False

    def test_all_conditions_must_hold(self):
        config = {
            "amount": {"operator": "greater_than", "value": 10},
            "status": {"operator": "equals", "value": "paid"},
        }

        assert evaluate_conditions(config, {"amount": 15, "status": "paid"}) is True
        assert evaluate_conditions(config, {"amount": 15, "status": "new"}) is False

    def test_unknown_operator_never_matches(self):
        config = {"amount": {"operator": "between", "value": [1, 2]}}

        assert evaluate_conditions(config, {"amount": 1}) is False

    def test_malformed_condition_never_matches(self):
        assert evaluate_conditions({"amount": 10}, {"amount": 10}) is False

    def test_none_context(self):
        config = {"status": {"operator": "not_equals", "value": "lost"}}

        assert evaluate_conditions(config, None) is True


class TestOperators:
    """Test single operators."""

    def test_equals(self):
        condition = {"operator": "equals", "value": "vip"}

        assert evaluate_condition("segment", condition, {"segment": "vip"})
        assert not evaluate_condition("segment", condition, {"segment": "new"})

    def test_not_equals_on_missing_field(self):
        condition = {"operator": "not_equals", "value": "vip"}

        assert evaluate_condition("segment", condition, {})

    def test_less_than(self):
        condition = {"operator": "less_than", "value": 3}

        assert evaluate_condition("days_left", condition, {"days_left": 1})
        assert not evaluate_condition("days_left", condition, {"days_left": 3})

    def test_incomparable_types_do_not_match(self):
        condition = {"operator": "greater_than", "value": 10}

        assert not evaluate_condition("amount", condition, {"amount": "lots"})
        assert not evaluate_condition("amount", condition, {})

    def test_contains_uses_string_form(self):
        condition = {"operator": "contains", "value": "Coffee"}

        assert evaluate_condition("name", condition, {"name": "Coffee House"})
        assert not evaluate_condition("name", condition, {"name": "Tea Room"})

    def test_in(self):
        condition = {"operator": "in", "value": ["new", "lead"]}

        assert evaluate_condition("status", condition, {"status": "lead"})
        assert not evaluate_condition("status", condition, {"status": "lost"})

    def test_in_requires_collection(self):
        condition = {"operator": "in", "value": "lead"}

        assert not evaluate_condition("status", condition, {"status": "lead"})
