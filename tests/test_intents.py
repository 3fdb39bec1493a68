"""
Tests for the DORA intent classifier.
"""

import pytest

from advisordesk.dora.intents import INTENT_RULES, Intent, _rule, order_rules, parse_intent


class TestParseIntent:

    @pytest.mark.parametrize("message, expected", [
        ("hello there", Intent.GREETING),
        ("  Good Morning DORA  ", Intent.GREETING),
        ("help", Intent.HELP),
        ("show portfolio summary", Intent.PORTFOLIO_SUMMARY),
        ("what's the goal status?", Intent.GOAL_STATUS),
        ("anything off-track?", Intent.OFF_TRACK),
        ("what's the sharpe ratio", Intent.RISK_METRICS),
        ("is there cash drag?", Intent.CASH_ANALYSIS),
        ("is there any drift", Intent.REBALANCING),
        ("does it need rebalancing", Intent.REBALANCING),
        ("what should we do next", Intent.RECOMMENDATIONS),
        ("meeting agenda please", Intent.MEETING_POINTS),
        ("tell me about this client", Intent.CLIENT_INFO),
        ("house view on tech", Intent.KNOWLEDGE_BASE),
        ("asdkjasdkj", Intent.UNKNOWN),
    ])
    def test_classifies(self, message, expected):
        assert parse_intent(message) == expected

    def test_first_matching_rule_wins(self):
        # "risk" (60) is checked before "drift" (80)
        assert parse_intent("risk and drift") == Intent.RISK_METRICS

    def test_cash_rule_precedes_cross_client_cash(self):
        assert parse_intent("which clients have high cash") == Intent.CASH_ANALYSIS

    def test_never_raises_on_empty(self):
        assert parse_intent("") == Intent.UNKNOWN
        assert parse_intent("   ") == Intent.UNKNOWN


class TestRuleOrdering:

    def test_rules_have_unique_priorities(self):
        priorities = [r.priority for r in INTENT_RULES]
        assert len(priorities) == len(set(priorities))

    def test_duplicate_priority_rejected(self):
        rules = [_rule(10, Intent.GREETING, r"hi"), _rule(10, Intent.HELP, r"help")]
        with pytest.raises(ValueError):
            order_rules(rules)

    def test_custom_rules_follow_priority_not_list_position(self):
        rules = [
            _rule(20, Intent.RISK_METRICS, r"\brisk\b"),
            _rule(10, Intent.REBALANCING, r"\brebalanc"),
        ]
        assert parse_intent("risk and rebalance", rules) == Intent.REBALANCING
