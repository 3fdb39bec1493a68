"""
AdvisorDesk — DORA Intent Classifier

Maps a free-text advisor message to exactly one intent label.

Rules are evaluated in ascending ``priority`` and the first rule with any
matching pattern wins; there is no best-match scoring. A message that hits
patterns from several rules resolves to the lowest priority number, so
re-numbering a rule changes how ambiguous messages classify.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Pattern, Sequence, Tuple


class Intent(str, Enum):
    GREETING = "greeting"
    HELP = "help"
    PORTFOLIO_SUMMARY = "portfolio_summary"
    GOAL_STATUS = "goal_status"
    OFF_TRACK = "off_track"
    RISK_METRICS = "risk_metrics"
    CASH_ANALYSIS = "cash_analysis"
    REBALANCING = "rebalancing"
    RECOMMENDATIONS = "recommendations"
    COMPARISON_CASH = "comparison_cash"
    COMPARISON_OFFTRACK = "comparison_offtrack"
    MEETING_POINTS = "meeting_points"
    CLIENT_INFO = "client_info"
    KNOWLEDGE_BASE = "knowledge_base"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class IntentRule:
    priority: int
    intent: Intent
    patterns: Tuple[Pattern, ...]

    def matches(self, text: str) -> bool:
        return any(p.search(text) for p in self.patterns)


def _rule(priority: int, intent: Intent, *patterns: str) -> IntentRule:
    return IntentRule(priority, intent, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


INTENT_RULES: List[IntentRule] = [
    _rule(10, Intent.GREETING,
          r"^(hi|hello|hey|good\s*(morning|afternoon|evening)|yo|howdy)"),
    _rule(20, Intent.HELP,
          r"\b(help|what can you do|capabilities|commands|how to use)\b"),
    _rule(30, Intent.PORTFOLIO_SUMMARY,
          r"\b(portfolio|total|aum|invested|holdings?|overview|summary)\b",
          r"\bhow much\b.*\b(invest|portfolio|worth)\b"),
    _rule(40, Intent.GOAL_STATUS,
          r"\b(goal|goals|status|progress|target)\b",
          r"\bhow.*goals?\b"),
    _rule(50, Intent.OFF_TRACK,
          r"\b(off[- ]?track|behind|falling|underperform|needs?\s*attention|struggling)\b",
          r"\bwhich.*goals?.*(?:not|aren't|behind)\b"),
    _rule(60, Intent.RISK_METRICS,
          r"\b(risk|sharpe|volatility|drawdown|max draw|beta)\b"),
    _rule(70, Intent.CASH_ANALYSIS,
          r"\b(cash|idle|uninvested|drag|liquid|money\s*market)\b",
          r"\bcash\s*(holding|ratio|percentage|drag)\b"),
    _rule(80, Intent.REBALANCING,
          r"\b(rebalanc\w*|drift\w*|misalign\w*|realign\w*|allocation.*off|over.*weight|under.*weight)\b"),
    _rule(90, Intent.RECOMMENDATIONS,
          r"\b(recommend|suggest|what\s*should|advise|improve|action|optimize)\b"),
    _rule(100, Intent.COMPARISON_CASH,
          r"\bwhich.*client.*cash\b",
          r"\bclient.*>?\s*\d+%?\s*cash\b",
          r"\bwho.*cash\b"),
    _rule(110, Intent.COMPARISON_OFFTRACK,
          r"\bwhich.*client.*off[- ]?track\b",
          r"\bwho.*needs?\s*(attention|action|rebalancing)\b",
          r"\bclient.*off[- ]?track\b"),
    _rule(120, Intent.MEETING_POINTS,
          r"\b(meeting|talking\s*point|prep|agenda|discussion|brief)\b"),
    _rule(130, Intent.CLIENT_INFO,
          r"\b(age|profile|joined|income|monthly|who\s*is|tell\s*me\s*about)\b"),
    _rule(140, Intent.KNOWLEDGE_BASE,
          r"\b(house view|research|outlook|inflation|policy|think about|opinion|forecast)\b",
          r"\bwhat.*(manulife|we).*(say|think|view)\b",
          # sectors
          r"\b(tech(nology)?|healthcare|health|pharma|financials?|banking|energy|oil|renewable"
          r"|real estate|reit|consumer|staples|discretionary|semiconductor|ai sector|cloud)\b",
          # countries and regions
          r"\b(philippines?|psei|us market|us equit\w*|america|china|chinese|hang seng|india|nifty"
          r"|sensex|japan|nikkei|asean|southeast asia|vietnam|indonesia|thailand|emerging market)\b",
          # currencies
          r"\b(usd.?php|peso|dollar.?peso|cny|yuan|renminbi|jpy|yen|currency|fx|exchange rate)\b",
          # asset classes
          r"\b(equit(y|ies)|stocks?|bonds?|fixed income|yield|treasury|duration"
          r"|commodit(y|ies)|gold|silver|copper)\b",
          # strategies
          r"\b(esg|sustainable|green invest\w*|dividend|income strate\w*|dca|dollar cost|averaging"
          r"|retirement|bucket strategy|tax.*(loss|harvest\w*|efficien\w*))\b",
          # macro
          r"\b(interest rate|rate cut|monetary policy|central bank|bsp|fed rate|cpi|cost of living)\b",
          # broad research queries
          r"\b(sector|country|region|market outlook|asset class|investment strategy|what.*invest"
          r"|where.*invest|best.*fund|recommend.*sector)\b"),
]


def order_rules(rules: Sequence[IntentRule]) -> List[IntentRule]:
    """Sort rules by priority; duplicate priorities would make order ambiguous."""
    seen = {}
    for rule in rules:
        if rule.priority in seen:
            raise ValueError(
                f"Intent rules {seen[rule.priority].value} and {rule.intent.value} "
                f"share priority {rule.priority}"
            )
        seen[rule.priority] = rule.intent
    return sorted(rules, key=lambda r: r.priority)


_ORDERED_RULES = order_rules(INTENT_RULES)


def parse_intent(message: str, rules: Sequence[IntentRule] = None) -> Intent:
    """Classify a message. Never raises; no match is Intent.UNKNOWN."""
    ordered = _ORDERED_RULES if rules is None else order_rules(rules)
    normalized = message.strip().lower()
    for rule in ordered:
        if rule.matches(normalized):
            return rule.intent
    return Intent.UNKNOWN
