"""
AdvisorDesk — Insights

Two rule sets over the client book:

    generate_actionable_insights  book-wide queue for the advisor home page,
                                  lifecycle / efficiency / seasonal / flagged
                                  rules, highest priority first
    copilot_insights              per-client cards for the dashboard copilot
                                  panel: actions, performance, talking points
"""

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Dict, List, Literal, Optional, Sequence

import numpy as np

from advisordesk.analytics.metrics import client_risk_metrics, client_weighted_returns, fund_amounts_frame
from advisordesk.dora.responder import additional_monthly_needed, format_php, round_half_up
from advisordesk.models.schema import CamelModel, Client
from config.settings import (
    CASH_WARNING_PCT, COPILOT_CONCENTRATION_PCT, INFLATION_RATE,
    RISK_AGE_THRESHOLD, STRONG_POSITION_PROBABILITY, LARGE_ACCOUNT_THRESHOLD,
    EFFICIENCY_SHARPE_FLOOR,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# Actionable insights (advisor home)
# ─────────────────────────────────────────────────────────────────────

InsightType = Literal["opportunity", "risk", "service", "compliance"]
ActionType = Literal["rebalance", "contact", "review", "tax_harvest"]


class Insight(CamelModel):
    id: str
    client_id: str
    client_name: str
    title: str
    description: str
    type: InsightType
    priority: int                # 1-10, 10 highest
    action_type: ActionType
    action_label: str
    action_url: str
    tags: List[str]
    generated_at: datetime


# keyed by calendar month
SEASONAL_RULES: Dict[int, dict] = {
    10: {
        "title": "Year-End Tax Planning",
        "description": "Review portfolio for tax-loss harvesting opportunities before year-end.",
        "action_type": "tax_harvest",
        "priority": 8,
        "tags": ["Tax", "Seasonal"],
    },
    1: {
        "title": "TFSA/RRSP Contribution Room",
        "description": "New contribution room available for the new year. Suggest top-up.",
        "action_type": "contact",
        "priority": 7,
        "tags": ["Contribution", "Seasonal"],
    },
}


def _client_insights(client: Client, today: date, generated_at: datetime) -> List[Insight]:
    url = f"/clients/{client.id}"
    found = []

    def add(**fields):
        found.append(Insight(
            client_id=client.id, client_name=client.name, action_url=url,
            generated_at=generated_at, **fields,
        ))

    retirement = next((g for g in client.goals if "retirement" in g.name.lower()), None)
    if retirement is not None and retirement.target_year - today.year == 1:
        add(
            id=f"lifecycle-retire-{client.id}",
            title="Approaching Retirement",
            description="Client is 1 year away from target retirement date. Schedule income strategy review.",
            type="service", priority=10, action_type="contact", action_label="Schedule Review",
            tags=["Lifecycle", "Retirement"],
        )

    sharpe = client_risk_metrics(client).sharpe_ratio
    if sharpe < EFFICIENCY_SHARPE_FLOOR and client.risk_profile != "Conservative":
        add(
            id=f"risk-sharpe-{client.id}",
            title="Portfolio Efficiency Alert",
            description=(
                f"Portfolio Sharpe ratio is {sharpe:.2f}, below {EFFICIENCY_SHARPE_FLOOR}. "
                "Consider rebalancing to improve risk-adjusted returns."
            ),
            type="risk", priority=9, action_type="rebalance", action_label="Rebalance Portfolio",
            tags=["Risk", "Market"],
        )

    seasonal = SEASONAL_RULES.get(today.month)
    if seasonal and client.total_portfolio > LARGE_ACCOUNT_THRESHOLD:
        add(
            id=f"seasonal-{today.month - 1}-{client.id}",  # zero-based month in the id
            action_label="Review Opportunities",
            type="opportunity",
            **seasonal,
        )

    if client.needs_action:
        add(
            id=f"legacy-action-{client.id}",
            title="Advisor Flagged Action",
            description=client.action_reason or "Manual follow-up required.",
            type="service", priority=5, action_type="contact", action_label="View Client",
            tags=["Manual"],
        )

    return found


def generate_actionable_insights(
    clients: Sequence[Client],
    today: Optional[date] = None,
) -> List[Insight]:
    """Insights across the book, highest priority first (ties keep book order)."""
    generated_at = datetime.now(timezone.utc)
    today = today or generated_at.date()

    insights = []
    for client in clients:
        insights.extend(_client_insights(client, today, generated_at))

    logger.debug("Generated %s insights for %s clients", len(insights), len(clients))
    return sorted(insights, key=lambda i: i.priority, reverse=True)


# ─────────────────────────────────────────────────────────────────────
# Copilot insights (client dashboard)
# ─────────────────────────────────────────────────────────────────────

class IconKind(str, Enum):
    ZAP = "zap"
    BANKNOTE = "banknote"
    ALERT = "alert-triangle"
    CHECK = "check-circle"
    TRENDING_UP = "trending-up"
    LIGHTBULB = "lightbulb"
    BAR_CHART = "bar-chart"
    REFRESH = "refresh"


Severity = Literal["critical", "warning", "info", "success"]
Category = Literal["action", "performance", "talking-point"]


class CopilotInsight(CamelModel):
    id: str
    icon: IconKind
    severity: Severity
    category: Category
    title: str
    message: str


def copilot_insights(client: Client, today: Optional[date] = None) -> List[CopilotInsight]:
    today = today or date.today()
    inflation_pct = INFLATION_RATE * 100
    total_invested = client.total_invested
    off_track = client.goals_with_status("off-track")
    ahead = client.goals_with_status("ahead")
    avg_prob = round(float(np.mean([g.probability for g in client.goals]))) if client.goals else 0
    total_monthly = sum(g.monthly_contribution for g in client.goals)
    weighted_ytd = client_weighted_returns(client).ytd

    insights: List[CopilotInsight] = []

    for g in off_track:
        extra = additional_monthly_needed(g)
        if extra > 0:
            message = (
                f"Increase monthly contribution by {format_php(extra)} or extend target "
                f"to improve {g.probability:g}% probability."
            )
        else:
            message = (
                f"Review allocation - current {g.risk_profile} profile may need adjustment "
                f"to reach {format_php(g.target_amount)} by {g.target_date}."
            )
        insights.append(CopilotInsight(
            id=f"action-{g.id}", icon=IconKind.ZAP, severity="critical", category="action",
            title=f"Action: {g.name}", message=message,
        ))

    if client.cash_pct > CASH_WARNING_PCT:
        erosion = round_half_up(client.cash_holdings * INFLATION_RATE)
        insights.append(CopilotInsight(
            id="cash-drag", icon=IconKind.BANKNOTE, severity="warning", category="action",
            title="Excess Cash Holdings",
            message=(
                f"{client.cash_pct:.0f}% ({format_php(client.cash_holdings)}) in cash. "
                f"BSP inflation at {inflation_pct:.1f}% erodes {format_php(erosion)}/yr "
                "in purchasing power. Deploy via DCA."
            ),
        ))

    if client.risk_profile == "Aggressive" and client.age > RISK_AGE_THRESHOLD:
        insights.append(CopilotInsight(
            id="risk-mismatch", icon=IconKind.ALERT, severity="warning", category="action",
            title="Risk-Age Mismatch",
            message=(
                f"At age {client.age}, aggressive allocation carries higher sequence-of-returns risk. "
                "Suggest transitioning 30-40% to balanced/conservative funds."
            ),
        ))

    amounts = fund_amounts_frame(client)
    if not amounts.empty and total_invested > 0:
        top_pct = float(amounts.iloc[0]) / total_invested * 100
        if top_pct > COPILOT_CONCENTRATION_PCT:
            insights.append(CopilotInsight(
                id="concentration", icon=IconKind.REFRESH, severity="warning", category="action",
                title="Concentration Risk",
                message=(
                    f"{top_pct:.0f}% of portfolio concentrated in a single fund. "
                    "Consider diversifying across more asset classes."
                ),
            ))

    if weighted_ytd > inflation_pct:
        versus = (
            f"Outpacing BSP inflation ({inflation_pct:.1f}%) by {weighted_ytd - inflation_pct:.1f}pp "
            "- real returns are positive."
        )
    else:
        versus = (
            f"Below BSP inflation ({inflation_pct:.1f}%) - consider increasing equity exposure "
            "to preserve purchasing power."
        )
    insights.append(CopilotInsight(
        id="performance", icon=IconKind.BAR_CHART,
        severity="success" if weighted_ytd > 7 else "info", category="performance",
        title="Portfolio Performance",
        message=f"YTD weighted return: +{weighted_ytd:.1f}%. {versus}",
    ))

    if ahead:
        plural = "s" if len(ahead) > 1 else ""
        insights.append(CopilotInsight(
            id="ahead-summary", icon=IconKind.CHECK, severity="success", category="performance",
            title=f"{len(ahead)} Goal{plural} Ahead of Schedule",
            message=(
                f"{', '.join(g.name for g in ahead)}. Consider de-risking or redirecting "
                "surplus contributions to off-track goals."
            ),
        ))

    if client.goals and avg_prob >= STRONG_POSITION_PROBABILITY and not off_track:
        insights.append(CopilotInsight(
            id="all-good", icon=IconKind.CHECK, severity="success", category="performance",
            title="Strong Overall Position",
            message=(
                f"Average goal probability at {avg_prob}%. All goals on track or ahead. "
                "Maintain current strategy."
            ),
        ))

    insights.append(CopilotInsight(
        id="inflation-talk", icon=IconKind.TRENDING_UP, severity="info", category="talking-point",
        title="Inflation Talking Point",
        message=(
            f"BSP inflation at {inflation_pct:.1f}%. {client.name}'s goals need real returns above "
            "this threshold. Show how DCA and equity allocation protect against inflation erosion."
        ),
    ))

    insights.append(CopilotInsight(
        id="dca-talk", icon=IconKind.LIGHTBULB, severity="info", category="talking-point",
        title="DCA Opportunity",
        message=(
            f"Current monthly commitment: {format_php(total_monthly)}. Peso-cost averaging reduces "
            "drawdown risk by ~30%. Ideal for volatile PH equity positions."
        ),
    ))

    retirement = next((g for g in client.goals if g.type == "retirement"), None)
    if retirement is not None:
        retire_age = retirement.target_year - (today.year - client.age)
        outlook = "On track" if retirement.probability >= STRONG_POSITION_PROBABILITY else "Needs attention"
        insights.append(CopilotInsight(
            id="retirement-talk", icon=IconKind.LIGHTBULB, severity="info", category="talking-point",
            title="Retirement Planning",
            message=(
                f"Planned retirement at age ~{retire_age}. {outlook} - discuss lifestyle expectations "
                "and income replacement ratio (target: 70-80% of current income)."
            ),
        ))

    return insights
