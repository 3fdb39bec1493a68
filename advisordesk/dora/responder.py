"""
AdvisorDesk — DORA Response Generator

Dispatches a classified intent to a templated reply built from the client
book. Every figure is computed here from Client/Goal fields; the templates
only phrase them.
"""

import logging
import math
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional, Sequence

from pydantic import Field

from advisordesk.dora.intents import Intent
from advisordesk.dora.knowledge_base import ComplianceBadge, Source, query_knowledge_base
from advisordesk.models.schema import CamelModel, Client
from config.settings import (
    CASH_WARNING_PCT, CASH_COMPARISON_PCT, INFLATION_RATE,
    REBALANCE_CONCENTRATION_PCT, SAVINGS_RATE_FLOOR, SAVINGS_RATE_TARGET,
    RISK_AGE_THRESHOLD, PROJECTION_BASE_YEAR,
    CHAT_RISK_BUCKETS, CHAT_VOLATILITY, CHAT_MAX_DRAWDOWN, CHAT_SHARPE,
)

logger = logging.getLogger(__name__)

CardColor = Literal["green", "red", "amber", "default"]


class DataCard(CamelModel):
    label: str
    value: str
    color: Optional[CardColor] = None


class Action(CamelModel):
    label: str
    type: Literal["navigate", "info"]
    target: Optional[str] = None


class DoraResponse(CamelModel):
    text: str
    data: Optional[List[DataCard]] = None
    actions: Optional[List[Action]] = None
    compliance_badge: Optional[ComplianceBadge] = None
    sources: Optional[List[Source]] = None
    disclaimers: Optional[List[str]] = None


# ─────────────────────────────────────────────────────────────────────
# Formatting helpers
# ─────────────────────────────────────────────────────────────────────

def format_php(amount: float) -> str:
    return f"₱{amount:,.0f}"


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded towards +infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(Decimal(value) + Decimal("0.5"))


def _num(value: float) -> str:
    """Render like a JS number: 10.0 -> "10", 8.3 -> "8.3"."""
    value = float(value)
    return str(int(value)) if value.is_integer() else str(value)


def _card(label: str, value: str, color: CardColor = "default") -> DataCard:
    return DataCard(label=label, value=value, color=color)


def _info(label: str) -> Action:
    return Action(label=label, type="info")


def _navigate(label: str, client: Client) -> Action:
    return Action(label=label, type="navigate", target=f"/clients/{client.id}")


def _pct_of(part: float, whole: float) -> float:
    return part / whole * 100 if whole else 0.0


# ─────────────────────────────────────────────────────────────────────
# Canned responses
# ─────────────────────────────────────────────────────────────────────

def greeting_response() -> DoraResponse:
    return DoraResponse(
        text=(
            "Hi! I'm DORA, your Digital Operations & Recommendations Assistant. I can help you "
            "with portfolio insights, goal tracking, risk analysis, and meeting preparation. "
            "What would you like to know?"
        ),
        actions=[
            _info("Portfolio Summary"),
            _info("Off-track Goals"),
            _info("Cash Analysis"),
            _info("Recommendations"),
        ],
    )


def help_response() -> DoraResponse:
    return DoraResponse(
        text=(
            "Here's what I can help you with:\n\n"
            "• **Portfolio** — \"Show portfolio summary\", \"How much is invested?\"\n"
            "• **Goals** — \"What's the goal status?\", \"Which goals are off-track?\"\n"
            "• **Risk** — \"Show risk metrics\", \"What's the Sharpe ratio?\"\n"
            "• **Cash** — \"Cash holdings analysis\", \"Is there cash drag?\"\n"
            "• **Rebalancing** — \"Does the portfolio need rebalancing?\"\n"
            "• **Recommendations** — \"What should I do?\", \"Suggest improvements\"\n"
            "• **Cross-client** — \"Which clients have high cash?\", \"Who needs attention?\"\n"
            "• **Meeting** — \"Prepare talking points\", \"Meeting agenda\"\n"
            "• **Research** — \"What is our view on inflation?\", \"House view on tech\""
        ),
        actions=[
            _info("Portfolio Summary"),
            _info("Which clients need attention?"),
            _info("House view on tech"),
        ],
    )


def unknown_response() -> DoraResponse:
    return DoraResponse(
        text="I'm not sure I understand that query. Here are some things I can help with:",
        actions=[
            _info("Portfolio Summary"),
            _info("Goal Status"),
            _info("Off-track Goals"),
            _info("Risk Metrics"),
            _info("Cash Analysis"),
            _info("Recommendations"),
        ],
    )


def select_client_response() -> DoraResponse:
    return DoraResponse(
        text=(
            "I'd be happy to help! Please navigate to a specific client's dashboard for detailed "
            "analysis, or ask me a cross-client question like \"Which clients have high cash?\" "
            "or \"Who needs attention?\""
        ),
        actions=[
            _info("Which clients need attention?"),
            _info("Cash analysis across clients"),
        ],
    )


# ─────────────────────────────────────────────────────────────────────
# Single-client responses
# ─────────────────────────────────────────────────────────────────────

def portfolio_summary_response(client: Client) -> DoraResponse:
    cash_pct = round(client.cash_pct, 1)
    return DoraResponse(
        text=f"Here's {client.name}'s portfolio overview:",
        data=[
            _card("Total Portfolio", format_php(client.total_portfolio)),
            _card("Invested", format_php(client.total_invested), "green"),
            _card(
                "Cash Holdings",
                f"{format_php(client.cash_holdings)} ({cash_pct:.1f}%)",
                "amber" if cash_pct > CASH_WARNING_PCT else "default",
            ),
            _card("YTD Return", f"+{_num(client.returns.ytd)}%", "green"),
            _card("1Y Return", f"+{_num(client.returns.one_year)}%", "green"),
            _card("Monthly Income", format_php(client.monthly_income)),
        ],
    )


def goal_status_response(client: Client) -> DoraResponse:
    on_track = len(client.goals_with_status("on-track"))
    ahead = len(client.goals_with_status("ahead"))
    off_track = len(client.goals_with_status("off-track"))

    markers = {"ahead": "🟢", "on-track": "🔵"}
    lines = []
    for g in client.goals:
        funded = _pct_of(g.current_amount, g.target_amount)
        lines.append(
            f"{markers.get(g.status, '🔴')} **{g.name}** — {funded:.0f}% funded "
            f"({format_php(g.current_amount)} / {format_php(g.target_amount)}), "
            f"{_num(g.probability)}% probability, target: {g.target_date}"
        )

    return DoraResponse(
        text=f"{client.name} has {len(client.goals)} active goals:\n\n" + "\n".join(lines),
        data=[
            _card("On Track", str(on_track), "green"),
            _card("Ahead", str(ahead), "green"),
            _card("Off Track", str(off_track), "red" if off_track > 0 else "green"),
        ],
    )


def additional_monthly_needed(goal, base_year: int = PROJECTION_BASE_YEAR) -> int:
    """Extra monthly contribution to close a goal's gap by its target year."""
    gap = goal.target_amount - goal.current_amount
    years_left = goal.target_year - base_year
    if years_left <= 0:
        return 0
    return round_half_up(gap / (years_left * 12)) - round_half_up(goal.monthly_contribution)


def off_track_response(client: Client) -> DoraResponse:
    off_track = client.goals_with_status("off-track")
    if not off_track:
        return DoraResponse(
            text=(
                f"Great news! All of {client.name}'s goals are on track or ahead of schedule. "
                "No immediate action needed."
            ),
            data=[_card("Status", "All Clear ✓", "green")],
        )

    details = []
    for g in off_track:
        gap = g.target_amount - g.current_amount
        extra = additional_monthly_needed(g)
        advice = (
            f"Need +{format_php(extra)}/mo or extend target" if extra > 0
            else "Consider rebalancing allocation"
        )
        details.append(
            f"🔴 **{g.name}** — {_num(g.probability)}% probability "
            f"(target: {format_php(g.target_amount)} by {g.target_date})\n"
            f"   Gap: {format_php(gap)} | {advice}"
        )

    return DoraResponse(
        text=f"{client.name} has {len(off_track)} off-track goal(s):\n\n" + "\n\n".join(details),
        data=[_card(g.name, f"{_num(g.probability)}%", "red") for g in off_track],
        actions=[_navigate("View Goal Details", client)],
    )


def _chat_bucket(values: Sequence[float], ytd: float) -> float:
    high, medium = CHAT_RISK_BUCKETS
    if ytd > high:
        return values[0]
    if ytd > medium:
        return values[1]
    return values[2]


def risk_metrics_response(client: Client) -> DoraResponse:
    """
    Chat-path risk metrics, bucketed on YTD return.

    Fund-weighted figures live in
    advisordesk.analytics.metrics.client_risk_metrics.
    """
    if client.total_invested == 0:
        return DoraResponse(text=f"{client.name} has no invested positions to analyze.")

    ytd = client.returns.ytd
    vol = _chat_bucket(CHAT_VOLATILITY, ytd)
    drawdown = -_chat_bucket(CHAT_MAX_DRAWDOWN, ytd)
    sharpe = _chat_bucket(CHAT_SHARPE, ytd)

    if sharpe >= 1:
        sharpe_color = "green"
    elif sharpe >= 0.5:
        sharpe_color = "amber"
    else:
        sharpe_color = "red"

    return DoraResponse(
        text=f"Risk analysis for {client.name}'s portfolio:",
        data=[
            _card("Risk Profile", client.risk_profile),
            _card("Volatility", f"{vol:.1f}%", "red" if vol > 15 else "default"),
            _card("Max Drawdown", f"{drawdown:.1f}%", "red"),
            _card("Sharpe Ratio", f"{sharpe:.2f}", sharpe_color),
            _card("YTD Return", f"+{_num(ytd)}%", "green"),
        ],
    )


def cash_analysis_response(client: Client) -> DoraResponse:
    cash_pct = client.cash_pct
    inflation_drag = round_half_up(client.cash_holdings * INFLATION_RATE)
    excessive = cash_pct > CASH_WARNING_PCT

    if excessive:
        text = (
            f"⚠️ {client.name} has **{cash_pct:.1f}%** of portfolio in cash "
            f"({format_php(client.cash_holdings)}). This is above the recommended 10-15% "
            f"threshold.\n\nWith BSP inflation at {INFLATION_RATE * 100:.1f}%, this idle cash "
            f"loses approximately **{format_php(inflation_drag)}/year** in purchasing power. "
            "Consider deploying via DCA into existing goal allocations."
        )
    else:
        text = (
            f"{client.name}'s cash position of {format_php(client.cash_holdings)} "
            f"({cash_pct:.1f}%) is within acceptable range. No immediate action needed."
        )

    return DoraResponse(
        text=text,
        data=[
            _card("Cash Holdings", format_php(client.cash_holdings), "amber" if excessive else "default"),
            _card("Cash %", f"{cash_pct:.1f}%", "amber" if excessive else "green"),
            _card("Annual Inflation Drag", format_php(inflation_drag), "red"),
        ],
    )


def fund_amounts(client: Client) -> dict:
    """Invested amount per fund id across all goals, first-seen order."""
    amounts = {}
    for g in client.goals:
        for f in g.portfolio.funds:
            amounts[f.fund_id] = amounts.get(f.fund_id, 0) + f.amount
    return amounts


def rebalancing_response(client: Client) -> DoraResponse:
    total = client.total_invested
    overweight = [
        (fund_id, _pct_of(amount, total))
        for fund_id, amount in fund_amounts(client).items()
        if _pct_of(amount, total) > REBALANCE_CONCENTRATION_PCT
    ]

    if not overweight:
        return DoraResponse(
            text=(
                f"{client.name}'s portfolio allocation looks well-diversified. "
                "No significant concentration detected."
            ),
            data=[_card("Drift Status", "Well Aligned ✓", "green")],
        )

    limit = _num(REBALANCE_CONCENTRATION_PCT)
    bullets = "\n".join(
        f"• Fund **{fid}** is at **{pct:.1f}%** (recommend <{limit}%)" for fid, pct in overweight
    )
    return DoraResponse(
        text=(
            f"{client.name}'s portfolio shows concentration risk:\n\n{bullets}\n\n"
            "Consider redistributing to reduce single-fund concentration."
        ),
        data=[_card(fid, f"{pct:.1f}%", "amber") for fid, pct in overweight],
        actions=[_navigate("View Drift Details", client)],
    )


def recommendations_response(client: Client) -> DoraResponse:
    recs = []
    off_track = client.goals_with_status("off-track")
    ahead = client.goals_with_status("ahead")
    cash_pct = client.cash_pct
    total_monthly = sum(g.monthly_contribution for g in client.goals)

    if off_track:
        recs.append(
            f"🔴 **Address off-track goals**: {', '.join(g.name for g in off_track)}. "
            "Consider increasing contributions or extending target dates."
        )
    if cash_pct > CASH_WARNING_PCT:
        recs.append(
            f"💰 **Deploy excess cash**: {format_php(client.cash_holdings)} in idle cash "
            f"({cash_pct:.0f}%). DCA into existing allocations to reduce inflation drag."
        )
    if client.risk_profile == "Aggressive" and client.age > RISK_AGE_THRESHOLD:
        recs.append(
            f"⚠️ **Risk-age review**: At age {client.age} with Aggressive profile, consider "
            "transitioning 30-40% to balanced/conservative funds."
        )
    if total_monthly < client.monthly_income * SAVINGS_RATE_FLOOR:
        recs.append(
            f"📈 **Increase savings rate**: Monthly contributions of {format_php(total_monthly)} "
            f"are below {SAVINGS_RATE_FLOOR:.0%} of income. Consider increasing to "
            f"{format_php(round_half_up(client.monthly_income * SAVINGS_RATE_TARGET))}/mo."
        )
    if ahead:
        recs.append(
            f"🟢 **Redirect surplus**: {', '.join(g.name for g in ahead)} ahead of schedule. "
            "Consider redirecting excess contributions to off-track goals or de-risking."
        )
    if not recs:
        recs.append(
            f"✅ {client.name}'s portfolio is in good shape. Maintain current strategy and "
            "schedule regular reviews."
        )

    return DoraResponse(
        text=f"Here are my recommendations for {client.name}:\n\n" + "\n\n".join(recs),
    )


def meeting_points(client: Client) -> List[str]:
    """Talking points for an upcoming review, most important first."""
    points = []
    off_track = client.goals_with_status("off-track")
    ahead = client.goals_with_status("ahead")
    cash_pct = client.cash_pct

    points.append(
        f"📋 **Review Period**: YTD return +{_num(client.returns.ytd)}%, "
        f"1Y return +{_num(client.returns.one_year)}%"
    )
    if off_track:
        goals = ", ".join(f"{g.name} ({_num(g.probability)}%)" for g in off_track)
        points.append(f"🔴 **Off-track Goals**: {goals} — discuss remediation strategy")
    if ahead:
        goals = ", ".join(f"{g.name} ({_num(g.probability)}%)" for g in ahead)
        points.append(f"🟢 **Ahead Goals**: {goals} — discuss de-risking or surplus redeployment")
    if cash_pct > CASH_COMPARISON_PCT:
        points.append(f"💰 **Cash Review**: {cash_pct:.0f}% in cash — discuss DCA plan to deploy idle funds")
    points.append(
        f"📊 **Market Context**: BSP inflation at {INFLATION_RATE * 100:.1f}% — ensure all goal "
        "projections factor in purchasing power erosion"
    )
    if any(g.type == "retirement" for g in client.goals):
        points.append(
            "🏠 **Retirement Check**: Review income replacement ratio target "
            f"(70-80% of current {format_php(client.monthly_income)}/mo)"
        )
    return points


def meeting_points_response(client: Client) -> DoraResponse:
    return DoraResponse(
        text=f"Meeting talking points for {client.name}:\n\n" + "\n\n".join(meeting_points(client)),
        actions=[_navigate("Open Meeting Prep", client)],
    )


def client_info_response(client: Client, today: Optional[date] = None) -> DoraResponse:
    today = today or date.today()
    tenure = round_half_up((today - client.joined_date).days / 365.25)

    return DoraResponse(
        text=f"Client profile for {client.name}:",
        data=[
            _card("Age", str(client.age)),
            _card("Risk Profile", client.risk_profile),
            _card("Monthly Income", format_php(client.monthly_income)),
            _card("Client Since", client.joined_date.isoformat()),
            _card("Tenure", f"~{tenure} year{'' if tenure == 1 else 's'}"),
            _card("Active Goals", str(len(client.goals))),
            _card(
                "Needs Action",
                f"Yes — {client.action_reason}" if client.needs_action else "No",
                "amber" if client.needs_action else "green",
            ),
        ],
    )


# ─────────────────────────────────────────────────────────────────────
# Cross-client responses
# ─────────────────────────────────────────────────────────────────────

def comparison_cash_response(clients: Sequence[Client]) -> DoraResponse:
    # sorted() is stable: equal cash percentages keep book order
    ranked = sorted(clients, key=lambda c: c.cash_pct, reverse=True)
    high_cash = [c for c in ranked if c.cash_pct > CASH_COMPARISON_PCT]
    limit = _num(CASH_COMPARISON_PCT)

    if high_cash:
        lines = "\n".join(
            f"• **{c.name}** — {c.cash_pct:.1f}% ({format_php(c.cash_holdings)})" for c in high_cash
        )
        text = f"{len(high_cash)} client(s) have cash holdings above {limit}%:\n\n{lines}"
    else:
        text = f"All clients have cash holdings within the recommended <{limit}% threshold."

    def color(pct: float) -> CardColor:
        if pct > CASH_WARNING_PCT:
            return "red"
        if pct > CASH_COMPARISON_PCT:
            return "amber"
        return "green"

    return DoraResponse(
        text=text,
        data=[_card(c.name, f"{c.cash_pct:.1f}%", color(c.cash_pct)) for c in ranked],
    )


def comparison_offtrack_response(clients: Sequence[Client]) -> DoraResponse:
    flagged = [
        (c, c.goals_with_status("off-track"))
        for c in clients
        if c.goals_with_status("off-track") or c.needs_action
    ]
    flagged.sort(key=lambda item: len(item[1]), reverse=True)

    if not flagged:
        return DoraResponse(
            text="All clients are in good standing — no off-track goals or pending actions detected.",
            data=[_card("Status", "All Clear ✓", "green")],
        )

    lines = []
    for c, off_track in flagged:
        goals = ", ".join(f"{g.name} ({_num(g.probability)}%)" for g in off_track)
        line = f"• **{c.name}** — {len(off_track)} off-track goal(s)"
        if goals:
            line += f": {goals}"
        if c.action_reason:
            line += f" | {c.action_reason}"
        lines.append(line)

    return DoraResponse(
        text=f"{len(flagged)} client(s) need attention:\n\n" + "\n".join(lines),
        data=[_card(c.name, f"{len(off_track)} off-track", "red") for c, off_track in flagged],
    )


def book_summary_response(clients: Sequence[Client]) -> DoraResponse:
    total_aum = sum(c.total_portfolio for c in clients)
    average = round_half_up(total_aum / len(clients)) if clients else 0
    return DoraResponse(
        text=(
            f"Across all {len(clients)} clients:\n\n"
            f"• **Total AUM**: {format_php(total_aum)}\n"
            f"• **Avg Portfolio**: {format_php(average)}"
        ),
        data=[_card(c.name, format_php(c.total_portfolio)) for c in clients],
    )


# ─────────────────────────────────────────────────────────────────────
# Dispatch
# ─────────────────────────────────────────────────────────────────────

CLIENT_HANDLERS = {
    Intent.PORTFOLIO_SUMMARY: portfolio_summary_response,
    Intent.GOAL_STATUS: goal_status_response,
    Intent.OFF_TRACK: off_track_response,
    Intent.RISK_METRICS: risk_metrics_response,
    Intent.CASH_ANALYSIS: cash_analysis_response,
    Intent.REBALANCING: rebalancing_response,
    Intent.RECOMMENDATIONS: recommendations_response,
    Intent.MEETING_POINTS: meeting_points_response,
    Intent.CLIENT_INFO: client_info_response,
}

# Client-scoped intents that fall back to a whole-book view without a client
BOOK_FALLBACKS = {
    Intent.PORTFOLIO_SUMMARY: book_summary_response,
    Intent.OFF_TRACK: comparison_offtrack_response,
    Intent.CASH_ANALYSIS: comparison_cash_response,
}


def knowledge_response(intent: Intent, message: str, latency_ms: Optional[int] = None) -> DoraResponse:
    result = query_knowledge_base(message, latency_ms=latency_ms)
    if intent == Intent.UNKNOWN and not result.sources:
        return unknown_response()
    return DoraResponse(
        text=result.answer,
        compliance_badge=result.compliance_badge,
        sources=result.sources,
        disclaimers=result.disclaimers or None,
        actions=[_info("View Source Doc")] if result.sources else None,
    )


def generate_response(
    intent: Intent,
    message: str,
    client: Optional[Client],
    all_clients: Sequence[Client],
    latency_ms: Optional[int] = None,
) -> DoraResponse:
    """Build DORA's reply for a classified message."""
    if intent == Intent.GREETING:
        return greeting_response()
    if intent == Intent.HELP:
        return help_response()
    if intent == Intent.COMPARISON_CASH:
        return comparison_cash_response(all_clients)
    if intent == Intent.COMPARISON_OFFTRACK:
        return comparison_offtrack_response(all_clients)
    if intent in (Intent.KNOWLEDGE_BASE, Intent.UNKNOWN):
        return knowledge_response(intent, message, latency_ms=latency_ms)

    if client is None:
        fallback = BOOK_FALLBACKS.get(intent)
        return fallback(all_clients) if fallback else select_client_response()

    handler = CLIENT_HANDLERS.get(intent)
    if handler is None:
        return unknown_response()
    return handler(client)
