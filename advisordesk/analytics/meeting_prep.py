"""
AdvisorDesk — Meeting Prep

Builds the pre-meeting brief for one client: a timed agenda, talking points
and suggested follow-up tasks. Drift is measured against the model
portfolio mapped to the client's risk profile.
"""

import logging
from typing import List, Literal, Optional, Sequence

from advisordesk.analytics.metrics import (
    PortfolioDrift, client_drift, client_risk_metrics, client_weighted_returns,
    fee_analysis, model_for_risk_profile,
)
from advisordesk.dora.responder import format_php
from advisordesk.models.schema import CamelModel, Client, ModelPortfolio
from config.settings import (
    CASH_COMPARISON_PCT, CASH_WARNING_PCT, CASH_AGENDA_HIGH_PCT, INFLATION_RATE,
    FEE_REVIEW_EXPENSE_RATIO, RISK_AGE_THRESHOLD, MEETING_DERISK_AGE,
)

logger = logging.getLogger(__name__)

Priority = Literal["high", "medium", "low"]


class AgendaItem(CamelModel):
    id: str
    title: str
    description: str
    duration: int                # minutes
    priority: Priority


class TalkingPoint(CamelModel):
    text: str
    type: Literal["success", "warning", "info"]


class MeetingPrep(CamelModel):
    client_id: str
    agenda: List[AgendaItem]
    total_duration: int
    talking_points: List[TalkingPoint]
    suggested_follow_ups: List[str]
    drift: Optional[PortfolioDrift] = None


def _fmt(value: float) -> str:
    return f"{value:g}"


def _drifted(drift: Optional[PortfolioDrift]) -> bool:
    return drift is not None and drift.status != "aligned"


def build_agenda(client: Client, drift: Optional[PortfolioDrift]) -> List[AgendaItem]:
    off_track = client.goals_with_status("off-track")
    ahead = client.goals_with_status("ahead")
    returns = client_weighted_returns(client)
    sharpe = client_risk_metrics(client).sharpe_ratio
    fees = fee_analysis(client)
    cash_pct = client.cash_pct

    items: List[AgendaItem] = []

    def add(title: str, description: str, duration: int, priority: Priority):
        items.append(AgendaItem(
            id=f"a-{len(items)}", title=title, description=description,
            duration=duration, priority=priority,
        ))

    add(
        "Welcome & Relationship Check-In",
        f"Review {client.name}'s current situation, life changes, and priorities since last meeting.",
        5, "medium",
    )

    if off_track:
        add(
            f"Off-Track Goals Review ({len(off_track)})",
            ". ".join(
                f"{g.name}: {g.probability:g}% probability, discuss contribution increase or timeline extension"
                for g in off_track
            ),
            10, "high",
        )

    if _drifted(drift):
        add(
            f"Portfolio Rebalancing ({_fmt(drift.overall_drift)}% drift)",
            f"Portfolio has drifted from {drift.model_name} model. "
            "Review fund allocation and discuss rebalancing.",
            10, "high" if drift.status == "significant-drift" else "medium",
        )

    add(
        "Performance Review",
        f"YTD return +{_fmt(returns.ytd)}%, 1Y +{_fmt(returns.one_year)}%. Sharpe ratio: {sharpe:.2f}.",
        10, "medium",
    )

    if cash_pct > CASH_COMPARISON_PCT:
        add(
            f"Cash Management ({cash_pct:.0f}%)",
            f"{format_php(client.cash_holdings)} idle in cash. Discuss DCA plan to deploy into goal allocations.",
            5, "high" if cash_pct > CASH_AGENDA_HIGH_PCT else "medium",
        )

    if ahead:
        plural = "s" if len(ahead) > 1 else ""
        add(
            f"Surplus Review ({len(ahead)} goal{plural} ahead)",
            f"{', '.join(g.name for g in ahead)} ahead of schedule. "
            "Discuss de-risking or redirecting contributions.",
            5, "low",
        )

    if fees.weighted_expense_ratio > FEE_REVIEW_EXPENSE_RATIO:
        add(
            "Fee & Expense Review",
            f"Weighted expense ratio at {_fmt(fees.weighted_expense_ratio)}% "
            f"({format_php(fees.annual_fee_cost)}/yr). Review lower-cost alternatives.",
            5, "low",
        )

    add(
        "Action Items & Next Steps",
        "Summarize agreed actions, set follow-up date, and confirm next quarterly review.",
        5, "medium",
    )
    return items


def talking_points(client: Client, drift: Optional[PortfolioDrift]) -> List[TalkingPoint]:
    off_track = client.goals_with_status("off-track")
    inflation_pct = INFLATION_RATE * 100
    ytd = client_weighted_returns(client).ytd

    points: List[TalkingPoint] = []
    if ytd > inflation_pct:
        points.append(TalkingPoint(
            text=f"Portfolio returning +{_fmt(ytd)}% YTD, ahead of inflation. Strong positioning",
            type="success",
        ))
    else:
        points.append(TalkingPoint(
            text=f"Portfolio returning +{_fmt(ytd)}% YTD, below inflation. Discuss reallocation",
            type="warning",
        ))

    if off_track:
        points.append(TalkingPoint(
            text=f"{len(off_track)} goal(s) off-track: {', '.join(g.name for g in off_track)}",
            type="warning",
        ))

    if _drifted(drift):
        points.append(TalkingPoint(
            text=f"Portfolio drift: {_fmt(drift.overall_drift)}% from {drift.model_name} model",
            type="warning" if drift.status == "significant-drift" else "info",
        ))

    if client.cash_pct > CASH_COMPARISON_PCT:
        points.append(TalkingPoint(
            text=f"Cash holdings at {client.cash_pct:.0f}%. Discuss deploying idle funds via DCA",
            type="info",
        ))

    points.append(TalkingPoint(
        text=f"BSP inflation at {inflation_pct:.1f}%. All goal projections should factor in purchasing power erosion",
        type="info",
    ))

    if client.age > MEETING_DERISK_AGE and client.risk_profile == "Aggressive":
        points.append(TalkingPoint(
            text=f"Client is {client.age} with Aggressive profile. Consider de-risking",
            type="warning",
        ))
    return points


def suggested_follow_ups(client: Client, drift: Optional[PortfolioDrift]) -> List[str]:
    off_track = client.goals_with_status("off-track")
    suggestions = []
    if off_track:
        suggestions.append(f"Increase monthly contribution for {off_track[0].name}")
    if _drifted(drift):
        suggestions.append("Execute rebalancing trade to align with model portfolio")
    if client.cash_pct > CASH_WARNING_PCT:
        suggestions.append("Set up DCA schedule for idle cash deployment")
    if client.risk_profile == "Aggressive" and client.age > RISK_AGE_THRESHOLD:
        suggestions.append("Schedule risk profile review: consider de-risking")
    suggestions.append("Schedule next quarterly review meeting")
    return suggestions


def prepare_meeting(client: Client, model_portfolios: Sequence[ModelPortfolio]) -> MeetingPrep:
    model = model_for_risk_profile(client.risk_profile, model_portfolios)
    drift = client_drift(client, model) if model is not None else None
    if model is None:
        logger.info("No model portfolio mapped for %s (%s); skipping drift", client.id, client.risk_profile)

    agenda = build_agenda(client, drift)
    return MeetingPrep(
        client_id=client.id,
        agenda=agenda,
        total_duration=sum(item.duration for item in agenda),
        talking_points=talking_points(client, drift),
        suggested_follow_ups=suggested_follow_ups(client, drift),
        drift=drift,
    )
