"""
AdvisorDesk — Portfolio Analytics

Fund-weighted figures for the dashboard and meeting prep:
    - risk metrics (volatility, max drawdown, Sharpe) per goal and per client
    - invested-share weighted returns
    - fund exposure and fee drag
    - drift of actual fund weights from a model portfolio
    - goal projection and probability for the simulator

DORA's chat path answers risk questions with its own bucketed figures
(see risk_metrics_response).
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from advisordesk.models.schema import CamelModel, Client, Fund, Goal, ModelPortfolio, Returns
from config.portfolios import FUNDS
from config.settings import (
    DRIFT_ALIGNED_MAX, DRIFT_MINOR_MAX, RISK_PROFILE_MODEL_MAP,
    RISK_RETURN_MULTIPLIERS, DEFAULT_RETURN_MULTIPLIER, PROJECTION_VOL_FACTOR,
    PROJECTION_BASE_YEAR, PROJECTION_STARTING_AMOUNT, PROJECTION_GOAL_TARGET,
)

logger = logging.getLogger(__name__)


class RiskMetrics(CamelModel):
    volatility: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0


class FundExposure(CamelModel):
    fund_id: str
    name: str
    category: str
    amount: float
    pct: float


class FeeAnalysis(CamelModel):
    weighted_expense_ratio: float
    annual_fee_cost: float


class FundDrift(CamelModel):
    fund_id: str
    actual: float
    target: float
    drift: float


class PortfolioDrift(CamelModel):
    model_id: str
    model_name: str
    funds: List[FundDrift]
    overall_drift: float
    status: str                  # aligned / minor-drift / significant-drift


class ProjectionPoint(CamelModel):
    year: int
    projected: int
    target: int
    lower: int
    upper: int


# ─────────────────────────────────────────────────────────────────────
# Risk metrics
# ─────────────────────────────────────────────────────────────────────

def goal_risk_metrics(goal: Goal, funds: Dict[str, Fund] = FUNDS) -> RiskMetrics:
    """Weight-normalised average of each fund's risk stats. Unknown funds are skipped."""
    total_weight = sum(f.weight for f in goal.portfolio.funds)
    if total_weight == 0:
        return RiskMetrics()

    known = [(funds[a.fund_id], a.weight) for a in goal.portfolio.funds if a.fund_id in funds]
    if not known:
        return RiskMetrics()

    w = np.array([weight for _, weight in known]) / total_weight
    stats = np.array([[f.volatility, f.max_drawdown, f.sharpe_ratio] for f, _ in known])
    vol, drawdown, sharpe = np.round(w @ stats, 2)
    return RiskMetrics(volatility=float(vol), max_drawdown=float(drawdown), sharpe_ratio=float(sharpe))


def client_risk_metrics(client: Client, funds: Dict[str, Fund] = FUNDS) -> RiskMetrics:
    """Goal metrics weighted by each goal's share of the client's invested amount."""
    total = client.total_invested
    if total == 0:
        return RiskMetrics()

    w = np.array([g.portfolio.total_invested for g in client.goals]) / total
    stats = np.array([
        [m.volatility, m.max_drawdown, m.sharpe_ratio]
        for m in (goal_risk_metrics(g, funds) for g in client.goals)
    ])
    vol, drawdown, sharpe = np.round(w @ stats, 2)
    return RiskMetrics(volatility=float(vol), max_drawdown=float(drawdown), sharpe_ratio=float(sharpe))


def client_weighted_returns(client: Client) -> Returns:
    total = client.total_invested
    if total == 0:
        return Returns()

    w = np.array([g.portfolio.total_invested for g in client.goals]) / total
    rets = np.array([[g.returns.ytd, g.returns.one_year, g.returns.three_year] for g in client.goals])
    ytd, one_year, three_year = np.round(w @ rets, 1)
    return Returns(ytd=float(ytd), one_year=float(one_year), three_year=float(three_year))


# ─────────────────────────────────────────────────────────────────────
# Exposure and fees
# ─────────────────────────────────────────────────────────────────────

def fund_amounts_frame(client: Client) -> pd.Series:
    """Invested amount per fund across goals, largest first."""
    rows = [
        {"fund_id": a.fund_id, "amount": a.amount}
        for g in client.goals for a in g.portfolio.funds
    ]
    if not rows:
        return pd.Series(dtype=float)
    amounts = pd.DataFrame(rows).groupby("fund_id", sort=False)["amount"].sum()
    return amounts.sort_values(ascending=False, kind="stable")


def fund_exposure(client: Client, funds: Dict[str, Fund] = FUNDS) -> List[FundExposure]:
    total = client.total_invested
    exposure = []
    for fund_id, amount in fund_amounts_frame(client).items():
        fund = funds.get(fund_id)
        exposure.append(FundExposure(
            fund_id=fund_id,
            name=fund.name if fund else fund_id,
            category=fund.category if fund else "Unknown",
            amount=float(amount),
            pct=round(float(amount) / total * 100, 1) if total else 0.0,
        ))
    return exposure


def fee_analysis(client: Client, funds: Dict[str, Fund] = FUNDS) -> FeeAnalysis:
    amounts = fund_amounts_frame(client)
    amounts = amounts[[fid in funds for fid in amounts.index]]
    if amounts.empty or amounts.sum() == 0:
        return FeeAnalysis(weighted_expense_ratio=0.0, annual_fee_cost=0.0)

    ratios = np.array([funds[fid].expense_ratio for fid in amounts.index])
    weighted = float(np.average(ratios, weights=amounts.values))
    return FeeAnalysis(
        weighted_expense_ratio=round(weighted, 2),
        annual_fee_cost=float(round(client.total_invested * weighted / 100)),
    )


# ─────────────────────────────────────────────────────────────────────
# Drift against a model portfolio
# ─────────────────────────────────────────────────────────────────────

def model_for_risk_profile(
    risk_profile: str,
    portfolios: Sequence[ModelPortfolio],
) -> Optional[ModelPortfolio]:
    """The model portfolio mapped to a client or goal risk profile, if any."""
    mapped = RISK_PROFILE_MODEL_MAP.get(risk_profile)
    if mapped is None:
        return None
    model_risk, category = mapped
    for mp in portfolios:
        if mp.risk_profile == model_risk and mp.category == category:
            return mp
    return None


def drift_status(overall: float) -> str:
    if overall < DRIFT_ALIGNED_MAX:
        return "aligned"
    if overall < DRIFT_MINOR_MAX:
        return "minor-drift"
    return "significant-drift"


def portfolio_drift(actual_weights: Dict[str, float], model: ModelPortfolio) -> PortfolioDrift:
    """
    Per-fund drift (actual - target, percentage points) over the union of
    funds. Overall drift is half the absolute sum: the share of the
    portfolio that would have to move.
    """
    targets = {f.fund_id: f.weight for f in model.funds}
    fund_ids = list(actual_weights) + [fid for fid in targets if fid not in actual_weights]

    rows = []
    for fid in fund_ids:
        actual = actual_weights.get(fid, 0.0)
        target = targets.get(fid, 0.0)
        rows.append(FundDrift(
            fund_id=fid, actual=round(actual, 1), target=target, drift=round(actual - target, 1),
        ))

    overall = round(sum(abs(actual_weights.get(fid, 0.0) - targets.get(fid, 0.0)) for fid in fund_ids) / 2, 1)
    return PortfolioDrift(
        model_id=model.id,
        model_name=model.name,
        funds=rows,
        overall_drift=overall,
        status=drift_status(overall),
    )


def goal_drift(goal: Goal, model: ModelPortfolio) -> PortfolioDrift:
    total_weight = sum(f.weight for f in goal.portfolio.funds)
    weights: Dict[str, float] = {}
    for a in goal.portfolio.funds:
        share = a.weight / total_weight * 100 if total_weight else 0.0
        weights[a.fund_id] = weights.get(a.fund_id, 0.0) + share
    return portfolio_drift(weights, model)


def client_drift(client: Client, model: ModelPortfolio) -> PortfolioDrift:
    total = client.total_invested
    weights = {
        fid: (float(amount) / total * 100 if total else 0.0)
        for fid, amount in fund_amounts_frame(client).items()
    }
    return portfolio_drift(weights, model)


# ─────────────────────────────────────────────────────────────────────
# Goal simulator
# ─────────────────────────────────────────────────────────────────────

def expected_return(risk_profile: str) -> float:
    return RISK_RETURN_MULTIPLIERS.get(risk_profile, DEFAULT_RETURN_MULTIPLIER)


def project_goal(
    monthly_savings: float,
    time_horizon: int,
    risk_profile: str,
    starting_amount: float = PROJECTION_STARTING_AMOUNT,
    goal_target: float = PROJECTION_GOAL_TARGET,
    base_year: int = PROJECTION_BASE_YEAR,
) -> List[ProjectionPoint]:
    """Year-by-year compounding with an uncertainty band widening as sqrt(years)."""
    annual = expected_return(risk_profile)
    vol = annual * PROJECTION_VOL_FACTOR
    span = max(time_horizon - base_year, 1)

    points = []
    cumulative = starting_amount
    for year in range(base_year, time_horizon + 1):
        n = year - base_year
        cumulative = cumulative * (1 + annual) + monthly_savings * 12
        band = float(vol * np.sqrt(n + 1))
        target = starting_amount + (goal_target - starting_amount) / span * n
        points.append(ProjectionPoint(
            year=year,
            projected=round(cumulative),
            target=round(target),
            lower=round(max(0.0, cumulative * (1 - band))),
            upper=round(cumulative * (1 + band)),
        ))
    return points


def goal_probability(
    monthly_savings: float,
    time_horizon: int,
    risk_profile: str,
    starting_amount: float = PROJECTION_STARTING_AMOUNT,
    goal_target: float = PROJECTION_GOAL_TARGET,
    base_year: int = PROJECTION_BASE_YEAR,
) -> int:
    """Heuristic success probability, clamped to [15, 99]."""
    annual = expected_return(risk_profile)
    years = time_horizon - base_year

    cumulative = starting_amount
    for _ in range(max(years, 0)):
        cumulative = cumulative * (1 + annual) + monthly_savings * 12

    ratio = cumulative / goal_target if goal_target else 0.0
    return int(min(99, max(15, round(ratio * 55 + years * 0.8))))
