"""
AdvisorDesk — Fund Catalog & Default Model Portfolios
"""
from typing import Dict, List

from advisordesk.models.schema import Fund, ModelPortfolio, ModelPortfolioFund


# ─────────────────────────────────────────────────────────────────────
# Fund universe
# ─────────────────────────────────────────────────────────────────────

FUNDS: Dict[str, Fund] = {
    "f1": Fund(
        id="f1", name="Manulife Global Franchise Fund", category="Global Equity",
        risk="Moderate-High", ytd_return=12.5, expense_ratio=1.75,
        volatility=14.2, max_drawdown=-18.5, sharpe_ratio=0.88,
    ),
    "f2": Fund(
        id="f2", name="Manulife Asia Pacific REIT Fund", category="Real Estate",
        risk="Moderate", ytd_return=7.2, expense_ratio=1.5,
        volatility=11.8, max_drawdown=-15.2, sharpe_ratio=0.61,
    ),
    "f3": Fund(
        id="f3", name="Manulife Philippine Equity Fund", category="Philippine Equity",
        risk="High", ytd_return=9.8, expense_ratio=2.0,
        volatility=19.5, max_drawdown=-28.3, sharpe_ratio=0.50,
    ),
    "f4": Fund(
        id="f4", name="Manulife Dragon Growth Fund", category="Greater China Equity",
        risk="High", ytd_return=11.3, expense_ratio=1.85,
        volatility=22.1, max_drawdown=-32.6, sharpe_ratio=0.51,
    ),
    "f5": Fund(
        id="f5", name="Manulife Peso Money Market Fund", category="Money Market",
        risk="Low", ytd_return=3.5, expense_ratio=0.5,
        volatility=1.2, max_drawdown=-0.8, sharpe_ratio=2.92,
    ),
    "f6": Fund(
        id="f6", name="Manulife Income Builder Fund", category="Balanced",
        risk="Moderate", ytd_return=6.8, expense_ratio=1.25,
        volatility=8.5, max_drawdown=-12.1, sharpe_ratio=0.80,
    ),
}


def _funds(**weights: float) -> List[ModelPortfolioFund]:
    return [ModelPortfolioFund(fund_id=fid, weight=w) for fid, w in weights.items()]


# ─────────────────────────────────────────────────────────────────────
# Default model portfolios (weights sum to 100)
# ─────────────────────────────────────────────────────────────────────

MODEL_PORTFOLIOS: List[ModelPortfolio] = [
    ModelPortfolio(
        id="mp1", name="Conservative Default", risk_profile="Conservative", category="default",
        description="Capital preservation with stable income focus. Heavy allocation to money market and balanced funds.",
        funds=_funds(f5=45, f6=35, f2=20),
    ),
    ModelPortfolio(
        id="mp2", name="Moderate Default", risk_profile="Moderate", category="default",
        description="Balanced growth and income. Mix of equity, balanced, and fixed income funds.",
        funds=_funds(f1=30, f6=25, f2=25, f5=20),
    ),
    ModelPortfolio(
        id="mp3", name="Aggressive Default", risk_profile="Aggressive", category="default",
        description="Maximum growth potential. Heavy equity allocation across global and Philippine markets.",
        funds=_funds(f3=30, f4=30, f1=25, f2=15),
    ),
    ModelPortfolio(
        id="mp4", name="Conservative Low Volatility", risk_profile="Conservative", category="low_volatility",
        description="Ultra-low volatility with money market dominance for near-term goals.",
        funds=_funds(f5=60, f6=30, f2=10),
    ),
    ModelPortfolio(
        id="mp5", name="Moderate Growth", risk_profile="Moderate", category="growth",
        description="Growth-tilted moderate portfolio with higher equity exposure.",
        funds=_funds(f1=35, f3=25, f6=20, f2=20),
    ),
    ModelPortfolio(
        id="mp6", name="Aggressive Growth", risk_profile="Aggressive", category="aggressive_growth",
        description="Concentrated high-growth equity portfolio for long-term wealth accumulation.",
        funds=_funds(f3=35, f4=35, f1=30),
    ),
]
