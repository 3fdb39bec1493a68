"""
AdvisorDesk — Seed Client Book
Five clients with their goals, fund allocations and returns. Loaded into the
repository at startup; every change made through the API lives in memory only.
"""
from typing import Dict, List, Tuple

from advisordesk.models.schema import (
    Client, Goal, GoalFundAllocation, GoalPortfolio, Returns,
)


def _portfolio(allocations: List[Tuple[str, float, float]]) -> GoalPortfolio:
    """(fund_id, weight, amount) triples -> GoalPortfolio."""
    funds = [GoalFundAllocation(fund_id=f, weight=w, amount=a) for f, w, a in allocations]
    return GoalPortfolio(funds=funds, total_invested=sum(f.amount for f in funds))


def _returns(ytd: float, one_year: float, three_year: float) -> Returns:
    return Returns(ytd=ytd, one_year=one_year, three_year=three_year)


# ─────────────────────────────────────────────────────────────────────
# The Five Clients
# ─────────────────────────────────────────────────────────────────────

CLIENTS: Dict[str, Client] = {

    "c1": Client(
        id="c1",
        name="Maria Santos",
        age=35,
        risk_profile="Balanced",
        total_portfolio=5200000,
        cash_holdings=1300000,
        monthly_income=120000,
        returns=_returns(8.3, 10.1, 7.4),
        needs_action=False,
        joined_date="2022-03-15",
        goals=[
            Goal(
                id="g1", name="Child's Education (UST Tuition)", type="education",
                target_amount=3000000, current_amount=1800000, target_date="2032",
                probability=82, status="on-track", risk_profile="Balanced",
                monthly_contribution=15000,
                portfolio=_portfolio([("f1", 40, 720000), ("f2", 30, 540000), ("f6", 30, 540000)]),
                returns=_returns(9.1, 10.5, 7.8),
            ),
            Goal(
                id="g2", name="Retirement Fund", type="retirement",
                target_amount=15000000, current_amount=3200000, target_date="2050",
                probability=65, status="off-track", risk_profile="Growth",
                monthly_contribution=20000,
                portfolio=_portfolio([
                    ("f1", 35, 1120000), ("f3", 30, 960000), ("f4", 20, 640000), ("f5", 15, 480000),
                ]),
                returns=_returns(10.8, 12.3, 8.5),
            ),
            Goal(
                id="g3", name="Buying Property (Tagaytay)", type="property",
                target_amount=8000000, current_amount=5500000, target_date="2030",
                probability=91, status="ahead", risk_profile="Balanced",
                monthly_contribution=25000,
                portfolio=_portfolio([("f2", 40, 2200000), ("f6", 35, 1925000), ("f5", 25, 1375000)]),
                returns=_returns(6.2, 7.1, 6.0),
            ),
            Goal(
                id="g4", name="Medical Emergency Fund", type="medical",
                target_amount=1000000, current_amount=720000, target_date="2027",
                probability=88, status="on-track", risk_profile="Conservative",
                monthly_contribution=10000,
                portfolio=_portfolio([("f5", 60, 432000), ("f6", 40, 288000)]),
                returns=_returns(4.8, 5.2, 4.5),
            ),
        ],
    ),

    "c2": Client(
        id="c2",
        name="Jose Reyes",
        age=42,
        risk_profile="Growth",
        total_portfolio=12500000,
        cash_holdings=2000000,
        monthly_income=250000,
        returns=_returns(11.2, 13.8, 9.6),
        needs_action=True,
        action_reason="Retirement goal off-track, rebalancing recommended",
        joined_date="2020-11-02",
        goals=[
            Goal(
                id="g5", name="Retirement (Age 60)", type="retirement",
                target_amount=30000000, current_amount=8500000, target_date="2044",
                probability=58, status="off-track", risk_profile="Growth",
                monthly_contribution=40000,
                portfolio=_portfolio([
                    ("f1", 30, 2550000), ("f3", 25, 2125000), ("f4", 25, 2125000), ("f2", 20, 1700000),
                ]),
                returns=_returns(11.5, 14.2, 10.1),
            ),
            Goal(
                id="g6", name="Children's Education (Ateneo)", type="education",
                target_amount=5000000, current_amount=3200000, target_date="2030",
                probability=85, status="on-track", risk_profile="Balanced",
                monthly_contribution=20000,
                portfolio=_portfolio([("f1", 40, 1280000), ("f6", 35, 1120000), ("f5", 25, 800000)]),
                returns=_returns(8.9, 10.0, 7.5),
            ),
            Goal(
                id="g7", name="Investment Property (BGC Condo)", type="property",
                target_amount=15000000, current_amount=6800000, target_date="2033",
                probability=72, status="on-track", risk_profile="Growth",
                monthly_contribution=30000,
                portfolio=_portfolio([
                    ("f2", 35, 2380000), ("f3", 30, 2040000), ("f1", 20, 1360000), ("f6", 15, 1020000),
                ]),
                returns=_returns(9.8, 11.5, 8.2),
            ),
            Goal(
                id="g8", name="Wealth Growth Fund", type="growth",
                target_amount=20000000, current_amount=4500000, target_date="2040",
                probability=68, status="on-track", risk_profile="Aggressive",
                monthly_contribution=35000,
                portfolio=_portfolio([("f3", 35, 1575000), ("f4", 35, 1575000), ("f1", 30, 1350000)]),
                returns=_returns(13.2, 15.8, 11.0),
            ),
        ],
    ),

    "c3": Client(
        id="c3",
        name="Ana Dela Cruz",
        age=28,
        risk_profile="Aggressive",
        total_portfolio=1800000,
        cash_holdings=400000,
        monthly_income=85000,
        returns=_returns(14.5, 16.2, 11.8),
        needs_action=False,
        joined_date="2023-07-20",
        goals=[
            Goal(
                id="g9", name="Retirement (Age 55)", type="retirement",
                target_amount=25000000, current_amount=800000, target_date="2053",
                probability=72, status="on-track", risk_profile="Aggressive",
                monthly_contribution=15000,
                portfolio=_portfolio([("f3", 35, 280000), ("f4", 35, 280000), ("f1", 30, 240000)]),
                returns=_returns(14.8, 16.5, 12.0),
            ),
            Goal(
                id="g10", name="Emergency Savings", type="saving",
                target_amount=500000, current_amount=420000, target_date="2027",
                probability=95, status="ahead", risk_profile="Conservative",
                monthly_contribution=8000,
                portfolio=_portfolio([("f5", 70, 294000), ("f6", 30, 126000)]),
                returns=_returns(4.2, 4.8, 4.0),
            ),
        ],
    ),

    "c4": Client(
        id="c4",
        name="Ricardo Garcia",
        age=55,
        risk_profile="Conservative",
        total_portfolio=25000000,
        cash_holdings=5000000,
        monthly_income=350000,
        returns=_returns(5.1, 6.3, 5.8),
        needs_action=True,
        action_reason="Portfolio review due, annual rebalancing needed",
        joined_date="2019-01-10",
        goals=[
            Goal(
                id="g11", name="Retirement (2030)", type="retirement",
                target_amount=40000000, current_amount=22000000, target_date="2030",
                probability=78, status="on-track", risk_profile="Conservative",
                monthly_contribution=50000,
                portfolio=_portfolio([
                    ("f5", 35, 7700000), ("f6", 30, 6600000), ("f2", 20, 4400000), ("f1", 15, 3300000),
                ]),
                returns=_returns(5.5, 6.8, 6.0),
            ),
            Goal(
                id="g12", name="Grandchildren's Education Trust", type="education",
                target_amount=10000000, current_amount=3500000, target_date="2038",
                probability=70, status="on-track", risk_profile="Balanced",
                monthly_contribution=25000,
                portfolio=_portfolio([
                    ("f1", 35, 1225000), ("f6", 30, 1050000), ("f2", 20, 700000), ("f5", 15, 525000),
                ]),
                returns=_returns(7.2, 8.5, 7.0),
            ),
        ],
    ),

    "c5": Client(
        id="c5",
        name="Lourdes Bautista",
        age=47,
        risk_profile="Balanced",
        total_portfolio=8700000,
        cash_holdings=1500000,
        monthly_income=180000,
        returns=_returns(7.8, 9.2, 7.1),
        needs_action=False,
        joined_date="2021-05-08",
        goals=[
            Goal(
                id="g13", name="Retirement (Age 60)", type="retirement",
                target_amount=20000000, current_amount=6200000, target_date="2039",
                probability=74, status="on-track", risk_profile="Balanced",
                monthly_contribution=30000,
                portfolio=_portfolio([
                    ("f1", 30, 1860000), ("f6", 25, 1550000), ("f2", 25, 1550000), ("f5", 20, 1240000),
                ]),
                returns=_returns(7.5, 8.8, 7.0),
            ),
            Goal(
                id="g14", name="Son's Wedding Fund", type="saving",
                target_amount=2000000, current_amount=1500000, target_date="2028",
                probability=90, status="ahead", risk_profile="Conservative",
                monthly_contribution=15000,
                portfolio=_portfolio([("f5", 50, 750000), ("f6", 50, 750000)]),
                returns=_returns(5.0, 5.8, 5.2),
            ),
            Goal(
                id="g15", name="Medical Emergency", type="medical",
                target_amount=1500000, current_amount=1200000, target_date="2027",
                probability=92, status="ahead", risk_profile="Conservative",
                monthly_contribution=10000,
                portfolio=_portfolio([("f5", 70, 840000), ("f6", 30, 360000)]),
                returns=_returns(4.3, 5.0, 4.5),
            ),
        ],
    ),
}
