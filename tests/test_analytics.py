"""
Tests for fund-weighted portfolio analytics and the goal simulator.
"""

import pytest

from advisordesk.analytics.metrics import (
    client_drift, client_risk_metrics, client_weighted_returns, drift_status,
    fee_analysis, fund_exposure, goal_drift, goal_probability, goal_risk_metrics,
    model_for_risk_profile, portfolio_drift, project_goal,
)
from advisordesk.models.schema import Goal, ModelPortfolio
from config.clients import CLIENTS
from config.portfolios import MODEL_PORTFOLIOS


def _goal(allocations, **extra):
    data = {
        "id": "gx", "name": "Test", "target_amount": 100, "target_date": "2030",
        "portfolio": {
            "funds": [{"fund_id": f, "weight": w, "amount": a} for f, w, a in allocations],
            "total_invested": sum(a for _, _, a in allocations),
        },
    }
    data.update(extra)
    return Goal.model_validate(data)


def _model(**weights):
    return ModelPortfolio(
        id="mpx", name="Test Model", risk_profile="Moderate", category="default",
        description="", funds=[{"fund_id": f, "weight": w} for f, w in weights.items()],
    )


class TestRiskMetrics:

    def test_goal_metrics_weighted(self):
        g4 = CLIENTS["c1"].goals[3]
        metrics = goal_risk_metrics(g4)
        assert metrics.volatility == pytest.approx(4.12)
        assert metrics.max_drawdown == pytest.approx(-5.32)
        assert metrics.sharpe_ratio == pytest.approx(2.07)

    def test_unknown_funds_skipped_but_weight_counted(self):
        metrics = goal_risk_metrics(_goal([("f5", 50, 50), ("zz", 50, 50)]))
        assert metrics.volatility == pytest.approx(0.6)

    def test_zero_weight_goal(self):
        assert goal_risk_metrics(_goal([])).volatility == 0

    def test_client_metrics_weighted_by_invested(self):
        client = CLIENTS["c1"]
        metrics = client_risk_metrics(client)
        total = client.total_invested
        expected = sum(
            goal_risk_metrics(g).volatility * g.portfolio.total_invested / total for g in client.goals
        )
        assert metrics.volatility == pytest.approx(expected, abs=0.01)

    def test_client_without_investments(self):
        client = CLIENTS["c1"].model_copy(update={"goals": []})
        assert client_risk_metrics(client).sharpe_ratio == 0
        assert client_weighted_returns(client).ytd == 0

    def test_weighted_returns(self):
        client = CLIENTS["c3"]
        # g9 800k at 14.8, g10 420k at 4.2
        assert client_weighted_returns(client).ytd == pytest.approx(round((800000 * 14.8 + 420000 * 4.2) / 1220000, 1))


class TestExposureAndFees:

    def test_fund_exposure_descending(self):
        exposure = fund_exposure(CLIENTS["c4"])
        assert exposure[0].fund_id == "f5"
        assert exposure[0].amount == 8225000
        assert exposure[0].pct == pytest.approx(32.3)
        amounts = [e.amount for e in exposure]
        assert amounts == sorted(amounts, reverse=True)

    def test_fee_analysis(self):
        client = CLIENTS["c3"]
        fees = fee_analysis(client)
        # f3 280k@2.0, f4 280k@1.85, f1 240k@1.75, f5 294k@0.5, f6 126k@1.25
        weighted = (280000 * 2.0 + 280000 * 1.85 + 240000 * 1.75 + 294000 * 0.5 + 126000 * 1.25) / 1220000
        assert fees.weighted_expense_ratio == pytest.approx(round(weighted, 2))
        assert fees.annual_fee_cost == pytest.approx(round(1220000 * weighted / 100))


class TestDrift:

    @pytest.mark.parametrize("overall, status", [
        (0, "aligned"), (4.9, "aligned"), (5, "minor-drift"), (9.9, "minor-drift"), (10, "significant-drift"),
    ])
    def test_status_bands(self, overall, status):
        assert drift_status(overall) == status

    def test_union_of_funds(self):
        drift = portfolio_drift({"f1": 60, "f2": 40}, _model(f1=50, f5=50))
        by_fund = {f.fund_id: f.drift for f in drift.funds}
        assert by_fund == {"f1": 10, "f2": 40, "f5": -50}
        assert drift.overall_drift == 50
        assert drift.status == "significant-drift"

    def test_minor_drift(self):
        drift = portfolio_drift({"f1": 57, "f6": 43}, _model(f1=50, f6=50))
        assert drift.overall_drift == 7
        assert drift.status == "minor-drift"

    def test_goal_drift_normalises_weights(self):
        goal = _goal([("f1", 30, 30), ("f6", 30, 30)])
        assert goal_drift(goal, _model(f1=50, f6=50)).overall_drift == 0

    def test_risk_profile_mapping(self):
        assert model_for_risk_profile("Balanced", MODEL_PORTFOLIOS).id == "mp2"
        assert model_for_risk_profile("Growth", MODEL_PORTFOLIOS).id == "mp5"
        assert model_for_risk_profile("Conservative", MODEL_PORTFOLIOS).id == "mp1"
        assert model_for_risk_profile("Aggressive", MODEL_PORTFOLIOS).id == "mp3"
        assert model_for_risk_profile("Exotic", MODEL_PORTFOLIOS) is None

    def test_client_drift_against_mapped_model(self):
        maria = CLIENTS["c1"]
        drift = client_drift(maria, model_for_risk_profile(maria.risk_profile, MODEL_PORTFOLIOS))
        assert drift.model_id == "mp2"
        assert drift.status == "significant-drift"


class TestProjection:

    def test_single_year(self):
        points = project_goal(0, 2026, "Conservative", starting_amount=1000, goal_target=2000)
        assert len(points) == 1
        p = points[0]
        assert (p.year, p.projected, p.target) == (2026, 1040, 1000)
        assert (p.lower, p.upper) == (1028, 1052)

    def test_horizon_inclusive_and_target_path_reaches_goal(self):
        points = project_goal(10000, 2036, "Balanced", starting_amount=2000000, goal_target=15000000)
        assert [p.year for p in points] == list(range(2026, 2037))
        assert points[-1].target == 15000000
        assert all(p.lower <= p.projected <= p.upper for p in points)

    def test_unknown_profile_uses_default_return(self):
        a = project_goal(5000, 2030, "Balanced")
        b = project_goal(5000, 2030, "Exotic")
        assert a == b

    def test_probability(self):
        assert goal_probability(0, 2026, "Conservative", starting_amount=1000, goal_target=1000) == 55
        assert goal_probability(0, 2026, "Conservative", starting_amount=1, goal_target=1000) == 15
        assert goal_probability(1000000, 2060, "Aggressive") == 99
