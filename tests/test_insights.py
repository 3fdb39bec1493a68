"""
Tests for actionable insights, copilot insights and meeting prep.
"""

from datetime import date

import pytest

from advisordesk.analytics.insights import IconKind, copilot_insights, generate_actionable_insights
from advisordesk.analytics.meeting_prep import prepare_meeting
from config.clients import CLIENTS
from config.portfolios import MODEL_PORTFOLIOS


@pytest.fixture
def clients():
    return [c.model_copy(deep=True) for c in CLIENTS.values()]


def _client(client_id, **update):
    return CLIENTS[client_id].model_copy(deep=True, update=update)


class TestActionableInsights:

    def test_october_adds_tax_planning(self, clients):
        insights = generate_actionable_insights(clients, today=date(2026, 10, 19))
        seasonal = [i for i in insights if i.id.startswith("seasonal-9-")]
        assert len(seasonal) == 5
        assert all(i.priority == 8 and i.action_type == "tax_harvest" for i in seasonal)

    def test_january_adds_contribution_room(self, clients):
        insights = generate_actionable_insights(clients, today=date(2027, 1, 5))
        assert {i.priority for i in insights if i.id.startswith("seasonal-")} == {7}
        assert "seasonal-0-c1" in [i.id for i in insights]

    def test_retirement_one_year_out(self, clients):
        insights = generate_actionable_insights(clients, today=date(2029, 3, 1))
        assert [i.id for i in insights] == [
            "lifecycle-retire-c4", "legacy-action-c2", "legacy-action-c4",
        ]
        assert insights[0].priority == 10

    def test_small_accounts_skip_seasonal(self):
        small = _client("c3", total_portfolio=90000)
        assert generate_actionable_insights([small], today=date(2026, 10, 1)) == []

    def test_low_sharpe_flags_efficiency(self):
        # unlisted funds carry no risk stats, so Sharpe collapses to 0
        client = _client("c3")
        for goal in client.goals:
            for fund in goal.portfolio.funds:
                fund.fund_id = "unlisted"
        insights = generate_actionable_insights([client], today=date(2026, 3, 1))
        assert [i.id for i in insights] == ["risk-sharpe-c3"]

    def test_conservative_never_gets_efficiency_alert(self):
        client = _client("c3", risk_profile="Conservative")
        for goal in client.goals:
            for fund in goal.portfolio.funds:
                fund.fund_id = "unlisted"
        assert generate_actionable_insights([client], today=date(2026, 3, 1)) == []


class TestCopilotInsights:

    def test_maria(self):
        insights = copilot_insights(CLIENTS["c1"], today=date(2026, 10, 19))
        ids = [i.id for i in insights]
        assert ids[0] == "action-g2"
        assert "cash-drag" in ids
        assert "ahead-summary" in ids
        assert "all-good" not in ids
        assert ids[-3:] == ["inflation-talk", "dca-talk", "retirement-talk"]

    def test_icons_are_tags(self):
        insights = copilot_insights(CLIENTS["c1"], today=date(2026, 10, 19))
        cash = next(i for i in insights if i.id == "cash-drag")
        assert cash.icon is IconKind.BANKNOTE
        assert cash.model_dump(by_alias=True, mode="json")["icon"] == "banknote"

    def test_retirement_age(self):
        insights = copilot_insights(CLIENTS["c1"], today=date(2026, 10, 19))
        retirement = next(i for i in insights if i.id == "retirement-talk")
        # born ~1991, target 2050
        assert "age ~59" in retirement.message

    def test_risk_age_mismatch(self):
        client = _client("c3", age=52)
        assert "risk-mismatch" in [i.id for i in copilot_insights(client)]

    def test_concentration_above_thirty_five_percent(self):
        client = _client("c3")
        client.goals[1].portfolio.funds[0].amount = 900000
        client.goals[1].portfolio.total_invested = 1026000
        ids = [i.id for i in copilot_insights(client)]
        assert "concentration" in ids

    def test_strong_position(self):
        ids = [i.id for i in copilot_insights(CLIENTS["c5"])]
        assert "all-good" in ids


class TestMeetingPrep:

    def test_maria_agenda(self):
        prep = prepare_meeting(CLIENTS["c1"], MODEL_PORTFOLIOS)
        titles = [a.title.split(" (")[0] for a in prep.agenda]
        assert titles == [
            "Welcome & Relationship Check-In",
            "Off-Track Goals Review",
            "Portfolio Rebalancing",
            "Performance Review",
            "Cash Management",
            "Surplus Review",
            "Fee & Expense Review",
            "Action Items & Next Steps",
        ]
        assert prep.total_duration == 55
        assert prep.drift.model_id == "mp2"

    def test_cash_at_twenty_five_percent_is_medium(self):
        prep = prepare_meeting(CLIENTS["c1"], MODEL_PORTFOLIOS)
        cash = next(a for a in prep.agenda if a.title.startswith("Cash Management"))
        assert cash.priority == "medium"

    def test_follow_ups(self):
        prep = prepare_meeting(CLIENTS["c1"], MODEL_PORTFOLIOS)
        assert prep.suggested_follow_ups[0] == "Increase monthly contribution for Retirement Fund"
        assert "Set up DCA schedule for idle cash deployment" in prep.suggested_follow_ups
        assert prep.suggested_follow_ups[-1] == "Schedule next quarterly review meeting"

    def test_talking_points(self):
        prep = prepare_meeting(CLIENTS["c1"], MODEL_PORTFOLIOS)
        assert prep.talking_points[0].type == "success"
        assert any(tp.text.startswith("BSP inflation at 5.3%") for tp in prep.talking_points)

    def test_unmapped_profile_skips_rebalancing(self):
        client = _client("c1", risk_profile="Bespoke")
        prep = prepare_meeting(client, MODEL_PORTFOLIOS)
        assert prep.drift is None
        assert not any(a.title.startswith("Portfolio Rebalancing") for a in prep.agenda)
