"""
Tests for the in-memory client book repository.
"""

import pytest
from pydantic import ValidationError

from advisordesk.models.schema import (
    ClientCreate, ClientUpdate, GoalCreate, GoalUpdate, MeetingNote,
    ModelPortfolioCreate, ModelPortfolioUpdate,
)
from advisordesk.storage.repository import (
    ClientNotFoundError, GoalNotFoundError, InMemoryClientRepository,
    ModelPortfolioNotFoundError, NotFoundError,
)


@pytest.fixture
def repo():
    return InMemoryClientRepository.with_seed_data()


def _new_client(**overrides):
    data = {
        "name": "Carmen Lim",
        "age": 39,
        "riskProfile": "Balanced",
        "totalPortfolio": 3000000,
        "cashHoldings": 300000,
        "monthlyIncome": 95000,
        "joinedDate": "2026-01-05",
        "goals": [{
            "name": "House Downpayment",
            "type": "property",
            "targetAmount": 1500000,
            "targetDate": "2029",
            "portfolio": {"funds": [{"fundId": "f6", "weight": 100, "amount": 500000}], "totalInvested": 500000},
        }],
    }
    data.update(overrides)
    return ClientCreate.model_validate(data)


class TestSeedData:

    def test_seeded_book(self, repo):
        assert [c.id for c in repo.list_clients()] == ["c1", "c2", "c3", "c4", "c5"]
        assert len(repo.list_model_portfolios()) == 6

    def test_instances_are_isolated(self):
        a = InMemoryClientRepository.with_seed_data()
        b = InMemoryClientRepository.with_seed_data()
        a.delete_client("c1")
        assert b.get_client("c1").name == "Maria Santos"

    def test_returned_records_are_copies(self, repo):
        client = repo.get_client("c1")
        client.name = "Changed"
        assert repo.get_client("c1").name == "Maria Santos"


class TestClients:

    def test_create_generates_ids(self, repo):
        client = repo.create_client(_new_client())
        assert client.id.startswith("c_")
        assert client.goals[0].id.startswith("g_")
        assert repo.get_client(client.id) == client

    def test_missing_client_raises(self, repo):
        with pytest.raises(ClientNotFoundError) as exc:
            repo.get_client("nope")
        assert str(exc.value) == "Client not found"
        assert isinstance(exc.value, NotFoundError)

    def test_update_preserves_goals(self, repo):
        before = repo.get_client("c1")
        updated = repo.update_client("c1", ClientUpdate(name="Maria S. Santos", needs_action=True))
        assert updated.name == "Maria S. Santos"
        assert updated.needs_action is True
        assert updated.goals == before.goals

    def test_update_rejects_invalid_merge(self, repo):
        with pytest.raises(ValidationError):
            repo.update_client("c1", ClientUpdate(age=-5))
        assert repo.get_client("c1").age == 35

    def test_delete(self, repo):
        repo.delete_client("c3")
        with pytest.raises(ClientNotFoundError):
            repo.get_client("c3")
        with pytest.raises(ClientNotFoundError):
            repo.delete_client("c3")

    def test_add_meeting_note(self, repo):
        note = MeetingNote(date="2026-10-01", notes="Quarterly review", follow_ups=[{"task": "Send proposal"}])
        client = repo.add_meeting_note("c1", note)
        assert client.meeting_notes[-1].follow_ups[0].done is False


class TestGoals:

    def test_add_goal(self, repo):
        goal = repo.add_goal("c3", GoalCreate(name="Travel Fund", target_amount=300000, target_date="2028"))
        assert goal.id.startswith("g_")
        assert len(repo.get_client("c3").goals) == 3

    def test_uneven_weights_are_logged_not_rejected(self, repo, caplog):
        data = GoalCreate.model_validate({
            "name": "Lopsided", "targetAmount": 100, "targetDate": "2030",
            "portfolio": {"funds": [{"fundId": "f1", "weight": 60}]},
        })
        goal = repo.add_goal("c3", data)
        assert goal.portfolio.funds[0].weight == 60
        assert "not 100" in caplog.text

    def test_weight_tolerance_comes_from_settings(self, repo, caplog, monkeypatch):
        monkeypatch.setattr("advisordesk.storage.repository.MODEL_WEIGHT_TOLERANCE", 1.0)
        data = GoalCreate.model_validate({
            "name": "Nearly Even", "targetAmount": 100, "targetDate": "2030",
            "portfolio": {"funds": [{"fundId": "f1", "weight": 60}, {"fundId": "f6", "weight": 39.5}]},
        })
        repo.add_goal("c3", data)
        assert "not 100" not in caplog.text

    def test_target_date_must_start_with_year(self):
        with pytest.raises(ValidationError):
            GoalCreate(name="Someday", target_amount=100, target_date="TBD")
        with pytest.raises(ValidationError):
            GoalUpdate(target_date="soon")

    def test_update_goal(self, repo):
        goal = repo.update_goal("c1", "g2", GoalUpdate(status="on-track", probability=76))
        assert goal.id == "g2"
        assert goal.status == "on-track"
        assert goal.target_amount == 15000000

    def test_goal_of_other_client_not_found(self, repo):
        with pytest.raises(GoalNotFoundError):
            repo.update_goal("c2", "g1", GoalUpdate(name="x"))

    def test_delete_goal(self, repo):
        repo.delete_goal("c1", "g4")
        assert [g.id for g in repo.get_client("c1").goals] == ["g1", "g2", "g3"]


class TestModelPortfolios:

    def test_by_risk(self, repo):
        assert [mp.id for mp in repo.list_model_portfolios_by_risk("Conservative")] == ["mp1", "mp4"]
        assert repo.list_model_portfolios_by_risk("Unknown") == []

    def test_create_update_delete(self, repo):
        mp = repo.create_model_portfolio(ModelPortfolioCreate(
            name="Income Tilt", risk_profile="Moderate", category="default",
            description="More income", funds=[{"fund_id": "f6", "weight": 100}],
        ))
        assert mp.id.startswith("mp_")
        updated = repo.update_model_portfolio(mp.id, ModelPortfolioUpdate(name="Income Tilt II"))
        assert updated.name == "Income Tilt II"
        assert updated.funds == mp.funds
        repo.delete_model_portfolio(mp.id)
        with pytest.raises(ModelPortfolioNotFoundError):
            repo.get_model_portfolio(mp.id)
