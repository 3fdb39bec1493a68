"""
Tests for the DORA alert feed.
"""

from datetime import datetime, timedelta, timezone

import pytest

from advisordesk.dora.alerts import generate_dora_alerts
from advisordesk.models.schema import MeetingNote
from config.clients import CLIENTS

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clients():
    return [c.model_copy(deep=True) for c in CLIENTS.values()]


class TestGenerateDoraAlerts:

    def test_seed_book_alerts_newest_first(self, clients):
        alerts = generate_dora_alerts(clients, now=NOW)
        assert [a.id for a in alerts] == ["action-c2", "action-c4", "system-1", "goals-c1", "goals-c2"]

    def test_timestamps_and_read_flags(self, clients):
        alerts = {a.id: a for a in generate_dora_alerts(clients, now=NOW)}
        assert alerts["goals-c1"].timestamp == NOW - timedelta(hours=2)
        assert alerts["system-1"].timestamp == NOW - timedelta(minutes=30)
        assert alerts["system-1"].read is True
        assert alerts["action-c2"].read is False
        assert alerts["action-c2"].action_url == "/clients/c2"

    def test_conservative_negative_ytd(self, clients):
        ricardo = clients[3]
        ricardo.returns.ytd = -1.5
        alerts = {a.id: a for a in generate_dora_alerts(clients, now=NOW)}
        assert alerts["drift-c4"].timestamp == NOW - timedelta(days=1)
        assert alerts["drift-c4"].type == "info"

    def test_open_follow_ups_from_last_meeting(self, clients):
        ana = clients[2]
        ana.meeting_notes = [
            MeetingNote(date="2026-06-01", notes="old", follow_ups=[{"task": "a", "done": False}]),
            MeetingNote(date="2026-10-01", notes="latest", follow_ups=[
                {"task": "b", "done": True}, {"task": "c", "done": False},
            ]),
        ]
        alerts = generate_dora_alerts(clients, now=NOW)
        tasks = next(a for a in alerts if a.id == "tasks-c3")
        assert tasks.timestamp == datetime(2026, 10, 1, tzinfo=timezone.utc)
        assert "1 pending tasks" in tasks.description
        assert alerts[-1].id == "tasks-c3"

    def test_completed_follow_ups_raise_nothing(self, clients):
        clients[2].meeting_notes = [
            MeetingNote(date="2026-10-01", follow_ups=[{"task": "b", "done": True}]),
        ]
        assert "tasks-c3" not in [a.id for a in generate_dora_alerts(clients, now=NOW)]

    def test_empty_book_still_has_system_alert(self):
        assert [a.id for a in generate_dora_alerts([], now=NOW)] == ["system-1"]

    def test_naive_now_treated_as_utc(self, clients):
        alerts = generate_dora_alerts(clients, now=datetime(2026, 10, 19, 12, 0))
        assert alerts[0].timestamp.tzinfo is not None
