"""
AdvisorDesk — DORA Alert Feed

Derives the advisor's notification list from the client book: flagged
clients, off-track goals, conservative portfolios losing money, open
follow-ups from the last meeting, plus one static market update.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Literal, Optional, Sequence

from advisordesk.models.schema import CamelModel, Client

AlertType = Literal["info", "warning", "success", "alert"]


class DoraAlert(CamelModel):
    id: str
    title: str
    description: str
    type: AlertType
    timestamp: datetime
    read: bool = False
    client_id: Optional[str] = None
    action_url: Optional[str] = None


def _meeting_time(day: date) -> datetime:
    return datetime.combine(day, time(), tzinfo=timezone.utc)


def client_alerts(client: Client, now: datetime) -> List[DoraAlert]:
    alerts = []
    url = f"/clients/{client.id}"

    if client.needs_action:
        alerts.append(DoraAlert(
            id=f"action-{client.id}",
            title="Action Required",
            description=f"{client.name}: {client.action_reason or 'Review required'}",
            type="alert",
            timestamp=now,
            client_id=client.id,
            action_url=url,
        ))

    off_track = client.goals_with_status("off-track")
    if off_track:
        alerts.append(DoraAlert(
            id=f"goals-{client.id}",
            title="Goals Off-Track",
            description=(
                f"{client.name} has {len(off_track)} goal(s) requiring attention: "
                f"{', '.join(g.name for g in off_track)}."
            ),
            type="warning",
            timestamp=now - timedelta(hours=2),
            client_id=client.id,
            action_url=url,
        ))

    if client.risk_profile == "Conservative" and client.returns.ytd < 0:
        alerts.append(DoraAlert(
            id=f"drift-{client.id}",
            title="Portfolio Review Suggestion",
            description=(
                f"{client.name} (Conservative) has negative YTD returns. "
                "Consider reviewing fixed income allocation."
            ),
            type="info",
            timestamp=now - timedelta(days=1),
            read=True,
            client_id=client.id,
            action_url=url,
        ))

    if client.meeting_notes:
        last = client.meeting_notes[-1]
        open_tasks = [t for t in last.follow_ups if not t.done]
        if open_tasks:
            alerts.append(DoraAlert(
                id=f"tasks-{client.id}",
                title="Open Follow-up Tasks",
                description=f"{client.name}: {len(open_tasks)} pending tasks from last meeting.",
                type="info",
                timestamp=_meeting_time(last.date),
                client_id=client.id,
                action_url=url,
            ))

    return alerts


def generate_dora_alerts(clients: Sequence[Client], now: Optional[datetime] = None) -> List[DoraAlert]:
    """All alerts for the book, newest first."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    alerts = []
    for client in clients:
        alerts.extend(client_alerts(client, now))

    alerts.append(DoraAlert(
        id="system-1",
        title="Market Update",
        description="PSEi closed up 1.2% today. Tech sector leading gains.",
        type="success",
        timestamp=now - timedelta(minutes=30),
        read=True,
    ))

    return sorted(alerts, key=lambda a: a.timestamp, reverse=True)
