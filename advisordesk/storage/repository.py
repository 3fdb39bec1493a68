"""
AdvisorDesk — Client Book Repository

The repository interface handed to request handlers, plus the in-memory
implementation used by the server. Nothing is persisted: the book is seeded
at construction and lost on restart.

Lookups never return None for a missing record; they raise a NotFoundError
subclass, which the API layer maps to HTTP 404.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from advisordesk.models.schema import (
    Client, ClientCreate, ClientUpdate,
    Goal, GoalCreate, GoalUpdate,
    MeetingNote,
    ModelPortfolio, ModelPortfolioCreate, ModelPortfolioUpdate,
)
from config.settings import MODEL_WEIGHT_TOLERANCE

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Base class for repository failures."""


class NotFoundError(StorageError):
    entity = "Record"

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"{self.entity} not found")


class ClientNotFoundError(NotFoundError):
    entity = "Client"


class GoalNotFoundError(NotFoundError):
    entity = "Goal"


class ModelPortfolioNotFoundError(NotFoundError):
    entity = "Model portfolio"


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def _check_goal_weights(goal: Goal) -> None:
    # Flagged, never rejected
    if not goal.portfolio.funds:
        return
    total = sum(f.weight for f in goal.portfolio.funds)
    if abs(total - 100) > MODEL_WEIGHT_TOLERANCE:
        logger.warning("Goal %s (%s) fund weights sum to %s, not 100", goal.id, goal.name, total)


# ─────────────────────────────────────────────────────────────────────
# Interface
# ─────────────────────────────────────────────────────────────────────

class ClientRepository(ABC):

    # Clients
    @abstractmethod
    def list_clients(self) -> List[Client]: ...

    @abstractmethod
    def get_client(self, client_id: str) -> Client: ...

    @abstractmethod
    def create_client(self, data: ClientCreate) -> Client: ...

    @abstractmethod
    def update_client(self, client_id: str, data: ClientUpdate) -> Client: ...

    @abstractmethod
    def delete_client(self, client_id: str) -> None: ...

    @abstractmethod
    def add_meeting_note(self, client_id: str, note: MeetingNote) -> Client: ...

    # Goals
    @abstractmethod
    def add_goal(self, client_id: str, data: GoalCreate) -> Goal: ...

    @abstractmethod
    def update_goal(self, client_id: str, goal_id: str, data: GoalUpdate) -> Goal: ...

    @abstractmethod
    def delete_goal(self, client_id: str, goal_id: str) -> None: ...

    # Model portfolios
    @abstractmethod
    def list_model_portfolios(self) -> List[ModelPortfolio]: ...

    @abstractmethod
    def list_model_portfolios_by_risk(self, risk_profile: str) -> List[ModelPortfolio]: ...

    @abstractmethod
    def get_model_portfolio(self, portfolio_id: str) -> ModelPortfolio: ...

    @abstractmethod
    def create_model_portfolio(self, data: ModelPortfolioCreate) -> ModelPortfolio: ...

    @abstractmethod
    def update_model_portfolio(self, portfolio_id: str, data: ModelPortfolioUpdate) -> ModelPortfolio: ...

    @abstractmethod
    def delete_model_portfolio(self, portfolio_id: str) -> None: ...


# ─────────────────────────────────────────────────────────────────────
# In-memory implementation
# ─────────────────────────────────────────────────────────────────────

class InMemoryClientRepository(ClientRepository):
    """
    Dict-backed repository. Returns deep copies so callers never hold a
    reference into the store.
    """

    def __init__(
        self,
        clients: Optional[Iterable[Client]] = None,
        model_portfolios: Optional[Iterable[ModelPortfolio]] = None,
    ):
        self._clients: Dict[str, Client] = {}
        self._model_portfolios: Dict[str, ModelPortfolio] = {}
        for c in clients or []:
            self._clients[c.id] = c.model_copy(deep=True)
        for mp in model_portfolios or []:
            self._model_portfolios[mp.id] = mp.model_copy(deep=True)

    @classmethod
    def with_seed_data(cls) -> "InMemoryClientRepository":
        from config.clients import CLIENTS
        from config.portfolios import MODEL_PORTFOLIOS
        return cls(clients=CLIENTS.values(), model_portfolios=MODEL_PORTFOLIOS)

    # ── Clients ──────────────────────────────────────────────────────

    def _client(self, client_id: str) -> Client:
        try:
            return self._clients[client_id]
        except KeyError:
            raise ClientNotFoundError(client_id) from None

    def list_clients(self) -> List[Client]:
        return [c.model_copy(deep=True) for c in self._clients.values()]

    def get_client(self, client_id: str) -> Client:
        return self._client(client_id).model_copy(deep=True)

    def create_client(self, data: ClientCreate) -> Client:
        fields = data.model_dump(exclude={"goals"})
        goals = [Goal(id=_new_id("g"), **g.model_dump()) for g in data.goals]
        client = Client(id=_new_id("c"), goals=goals, **fields)
        for goal in client.goals:
            _check_goal_weights(goal)
        self._clients[client.id] = client
        logger.info("Created client %s (%s) with %d goal(s)", client.id, client.name, len(goals))
        return client.model_copy(deep=True)

    def update_client(self, client_id: str, data: ClientUpdate) -> Client:
        existing = self._client(client_id)
        merged = existing.model_dump()
        merged.update(data.model_dump(exclude_unset=True))
        # Goals are never overwritten through a client update
        merged["goals"] = existing.model_dump()["goals"]
        updated = Client.model_validate(merged)
        self._clients[client_id] = updated
        logger.info("Updated client %s", client_id)
        return updated.model_copy(deep=True)

    def delete_client(self, client_id: str) -> None:
        self._client(client_id)
        del self._clients[client_id]
        logger.info("Deleted client %s", client_id)

    def add_meeting_note(self, client_id: str, note: MeetingNote) -> Client:
        client = self._client(client_id)
        client.meeting_notes.append(note.model_copy(deep=True))
        logger.info("Saved meeting note for %s with %d follow-up(s)", client_id, len(note.follow_ups))
        return client.model_copy(deep=True)

    # ── Goals ────────────────────────────────────────────────────────

    @staticmethod
    def _goal_index(client: Client, goal_id: str) -> int:
        for i, goal in enumerate(client.goals):
            if goal.id == goal_id:
                return i
        raise GoalNotFoundError(goal_id)

    def add_goal(self, client_id: str, data: GoalCreate) -> Goal:
        client = self._client(client_id)
        goal = Goal(id=_new_id("g"), **data.model_dump())
        _check_goal_weights(goal)
        client.goals.append(goal)
        logger.info("Added goal %s to client %s", goal.id, client_id)
        return goal.model_copy(deep=True)

    def update_goal(self, client_id: str, goal_id: str, data: GoalUpdate) -> Goal:
        client = self._client(client_id)
        idx = self._goal_index(client, goal_id)
        merged = client.goals[idx].model_dump()
        merged.update(data.model_dump(exclude_unset=True))
        merged["id"] = goal_id
        goal = Goal.model_validate(merged)
        _check_goal_weights(goal)
        client.goals[idx] = goal
        logger.info("Updated goal %s for client %s", goal_id, client_id)
        return goal.model_copy(deep=True)

    def delete_goal(self, client_id: str, goal_id: str) -> None:
        client = self._client(client_id)
        idx = self._goal_index(client, goal_id)
        del client.goals[idx]
        logger.info("Deleted goal %s from client %s", goal_id, client_id)

    # ── Model portfolios ─────────────────────────────────────────────

    def _portfolio(self, portfolio_id: str) -> ModelPortfolio:
        try:
            return self._model_portfolios[portfolio_id]
        except KeyError:
            raise ModelPortfolioNotFoundError(portfolio_id) from None

    def list_model_portfolios(self) -> List[ModelPortfolio]:
        return [mp.model_copy(deep=True) for mp in self._model_portfolios.values()]

    def list_model_portfolios_by_risk(self, risk_profile: str) -> List[ModelPortfolio]:
        return [
            mp.model_copy(deep=True)
            for mp in self._model_portfolios.values()
            if mp.risk_profile == risk_profile
        ]

    def get_model_portfolio(self, portfolio_id: str) -> ModelPortfolio:
        return self._portfolio(portfolio_id).model_copy(deep=True)

    def create_model_portfolio(self, data: ModelPortfolioCreate) -> ModelPortfolio:
        mp = ModelPortfolio(id=_new_id("mp"), **data.model_dump())
        self._model_portfolios[mp.id] = mp
        logger.info("Created model portfolio %s (%s)", mp.id, mp.name)
        return mp.model_copy(deep=True)

    def update_model_portfolio(self, portfolio_id: str, data: ModelPortfolioUpdate) -> ModelPortfolio:
        merged = self._portfolio(portfolio_id).model_dump()
        merged.update(data.model_dump(exclude_unset=True))
        merged["id"] = portfolio_id
        mp = ModelPortfolio.model_validate(merged)
        self._model_portfolios[portfolio_id] = mp
        logger.info("Updated model portfolio %s", portfolio_id)
        return mp.model_copy(deep=True)

    def delete_model_portfolio(self, portfolio_id: str) -> None:
        self._portfolio(portfolio_id)
        del self._model_portfolios[portfolio_id]
        logger.info("Deleted model portfolio %s", portfolio_id)
