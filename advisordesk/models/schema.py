"""
AdvisorDesk — Domain Schema

Pydantic models for the client book. Attributes are snake_case in Python and
camelCase on the wire; both spellings are accepted on input.
"""

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

GoalStatus = Literal["on-track", "off-track", "ahead"]
ModelRiskProfile = Literal["Conservative", "Moderate", "Aggressive"]
ModelCategory = Literal["default", "low_volatility", "growth", "aggressive_growth"]

# Goal target dates start with a four-digit year
YEAR_PATTERN = r"^\d{4}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────────────────────────────
# Funds
# ─────────────────────────────────────────────────────────────────────

class Fund(CamelModel):
    id: str
    name: str
    category: str
    risk: str
    ytd_return: float
    expense_ratio: float
    volatility: float
    max_drawdown: float
    sharpe_ratio: float


# ─────────────────────────────────────────────────────────────────────
# Goals
# ─────────────────────────────────────────────────────────────────────

class GoalFundAllocation(CamelModel):
    fund_id: str
    weight: float
    amount: float = 0


class GoalPortfolio(CamelModel):
    funds: List[GoalFundAllocation] = Field(default_factory=list)
    total_invested: float = 0


class Returns(CamelModel):
    ytd: float = 0
    one_year: float = 0
    three_year: float = 0


class GoalCreate(CamelModel):
    name: str = Field(min_length=1)
    type: str = "saving"
    target_amount: float = Field(ge=0)
    current_amount: float = Field(default=0, ge=0)
    target_date: str = Field(pattern=YEAR_PATTERN)    # year, e.g. "2032"
    probability: float = Field(default=50, ge=0, le=100)
    status: GoalStatus = "on-track"
    risk_profile: str = "Balanced"
    portfolio: GoalPortfolio = Field(default_factory=GoalPortfolio)
    returns: Returns = Field(default_factory=Returns)
    monthly_contribution: float = Field(default=0, ge=0)


class Goal(GoalCreate):
    id: str

    @property
    def target_year(self) -> int:
        return int(self.target_date[:4])


class GoalUpdate(CamelModel):
    name: Optional[str] = None
    type: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None
    target_date: Optional[str] = Field(default=None, pattern=YEAR_PATTERN)
    probability: Optional[float] = Field(default=None, ge=0, le=100)
    status: Optional[GoalStatus] = None
    risk_profile: Optional[str] = None
    portfolio: Optional[GoalPortfolio] = None
    returns: Optional[Returns] = None
    monthly_contribution: Optional[float] = None


# ─────────────────────────────────────────────────────────────────────
# Meeting notes
# ─────────────────────────────────────────────────────────────────────

class FollowUpTask(CamelModel):
    task: str
    done: bool = False


class MeetingNote(CamelModel):
    date: datetime.date
    notes: str = ""
    follow_ups: List[FollowUpTask] = Field(default_factory=list)


class MeetingNoteCreate(CamelModel):
    date: Optional[datetime.date] = None
    notes: str = ""
    follow_ups: List[FollowUpTask] = Field(default_factory=list)

    def to_note(self, today: Optional[datetime.date] = None) -> MeetingNote:
        when = self.date or today or datetime.date.today()
        return MeetingNote(date=when, notes=self.notes, follow_ups=self.follow_ups)


# ─────────────────────────────────────────────────────────────────────
# Clients
# ─────────────────────────────────────────────────────────────────────

class _ClientFields(CamelModel):
    name: str = Field(min_length=1)
    age: int = Field(ge=0)
    risk_profile: str
    total_portfolio: float = Field(gt=0)
    cash_holdings: float = Field(default=0, ge=0)
    monthly_income: float = Field(default=0, ge=0)
    returns: Returns = Field(default_factory=Returns)
    needs_action: bool = False
    action_reason: Optional[str] = None
    joined_date: datetime.date
    meeting_notes: List[MeetingNote] = Field(default_factory=list)


class ClientCreate(_ClientFields):
    goals: List[GoalCreate] = Field(default_factory=list)


class Client(_ClientFields):
    id: str
    goals: List[Goal] = Field(default_factory=list)

    @property
    def cash_pct(self) -> float:
        return self.cash_holdings / self.total_portfolio * 100

    @property
    def total_invested(self) -> float:
        return sum(g.portfolio.total_invested for g in self.goals)

    def goals_with_status(self, status: str) -> List[Goal]:
        return [g for g in self.goals if g.status == status]


class ClientUpdate(CamelModel):
    """Partial client update. Goals are managed through their own endpoints."""
    name: Optional[str] = None
    age: Optional[int] = None
    risk_profile: Optional[str] = None
    total_portfolio: Optional[float] = None
    cash_holdings: Optional[float] = None
    monthly_income: Optional[float] = None
    returns: Optional[Returns] = None
    needs_action: Optional[bool] = None
    action_reason: Optional[str] = None
    joined_date: Optional[datetime.date] = None
    meeting_notes: Optional[List[MeetingNote]] = None


# ─────────────────────────────────────────────────────────────────────
# Model portfolios
# ─────────────────────────────────────────────────────────────────────

class ModelPortfolioFund(CamelModel):
    fund_id: str
    weight: float = Field(ge=0, le=100)


class ModelPortfolioCreate(CamelModel):
    name: str
    risk_profile: ModelRiskProfile
    category: ModelCategory
    description: str
    funds: List[ModelPortfolioFund]

    @property
    def total_weight(self) -> float:
        return sum(f.weight for f in self.funds)


class ModelPortfolio(ModelPortfolioCreate):
    id: str


class ModelPortfolioUpdate(CamelModel):
    name: Optional[str] = None
    risk_profile: Optional[ModelRiskProfile] = None
    category: Optional[ModelCategory] = None
    description: Optional[str] = None
    funds: Optional[List[ModelPortfolioFund]] = None
