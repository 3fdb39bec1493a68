"""
AdvisorDesk — Trade Instructions

Renders the client-facing confirmation email for a proposed goal
reallocation. Nothing is sent or executed; the email is written to the log.
"""

import json
import logging
from typing import List, Optional

from pydantic import Field

from advisordesk.models.schema import CamelModel
from config.settings import TRADE_WEIGHT_TOLERANCE

logger = logging.getLogger(__name__)

EMAIL_RULE = "[EMAIL SIMULATION] ---------------------------------------------------"


class TradeFund(CamelModel):
    fund_id: str
    weight: float = Field(ge=0, le=100)
    amount: Optional[float] = None


class TradePortfolio(CamelModel):
    name: Optional[str] = None
    funds: List[TradeFund] = Field(min_length=1)
    total_invested: Optional[float] = None

    @property
    def total_weight(self) -> float:
        return sum(f.weight for f in self.funds)


class TradeRequest(CamelModel):
    goal_id: str
    client_name: str = Field(min_length=1)
    portfolio: TradePortfolio


def weights_balanced(portfolio: TradePortfolio) -> bool:
    return abs(portfolio.total_weight - 100) <= TRADE_WEIGHT_TOLERANCE


def render_trade_email(trade: TradeRequest) -> str:
    details = json.dumps(
        trade.portfolio.model_dump(by_alias=True, exclude_none=True), indent=2,
    )
    return f"""To: {trade.client_name} <client@example.com>
Subject: Action Required: Confirm your Portfolio Trade for Goal {trade.goal_id}

Dear {trade.client_name},

Your advisor has proposed a new portfolio allocation for your goal.
Please log in to your dashboard to review and confirm the trade execution.

Portfolio Details:
{details}"""


def send_trade_instructions(trade: TradeRequest) -> str:
    """Render the confirmation email and log it in place of delivery."""
    email = render_trade_email(trade)
    logger.info("\n%s\n%s\n\n%s\n", EMAIL_RULE, email, EMAIL_RULE)
    return email
