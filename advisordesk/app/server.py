"""
AdvisorDesk — FastAPI Backend

Client/goal/model-portfolio CRUD, the DORA assistant, alerts, analytics
and meeting prep for the advisor dashboard. State lives in an injected
in-memory repository seeded at import; nothing survives a restart.
"""

import logging
import os
import sys
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

# Add project root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from config.settings import (
    APP_NAME, APP_VERSION, LOG_LEVEL, CORS_ORIGINS, HOST, PORT,
    MODEL_WEIGHT_TOLERANCE, PROJECTION_STARTING_AMOUNT, PROJECTION_GOAL_TARGET,
    PROJECTION_BASE_YEAR, PROJECTION_MAX_YEARS,
)
from config.portfolios import FUNDS
from advisordesk.analytics.insights import copilot_insights, generate_actionable_insights
from advisordesk.analytics.meeting_prep import prepare_meeting
from advisordesk.analytics.metrics import (
    client_drift, client_risk_metrics, client_weighted_returns, expected_return,
    fee_analysis, fund_exposure, goal_drift, goal_probability, model_for_risk_profile,
    project_goal,
)
from advisordesk.app.auth import require_auth
from advisordesk.app.trades import TradeRequest, send_trade_instructions, weights_balanced
from advisordesk.dora.alerts import generate_dora_alerts
from advisordesk.dora.intents import parse_intent
from advisordesk.dora.knowledge_base import query_knowledge_base
from advisordesk.dora.responder import generate_response
from advisordesk.models.schema import (
    CamelModel, ClientCreate, ClientUpdate, GoalCreate, GoalUpdate, MeetingNoteCreate,
    ModelPortfolioCreate, ModelPortfolioUpdate, ModelPortfolioFund,
)
from advisordesk.storage.repository import (
    ClientNotFoundError, ClientRepository, GoalNotFoundError, InMemoryClientRepository,
    ModelPortfolioNotFoundError, NotFoundError,
)

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.repository = InMemoryClientRepository.with_seed_data()


def get_repository(request: Request) -> ClientRepository:
    return request.app.state.repository


def _json(model: BaseModel) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def _json_list(models) -> List[dict]:
    return [_json(m) for m in models]


@app.on_event("startup")
async def startup_event():
    repo = app.state.repository
    logger.info("=" * 60)
    logger.info("%s %s ready! Serving %d clients, %d model portfolios, %d funds",
                APP_NAME, APP_VERSION, len(repo.list_clients()),
                len(repo.list_model_portfolios()), len(FUNDS))
    logger.info("=" * 60)


# ─────────────────────────────────────────────────────────────────────
# Error handling
# ─────────────────────────────────────────────────────────────────────

def _error_list(errors) -> List[dict]:
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", ""), "type": e.get("type", "")} for e in errors]


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid data", "errors": _error_list(exc.errors())})


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": "Invalid data", "errors": _error_list(exc.errors())})


def _check_model_weights(funds: List[ModelPortfolioFund]) -> None:
    total = sum(f.weight for f in funds)
    if abs(total - 100) > MODEL_WEIGHT_TOLERANCE:
        raise HTTPException(400, "Fund weights must sum to 100%")


# ─────────────────────────────────────────────────────────────────────
# Health & reference data
# ─────────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health(repo: ClientRepository = Depends(get_repository)):
    return {"status": "ok", "clients": len(repo.list_clients())}


@app.get("/api/funds")
def funds():
    return _json_list(FUNDS.values())


# ─────────────────────────────────────────────────────────────────────
# Clients
# ─────────────────────────────────────────────────────────────────────

@app.get("/api/clients")
def list_clients(repo: ClientRepository = Depends(get_repository)):
    return _json_list(repo.list_clients())


@app.get("/api/clients/{client_id}")
def get_client(client_id: str, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.get_client(client_id))


@app.post("/api/clients", status_code=201)
def create_client(body: ClientCreate, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.create_client(body))


@app.patch("/api/clients/{client_id}")
def update_client(client_id: str, body: ClientUpdate, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.update_client(client_id, body))


@app.delete("/api/clients/{client_id}")
def delete_client(client_id: str, repo: ClientRepository = Depends(get_repository)):
    repo.delete_client(client_id)
    return {"success": True}


@app.post("/api/clients/{client_id}/meeting-notes", status_code=201)
def add_meeting_note(client_id: str, body: MeetingNoteCreate, repo: ClientRepository = Depends(get_repository)):
    note = body.to_note()
    repo.add_meeting_note(client_id, note)
    return _json(note)


# ─────────────────────────────────────────────────────────────────────
# Goals (nested under clients)
# ─────────────────────────────────────────────────────────────────────

@app.post("/api/clients/{client_id}/goals", status_code=201)
def add_goal(client_id: str, body: GoalCreate, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.add_goal(client_id, body))


@app.patch("/api/clients/{client_id}/goals/{goal_id}")
def update_goal(client_id: str, goal_id: str, body: GoalUpdate, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.update_goal(client_id, goal_id, body))


@app.delete("/api/clients/{client_id}/goals/{goal_id}")
def delete_goal(client_id: str, goal_id: str, repo: ClientRepository = Depends(get_repository)):
    repo.delete_goal(client_id, goal_id)
    return {"success": True}


# ─────────────────────────────────────────────────────────────────────
# Model portfolios
# ─────────────────────────────────────────────────────────────────────

@app.get("/api/model-portfolios")
def list_model_portfolios(repo: ClientRepository = Depends(get_repository)):
    return _json_list(repo.list_model_portfolios())


@app.get("/api/model-portfolios/risk/{risk_profile}")
def model_portfolios_by_risk(risk_profile: str, repo: ClientRepository = Depends(get_repository)):
    return _json_list(repo.list_model_portfolios_by_risk(risk_profile))


@app.get("/api/model-portfolios/{portfolio_id}")
def get_model_portfolio(portfolio_id: str, repo: ClientRepository = Depends(get_repository)):
    return _json(repo.get_model_portfolio(portfolio_id))


@app.post("/api/model-portfolios", status_code=201)
def create_model_portfolio(body: ModelPortfolioCreate, repo: ClientRepository = Depends(get_repository)):
    _check_model_weights(body.funds)
    return _json(repo.create_model_portfolio(body))


@app.patch("/api/model-portfolios/{portfolio_id}")
def update_model_portfolio(
    portfolio_id: str,
    body: ModelPortfolioUpdate,
    repo: ClientRepository = Depends(get_repository),
):
    if body.funds is not None:
        _check_model_weights(body.funds)
    return _json(repo.update_model_portfolio(portfolio_id, body))


@app.delete("/api/model-portfolios/{portfolio_id}")
def delete_model_portfolio(portfolio_id: str, repo: ClientRepository = Depends(get_repository)):
    repo.delete_model_portfolio(portfolio_id)
    return {"success": True}


# ─────────────────────────────────────────────────────────────────────
# Analytics
# ─────────────────────────────────────────────────────────────────────

@app.get("/api/clients/{client_id}/analytics")
def client_analytics(client_id: str, repo: ClientRepository = Depends(get_repository)):
    """Fund-weighted figures for the client dashboard."""
    client = repo.get_client(client_id)
    model = model_for_risk_profile(client.risk_profile, repo.list_model_portfolios())
    drift = client_drift(client, model) if model is not None else None
    return {
        "clientId": client.id,
        "riskMetrics": _json(client_risk_metrics(client)),
        "returns": _json(client_weighted_returns(client)),
        "fundExposure": _json_list(fund_exposure(client)),
        "feeAnalysis": _json(fee_analysis(client)),
        "drift": _json(drift) if drift is not None else None,
    }


@app.get("/api/clients/{client_id}/goals/{goal_id}/drift")
def goal_drift_detail(
    client_id: str,
    goal_id: str,
    model_portfolio_id: Optional[str] = Query(None, alias="modelPortfolioId"),
    repo: ClientRepository = Depends(get_repository),
):
    """Drift of one goal against the chosen model, or the one mapped to the goal's risk profile."""
    client = repo.get_client(client_id)
    goal = next((g for g in client.goals if g.id == goal_id), None)
    if goal is None:
        raise GoalNotFoundError(goal_id)

    if model_portfolio_id:
        model = repo.get_model_portfolio(model_portfolio_id)
    else:
        model = model_for_risk_profile(goal.risk_profile, repo.list_model_portfolios())
        if model is None:
            raise ModelPortfolioNotFoundError(goal.risk_profile)
    return _json(goal_drift(goal, model))


@app.get("/api/clients/{client_id}/copilot")
def client_copilot(client_id: str, repo: ClientRepository = Depends(get_repository)):
    return _json_list(copilot_insights(repo.get_client(client_id)))


@app.get("/api/clients/{client_id}/meeting-prep")
def meeting_prep(client_id: str, repo: ClientRepository = Depends(get_repository)):
    client = repo.get_client(client_id)
    return _json(prepare_meeting(client, repo.list_model_portfolios()))


class ProjectionRequest(CamelModel):
    monthly_savings: float = Field(ge=0)
    time_horizon: int = Field(ge=PROJECTION_BASE_YEAR, le=PROJECTION_BASE_YEAR + PROJECTION_MAX_YEARS)
    risk_profile: str
    starting_amount: float = Field(PROJECTION_STARTING_AMOUNT, ge=0)
    goal_target: float = Field(PROJECTION_GOAL_TARGET, gt=0)


@app.post("/api/simulator/projection")
def simulator_projection(req: ProjectionRequest):
    args = (req.monthly_savings, req.time_horizon, req.risk_profile, req.starting_amount, req.goal_target)
    return {
        "points": _json_list(project_goal(*args)),
        "probability": goal_probability(*args),
        "expectedReturn": expected_return(req.risk_profile),
    }


# ─────────────────────────────────────────────────────────────────────
# Trades
# ─────────────────────────────────────────────────────────────────────

@app.post("/api/trade/execute", dependencies=[Depends(require_auth)])
def execute_trade(req: TradeRequest):
    if not weights_balanced(req.portfolio):
        raise HTTPException(400, f"Fund weights must sum to 100% (current: {req.portfolio.total_weight:g}%)")
    send_trade_instructions(req)
    return {"success": True, "message": "Trade instructions sent to client"}


# ─────────────────────────────────────────────────────────────────────
# DORA
# ─────────────────────────────────────────────────────────────────────

class ChatRequest(CamelModel):
    message: str = Field(min_length=1)
    client_id: Optional[str] = None


class RagRequest(CamelModel):
    query: str = Field(min_length=1)


@app.post("/api/dora/chat")
def dora_chat(req: ChatRequest, repo: ClientRepository = Depends(get_repository)):
    """Classify the message and answer it; an unknown clientId is treated as no client."""
    intent = parse_intent(req.message)
    all_clients = repo.list_clients()

    client = None
    if req.client_id:
        try:
            client = repo.get_client(req.client_id)
        except ClientNotFoundError:
            logger.info("Chat for unknown client %s; answering without client context", req.client_id)

    logger.info("DORA intent=%s client=%s", intent.value, client.id if client else "-")
    response = generate_response(intent, req.message, client, all_clients)
    return {"response": _json(response), "intent": intent.value}


@app.get("/api/dora/alerts")
def dora_alerts(repo: ClientRepository = Depends(get_repository)):
    return _json_list(generate_dora_alerts(repo.list_clients()))


@app.get("/api/dora/insights")
def dora_insights(repo: ClientRepository = Depends(get_repository)):
    return _json_list(generate_actionable_insights(repo.list_clients()))


@app.post("/api/rag/chat")
def rag_chat(req: RagRequest):
    return _json(query_knowledge_base(req.query))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
