"""
AdvisorDesk — Central Configuration
Single source of truth for all parameters. Change here, nowhere else.
"""
from typing import Dict, List, Tuple
import os
from dotenv import load_dotenv

load_dotenv()

APP_NAME = "AdvisorDesk"
APP_VERSION = "1.0.0"

# ─────────────────────────────────────────────────────────────────────
# Server
# ─────────────────────────────────────────────────────────────────────
HOST = os.getenv("ADVISORDESK_HOST", "0.0.0.0")
PORT = int(os.getenv("ADVISORDESK_PORT", "8000"))
LOG_LEVEL = os.getenv("ADVISORDESK_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("ADVISORDESK_CORS_ORIGINS", "*").split(",") if o.strip()
]

# ─────────────────────────────────────────────────────────────────────
# DORA — knowledge retrieval
# ─────────────────────────────────────────────────────────────────────
# Simulated network latency for House View lookups; 0 disables the delay
RAG_LATENCY_MS = int(os.getenv("DORA_RAG_LATENCY_MS", "600"))
RAG_TOP_DOCS = 3
RAG_SNIPPET_CHARS = 120
RAG_MIN_WORD_LENGTH = 4          # query words must be longer than this
RAG_MIN_CONTENT_OVERLAP = 2
RAG_TOPIC_SCORE = 10
RAG_KEYWORD_SCORE = 5

# ─────────────────────────────────────────────────────────────────────
# Cash thresholds (percent of total portfolio)
# The single-client and cross-client paths use different cut-offs.
# ─────────────────────────────────────────────────────────────────────
CASH_WARNING_PCT = 20.0          # single-client warning, red in rankings
CASH_COMPARISON_PCT = 15.0       # cross-client filter, meeting talking points
CASH_AGENDA_HIGH_PCT = 25.0

INFLATION_RATE = 0.053           # BSP headline inflation assumption

# ─────────────────────────────────────────────────────────────────────
# Concentration thresholds (single fund share of invested amount, percent)
# ─────────────────────────────────────────────────────────────────────
REBALANCE_CONCENTRATION_PCT = 30.0
COPILOT_CONCENTRATION_PCT = 35.0

# ─────────────────────────────────────────────────────────────────────
# Recommendation heuristics
# ─────────────────────────────────────────────────────────────────────
SAVINGS_RATE_FLOOR = 0.15
SAVINGS_RATE_TARGET = 0.20
RISK_AGE_THRESHOLD = 50
MEETING_DERISK_AGE = 55           # meeting talking point uses its own cut-off
STRONG_POSITION_PROBABILITY = 75
LARGE_ACCOUNT_THRESHOLD = 100000
EFFICIENCY_SHARPE_FLOOR = 0.5
FEE_REVIEW_EXPENSE_RATIO = 1.2

# Reference year for goal gap and projection arithmetic
PROJECTION_BASE_YEAR = 2026

# ─────────────────────────────────────────────────────────────────────
# Chat-path risk approximation (bucketed on YTD return, percent)
# ─────────────────────────────────────────────────────────────────────
CHAT_RISK_BUCKETS: Tuple[float, float] = (10.0, 5.0)     # high, medium cut-offs
CHAT_VOLATILITY = (12.5, 8.2, 5.1)
CHAT_MAX_DRAWDOWN = (18.5, 12.3, 6.8)
CHAT_SHARPE = (0.92, 0.74, 0.55)

# ─────────────────────────────────────────────────────────────────────
# Drift bands (overall drift, percentage points)
# ─────────────────────────────────────────────────────────────────────
DRIFT_ALIGNED_MAX = 5.0
DRIFT_MINOR_MAX = 10.0

# Client risk profile -> (model portfolio risk profile, category)
RISK_PROFILE_MODEL_MAP: Dict[str, Tuple[str, str]] = {
    "Conservative": ("Conservative", "default"),
    "Balanced":     ("Moderate", "default"),
    "Moderate":     ("Moderate", "default"),
    "Growth":       ("Moderate", "growth"),
    "Aggressive":   ("Aggressive", "default"),
}

# ─────────────────────────────────────────────────────────────────────
# Goal simulator
# ─────────────────────────────────────────────────────────────────────
RISK_RETURN_MULTIPLIERS: Dict[str, float] = {
    "Conservative": 0.04,
    "Balanced":     0.07,
    "Growth":       0.10,
    "Aggressive":   0.14,
}
DEFAULT_RETURN_MULTIPLIER = 0.07
PROJECTION_VOL_FACTOR = 0.3
PROJECTION_STARTING_AMOUNT = 2000000
PROJECTION_GOAL_TARGET = 15000000
PROJECTION_MAX_YEARS = 100         # horizons beyond base year + this are rejected

# ─────────────────────────────────────────────────────────────────────
# Fund weight validation (percentage points away from 100)
# ─────────────────────────────────────────────────────────────────────
MODEL_WEIGHT_TOLERANCE = 1e-9     # model portfolios: exactly 100
TRADE_WEIGHT_TOLERANCE = 0.1
