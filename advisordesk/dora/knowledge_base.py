"""
AdvisorDesk — House View Knowledge Base

A fixed corpus of research opinions and a keyword retriever over it.
Matching is lexical only: topic substring, keyword substring, or overlap of
significant query words with the document body. No embeddings.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Literal, Optional, Tuple

from pydantic import Field

from advisordesk.models.schema import CamelModel
from config.settings import (
    RAG_LATENCY_MS, RAG_TOP_DOCS, RAG_SNIPPET_CHARS, RAG_MIN_WORD_LENGTH,
    RAG_MIN_CONTENT_OVERLAP, RAG_TOPIC_SCORE, RAG_KEYWORD_SCORE,
)

logger = logging.getLogger(__name__)

ComplianceBadge = Literal["approved", "needs_review", "informational"]

NO_MATCH_ANSWER = (
    "I couldn't find specific House View guidance on this topic in our approved research "
    "library. Please consult the full research portal or your team lead for the latest view. "
    "You can ask me about: **sectors** (tech, healthcare, energy), **countries** (PH, US, China, "
    "India), **currencies** (USD/PHP), or **strategies** (ESG, dividends, retirement)."
)
EDUCATIONAL_DISCLAIMER = (
    "This information is for educational purposes only and does not constitute specific "
    "financial, tax, or legal advice."
)


@dataclass(frozen=True)
class KnowledgeDocument:
    id: str
    topic: str
    keywords: Tuple[str, ...]
    content: str
    compliance_note: str
    source: str


class Source(CamelModel):
    title: str
    snippet: str


class RAGResult(CamelModel):
    answer: str
    sources: List[Source] = Field(default_factory=list)
    compliance_badge: ComplianceBadge
    disclaimers: List[str] = Field(default_factory=list)


def _doc(id, topic, keywords, content, compliance_note, source) -> KnowledgeDocument:
    return KnowledgeDocument(id, topic, tuple(keywords), content, compliance_note, source)


# ─────────────────────────────────────────────────────────────────────
# House View corpus
# ─────────────────────────────────────────────────────────────────────

HOUSE_VIEW_DOCS: Tuple[KnowledgeDocument, ...] = (
    # Sectors
    _doc("sec-tech", "technology",
         ["tech", "technology", "ai", "software", "semiconductor", "cloud"],
         "Manulife Investment Management remains **constructive on Technology**, particularly in AI "
         "infrastructure and cloud computing. We favor companies with strong free cash flow and "
         "defensible moats. Key picks: semiconductor leaders and enterprise SaaS providers. "
         "Valuations are elevated but justified by earnings growth.",
         "Approved for client use.",
         "Sector Research: Technology — Q1 2025"),
    _doc("sec-health", "healthcare",
         ["healthcare", "health", "pharma", "biotech", "medical"],
         "Healthcare remains a **defensive play** with attractive valuations. We see opportunity in "
         "GLP-1 drug manufacturers, medtech innovation, and aging-population beneficiaries across "
         "Asia. Biotech is high-risk/high-reward — suitable only for aggressive risk profiles.",
         "Approved for client use.",
         "Sector Research: Healthcare — Q4 2024"),
    _doc("sec-financials", "financials",
         ["financials", "banks", "banking", "insurance", "finance"],
         "We are **neutral on global financials** but **overweight ASEAN banks**, which benefit from "
         "strong net interest margins and rising credit demand. Philippine banks (BPI, BDO) offer "
         "attractive dividend yields at 4-5%. Insurance sector benefits from rising awareness "
         "post-pandemic.",
         "Approved for client use. Regional bias disclosure required.",
         "Sector Strategy: Financials — 2025 Outlook"),
    _doc("sec-energy", "energy",
         ["energy", "oil", "gas", "renewable", "clean energy", "solar"],
         "We maintain a **barbell approach**: traditional energy for cash flow (oil majors yielding "
         "5-6%) and clean energy for long-term growth. OPEC+ discipline supports Brent at $75-85 "
         "range. Solar and wind capacity additions in Asia present compelling growth stories.",
         "Approved for client use.",
         "Commodity & Energy Outlook — 2025"),
    _doc("sec-realestate", "real estate",
         ["real estate", "reit", "reits", "property", "housing"],
         "Asian REITs are offering **attractive entry points** with yields of 5-7%. We favor "
         "logistics and data center REITs over retail. Philippine property developers face "
         "headwinds from oversupply in office space, but residential demand remains stable. "
         "Singapore REITs offer the best risk-adjusted returns in the region.",
         "Approved for client use.",
         "Asia Pacific REIT Strategy — 2025"),
    _doc("sec-consumer", "consumer",
         ["consumer", "retail", "spending", "discretionary", "staples"],
         "We are **overweight Consumer Staples** in emerging markets as a defensive hedge. Consumer "
         "Discretionary is selectively attractive — focus on companies leveraging e-commerce "
         "penetration in Southeast Asia. Philippine remittance-driven consumption supports domestic "
         "consumer names.",
         "Approved for client use.",
         "Consumer Sector Analysis — ASEAN Focus"),

    # Countries and regions
    _doc("geo-ph", "philippines",
         ["philippines", "philippine", "psei", "manila", "ph market", "pinoy"],
         "The Philippine market offers **value opportunity** with PSEi trading at ~13x forward P/E, "
         "below historical average. BSP rate cuts (expected 75-100bps in 2025) are a catalyst. Top "
         "picks: banks (BDO, BPI), property (SMPH), and consumer (JFC). Key risk: peso depreciation "
         "and fiscal deficit.",
         "Approved for client use. Country concentration risk disclosure required.",
         "Philippines Market Outlook — 2025"),
    _doc("geo-us", "united states",
         ["us", "usa", "america", "american", "s&p", "nasdaq", "wall street", "fed"],
         "US equities remain the **global anchor allocation**. S&P 500 earnings growth projected at "
         "10-12% for 2025. The Fed is on a rate-cutting path which supports multiples. We favor "
         "quality large-caps but flag concentration risk in Magnificent 7. Small-caps offer "
         "catch-up potential.",
         "Approved for client use.",
         "US Equity Strategy — 2025"),
    _doc("geo-china", "china",
         ["china", "chinese", "csi", "hang seng", "beijing", "shanghai", "hsi"],
         "China is a **tactical opportunity** after significant de-rating. Policy stimulus (rate "
         "cuts, property support, tech regulation easing) is underappreciated. We prefer H-shares "
         "over A-shares for valuation margin of safety. Key risks: geopolitics, property sector "
         "restructuring, and deflation pressure.",
         "Approved for client use. Geopolitical risk disclosure required.",
         "China Investment Outlook — 2025"),
    _doc("geo-india", "india",
         ["india", "indian", "nifty", "sensex", "mumbai", "bse"],
         "India is our **top structural overweight** in Asia. Demographics, digitalization, and "
         "manufacturing reshoring (PLI schemes) support multi-year growth. Nifty trades at premium "
         "(22x) but justified by 15%+ earnings growth. SIP flows remain strong. Focus: financials, "
         "IT services, and industrials.",
         "Approved for client use. Valuation premium disclosure required.",
         "India Strategy: Structural Growth Story — 2025"),
    _doc("geo-japan", "japan",
         ["japan", "japanese", "nikkei", "topix", "boj", "yen"],
         "Japan equities are benefiting from **corporate governance reforms** (improved buybacks, "
         "unwinding cross-shareholdings). BOJ normalization is gradual and well-communicated. Weak "
         "yen supports exporters. We favor value names in financials and trading companies.",
         "Approved for client use.",
         "Japan Equity Outlook — 2025"),
    _doc("geo-asean", "asean",
         ["asean", "southeast asia", "sea", "emerging", "vietnam", "indonesia", "thailand"],
         "ASEAN markets offer **diversification benefits** with low correlation to DM. Indonesia "
         "(domestic demand + nickel) and Vietnam (FDI + manufacturing) are standout markets. "
         "Thailand faces political uncertainty. Regional central banks have room for rate cuts, "
         "supporting equity multiples.",
         "Approved for client use.",
         "ASEAN Market Strategy — 2025"),

    # Currencies
    _doc("fx-usdphp", "usd-php",
         ["usd/php", "usd php", "peso", "dollar peso", "php", "currency", "fx"],
         "We expect the **PHP to range 55-57 vs USD** in 2025. BSP rate cuts may pressure the peso, "
         "but strong OFW remittances ($38B+) and tourism recovery provide support. For "
         "peso-denominated portfolios, we recommend maintaining 30-40% USD-hedged allocation to "
         "manage currency risk.",
         "Approved for client use. Currency risk disclaimer required.",
         "FX Strategy: USD/PHP — 2025"),
    _doc("fx-cny", "cny",
         ["cny", "yuan", "renminbi", "rmb", "chinese currency"],
         "The **CNY faces mild depreciation pressure** (target: 7.3-7.5 vs USD) as PBOC maintains "
         "accommodative policy. Capital outflows remain a concern. For portfolios with China "
         "exposure, CNH-hedged share classes are recommended for non-USD clients.",
         "Approved for client use.",
         "FX Outlook: Asian Currencies — 2025"),
    _doc("fx-jpy", "jpy",
         ["jpy", "yen", "japanese yen"],
         "The **JPY is expected to strengthen** modestly as BOJ continues gradual rate hikes. "
         "Target: 140-148 vs USD. This represents a headwind for unhedged Japan equity allocations "
         "but benefits JPY-denominated bond portfolios.",
         "Approved for client use.",
         "FX Outlook: Asian Currencies — 2025"),

    # Asset classes
    _doc("ac-equity", "equity",
         ["equity", "equities", "stocks", "stock market", "shares"],
         "Global equities should deliver **mid-to-high single digit returns** in 2025. We recommend "
         "a balanced approach: 60% DM / 40% EM allocation for moderate risk profiles. Quality "
         "factor over momentum. Dividend-paying stocks provide downside cushion in volatile markets.",
         "Approved for client use.",
         "Global Equity Strategy — 2025"),
    _doc("ac-fi", "fixed income",
         ["fixed income", "bonds", "bond", "yield", "interest rate", "treasury", "duration"],
         "Fixed income is **increasingly attractive** as central banks cut rates. We favor "
         "intermediate duration (3-5Y) corporate bonds (IG) for yield pickup. EM local currency "
         "bonds offer ~6-8% yields. Avoid long-duration in volatile rate environments. Philippine "
         "government bonds (5Y @ 6.1%) offer solid real yields.",
         "Approved for client use.",
         "Fixed Income Strategy — 2025"),
    _doc("ac-commodities", "commodities",
         ["commodities", "commodity", "gold", "silver", "metals", "copper"],
         "**Gold is our top commodity conviction** — targeting $2,500-2,800/oz on central bank "
         "buying and geopolitical hedging demand. Copper benefits from electrification and data "
         "center buildout. We recommend 5-8% portfolio allocation to commodities for "
         "diversification.",
         "Approved for client use.",
         "Commodity Outlook — 2025"),

    # Strategies
    _doc("str-esg", "esg",
         ["esg", "sustainable", "sustainability", "green", "responsible", "impact"],
         "ESG integration continues to demonstrate **no performance penalty** over medium-to-long "
         "horizons. We recommend ESG-aware funds for client portfolios — particularly those with "
         "governance screens. ASEAN green bonds are a growing opportunity with tax incentives in "
         "several markets.",
         "Approved for client use. ESG methodology disclosure required.",
         "Sustainable Investing Framework — Manulife IM"),
    _doc("str-dividend", "dividend",
         ["dividend", "income", "yield", "payout", "distribution"],
         "Dividend strategies are **well-suited for retirees and conservative profiles**. Asian "
         "dividend yields (3-5%) exceed global averages. Focus on companies with sustainable payout "
         "ratios below 60% and growing free cash flow. Dividend reinvestment significantly "
         "compounds long-term wealth.",
         "Approved for client use.",
         "Income Strategy: Asia Dividend — 2025"),
    _doc("str-dca", "dca",
         ["dca", "dollar cost", "averaging", "regular investment", "systematic", "sip"],
         "Dollar-cost averaging remains our **recommended approach for lump-sum averse clients**. "
         "Historical analysis shows DCA outperforms lump-sum investing 40% of the time and "
         "significantly reduces regret risk. Monthly investment plans in diversified funds are the "
         "easiest way to implement.",
         "Approved for client use. General educational content.",
         "Behavioural Finance: DCA vs Lump Sum"),

    # Macro
    _doc("macro-inflation", "inflation",
         ["inflation", "cpi", "price", "cost of living"],
         "Global inflation is moderating toward central bank targets. We expect US CPI to average "
         "2.3% in 2025, allowing the Fed to continue easing. Philippine CPI is under control at "
         "3-4%, supporting BSP rate cuts. Portfolios should maintain inflation hedges through "
         "REITs, TIPS, and commodities.",
         "Approved for client use. Expiry: 2025-12-31.",
         "Global Macro Outlook — 2025"),
    _doc("macro-rates", "interest rates",
         ["interest rate", "rate cut", "monetary policy", "central bank", "bsp", "fed rate"],
         "The global rate-cutting cycle is **firmly underway**. Fed funds target: 3.75-4.00% by "
         "year-end 2025. BSP has room for 75-100bps of cuts. Lower rates support equity "
         "valuations, compress bond yields (capital gains for existing holders), and reduce "
         "mortgage costs. Duration extension is warranted.",
         "Approved for client use.",
         "Monetary Policy Monitor — 2025"),
    _doc("str-retirement", "retirement",
         ["retirement", "retire", "pension", "bucket strategy", "decumulation"],
         "For clients nearing retirement, we recommend a **'bucket strategy'**: allocate 2 years "
         "of living expenses to cash equivalents, 3-5 years to bonds, and the remainder to growth "
         "assets. This mitigates sequence-of-returns risk. Safe withdrawal rate: 3.5-4% adjusted "
         "for Philippine cost of living.",
         "General educational content only. Not specific advice.",
         "Retirement Planning Guide — 2025"),
    _doc("str-tax", "tax",
         ["tax", "tax-loss", "harvesting", "capital gains", "tax efficiency"],
         "Tax-loss harvesting should be considered for non-registered accounts where unrealized "
         "losses exceed ₱250,000. For Philippine clients, long-term capital gains on listed "
         "securities are tax-exempt. Recommend maximizing PERA contributions (₱100,000/year) for "
         "tax-deferred growth.",
         "Tax advice disclaimer required.",
         "Tax Efficiency Whitepaper — Philippines"),
)


# ─────────────────────────────────────────────────────────────────────
# Matching and scoring
# ─────────────────────────────────────────────────────────────────────

def _significant_words(query: str) -> List[str]:
    words = []
    for w in query.split():
        if len(w) > RAG_MIN_WORD_LENGTH and w not in words:
            words.append(w)
    return words


def matches_document(query: str, doc: KnowledgeDocument) -> bool:
    """``query`` must already be lowercased."""
    if doc.topic in query:
        return True
    if any(kw in query for kw in doc.keywords):
        return True
    content_words = doc.content.lower().split()
    overlap = sum(
        1 for qw in _significant_words(query)
        if any(qw in cw for cw in content_words)
    )
    return overlap >= RAG_MIN_CONTENT_OVERLAP


def score_document(query: str, doc: KnowledgeDocument) -> int:
    score = RAG_TOPIC_SCORE if doc.topic in query else 0
    score += RAG_KEYWORD_SCORE * sum(1 for kw in doc.keywords if kw in query)
    return score


def rank_documents(
    query: str,
    docs: Tuple[KnowledgeDocument, ...] = HOUSE_VIEW_DOCS,
) -> List[KnowledgeDocument]:
    """Matched documents, best first. Equal scores keep corpus order."""
    lowered = query.lower()
    matched = [d for d in docs if matches_document(lowered, d)]
    return sorted(matched, key=lambda d: score_document(lowered, d), reverse=True)


def query_knowledge_base(
    query: str,
    docs: Tuple[KnowledgeDocument, ...] = HOUSE_VIEW_DOCS,
    latency_ms: Optional[int] = None,
) -> RAGResult:
    """
    Answer a research question from the House View corpus.

    The top document is the primary answer; a second match is appended under
    a "Related" heading. Up to three sources are returned. Never raises for a
    string query.
    """
    ranked = rank_documents(query, docs)

    delay = RAG_LATENCY_MS if latency_ms is None else latency_ms
    if delay > 0:
        time.sleep(delay / 1000)

    logger.debug("House View lookup matched %d document(s)", len(ranked))

    if not ranked:
        return RAGResult(answer=NO_MATCH_ANSWER, compliance_badge="needs_review")

    top_docs = ranked[:RAG_TOP_DOCS]
    main = top_docs[0]
    answer = f"**{main.source}:**\n\n{main.content}"
    if len(top_docs) > 1:
        related = top_docs[1]
        answer += f"\n\n---\n\n**Related — {related.source}:**\n{related.content}"

    sources = [
        Source(title=d.source, snippet=d.content[:RAG_SNIPPET_CHARS] + "...")
        for d in top_docs
    ]

    badge: ComplianceBadge = "approved"
    if any("General educational" in d.compliance_note for d in top_docs):
        badge = "informational"

    disclaimers = []
    if any("disclaimer" in d.compliance_note for d in top_docs):
        disclaimers.append(EDUCATIONAL_DISCLAIMER)

    return RAGResult(answer=answer, sources=sources, compliance_badge=badge, disclaimers=disclaimers)
