"""
Tests for the House View knowledge retriever.
"""

import pytest

from advisordesk.dora import knowledge_base
from advisordesk.dora.knowledge_base import (
    EDUCATIONAL_DISCLAIMER, NO_MATCH_ANSWER, KnowledgeDocument,
    query_knowledge_base, rank_documents, score_document,
)


def _doc(doc_id, topic, keywords, content="", note="Approved for client use."):
    return KnowledgeDocument(doc_id, topic, tuple(keywords), content, note, f"Source {doc_id}")


class TestQueryKnowledgeBase:

    def test_technology_house_view(self):
        result = query_knowledge_base("What's the house view on technology?", latency_ms=0)
        assert result.sources[0].title.startswith("Sector Research: Technology")
        assert result.compliance_badge == "approved"
        assert result.answer.startswith("**Sector Research: Technology")

    def test_nonsense_query_needs_review(self):
        result = query_knowledge_base("asdkjasdkj nonsense query", latency_ms=0)
        assert result.sources == []
        assert result.compliance_badge == "needs_review"
        assert result.answer == NO_MATCH_ANSWER
        assert result.disclaimers == []

    def test_educational_content_is_informational(self):
        result = query_knowledge_base("dollar cost averaging", latency_ms=0)
        assert result.compliance_badge == "informational"

    def test_disclaimer_note_adds_disclaimer(self):
        result = query_knowledge_base("tax loss harvesting", latency_ms=0)
        assert EDUCATIONAL_DISCLAIMER in result.disclaimers

    def test_at_most_three_sources_with_truncated_snippets(self):
        result = query_knowledge_base(
            "tech healthcare energy banking philippines china india japan", latency_ms=0,
        )
        assert len(result.sources) == 3
        for source in result.sources:
            assert source.snippet.endswith("...")
            assert len(source.snippet) <= 123

    def test_related_document_appended(self):
        result = query_knowledge_base("tech and healthcare", latency_ms=0)
        assert "**Related —" in result.answer

    def test_latency_is_simulated(self, monkeypatch):
        delays = []
        monkeypatch.setattr(knowledge_base.time, "sleep", delays.append)
        query_knowledge_base("tech", latency_ms=250)
        assert delays == [0.25]

    def test_zero_latency_skips_sleep(self, monkeypatch):
        delays = []
        monkeypatch.setattr(knowledge_base.time, "sleep", delays.append)
        query_knowledge_base("tech", latency_ms=0)
        assert delays == []


class TestRanking:

    def test_topic_outscores_keyword(self):
        docs = (
            _doc("a", "alpha", ["beta"]),
            _doc("b", "beta", ["alpha"]),
        )
        ranked = rank_documents("tell me about alpha", docs)
        assert [d.id for d in ranked] == ["a", "b"]
        assert score_document("tell me about alpha", docs[0]) == 10

    def test_ties_keep_corpus_order(self):
        docs = (
            _doc("first", "zzz", ["shared"]),
            _doc("second", "yyy", ["shared"]),
        )
        assert [d.id for d in rank_documents("shared", docs)] == ["first", "second"]

    def test_content_overlap_needs_two_distinct_long_words(self):
        doc = _doc("c", "zzz", ["qqq"], content="Valuations remain elevated across markets")
        assert rank_documents("valuations valuations", (doc,)) == []
        assert rank_documents("valuations elevated", (doc,)) == [doc]

    @pytest.mark.parametrize("query", ["VALUATIONS ELEVATED", "Valuations Elevated"])
    def test_matching_is_case_insensitive(self, query):
        doc = _doc("c", "zzz", ["qqq"], content="Valuations remain elevated across markets")
        assert rank_documents(query, (doc,)) == [doc]
