"""FTS5 query construction and BM25 scoring for the knowledge index.

Two FTS5 tables index the same fields: ``documents_fts`` holds whole
tokens (exact-term and expansion clauses), ``documents_trigram`` holds
trigrams so that a phrase matches anywhere inside a field (the ``*query*``
clause).
"""

import logging
import re
import sqlite3
from collections.abc import Iterable

from code_review_rag.db.backend import Database
from code_review_rag.models.document import SEARCH_FIELDS

logger = logging.getLogger(__name__)

TOKEN_TABLE = "documents_fts"
TRIGRAM_TABLE = "documents_trigram"

# Shorter queries would make the substring clause match nearly everything
MIN_WILDCARD_LENGTH = 3

_WORD_RE = re.compile(r"\w")


def quote_phrase(text: str) -> str:
    """Wrap text as an FTS5 string, doubling embedded quotes."""
    return '"' + text.replace('"', '""') + '"'


def _field_clauses(phrase: str, fields: Iterable[str]) -> list[str]:
    return [f"{field} : {phrase}" for field in fields]


def build_exact_clauses(query: str, fields: Iterable[str] = SEARCH_FIELDS) -> list[str]:
    """One exact-term clause per field for the normalized query."""
    if not _WORD_RE.search(query):
        return []
    return _field_clauses(quote_phrase(query), fields)


def build_wildcard_clauses(query: str, fields: Iterable[str] = SEARCH_FIELDS) -> list[str]:
    """One substring clause per field, only for queries longer than 2 characters."""
    if len(query) < MIN_WILDCARD_LENGTH:
        return []
    return _field_clauses(quote_phrase(query), fields)


def build_expansion_clauses(
    terms: Iterable[str], fields: Iterable[str] = SEARCH_FIELDS
) -> list[str]:
    """One term clause per field for every associated keyword."""
    clauses: list[str] = []
    for field in fields:
        for term in sorted(terms):
            if _WORD_RE.search(term):
                clauses.append(f"{field} : {quote_phrase(term)}")
    return clauses


def combine(clauses: list[str]) -> str | None:
    """OR together clauses; None when there is nothing to match."""
    return " OR ".join(clauses) if clauses else None


async def match_scores(db: Database, table: str, expression: str | None) -> dict[str, float]:
    """Run one MATCH and return doc_id → relevance (higher is better).

    FTS5 bm25() is negative with more negative meaning better, so it is
    negated here. Syntax errors are logged and treated as no match.
    """
    if expression is None:
        return {}
    try:
        rows = await db.fts_match(table, expression)
    except sqlite3.Error:
        logger.warning("FTS match on %s failed for: %s", table, expression, exc_info=True)
        return {}
    return {doc_id: -score for doc_id, score in rows}


def merge_scores(*score_maps: dict[str, float]) -> list[tuple[str, float]]:
    """Sum clause scores per document, best first; ties keep index order."""
    totals: dict[str, float] = {}
    for scores in score_maps:
        for doc_id, score in scores.items():
            totals[doc_id] = totals.get(doc_id, 0.0) + score
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))
