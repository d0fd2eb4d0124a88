"""Knowledge searcher: multi-clause retrieval and raw-source pattern scan."""

import logging
import re

from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding
from code_review_rag.models.search import RetrievalOutcome, SearchResult
from code_review_rag.search.fts import (
    TOKEN_TABLE,
    TRIGRAM_TABLE,
    build_exact_clauses,
    build_expansion_clauses,
    build_wildcard_clauses,
    combine,
    match_scores,
    merge_scores,
)
from code_review_rag.search.patterns import PatternCache
from code_review_rag.store.document_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)

# Tags this short are too generic to flag in raw source
MIN_SCAN_TAG_LENGTH = 4

_LINE_BREAK_RE = re.compile(r"\r?\n")


def find_line_number(source_text: str, pattern: str) -> int:
    """First 1-based line containing ``pattern`` (case-insensitive), else 1."""
    needle = pattern.lower()
    for number, line in enumerate(_LINE_BREAK_RE.split(source_text), 1):
        if needle in line.lower():
            return number
    return 1


class KnowledgeSearcher:
    """Searches the document index for entries relevant to a finding.

    The pattern cache is fixed at construction; use ``open`` to build it from
    the current index contents. Reads never mutate the index, so one searcher
    can serve any number of concurrent searches.
    """

    def __init__(self, store: SQLiteDocumentStore, patterns: PatternCache) -> None:
        """Initialize with a document store and a prebuilt pattern cache."""
        self._store = store
        self._patterns = patterns

    @classmethod
    async def open(cls, store: SQLiteDocumentStore) -> "KnowledgeSearcher":
        """Scan the index once and build the pattern cache from it."""
        documents = await store.scan()
        patterns = PatternCache.from_documents(doc for _doc_id, doc in documents)
        logger.debug("Pattern cache built: %d keywords from %d docs", len(patterns), len(documents))
        return cls(store, patterns)

    @property
    def patterns(self) -> PatternCache:
        """The term-association cache used for query expansion."""
        return self._patterns

    async def search_scored(self, query: str, max_results: int = 5) -> list[SearchResult]:
        """Rank entries for ``query``; at most ``max_results``, best first."""
        normalized = query.strip().lower()
        if not normalized or max_results <= 0:
            return []

        logger.debug("Searching knowledge base for: %r", normalized)

        token_clauses = build_exact_clauses(normalized)
        token_clauses += build_expansion_clauses(self._patterns.expand(normalized))
        token_scores = await match_scores(self._store.db, TOKEN_TABLE, combine(token_clauses))
        wildcard_scores = await match_scores(
            self._store.db, TRIGRAM_TABLE, combine(build_wildcard_clauses(normalized))
        )

        ranked = merge_scores(token_scores, wildcard_scores)
        logger.debug("Found %d potential matches for %r", len(ranked), normalized)

        results: list[SearchResult] = []
        for doc_id, score in ranked[:max_results]:
            doc = await self._store.get(doc_id)
            if doc is None:
                continue
            logger.debug("Match: %s (score: %.4f)", doc.title, score)
            results.append(SearchResult(entry=doc.to_entry(), score=score))
        return results

    async def search(self, query: str, max_results: int = 5) -> list[KnowledgeEntry]:
        """Ranked entries for ``query``."""
        return [r.entry for r in await self.search_scored(query, max_results)]

    async def retrieve(self, finding: Finding, max_results: int = 3) -> RetrievalOutcome:
        """Retrieve entries for a finding's issue label."""
        results = await self.search_scored(finding.issue, max_results)
        return RetrievalOutcome(finding=finding, results=results)

    async def get_all_topics(self) -> list[str]:
        """Every indexed title, in index order."""
        return [doc.title for _doc_id, doc in await self._store.scan()]

    async def search_in_code(self, source_text: str, file_label: str) -> list[Finding]:
        """Flag entries whose tags appear literally in ``source_text``.

        Matching is a case-insensitive substring test, so a tag can fire
        inside a longer identifier. Each entry yields at most one finding:
        the first qualifying tag wins.
        """
        haystack = source_text.lower()
        findings: list[Finding] = []
        for _doc_id, doc in await self._store.scan():
            for tag in doc.tag_list:
                if len(tag) < MIN_SCAN_TAG_LENGTH or tag.lower() not in haystack:
                    continue
                line = find_line_number(source_text, tag)
                findings.append(
                    Finding(
                        issue=doc.title,
                        details=(
                            f"{file_label}:{line} - Knowledge base pattern '{tag}' "
                            "detected in code."
                        ),
                    )
                )
                break
        logger.info("Knowledge-base scan of %s found %d pattern(s)", file_label, len(findings))
        return findings
