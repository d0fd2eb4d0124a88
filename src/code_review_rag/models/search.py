"""Search-related models."""

from pydantic import BaseModel

from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding


class SearchResult(BaseModel):
    """A single ranked entry. Higher scores are better matches."""

    entry: KnowledgeEntry
    score: float


class RetrievalOutcome(BaseModel):
    """Entries retrieved for one finding. An empty result list is a no-match, not an error."""

    finding: Finding
    results: list[SearchResult]

    @property
    def matched(self) -> bool:
        """True when at least one entry was retrieved."""
        return bool(self.results)

    @property
    def entries(self) -> list[KnowledgeEntry]:
        """Retrieved entries in rank order."""
        return [r.entry for r in self.results]
