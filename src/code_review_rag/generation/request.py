"""Input to a generation strategy."""

from dataclasses import dataclass, field

from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding


@dataclass(frozen=True)
class FeedbackRequest:
    """Everything a strategy may use to explain one finding.

    ``entries`` are the entries retrieved for ``finding``. ``general_entries``
    hold the generic best-practice context used when no finding of the run
    matched anything. ``findings`` lists every distinct finding of the run.
    """

    finding: Finding
    entries: tuple[KnowledgeEntry, ...] = ()
    findings: tuple[Finding, ...] = ()
    general_entries: tuple[KnowledgeEntry, ...] = ()
    topics: tuple[str, ...] = ()
    user_query: str | None = None
    source_code: str | None = None
    context_findings: tuple[Finding, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Focus finding first, then the rest of the run in order
        others = tuple(f for f in self.findings if f != self.finding)
        object.__setattr__(self, "context_findings", (self.finding, *others))
