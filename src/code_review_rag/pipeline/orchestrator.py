"""Review pipeline: analysis, retrieval, augmentation and generation in order."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from code_review_rag.analysis.base import Analyzer, run_analyzer
from code_review_rag.errors import IndexWriteError, ReviewRagError
from code_review_rag.generation.request import FeedbackRequest
from code_review_rag.generation.strategy import GenerationStrategy
from code_review_rag.indexing.indexer import IndexResult, KnowledgeIndexer
from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.finding import Finding, dedupe_findings
from code_review_rag.models.outcome import GenerationOutcome
from code_review_rag.models.search import RetrievalOutcome
from code_review_rag.search.searcher import KnowledgeSearcher
from code_review_rag.store.document_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)

GENERAL_CONTEXT_QUERY = "best practices"
GENERAL_CONTEXT_RESULTS = 2
MAX_SUGGESTED_TOPICS = 3
NO_FINDINGS_TEXT = "No issues found - code looks good!"


class PipelineStage(StrEnum):
    """Stages a review run moves through, in order."""

    INIT = "init"
    INDEXED = "indexed"
    ANALYZED = "analyzed"
    RETRIEVED = "retrieved"
    AUGMENTED = "augmented"
    GENERATED = "generated"
    DONE = "done"
    FAILED = "failed"


_ORDER = [
    PipelineStage.INIT,
    PipelineStage.INDEXED,
    PipelineStage.ANALYZED,
    PipelineStage.RETRIEVED,
    PipelineStage.AUGMENTED,
    PipelineStage.GENERATED,
    PipelineStage.DONE,
]


@dataclass(frozen=True)
class StageFailure:
    """Where a run stopped and why."""

    stage: PipelineStage
    reason: str


@dataclass
class PipelineRun:
    """Tracks the stage of one run and rejects out-of-order transitions."""

    stage: PipelineStage = PipelineStage.INIT
    failure: StageFailure | None = None
    history: list[PipelineStage] = field(default_factory=lambda: [PipelineStage.INIT])

    def advance(self, target: PipelineStage) -> None:
        """Move to the next stage. Raises RuntimeError unless ``target`` follows directly."""
        if self.stage is PipelineStage.FAILED or target is PipelineStage.FAILED:
            raise RuntimeError(f"Cannot advance from {self.stage} to {target}")
        if _ORDER.index(target) != _ORDER.index(self.stage) + 1:
            raise RuntimeError(f"Out-of-order pipeline transition: {self.stage} -> {target}")
        self.stage = target
        self.history.append(target)

    def fail(self, reason: str) -> StageFailure:
        """Record a terminal failure at the current stage."""
        self.failure = StageFailure(self.stage, reason)
        self.stage = PipelineStage.FAILED
        self.history.append(PipelineStage.FAILED)
        return self.failure


@dataclass(frozen=True)
class ReviewSummary:
    """Counts for one review. ``match_rate`` is an integer percentage."""

    total: int
    matches: int

    @property
    def match_rate(self) -> int:
        """Share of findings with at least one knowledge-base match."""
        return self.matches * 100 // self.total if self.total else 0


@dataclass(frozen=True)
class FindingFeedback:
    """Retrieval and generation results for one finding."""

    retrieval: RetrievalOutcome
    outcome: GenerationOutcome

    @property
    def finding(self) -> Finding:
        return self.retrieval.finding

    @property
    def text(self) -> str:
        return self.outcome.text or ""


@dataclass
class ReviewReport:
    """Everything a review produced."""

    source: str
    run: PipelineRun
    feedback: list[FindingFeedback] = field(default_factory=list)
    general_entries: list[KnowledgeEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def findings(self) -> list[Finding]:
        return [f.finding for f in self.feedback]

    @property
    def summary(self) -> ReviewSummary:
        return ReviewSummary(
            total=len(self.feedback),
            matches=sum(1 for f in self.feedback if f.retrieval.matched),
        )

    @property
    def text(self) -> str:
        """Feedback for every finding, in finding order."""
        if not self.feedback:
            return NO_FINDINGS_TEXT
        return "\n".join(f.text for f in self.feedback)


class ReviewPipeline:
    """Runs reviews against one knowledge index.

    ``index_knowledge_base`` (or ``open``, for an index built earlier) must
    come first; it builds the searcher every review reads from.
    """

    def __init__(
        self,
        store: SQLiteDocumentStore,
        strategy: GenerationStrategy,
        analyzers: Sequence[Analyzer] = (),
        *,
        max_results: int = 3,
        scan_source: bool = True,
    ) -> None:
        """Initialize with the index, a generation strategy and the analyzers to run."""
        self._store = store
        self._strategy = strategy
        self._analyzers = list(analyzers)
        self._max_results = max_results
        self._scan_source = scan_source
        self._searcher: KnowledgeSearcher | None = None
        self.index_run = PipelineRun()

    @property
    def searcher(self) -> KnowledgeSearcher:
        """The searcher built by the last indexing run."""
        if self._searcher is None:
            raise RuntimeError("Knowledge base not indexed; call index_knowledge_base first")
        return self._searcher

    async def index_knowledge_base(self, entries: Iterable[KnowledgeEntry]) -> IndexResult:
        """Index entries and open a searcher over them. IndexWriteError is fatal."""
        run = PipelineRun()
        self.index_run = run
        try:
            result = await KnowledgeIndexer(self._store).index_knowledge_base(entries)
        except IndexWriteError as e:
            run.fail(str(e))
            logger.error("Indexing failed: %s", e)
            raise
        self._searcher = await KnowledgeSearcher.open(self._store)
        run.advance(PipelineStage.INDEXED)
        return result

    async def open(self) -> None:
        """Use an existing index as is, without re-indexing."""
        self._searcher = await KnowledgeSearcher.open(self._store)
        self.index_run = PipelineRun()
        self.index_run.advance(PipelineStage.INDEXED)

    async def review(self, source_path: Path, user_query: str | None = None) -> ReviewReport:
        """Review one source file and produce feedback for every finding."""
        searcher = self.searcher
        run = PipelineRun()
        run.advance(PipelineStage.INDEXED)
        report = ReviewReport(source=str(source_path), run=run)

        try:
            source_code = source_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            run.fail(f"cannot read {source_path}: {e}")
            raise ReviewRagError(f"Cannot read source file {source_path}: {e}") from e

        findings = await self._analyze(source_path, source_code)
        run.advance(PipelineStage.ANALYZED)
        logger.info("Analysis of %s produced %d distinct finding(s)", source_path, len(findings))

        if not findings:
            for stage in _ORDER[_ORDER.index(PipelineStage.RETRIEVED) :]:
                run.advance(stage)
            return report

        retrievals = [await searcher.retrieve(f, self._max_results) for f in findings]
        if not any(r.matched for r in retrievals):
            report.general_entries = await searcher.search(
                GENERAL_CONTEXT_QUERY, GENERAL_CONTEXT_RESULTS
            )
        topics: tuple[str, ...] = ()
        if not all(r.matched for r in retrievals):
            topics = tuple((await searcher.get_all_topics())[:MAX_SUGGESTED_TOPICS])
        for r in retrievals:
            logger.info(
                "Finding %r: %s",
                r.finding.issue,
                f"{len(r.results)} match(es)" if r.matched else "no knowledge-base match",
            )
        run.advance(PipelineStage.RETRIEVED)

        requests = [
            FeedbackRequest(
                finding=r.finding,
                entries=tuple(r.entries),
                findings=tuple(findings),
                general_entries=tuple(report.general_entries),
                topics=() if r.matched else topics,
                user_query=user_query,
                source_code=source_code,
            )
            for r in retrievals
        ]
        run.advance(PipelineStage.AUGMENTED)

        for retrieval, request in zip(retrievals, requests, strict=True):
            outcome = await self._strategy.generate(request)
            if outcome.warning:
                report.warnings.append(outcome.warning)
            report.feedback.append(FindingFeedback(retrieval=retrieval, outcome=outcome))
        run.advance(PipelineStage.GENERATED)

        run.advance(PipelineStage.DONE)
        return report

    async def _analyze(self, source_path: Path, source_code: str) -> list[Finding]:
        findings: list[Finding] = []
        for analyzer in self._analyzers:
            findings.extend(await run_analyzer(analyzer, source_path))
        if self._scan_source:
            findings.extend(await self.searcher.search_in_code(source_code, source_path.name))
        return dedupe_findings(findings)
