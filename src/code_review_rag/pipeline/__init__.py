"""Review pipeline orchestration."""

from code_review_rag.pipeline.orchestrator import (
    FindingFeedback,
    PipelineRun,
    PipelineStage,
    ReviewPipeline,
    ReviewReport,
    ReviewSummary,
    StageFailure,
)

__all__ = [
    "FindingFeedback",
    "PipelineRun",
    "PipelineStage",
    "ReviewPipeline",
    "ReviewReport",
    "ReviewSummary",
    "StageFailure",
]
