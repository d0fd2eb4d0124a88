"""Feedback generation strategies."""

from code_review_rag.generation.request import FeedbackRequest
from code_review_rag.generation.strategy import (
    BackendStrategy,
    GenerationStrategy,
    ResilientStrategy,
    create_strategy,
)
from code_review_rag.generation.template import TemplateStrategy

__all__ = [
    "BackendStrategy",
    "FeedbackRequest",
    "GenerationStrategy",
    "ResilientStrategy",
    "TemplateStrategy",
    "create_strategy",
]
