"""Static analyzers that produce findings for the review pipeline."""

from code_review_rag.analysis.base import Analyzer, run_analyzer
from code_review_rag.analysis.checkstyle import CheckstyleAnalyzer
from code_review_rag.analysis.pmd import PmdAnalyzer

__all__ = ["Analyzer", "CheckstyleAnalyzer", "PmdAnalyzer", "run_analyzer"]
