"""FastMCP server with lifespan management and tool registration."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastmcp import FastMCP

from code_review_rag.analysis.base import Analyzer
from code_review_rag.analysis.checkstyle import CheckstyleAnalyzer
from code_review_rag.analysis.pmd import PmdAnalyzer
from code_review_rag.config import (
    get_checkstyle_config,
    get_code_excerpt_chars,
    get_index_path,
    get_kb_dir,
    get_llm_provider,
    get_log_level,
    get_max_results,
    get_pmd_ruleset,
    get_template_path,
    require_path,
)
from code_review_rag.db.backend import Database
from code_review_rag.db.connection import create_connection
from code_review_rag.generation.strategy import create_strategy
from code_review_rag.generation.template import load_template
from code_review_rag.ingest.loader import load_knowledge_dir
from code_review_rag.llm import AnthropicLLMClient
from code_review_rag.llm.ollama import OllamaLLMClient
from code_review_rag.llm.provider import LLMProvider
from code_review_rag.pipeline.orchestrator import ReviewPipeline
from code_review_rag.store.document_store import SQLiteDocumentStore
from code_review_rag.tools.kb_review import register_kb_review
from code_review_rag.tools.kb_search import register_kb_search

KB_DIR_HINT = "Set REVIEW_KB_DIR (or pass --kb-dir) to a directory of *.json knowledge records."


def configure_logging() -> None:
    """Log to stderr (stdout is the MCP stdio transport) at REVIEW_LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, get_log_level(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def _create_llm(provider: str) -> LLMProvider | None:
    """Create a generation backend for the given provider name."""
    if provider == "anthropic":
        if AnthropicLLMClient is not None:
            return AnthropicLLMClient()
        return None
    if provider == "ollama":
        return OllamaLLMClient()
    return None


def create_analyzers() -> list[Analyzer]:
    """Analyzers enabled by configuration; each needs its rules file set."""
    analyzers: list[Analyzer] = []
    ruleset = get_pmd_ruleset()
    if ruleset is not None:
        analyzers.append(PmdAnalyzer(ruleset))
    checkstyle_config = get_checkstyle_config()
    if checkstyle_config is not None:
        analyzers.append(CheckstyleAnalyzer(checkstyle_config))
    return analyzers


def build_pipeline(
    db: Database,
    llm: LLMProvider | None,
    template_path: Path | None = None,
) -> ReviewPipeline:
    """Wire a review pipeline from configuration."""
    strategy = create_strategy(
        llm,
        load_template(template_path or get_template_path()),
        max_code_chars=get_code_excerpt_chars(),
    )
    return ReviewPipeline(
        SQLiteDocumentStore(db),
        strategy,
        create_analyzers(),
        max_results=get_max_results(),
    )


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Index the knowledge base and manage index and backend lifecycle."""
    configure_logging()
    logger = logging.getLogger(__name__)

    kb_dir = require_path(get_kb_dir(), "knowledge-base directory", KB_DIR_HINT)
    index_path = get_index_path()
    logger.info("Opening index at %s", index_path)
    db = await create_connection(index_path)

    provider = get_llm_provider()
    llm = _create_llm(provider)
    if llm is not None:
        logger.info("Generation backend: %s", provider)
    else:
        logger.warning("No generation backend (%s), template feedback only", provider)

    try:
        pipeline = build_pipeline(db, llm)
        loaded = load_knowledge_dir(kb_dir)
        await pipeline.index_knowledge_base(loaded.entries)
        yield {"db": db, "llm": llm, "pipeline": pipeline}
    finally:
        if llm is not None:
            await llm.close()
        await db.close()
        logger.info("Index connection closed")


_INSTRUCTIONS = """\
This server holds a curated code-review knowledge base for Java: best \
practices, anti-patterns and enhancements, each with a description, an \
example and a reference.

- kb_search: Look up guidance for a rule name or keyword (e.g. a PMD rule \
such as ReplaceVectorWithList, or a term such as 'synchronized').
- kb_topics: List every entry title in the knowledge base.
- kb_review: Review a Java file. Runs the configured static analyzers plus a \
knowledge-base pattern scan and returns feedback for each finding with a \
match summary.
"""


def create_server() -> FastMCP:
    """Create and configure the MCP server with all tools."""
    mcp = FastMCP(
        "code-review-rag",
        instructions=_INSTRUCTIONS,
        lifespan=lifespan,
    )

    register_kb_search(mcp)
    register_kb_review(mcp)

    return mcp
