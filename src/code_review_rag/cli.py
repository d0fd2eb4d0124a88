"""Command-line interface: review a file, query the knowledge base, or serve MCP."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from code_review_rag.config import get_kb_dir, get_llm_provider, require_path
from code_review_rag.db.backend import Database
from code_review_rag.db.connection import create_connection
from code_review_rag.errors import ConfigurationError, IndexWriteError, ReviewRagError
from code_review_rag.ingest.loader import load_knowledge_dir
from code_review_rag.llm.provider import LLMProvider
from code_review_rag.pipeline.orchestrator import ReviewPipeline
from code_review_rag.server import (
    KB_DIR_HINT,
    _create_llm,
    build_pipeline,
    configure_logging,
    create_server,
)
from code_review_rag.tools.formatters import format_report, format_search_results, format_topics

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INDEX_ERROR = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="code-review-rag",
        description="Java code review feedback grounded in a curated knowledge base",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def add_index_options(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--kb-dir",
            type=Path,
            default=None,
            help="Directory of *.json knowledge records (default: REVIEW_KB_DIR)",
        )
        p.add_argument(
            "--index",
            type=Path,
            default=None,
            help="Index database path (default: REVIEW_INDEX_PATH)",
        )

    review = sub.add_parser("review", help="Review a Java source file")
    review.add_argument("file", type=Path, help="Java source file to review")
    add_index_options(review)
    review.add_argument("--query", default=None, help="Question to focus the feedback")
    review.add_argument(
        "--provider",
        choices=["ollama", "anthropic", "none"],
        default=None,
        help="Generation backend (default: REVIEW_LLM_PROVIDER)",
    )
    review.add_argument(
        "--template",
        type=Path,
        default=None,
        help="Feedback template file (default: REVIEW_TEMPLATE_PATH or built-in)",
    )

    search = sub.add_parser("search", help="Search the knowledge base")
    search.add_argument("query", help="Rule name, keyword or phrase")
    search.add_argument("--limit", type=int, default=5, help="Maximum results (default: 5)")
    add_index_options(search)

    topics = sub.add_parser("topics", help="List knowledge-base titles")
    add_index_options(topics)

    sub.add_parser("serve", help="Run the MCP server over stdio")
    return parser


async def _open_pipeline(
    args: argparse.Namespace, *, require_kb: bool
) -> tuple[Database, LLMProvider | None, ReviewPipeline]:
    """Open the index and build a pipeline, indexing the knowledge base when given."""
    kb_dir = args.kb_dir or get_kb_dir()
    if require_kb:
        kb_dir = require_path(kb_dir, "knowledge-base directory", KB_DIR_HINT)

    provider = getattr(args, "provider", None) or get_llm_provider()
    llm = _create_llm(provider) if args.command == "review" else None
    db = await create_connection(args.index)
    pipeline = build_pipeline(db, llm, getattr(args, "template", None))
    try:
        if kb_dir is not None:
            await pipeline.index_knowledge_base(load_knowledge_dir(kb_dir).entries)
        else:
            await pipeline.open()
    except BaseException:
        if llm is not None:
            await llm.close()
        await db.close()
        raise
    return db, llm, pipeline


async def _run(args: argparse.Namespace) -> str:
    db, llm, pipeline = await _open_pipeline(args, require_kb=args.command == "review")
    try:
        if args.command == "review":
            report = await pipeline.review(args.file, user_query=args.query)
            return format_report(report)
        if args.command == "search":
            results = await pipeline.searcher.search_scored(args.query, args.limit)
            return format_search_results(results) + "\n"
        return format_topics(await pipeline.searcher.get_all_topics()) + "\n"
    finally:
        if llm is not None:
            await llm.close()
        await db.close()


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging()

    if args.command == "serve":
        create_server().run(transport="stdio")
        return EXIT_OK

    if args.command == "review" and not args.file.is_file():
        print(f"Error: source file not found: {args.file}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        output = asyncio.run(_run(args))
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except IndexWriteError as e:
        print(f"Index error: {e}", file=sys.stderr)
        return EXIT_INDEX_ERROR
    except ReviewRagError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INDEX_ERROR

    sys.stdout.write(output)
    return EXIT_OK
