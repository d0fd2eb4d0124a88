"""kb_review MCP tool: run the review pipeline over one Java file."""

import logging
from pathlib import Path
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from code_review_rag.tools.formatters import format_report

logger = logging.getLogger(__name__)


def register_kb_review(mcp: FastMCP) -> None:
    """Register the kb_review tool with the MCP server."""

    @mcp.tool()
    async def kb_review(
        path: Annotated[str, Field(description="Path to the Java source file to review")],
        query: Annotated[
            str | None, Field(description="Optional question to focus the feedback")
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Review a Java file against the knowledge base.

        Runs the configured static analyzers and a knowledge-base pattern scan,
        retrieves guidance for every finding and returns feedback plus a
        match summary. Falls back to template feedback if the generation
        backend is unavailable.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        source = Path(path).expanduser()
        if not source.is_file():
            return f"Error: file not found: {source}"
        pipeline = ctx.lifespan_context["pipeline"]
        report = await pipeline.review(source, user_query=query)
        return format_report(report)
