"""kb_search and kb_topics MCP tools."""

import logging
from typing import Annotated

from fastmcp import FastMCP
from fastmcp.server.context import Context
from pydantic import Field

from code_review_rag.tools.formatters import format_search_results, format_topics

logger = logging.getLogger(__name__)


def register_kb_search(mcp: FastMCP) -> None:
    """Register the kb_search and kb_topics tools with the MCP server."""

    @mcp.tool()
    async def kb_search(
        query: Annotated[
            str, Field(description="Rule name, keyword or phrase, e.g. 'Vector' or 'string concatenation'")
        ],
        limit: Annotated[
            int, Field(description="Maximum results to return (1-20)", ge=1, le=20)
        ] = 5,
        ctx: Context | None = None,
    ) -> str:
        """Search the code-review knowledge base.

        Matches the exact term, the term as a substring of titles, descriptions
        and tags, and keywords that co-occur with it in indexed entries.
        Results are ranked best first.
        """
        if ctx is None:
            raise RuntimeError("Context not injected")
        pipeline = ctx.lifespan_context["pipeline"]
        results = await pipeline.searcher.search_scored(query, limit)
        return format_search_results(results)

    @mcp.tool()
    async def kb_topics(ctx: Context | None = None) -> str:
        """List every knowledge-base entry title, in index order."""
        if ctx is None:
            raise RuntimeError("Context not injected")
        pipeline = ctx.lifespan_context["pipeline"]
        return format_topics(await pipeline.searcher.get_all_topics())
