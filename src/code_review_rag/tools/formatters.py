"""Plain-text formatters shared by the CLI and the MCP tools."""

from code_review_rag.models.entry import KnowledgeEntry
from code_review_rag.models.search import SearchResult
from code_review_rag.pipeline.orchestrator import ReviewReport, ReviewSummary

_SUMMARY_RULE = "=" * 28


def format_entry_header(entry: KnowledgeEntry, score: float | None = None) -> str:
    """Format: [BestPractice] Title (score 1.23)."""
    header = f"[{entry.type.value}] {entry.title}"
    if score is not None:
        header += f" (score {score:.2f})"
    return header


def format_entry_compact(entry: KnowledgeEntry, score: float | None = None) -> str:
    """Header + tags + description. For search results."""
    lines = [format_entry_header(entry, score)]
    if entry.tags:
        lines.append("  " + " ".join(f"#{t}" for t in entry.tags))
    lines.append(f"  {entry.description}")
    return "\n".join(lines)


def format_search_results(results: list[SearchResult], note: str | None = None) -> str:
    """Compact entries for a ranked result list."""
    return format_result_list(
        [format_entry_compact(r.entry, r.score) for r in results],
        note=note,
    )


def format_result_list(
    formatted_entries: list[str],
    header: str | None = None,
    note: str | None = None,
) -> str:
    """Count + note + entries joined by blank lines."""
    if not formatted_entries:
        return "No results found."

    lines: list[str] = []
    if header:
        lines.append(header)
    lines.append(f"{len(formatted_entries)} result(s)")
    if note:
        lines.append(f"Note: {note}")
    lines.append("")
    lines.append("\n\n".join(formatted_entries))
    return "\n".join(lines)


def format_topics(topics: list[str]) -> str:
    """Numbered list of knowledge-base titles."""
    if not topics:
        return "Knowledge base is empty."
    lines = [f"{len(topics)} topic(s)"]
    lines.extend(f"{i}. {topic}" for i, topic in enumerate(topics, 1))
    return "\n".join(lines)


def format_summary(summary: ReviewSummary) -> str:
    """Findings count, matches and match rate."""
    return "\n".join(
        [
            "=== RAG PIPELINE SUMMARY ===",
            f"Total findings: {summary.total}",
            f"Knowledge base matches: {summary.matches}",
            f"Match rate: {summary.match_rate}%",
            _SUMMARY_RULE,
        ]
    )


def format_report(report: ReviewReport) -> str:
    """Feedback text, then any warnings, then the summary."""
    parts = [report.text.rstrip("\n")]
    if report.warnings:
        # One line per distinct warning
        parts.append("\n".join(f"Warning: {w}" for w in dict.fromkeys(report.warnings)))
    if report.feedback:
        parts.append(format_summary(report.summary))
    return "\n\n".join(parts) + "\n"
