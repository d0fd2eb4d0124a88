"""Checkstyle analyzer via the Checkstyle CLI and its XML report."""

import shlex
import xml.etree.ElementTree as ET
from pathlib import Path

from code_review_rag.analysis.base import format_details, run_command
from code_review_rag.config import get_analyzer_timeout, get_checkstyle_command
from code_review_rag.errors import AnalyzerError
from code_review_rag.models.finding import Finding


def check_name(source: str) -> str:
    """Short check name from a fully qualified source, e.g. ``MagicNumber``."""
    short = source.rsplit(".", 1)[-1]
    return short.removesuffix("Check") or short


def parse_checkstyle_report(report: str, file_name: str) -> list[Finding]:
    """Findings from a Checkstyle XML report, one per ``<error>`` element."""
    start = report.find("<")
    if start < 0:
        raise AnalyzerError("Checkstyle produced no XML report")
    try:
        root = ET.fromstring(report[start:])
    except ET.ParseError as e:
        raise AnalyzerError(f"Checkstyle report is not XML: {e}") from e

    findings: list[Finding] = []
    for error in root.iter("error"):
        source = error.get("source", "Checkstyle")
        findings.append(
            Finding(
                issue=check_name(source),
                details=format_details(file_name, error.get("line", "1"), error.get("message", "")),
            )
        )
    return findings


class CheckstyleAnalyzer:
    """Runs Checkstyle with a configuration file against one Java file."""

    name = "checkstyle"

    def __init__(
        self,
        config: Path,
        command: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize with the configuration, and optionally the launcher and timeout."""
        self.config = config
        self.command = command or get_checkstyle_command()
        self.timeout = timeout if timeout is not None else get_analyzer_timeout()

    async def analyze(self, path: Path) -> list[Finding]:
        """Run Checkstyle over ``path`` and parse its report.

        Checkstyle exits with the violation count, so the exit code alone
        does not mean failure; an unparseable report does.
        """
        returncode, stdout, stderr = await run_command(
            [*shlex.split(self.command), "-c", str(self.config), "-f", "xml", str(path)],
            self.timeout,
        )
        try:
            return parse_checkstyle_report(stdout, path.name)
        except AnalyzerError:
            if returncode != 0 and stderr.strip():
                raise AnalyzerError(f"checkstyle exited {returncode}: {stderr.strip()}") from None
            raise
