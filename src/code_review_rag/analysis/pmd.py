"""PMD analyzer via the ``pmd check`` CLI and its JSON report."""

import json
import shlex
from pathlib import Path

from code_review_rag.analysis.base import format_details, run_command
from code_review_rag.config import get_analyzer_timeout, get_pmd_command
from code_review_rag.errors import AnalyzerError
from code_review_rag.models.finding import Finding

# pmd check exits 4 when violations were found
_OK_EXIT_CODES = frozenset({0, 4})


def parse_pmd_report(report: str, file_name: str) -> list[Finding]:
    """Findings from a PMD JSON report, one per violation.

    The issue label is the rule name; details carry the reported line and
    description against ``file_name``.
    """
    try:
        data = json.loads(report)
    except json.JSONDecodeError as e:
        raise AnalyzerError(f"PMD report is not JSON: {e}") from e
    files = data.get("files", []) if isinstance(data, dict) else None
    if not isinstance(files, list):
        raise AnalyzerError("PMD report has no 'files' list")

    findings: list[Finding] = []
    for file_report in files:
        violations = file_report.get("violations", []) if isinstance(file_report, dict) else None
        if not isinstance(violations, list):
            raise AnalyzerError(f"Malformed PMD file entry: {file_report!r}")
        for violation in violations:
            if not isinstance(violation, dict) or not isinstance(violation.get("rule"), str):
                raise AnalyzerError(f"Malformed PMD violation: {violation!r}")
            line = violation.get("beginline", 1)
            description = str(violation.get("description") or "").strip()
            findings.append(
                Finding(
                    issue=violation["rule"],
                    details=format_details(file_name, line, description),
                )
            )
    return findings


class PmdAnalyzer:
    """Runs PMD with a ruleset against one Java file."""

    name = "pmd"

    def __init__(
        self,
        ruleset: Path,
        command: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize with the ruleset, and optionally the launcher and timeout."""
        self.ruleset = ruleset
        self.command = command or get_pmd_command()
        self.timeout = timeout if timeout is not None else get_analyzer_timeout()

    async def analyze(self, path: Path) -> list[Finding]:
        """Run PMD over ``path`` and parse its report."""
        returncode, stdout, stderr = await run_command(
            [
                *shlex.split(self.command),
                "check",
                "-d",
                str(path),
                "-R",
                str(self.ruleset),
                "-f",
                "json",
                "--no-progress",
            ],
            self.timeout,
        )
        if returncode not in _OK_EXIT_CODES:
            raise AnalyzerError(f"pmd exited {returncode}: {stderr.strip()}")
        return parse_pmd_report(stdout, path.name)
