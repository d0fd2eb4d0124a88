"""Analyzer protocol and subprocess plumbing shared by the analyzers."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from code_review_rag.errors import AnalyzerError
from code_review_rag.models.finding import Finding

logger = logging.getLogger(__name__)

ANALYZER_ERROR_ISSUE = "AnalyzerError"


@runtime_checkable
class Analyzer(Protocol):
    """Runs a static analyzer over one source file."""

    name: str

    async def analyze(self, path: Path) -> list[Finding]:
        """Findings for ``path``. Raises AnalyzerError when the tool fails."""
        ...


def format_details(file_name: str, line: int | str, message: str) -> str:
    """Location string shared by every analyzer: ``file:line - message``."""
    return f"{file_name}:{line} - {message}"


async def run_command(args: list[str], timeout: float) -> tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    A missing binary or a timeout raises AnalyzerError; a non-zero exit code
    is returned to the caller, since analyzers use it to signal violations.
    """
    if not args:
        raise AnalyzerError("No analyzer command configured")
    proc: asyncio.subprocess.Process | None = None
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except FileNotFoundError as e:
        raise AnalyzerError(f"{args[0]} not found on PATH") from e
    except asyncio.TimeoutError as e:
        if proc and proc.returncode is None:
            proc.kill()
            await proc.wait()
        raise AnalyzerError(f"{args[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise AnalyzerError(f"{args[0]} could not be started: {e}") from e
    if proc.returncode is None:
        raise AnalyzerError(f"{args[0]} exited without a return code")
    return (
        proc.returncode,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


async def run_analyzer(analyzer: Analyzer, path: Path) -> list[Finding]:
    """Run one analyzer; a failure becomes a single synthetic finding."""
    try:
        findings = await analyzer.analyze(path)
    except AnalyzerError as e:
        logger.warning("%s analysis of %s failed: %s", analyzer.name, path, e)
        return [Finding(issue=ANALYZER_ERROR_ISSUE, details=f"{analyzer.name}: {e}")]
    logger.info("%s reported %d finding(s) for %s", analyzer.name, len(findings), path)
    return findings
