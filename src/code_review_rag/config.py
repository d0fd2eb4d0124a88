"""Environment-variable-based configuration."""

import os
from pathlib import Path

from code_review_rag.errors import ConfigurationError


def get_kb_dir() -> Path | None:
    """Return the knowledge-base directory from REVIEW_KB_DIR, if set."""
    raw = os.environ.get("REVIEW_KB_DIR")
    return Path(raw).expanduser() if raw else None


def get_index_path() -> Path:
    """Return the index database path from REVIEW_INDEX_PATH."""
    raw = os.environ.get("REVIEW_INDEX_PATH", "~/.local/share/code_review_rag/index.db")
    return Path(raw).expanduser()


def get_llm_provider() -> str:
    """Return the generation backend name from REVIEW_LLM_PROVIDER."""
    return os.environ.get("REVIEW_LLM_PROVIDER", "ollama").lower()


def get_ollama_url() -> str:
    """Return the Ollama API URL from REVIEW_OLLAMA_URL."""
    return os.environ.get("REVIEW_OLLAMA_URL", "http://localhost:11434")


def get_llm_model() -> str:
    """Return the Ollama model name from REVIEW_LLM_MODEL."""
    return os.environ.get("REVIEW_LLM_MODEL", "codellama:7b")


def get_llm_timeout() -> float:
    """Return the Ollama timeout in seconds from REVIEW_LLM_TIMEOUT."""
    return float(os.environ.get("REVIEW_LLM_TIMEOUT", "60.0"))


def get_anthropic_model() -> str:
    """Return the Anthropic model name from REVIEW_ANTHROPIC_MODEL."""
    return os.environ.get("REVIEW_ANTHROPIC_MODEL", "claude-3-5-haiku-latest")


def get_anthropic_timeout() -> float:
    """Return the Anthropic timeout in seconds from REVIEW_ANTHROPIC_TIMEOUT."""
    return float(os.environ.get("REVIEW_ANTHROPIC_TIMEOUT", "60.0"))


def get_template_path() -> Path | None:
    """Return the feedback template path from REVIEW_TEMPLATE_PATH, if set."""
    raw = os.environ.get("REVIEW_TEMPLATE_PATH")
    return Path(raw).expanduser() if raw else None


def get_max_results() -> int:
    """Return the per-finding retrieval limit from REVIEW_MAX_RESULTS."""
    return int(os.environ.get("REVIEW_MAX_RESULTS", "3"))


def get_code_excerpt_chars() -> int:
    """Return the prompt code excerpt cap from REVIEW_CODE_EXCERPT_CHARS."""
    return int(os.environ.get("REVIEW_CODE_EXCERPT_CHARS", "500"))


def get_pmd_command() -> str:
    """Return the PMD launcher from REVIEW_PMD_COMMAND."""
    return os.environ.get("REVIEW_PMD_COMMAND", "pmd")


def get_pmd_ruleset() -> Path | None:
    """Return the PMD ruleset from REVIEW_PMD_RULESET. None disables PMD."""
    raw = os.environ.get("REVIEW_PMD_RULESET")
    return Path(raw).expanduser() if raw else None


def get_checkstyle_command() -> str:
    """Return the Checkstyle launcher from REVIEW_CHECKSTYLE_COMMAND."""
    return os.environ.get("REVIEW_CHECKSTYLE_COMMAND", "checkstyle")


def get_checkstyle_config() -> Path | None:
    """Return the Checkstyle config from REVIEW_CHECKSTYLE_CONFIG. None disables Checkstyle."""
    raw = os.environ.get("REVIEW_CHECKSTYLE_CONFIG")
    return Path(raw).expanduser() if raw else None


def get_analyzer_timeout() -> float:
    """Return the analyzer subprocess timeout in seconds from REVIEW_ANALYZER_TIMEOUT."""
    return float(os.environ.get("REVIEW_ANALYZER_TIMEOUT", "120.0"))


def get_log_level() -> str:
    """Return the logging level from REVIEW_LOG_LEVEL."""
    return os.environ.get("REVIEW_LOG_LEVEL", "WARNING").upper()


def require_path(value: Path | None, name: str, hint: str) -> Path:
    """Return ``value`` or raise ConfigurationError telling the user how to set it."""
    if value is None:
        raise ConfigurationError(f"Missing required path: {name}. {hint}")
    return value
