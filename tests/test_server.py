"""Tests for server-level wiring."""

from pathlib import Path
from unittest.mock import patch

import pytest

from code_review_rag.analysis.checkstyle import CheckstyleAnalyzer
from code_review_rag.analysis.pmd import PmdAnalyzer
from code_review_rag.generation.strategy import ResilientStrategy
from code_review_rag.generation.template import TemplateStrategy
from code_review_rag.llm.anthropic import AnthropicLLMClient
from code_review_rag.llm.ollama import OllamaLLMClient
from code_review_rag.server import _create_llm, build_pipeline, create_analyzers, create_server
from tests.conftest import FakeLLM


def test_create_llm_ollama():
    assert isinstance(_create_llm("ollama"), OllamaLLMClient)


def test_create_llm_anthropic():
    assert isinstance(_create_llm("anthropic"), AnthropicLLMClient)


def test_create_llm_anthropic_unavailable():
    with patch("code_review_rag.server.AnthropicLLMClient", None):
        assert _create_llm("anthropic") is None


def test_create_llm_none_and_unknown():
    assert _create_llm("none") is None
    assert _create_llm("unknown") is None


def test_provider_config_default():
    from code_review_rag.config import get_llm_provider

    with patch.dict("os.environ", {}, clear=True):
        assert get_llm_provider() == "ollama"
    with patch.dict("os.environ", {"REVIEW_LLM_PROVIDER": "Anthropic"}):
        assert get_llm_provider() == "anthropic"


def test_analyzers_disabled_without_rules():
    with patch.dict("os.environ", {}, clear=True):
        assert create_analyzers() == []


def test_analyzers_enabled_by_config():
    env = {"REVIEW_PMD_RULESET": "/rules/pmd.xml", "REVIEW_CHECKSTYLE_CONFIG": "/rules/cs.xml"}
    with patch.dict("os.environ", env, clear=True):
        analyzers = create_analyzers()
    assert isinstance(analyzers[0], PmdAnalyzer)
    assert analyzers[0].ruleset == Path("/rules/pmd.xml")
    assert isinstance(analyzers[1], CheckstyleAnalyzer)


@pytest.mark.asyncio
async def test_build_pipeline_strategy_selection(db, tmp_path):
    template = tmp_path / "t.txt"
    template.write_text("$title", encoding="utf-8")
    with patch.dict("os.environ", {}, clear=True):
        template_only = build_pipeline(db, None, template)
        resilient = build_pipeline(db, FakeLLM())
    assert isinstance(template_only._strategy, TemplateStrategy)
    assert template_only._strategy.template == "$title"
    assert isinstance(resilient._strategy, ResilientStrategy)


def test_create_server():
    assert create_server().name == "code-review-rag"
