"""Generative backends for feedback text."""

from code_review_rag.llm.ollama import OllamaLLMClient
from code_review_rag.llm.provider import LLMProvider

try:
    from code_review_rag.llm.anthropic import AnthropicLLMClient
except ImportError:
    AnthropicLLMClient = None  # type: ignore[assignment,misc]

__all__ = ["AnthropicLLMClient", "LLMProvider", "OllamaLLMClient"]
