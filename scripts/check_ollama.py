"""Quick check that Ollama is running and the feedback model is available."""

import sys

import httpx

from code_review_rag.config import get_llm_model, get_ollama_url


def main() -> None:
    """Check Ollama connectivity and generation model availability."""
    url = get_ollama_url()
    model = get_llm_model()
    print(f"Checking Ollama at {url} for model {model}...")

    try:
        resp = httpx.get(f"{url}/api/tags", timeout=5.0)
        resp.raise_for_status()
        models = [m["name"] for m in resp.json().get("models", [])]
        print(f"Available models: {', '.join(models) or '(none)'}")

        if any(model in m for m in models):
            print(f"  {model} is available")
        else:
            print(f"  {model} not found, run: ollama pull {model}")
            print("  Reviews will fall back to template feedback until it is pulled.")
            sys.exit(1)
    except httpx.ConnectError:
        print("  Ollama is not running. Start it with: ollama serve")
        print("  Set REVIEW_LLM_PROVIDER=none to use template feedback only.")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"  Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
