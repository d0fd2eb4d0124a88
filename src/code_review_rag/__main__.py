"""Entry point for code-review-rag."""

import sys

from code_review_rag.cli import main

if __name__ == "__main__":
    sys.exit(main())
