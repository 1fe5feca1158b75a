"""
Entry point for running the review CLI as a module.

Usage:
    python -m src.cli due
    python -m src.cli stats
    python -m src.cli --help
"""
from .review_cli import main

if __name__ == "__main__":
    main()
