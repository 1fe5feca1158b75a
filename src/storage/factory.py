"""Build the configured review store."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from config import Settings, get_settings

from .base import ReviewStore
from .json_store import JsonReviewStore
from .memory_store import InMemoryReviewStore
from .sqlite_store import SqliteReviewStore


def get_review_store(
    settings: Settings | None = None,
    path: Path | None = None,
) -> ReviewStore:
    """
    Create the review store selected by `review_store_backend`.

    Args:
        settings: Settings to use (cached application settings if None)
        path: Overrides `review_store_path` for file-backed stores

    Returns:
        A ReviewStore implementation
    """
    settings = settings or get_settings()
    backend = settings.review_store_backend
    store_path = Path(path or settings.get_review_store_path()).expanduser()

    if backend == "memory":
        store: ReviewStore = InMemoryReviewStore()
    elif backend == "sqlite":
        store = SqliteReviewStore(store_path)
    elif backend == "json":
        store = JsonReviewStore(store_path)
    else:
        raise ValueError(f"Unknown review store backend: {backend}")

    logger.debug(f"Using {backend} review store ({store_path if backend != 'memory' else 'in-memory'})")
    return store
