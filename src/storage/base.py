"""Review store interface consumed by the review scheduler."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.scheduling.models import ReviewRecord


@runtime_checkable
class ReviewStore(Protocol):
    """
    Persistence for the review-record collection.

    The collection is always read and written as a whole. Implementations
    return an empty list when nothing is stored and raise
    PersistenceReadError / PersistenceWriteError only for genuine I/O
    failures.
    """

    async def get_review_items(self) -> list[ReviewRecord]:
        """Load every stored review record."""
        ...

    async def save_review_items(self, items: list[ReviewRecord]) -> None:
        """Replace the stored collection with `items`."""
        ...
