"""In-process review store, mainly for tests and the `memory` backend."""

from __future__ import annotations

from dataclasses import replace

from src.scheduling.models import ReviewRecord


class InMemoryReviewStore:
    """Keeps review records in a list; copies on the way in and out."""

    def __init__(self, items: list[ReviewRecord] | None = None):
        self._items: list[ReviewRecord] = [replace(item) for item in items or []]
        self.save_count = 0

    async def get_review_items(self) -> list[ReviewRecord]:
        return [replace(item) for item in self._items]

    async def save_review_items(self, items: list[ReviewRecord]) -> None:
        self._items = [replace(item) for item in items]
        self.save_count += 1
