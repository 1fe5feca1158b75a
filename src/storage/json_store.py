"""
JSON file review store.

Review records live under one key of a JSON document, next to whatever
else the application keeps in the same file (user progress, settings):

    {
      "reviewItems": [
        {"module_id": "m1", "next_review": "2025-01-02T09:00:00+00:00", ...}
      ],
      "userProgress": {...}
    }

Default location: ~/.spaced_review/progress.json
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from src.scheduling.errors import PersistenceReadError, PersistenceWriteError
from src.scheduling.models import ReviewRecord

REVIEW_ITEMS_KEY = "reviewItems"


class JsonReviewStore:
    """
    Stores the review collection in a JSON document.

    Writes go to a temporary sibling file which then replaces the
    document, so readers never see a half-written file.

    File I/O runs directly inside the async methods; a local file is
    small enough that it does not stall the event loop noticeably.
    """

    def __init__(self, path: Path, key: str = REVIEW_ITEMS_KEY):
        self.path = Path(path)
        self.key = key

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceReadError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise PersistenceReadError(f"{self.path} does not contain a JSON object")
        return data

    async def get_review_items(self) -> list[ReviewRecord]:
        """Load review records; a missing file or key means none stored."""
        raw_items = self._read_document().get(self.key) or []

        try:
            return [ReviewRecord.from_dict(item) for item in raw_items]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceReadError(f"Malformed review record in {self.path}: {e}") from e

    async def save_review_items(self, items: list[ReviewRecord]) -> None:
        """Replace the review collection, keeping the document's other keys."""
        try:
            document = self._read_document()
        except PersistenceReadError as e:
            raise PersistenceWriteError(str(e)) from e

        document[self.key] = [item.to_dict() for item in items]
        tmp_path = self.path.with_name(self.path.name + ".tmp")

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path.exists():
                tmp_path.unlink()
            raise PersistenceWriteError(f"Cannot write {self.path}: {e}") from e

        logger.debug(f"Saved {len(items)} review items to {self.path}")
