"""
Review scheduling records.

One ReviewRecord exists per learning module that has ever been scheduled.
Records are plain dataclasses; the stores convert them to and from the
mapping form with to_dict()/from_dict().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from loguru import logger

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing 'Z' is accepted)."""
    if isinstance(value, datetime):
        return ensure_aware(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class ReviewRecord:
    """SM-2 scheduling state for a single module."""

    module_id: str
    next_review: datetime
    interval_days: int = 1  # Days between the previous review and next_review
    ease_factor: float = DEFAULT_EASE_FACTOR
    repetition: int = 0  # Consecutive passing reviews since the last lapse

    def is_due(self, now: datetime) -> bool:
        """Check if this module is due for review at `now`."""
        return self.next_review <= now

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "module_id": self.module_id,
            "next_review": self.next_review.isoformat(),
            "interval_days": self.interval_days,
            "ease_factor": self.ease_factor,
            "repetition": self.repetition,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReviewRecord:
        """
        Create from a stored mapping.

        Missing scheduling fields fall back to the SM-2 defaults so that
        records written by older versions (which had no repetition count)
        keep working. The substitution is logged.

        Raises:
            KeyError: module_id or next_review is missing
            ValueError: next_review is not an ISO-8601 timestamp
        """
        missing = [
            name
            for name in ("interval_days", "ease_factor", "repetition")
            if data.get(name) is None
        ]
        if missing:
            logger.warning(
                "Review record {} missing {}; using defaults",
                data.get("module_id"),
                ", ".join(missing),
            )

        interval = data.get("interval_days")
        ease = data.get("ease_factor")
        repetition = data.get("repetition")

        return cls(
            module_id=str(data["module_id"]),
            next_review=parse_timestamp(data["next_review"]),
            interval_days=int(interval) if interval is not None else 1,
            ease_factor=float(ease) if ease is not None else DEFAULT_EASE_FACTOR,
            repetition=int(repetition) if repetition is not None else 0,
        )


@dataclass
class ReviewResult:
    """A self-rated review submitted from a review session."""

    module_id: str
    quality: int  # 0-5 SM-2 scale
    timestamp: datetime = field(default_factory=utc_now)


@dataclass
class ReviewStats:
    """Aggregate statistics over all review records."""

    total_reviews: int = 0
    due_today: int = 0
    due_this_week: int = 0
    average_ease_factor: float = DEFAULT_EASE_FACTOR
    retention_rate: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_reviews": self.total_reviews,
            "due_today": self.due_today,
            "due_this_week": self.due_this_week,
            "average_ease_factor": self.average_ease_factor,
            "retention_rate": self.retention_rate,
        }
