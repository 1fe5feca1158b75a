"""
Review Scheduler.

Bridges the SM-2 interval algorithm to the review store:
- schedules a module after completion (score -> grade)
- records self-rated reviews (explicit grade)
- answers due / upcoming / statistics queries
- resets a module's schedule

Every operation re-reads the full collection from the store and, when it
mutates, writes the full collection back. Concurrent writers for the same
module are last-writer-wins.

Write-path operations re-raise persistence errors. Read-path queries log
and fall back to empty/default results.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from loguru import logger

from .errors import PersistenceError
from .interval import SM2Config, SM2Scheduler
from .models import ReviewRecord, ReviewResult, ReviewStats, ensure_aware, utc_now
from .quality import score_to_quality

if TYPE_CHECKING:
    from src.storage.base import ReviewStore

Clock = Callable[[], datetime]

DEFAULT_UPCOMING_DAYS = 7
SECONDS_PER_DAY = 24 * 60 * 60


class ReviewScheduler:
    """Schedules module reviews and answers review-queue queries."""

    def __init__(
        self,
        store: ReviewStore,
        config: SM2Config | None = None,
        clock: Clock | None = None,
        week_days: int = DEFAULT_UPCOMING_DAYS,
    ):
        """
        Initialize the scheduler.

        Args:
            store: Persistence collaborator for review records
            config: SM-2 configuration (uses defaults if None)
            clock: Returns the current instant (UTC wall clock if None)
            week_days: Window for the "due this week" statistic
        """
        self.store = store
        self.config = config or SM2Config()
        self.sm2 = SM2Scheduler(self.config)
        self.clock = clock or utc_now
        self.week_days = week_days

    def _now(self) -> datetime:
        # Naive clock readings are taken as UTC, like stored timestamps
        return ensure_aware(self.clock())

    # =========================================================================
    # Write Path
    # =========================================================================

    async def schedule_module_review(
        self,
        module_id: str,
        completion_score: float,
        timestamp: datetime | None = None,
    ) -> ReviewRecord:
        """
        Schedule a module for review based on its completion score.

        Args:
            module_id: The completed module
            completion_score: Fraction correct (0-1), mapped to a grade
            timestamp: When the module was completed (informational)

        Returns:
            The stored ReviewRecord

        Raises:
            PersistenceError: the store could not be read or written
        """
        quality = score_to_quality(completion_score)
        logger.debug(
            "Scheduling {} from score {:.2f} -> quality {} (completed {})",
            module_id,
            completion_score,
            int(quality),
            timestamp.isoformat() if timestamp else "now",
        )

        try:
            return await self._apply_quality(module_id, int(quality))
        except PersistenceError as e:
            logger.error(f"Failed to schedule module review for {module_id}: {e}")
            raise

    async def record_review(self, result: ReviewResult) -> ReviewRecord:
        """
        Record a self-rated review and update the schedule.

        Args:
            result: Module and grade (0-5) from a review session

        Returns:
            The stored ReviewRecord

        Raises:
            PersistenceError: the store could not be read or written
        """
        try:
            return await self._apply_quality(result.module_id, result.quality)
        except PersistenceError as e:
            logger.error(f"Failed to record review for {result.module_id}: {e}")
            raise

    async def reset_module_review(self, module_id: str) -> bool:
        """
        Remove a module's review schedule.

        Idempotent: an unscheduled module leaves the collection untouched.

        Returns:
            True if a record was removed

        Raises:
            PersistenceError: the store could not be read or written
        """
        try:
            reviews = await self.store.get_review_items()
            remaining = [r for r in reviews if r.module_id != module_id]

            if len(remaining) == len(reviews):
                logger.debug(f"No review scheduled for {module_id}; nothing to reset")
                return False

            await self.store.save_review_items(remaining)
        except PersistenceError as e:
            logger.error(f"Failed to reset module review for {module_id}: {e}")
            raise

        logger.info(f"Reset review schedule for {module_id}")
        return True

    async def _apply_quality(self, module_id: str, quality: int) -> ReviewRecord:
        """Read-modify-write one module's record."""
        now = self._now()
        reviews = await self.store.get_review_items()
        existing = next((r for r in reviews if r.module_id == module_id), None)

        if existing is None:
            # Never scheduled: start from the canonical first state
            existing = self.sm2.calculate_next_review(None, quality, now)
            existing.module_id = module_id

        new_record = self.sm2.calculate_next_review(existing, quality, now)
        new_record.module_id = module_id

        updated = [r for r in reviews if r.module_id != module_id]
        updated.append(new_record)
        await self.store.save_review_items(updated)

        logger.debug(
            f"Recorded review for {module_id}: quality={quality}, "
            f"next_review={new_record.next_review.isoformat()}, "
            f"interval={new_record.interval_days}d, ease={new_record.ease_factor:.2f}"
        )
        return new_record

    # =========================================================================
    # Read Path
    # =========================================================================

    async def _load_or_empty(self, operation: str) -> list[ReviewRecord]:
        try:
            return await self.store.get_review_items()
        except PersistenceError as e:
            logger.warning(f"Failed to {operation}: {e}")
            return []

    async def get_due_reviews(self) -> list[ReviewRecord]:
        """Get modules whose review instant has passed (storage order)."""
        reviews = await self._load_or_empty("get due reviews")
        now = self._now()
        return [r for r in reviews if r.is_due(now)]

    async def get_upcoming_reviews(self, days: int = DEFAULT_UPCOMING_DAYS) -> list[ReviewRecord]:
        """
        Get reviews falling due within the next `days` days.

        Items already due are excluded; the window is (now, now + days].

        Returns:
            Records sorted by next_review, soonest first
        """
        reviews = await self._load_or_empty("get upcoming reviews")
        return self._upcoming(reviews, self._now(), days)

    @staticmethod
    def _upcoming(reviews: list[ReviewRecord], now: datetime, days: int) -> list[ReviewRecord]:
        horizon = now + timedelta(days=days)
        upcoming = [r for r in reviews if now < r.next_review <= horizon]
        return sorted(upcoming, key=lambda r: r.next_review)

    async def get_review_stats(self) -> ReviewStats:
        """
        Get aggregate statistics about the review system.

        Returns:
            ReviewStats; defaults (zero counts, 2.5 ease, 1.0 retention)
            when nothing is scheduled or the store is unavailable
        """
        reviews = await self._load_or_empty("get review stats")
        if not reviews:
            return ReviewStats(average_ease_factor=self.config.default_ease_factor)

        now = self._now()
        total = len(reviews)
        average_ease = sum(r.ease_factor for r in reviews) / total
        # Modules holding at or above the starting ease count as retained
        retained = sum(1 for r in reviews if r.ease_factor >= self.config.default_ease_factor)

        return ReviewStats(
            total_reviews=total,
            due_today=sum(1 for r in reviews if r.is_due(now)),
            due_this_week=len(self._upcoming(reviews, now, self.week_days)),
            average_ease_factor=round(average_ease, 2),
            retention_rate=round(retained / total, 2),
        )

    async def get_review(self, module_id: str) -> ReviewRecord | None:
        """Get the stored record for a module, if any."""
        reviews = await self._load_or_empty(f"get review for {module_id}")
        return next((r for r in reviews if r.module_id == module_id), None)

    async def is_module_due(self, module_id: str) -> bool:
        """Check if a scheduled module is due now."""
        record = await self.get_review(module_id)
        return record is not None and record.is_due(self._now())

    async def get_next_review_date(self, module_id: str) -> datetime | None:
        record = await self.get_review(module_id)
        return record.next_review if record else None

    async def get_time_until_review(self, module_id: str) -> str | None:
        """
        Describe when a module is next due.

        Returns:
            "Due now", "Due tomorrow", "Due in N days", or None if unscheduled
        """
        next_review = await self.get_next_review_date(module_id)
        if next_review is None:
            return None

        seconds = (next_review - self._now()).total_seconds()
        days = math.ceil(seconds / SECONDS_PER_DAY)

        if days <= 0:
            return "Due now"
        if days == 1:
            return "Due tomorrow"
        return f"Due in {days} days"
