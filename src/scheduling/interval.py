"""
SM-2 interval algorithm.

Pure computation of the next scheduling state for a module from its
previous state and a recall quality grade. The current instant is passed
in by the caller; nothing here reads the clock or touches storage.

Interval progression on successful recall:
- First repetition: 1 day
- Second repetition: 6 days
- Subsequent: round(previous interval * previous ease factor)

A failed recall (grade < 3) restarts the progression at 1 day. Intervals
are capped so the due date stays within the range of `datetime`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .models import DEFAULT_EASE_FACTOR, MIN_EASE_FACTOR, ReviewRecord
from .quality import clamp_quality, is_passing

if TYPE_CHECKING:
    from config import Settings


@dataclass(frozen=True)
class SM2Config:
    """Configuration for SM-2 algorithm."""

    default_ease_factor: float = DEFAULT_EASE_FACTOR
    minimum_ease_factor: float = MIN_EASE_FACTOR
    first_interval: int = 1  # Days for first review
    second_interval: int = 6  # Days for second review

    @classmethod
    def from_settings(cls, settings: Settings) -> SM2Config:
        return cls(**settings.get_sm2_config())


def round_half_up(value: float) -> int:
    """Round .5 upwards instead of to the nearest even integer."""
    return int(math.floor(value + 0.5))


def max_interval_days(now: datetime) -> int:
    """Longest interval from `now` that still lands on a representable date."""
    latest = datetime.max.replace(tzinfo=now.tzinfo)
    # One day of slack for UTC offset changes between now and the due date
    return (latest - now).days - 1


def ease_delta(quality: int) -> float:
    """EF' - EF = 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)"""
    miss = 5 - quality
    return 0.1 - miss * (0.08 + miss * 0.02)


class SM2Scheduler:
    """
    Implements the SM-2 spaced repetition algorithm.

    Each module has:
    - Ease Factor (EF): How easy the material is (2.5 default, min 1.3)
    - Interval: Days until next review
    - Repetition: Consecutive successful recalls since the last lapse
    """

    def __init__(self, config: SM2Config | None = None):
        """
        Initialize SM-2 scheduler.

        Args:
            config: Custom configuration (uses defaults if None)
        """
        self.config = config or SM2Config()

    def initial_state(self, now: datetime, module_id: str = "") -> ReviewRecord:
        """Canonical state of a module that has never been scheduled (due immediately)."""
        return ReviewRecord(
            module_id=module_id,
            next_review=now,
            interval_days=self.config.first_interval,
            ease_factor=self.config.default_ease_factor,
            repetition=0,
        )

    def calculate_next_review(
        self,
        previous: ReviewRecord | None,
        quality: int,
        now: datetime,
    ) -> ReviewRecord:
        """
        Calculate the next review state based on a quality grade.

        Args:
            previous: Current state for the module, or None if never scheduled
            quality: Recall grade (0-5), clamped into range
            now: The instant the review happens

        Returns:
            New ReviewRecord; for previous=None the canonical initial state
        """
        if previous is None:
            return self.initial_state(now)

        quality = clamp_quality(quality)
        limit = max_interval_days(now)

        if is_passing(quality):
            if previous.repetition == 0:
                interval = self.config.first_interval
            elif previous.repetition == 1:
                interval = self.config.second_interval
            else:
                interval = round_half_up(min(previous.interval_days * previous.ease_factor, limit))
            repetition = previous.repetition + 1
        else:
            # Lapse - start over
            interval = self.config.first_interval
            repetition = 0

        ease = max(self.config.minimum_ease_factor, previous.ease_factor + ease_delta(quality))
        interval = max(1, min(interval, limit))

        return ReviewRecord(
            module_id=previous.module_id,
            next_review=now + timedelta(days=interval),
            interval_days=interval,
            ease_factor=ease,
            repetition=repetition,
        )


_default_scheduler = SM2Scheduler()


def calculate_next_review(
    previous: ReviewRecord | None,
    quality: int,
    now: datetime,
    config: SM2Config | None = None,
) -> ReviewRecord:
    """Module-level shortcut for SM2Scheduler.calculate_next_review."""
    scheduler = SM2Scheduler(config) if config is not None else _default_scheduler
    return scheduler.calculate_next_review(previous, quality, now)
