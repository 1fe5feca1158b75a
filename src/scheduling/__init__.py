"""
Spaced Repetition Scheduling.

Components:
- SM2Scheduler: Pure SM-2 interval algorithm
- ReviewScheduler: Persists schedules and answers due/upcoming/stats queries
- QualityGrade: 0-5 recall grades and the score-to-grade mapping
- ReviewRecord: Per-module scheduling state
"""

from .errors import PersistenceError, PersistenceReadError, PersistenceWriteError
from .interval import SM2Config, SM2Scheduler, calculate_next_review
from .models import ReviewRecord, ReviewResult, ReviewStats
from .quality import RATING_SCALE, QualityGrade, quality_label, score_to_quality
from .review_scheduler import ReviewScheduler

__all__ = [
    # Algorithm
    "SM2Config",
    "SM2Scheduler",
    "calculate_next_review",
    # Grades
    "QualityGrade",
    "RATING_SCALE",
    "quality_label",
    "score_to_quality",
    # Records
    "ReviewRecord",
    "ReviewResult",
    "ReviewStats",
    # Service
    "ReviewScheduler",
    # Errors
    "PersistenceError",
    "PersistenceReadError",
    "PersistenceWriteError",
]
