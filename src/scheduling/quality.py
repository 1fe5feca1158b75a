"""
SM-2 quality grades and the score-to-grade mapping.

SM-2 Grade Scale:
0 - Complete blackout, could not recall anything
1 - Incorrect, serious difficulty recalling
2 - Incorrect, but the answer seemed easy once shown
3 - Correct, with significant difficulty
4 - Correct, with some hesitation
5 - Correct, with perfect recall
"""

from __future__ import annotations

import math
from enum import IntEnum
from typing import NamedTuple

PASSING_GRADE = 3


class QualityGrade(IntEnum):
    """Recall quality grades for the SM-2 algorithm."""

    COMPLETE_BLACKOUT = 0
    INCORRECT_HARD = 1
    INCORRECT_EASY = 2
    CORRECT_HARD = 3
    CORRECT_HESITANT = 4
    CORRECT_EASY = 5


class Rating(NamedTuple):
    """One point on the six-point self-rating scale."""

    quality: QualityGrade
    label: str
    description: str


# Ordered best to worst, the way the review screen lists them
RATING_SCALE: tuple[Rating, ...] = (
    Rating(QualityGrade.CORRECT_EASY, "Perfect", "Recalled everything easily"),
    Rating(QualityGrade.CORRECT_HESITANT, "Good", "Recalled most with minor hesitation"),
    Rating(QualityGrade.CORRECT_HARD, "Fair", "Recalled with some difficulty"),
    Rating(QualityGrade.INCORRECT_EASY, "Hard", "Barely recalled the concepts"),
    Rating(QualityGrade.INCORRECT_HARD, "Very Hard", "Serious difficulty recalling"),
    Rating(QualityGrade.COMPLETE_BLACKOUT, "Complete Blackout", "Could not recall anything"),
)

# (minimum score, grade), checked top to bottom
SCORE_THRESHOLDS: tuple[tuple[float, QualityGrade], ...] = (
    (0.9, QualityGrade.CORRECT_EASY),
    (0.8, QualityGrade.CORRECT_HESITANT),
    (0.6, QualityGrade.CORRECT_HARD),
    (0.4, QualityGrade.INCORRECT_EASY),
    (0.2, QualityGrade.INCORRECT_HARD),
)


def clamp_quality(quality: int) -> int:
    """Clamp a grade into the 0-5 range."""
    return max(int(QualityGrade.COMPLETE_BLACKOUT), min(int(QualityGrade.CORRECT_EASY), int(quality)))


def score_to_quality(score: float) -> QualityGrade:
    """
    Convert a completion score (0-1) to an SM-2 quality grade (0-5).

    Args:
        score: Fraction of the module answered correctly, e.g. a quiz result

    Returns:
        QualityGrade for the score (out-of-range scores are clamped first,
        NaN counts as no recall)
    """
    if math.isnan(score):
        return QualityGrade.COMPLETE_BLACKOUT
    score = max(0.0, min(1.0, score))
    for minimum, grade in SCORE_THRESHOLDS:
        if score >= minimum:
            return grade
    return QualityGrade.COMPLETE_BLACKOUT


def is_passing(quality: int) -> bool:
    """Grades of 3 and above count as successful recall."""
    return quality >= PASSING_GRADE


def quality_label(quality: int) -> str:
    """Get the rating-scale label for a grade."""
    labels = {rating.quality: rating.label for rating in RATING_SCALE}
    return labels[QualityGrade(clamp_quality(quality))]
