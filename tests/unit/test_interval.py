"""
Unit tests for the SM-2 interval algorithm.

Every call passes an explicit `now`, so the resulting next_review
values are exact.
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from src.scheduling.interval import (
    SM2Config,
    SM2Scheduler,
    calculate_next_review,
    ease_delta,
    max_interval_days,
    round_half_up,
)


class TestInitialState:
    """Tests for modules that were never scheduled."""

    def test_no_previous_returns_canonical_state(self, now):
        """A missing previous state yields the due-immediately first state."""
        record = calculate_next_review(None, 5, now)

        assert record.module_id == ""
        assert record.interval_days == 1
        assert record.ease_factor == 2.5
        assert record.repetition == 0
        assert record.next_review == now

    @pytest.mark.parametrize("quality", [0, 2, 3, 5])
    def test_initial_state_ignores_quality(self, now, quality):
        record = calculate_next_review(None, quality, now)
        assert (record.interval_days, record.repetition) == (1, 0)

    def test_initial_state_uses_configured_ease(self, now):
        record = calculate_next_review(None, 4, now, SM2Config(default_ease_factor=2.0))
        assert record.ease_factor == 2.0


class TestSuccessfulRecall:
    """Tests for grades 3-5."""

    def test_first_repetition_interval_is_one_day(self, now, make_record):
        previous = make_record("m1", repetition=0, interval_days=1)

        record = calculate_next_review(previous, 5, now)

        assert record.interval_days == 1
        assert record.repetition == 1
        assert record.next_review == now + timedelta(days=1)

    def test_second_repetition_interval_is_six_days(self, now, make_record):
        previous = make_record("m1", repetition=1, interval_days=1)

        record = calculate_next_review(previous, 4, now)

        assert record.interval_days == 6
        assert record.repetition == 2
        assert record.next_review == now + timedelta(days=6)

    def test_later_repetitions_multiply_by_previous_ease(self, now, make_record):
        """interval = 6, ease = 2.5 -> 15 days (old ease, not the updated one)."""
        previous = make_record("m1", repetition=2, interval_days=6, ease_factor=2.5)

        record = calculate_next_review(previous, 5, now)

        assert record.interval_days == 15
        assert record.repetition == 3
        assert record.ease_factor == pytest.approx(2.6)

    def test_half_day_intervals_round_up(self, now, make_record):
        """5 * 2.5 = 12.5 rounds to 13, not to the even 12."""
        previous = make_record("m1", repetition=3, interval_days=5, ease_factor=2.5)

        record = calculate_next_review(previous, 4, now)

        assert record.interval_days == 13

    def test_module_id_is_preserved(self, now, make_record):
        record = calculate_next_review(make_record("quantum-1", repetition=2, interval_days=6), 3, now)
        assert record.module_id == "quantum-1"


class TestLapse:
    """Tests for grades 0-2."""

    def test_lapse_resets_repetition_and_interval(self, now, make_record):
        previous = make_record("m1", repetition=3, interval_days=40, ease_factor=2.6)

        record = calculate_next_review(previous, 1, now)

        assert record.repetition == 0
        assert record.interval_days == 1
        assert record.next_review == now + timedelta(days=1)

    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_every_failing_grade_lapses(self, now, make_record, quality):
        previous = make_record("m1", repetition=5, interval_days=90)
        record = calculate_next_review(previous, quality, now)
        assert (record.repetition, record.interval_days) == (0, 1)

    def test_lapse_lowers_ease(self, now, make_record):
        previous = make_record("m1", repetition=3, interval_days=40, ease_factor=2.7)

        record = calculate_next_review(previous, 1, now)

        assert record.ease_factor == pytest.approx(2.16)


class TestEaseFactor:
    """Tests for the ease factor update and its floor."""

    @pytest.mark.parametrize("quality,expected", [
        (5, 0.10),
        (4, 0.00),
        (3, -0.14),
        (2, -0.32),
        (1, -0.54),
        (0, -0.80),
    ])
    def test_ease_delta_per_grade(self, quality, expected):
        assert ease_delta(quality) == pytest.approx(expected)

    def test_repeated_blackouts_never_drop_below_floor(self, now, make_record):
        record = make_record("m1", ease_factor=2.5)

        for _ in range(10):
            record = calculate_next_review(record, 0, now)
            assert record.ease_factor >= 1.3

        assert record.ease_factor == pytest.approx(1.3)

    def test_no_ease_ceiling(self, now, make_record):
        record = make_record("m1", ease_factor=2.5)

        for _ in range(20):
            # Stay on the first repetition so only the ease grows
            record = calculate_next_review(replace(record, repetition=0), 5, now)
            assert record.interval_days == 1

        assert record.ease_factor == pytest.approx(4.5)

    def test_custom_minimum_ease(self, now, make_record):
        scheduler = SM2Scheduler(SM2Config(minimum_ease_factor=1.7))

        record = scheduler.calculate_next_review(make_record("m1", ease_factor=1.8), 0, now)

        assert record.ease_factor == pytest.approx(1.7)


class TestInputHandling:
    """Tests for determinism and out-of-range grades."""

    def test_same_inputs_same_outputs(self, now, make_record):
        previous = make_record("m1", repetition=4, interval_days=20, ease_factor=2.3)

        first = calculate_next_review(previous, 4, now)
        second = calculate_next_review(previous, 4, now)

        assert first == second

    def test_previous_is_not_mutated(self, now, make_record):
        previous = make_record("m1", repetition=2, interval_days=6)

        calculate_next_review(previous, 5, now)

        assert previous.repetition == 2
        assert previous.interval_days == 6

    def test_grades_above_five_are_clamped(self, now, make_record):
        previous = make_record("m1", repetition=2, interval_days=6)

        assert calculate_next_review(previous, 9, now) == calculate_next_review(previous, 5, now)

    def test_negative_grades_are_clamped(self, now, make_record):
        previous = make_record("m1", repetition=2, interval_days=6)

        assert calculate_next_review(previous, -3, now) == calculate_next_review(previous, 0, now)

    def test_interval_never_below_one(self, now, make_record):
        previous = make_record("m1", repetition=4, interval_days=0, ease_factor=1.3)

        record = calculate_next_review(previous, 5, now)

        assert record.interval_days == 1


@pytest.mark.parametrize("value,expected", [(12.5, 13), (2.5, 3), (15.0, 15), (7.49, 7)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


class TestIntervalCap:
    """Tests for intervals that would run past the last representable date."""

    def test_huge_stored_interval_is_capped(self, now, make_record):
        previous = make_record("m1", repetition=5, interval_days=10**7, ease_factor=2.5)

        record = calculate_next_review(previous, 5, now)

        assert record.interval_days == max_interval_days(now)
        assert record.next_review == now + timedelta(days=record.interval_days)
        assert record.repetition == 6

    def test_long_run_of_perfect_grades_never_overflows(self, now, make_record):
        record = make_record("m1", ease_factor=2.5)

        for _ in range(40):
            record = calculate_next_review(record, 5, now)

        assert record.repetition == 40
        assert record.interval_days == max_interval_days(now)
        assert record.ease_factor == pytest.approx(6.5)

    def test_lapse_after_cap_restarts_at_one_day(self, now, make_record):
        previous = make_record("m1", repetition=5, interval_days=10**7)

        record = calculate_next_review(previous, 1, now)

        assert record.interval_days == 1

    def test_max_interval_lands_on_valid_date(self):
        now = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)

        limit = max_interval_days(now)

        assert (now + timedelta(days=limit)).year == 9999
