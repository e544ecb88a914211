"""Tests for aggregate totals, period stats and journey stages."""

from __future__ import annotations

from datetime import date

import pytest
from conftest import statuses_for

from rhythmchain.services.calendar_utils import SUNDAY
from rhythmchain.services.totals import (
    JourneyStage,
    calculate_period_stats,
    calculate_totals,
    encouragement_for,
    journey_stage,
    last_completed_date,
    summarize_periods,
)


class TestCalculateTotals:
    """Sessions, time and active periods."""

    def test_empty_history(self):
        totals = calculate_totals([])

        assert totals.total_sessions == 0
        assert totals.total_seconds == 0
        assert totals.total_hours == 0
        assert totals.first_entry_date is None
        assert totals.weeks_active == 0
        assert totals.months_active == 0

    def test_sums_sessions_and_time(self):
        days = statuses_for(date(2026, 1, 12), date(2026, 1, 18), [date(2026, 1, 12), date(2026, 1, 13)])
        days += statuses_for(date(2026, 1, 19), date(2026, 1, 19), seconds={date(2026, 1, 19): 600})

        totals = calculate_totals(days)

        assert totals.total_sessions == 3
        assert totals.total_seconds == 1800
        assert totals.total_hours == 0.5

    def test_first_entry_includes_incomplete_days(self):
        """A short session still marks the start of the history."""
        days = statuses_for(
            date(2026, 1, 5),
            date(2026, 1, 14),
            [date(2026, 1, 12)],
            seconds={date(2026, 1, 7): 100},
        )

        totals = calculate_totals(days)

        assert totals.first_entry_date == date(2026, 1, 7)
        assert totals.weeks_active == 1

    def test_active_weeks_and_months_need_a_complete_day(self):
        complete = [date(2025, 12, 30), date(2026, 1, 5), date(2026, 1, 6), date(2026, 1, 12)]
        days = statuses_for(date(2025, 12, 29), date(2026, 1, 14), complete)

        totals = calculate_totals(days)

        assert totals.weeks_active == 3
        assert totals.months_active == 2


class TestPeriodStats:
    """Sessions and averages over today, week, month and all time."""

    def test_empty_range(self):
        stats = calculate_period_stats([], date(2026, 1, 12), date(2026, 1, 18))

        assert (stats.sessions, stats.total_seconds, stats.average_seconds) == (0, 0, 0.0)

    def test_bounds_are_inclusive(self):
        days = statuses_for(
            date(2026, 1, 10),
            date(2026, 1, 14),
            seconds={date(2026, 1, 10): 100, date(2026, 1, 12): 400, date(2026, 1, 14): 500},
        )

        stats = calculate_period_stats(days, date(2026, 1, 12), date(2026, 1, 14))

        assert stats.sessions == 2
        assert stats.total_seconds == 900
        assert stats.average_seconds == 450.0

    def test_open_bounds(self):
        days = statuses_for(date(2026, 1, 10), date(2026, 1, 12), [date(2026, 1, 10), date(2026, 1, 12)])

        assert calculate_period_stats(days).sessions == 2
        assert calculate_period_stats(days, end=date(2026, 1, 11)).sessions == 1

    def test_summary_uses_calendar_week_and_month(self):
        """Wednesday the 14th: week from Monday the 12th, month from the 1st."""
        complete = [
            date(2025, 12, 31),
            date(2026, 1, 2),
            date(2026, 1, 11),
            date(2026, 1, 13),
            date(2026, 1, 14),
        ]
        days = statuses_for(date(2025, 12, 31), date(2026, 1, 14), complete)

        summary = summarize_periods(days, date(2026, 1, 14))

        assert summary.today.sessions == 1
        assert summary.this_week.sessions == 2
        assert summary.this_month.sessions == 4
        assert summary.all_time.sessions == 5
        assert summary.all_time.average_seconds == 600.0

    def test_summary_respects_week_start(self):
        complete = [date(2026, 1, 11), date(2026, 1, 13)]
        days = statuses_for(date(2026, 1, 10), date(2026, 1, 14), complete)

        summary = summarize_periods(days, date(2026, 1, 14), week_start_day=SUNDAY)

        assert summary.this_week.sessions == 2

    def test_days_after_today_are_left_out(self):
        days = statuses_for(date(2026, 1, 12), date(2026, 1, 16), [date(2026, 1, 12), date(2026, 1, 16)])

        summary = summarize_periods(days, date(2026, 1, 14))

        assert summary.all_time.sessions == 1
        assert summary.this_week.sessions == 1


class TestLastCompleted:
    def test_latest_complete_day(self):
        days = statuses_for(
            date(2026, 1, 12),
            date(2026, 1, 15),
            [date(2026, 1, 12), date(2026, 1, 13)],
            seconds={date(2026, 1, 15): 100},
        )

        assert last_completed_date(days) == date(2026, 1, 13)

    def test_none_without_complete_days(self):
        assert last_completed_date(statuses_for(date(2026, 1, 12), date(2026, 1, 14))) is None

    def test_ignores_days_after_today(self):
        days = statuses_for(date(2026, 1, 12), date(2026, 1, 16), [date(2026, 1, 12), date(2026, 1, 16)])

        assert last_completed_date(days, today=date(2026, 1, 14)) == date(2026, 1, 12)


class TestJourneyStage:
    """Stage thresholds on active weeks."""

    @pytest.mark.parametrize(
        "weeks,stage",
        [
            (0, JourneyStage.STARTING),
            (1, JourneyStage.STARTING),
            (2, JourneyStage.BUILDING),
            (3, JourneyStage.BUILDING),
            (4, JourneyStage.BECOMING),
            (52, JourneyStage.BECOMING),
        ],
    )
    def test_stage_thresholds(self, weeks, stage):
        assert journey_stage(weeks) is stage

    def test_encouragement(self):
        assert encouragement_for("starting") == "Every journey begins with a single step"
        assert encouragement_for(JourneyStage.BECOMING) == "This is who you are now"
