"""Tests for calendar expansion of assignments."""

import time
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from fitcoach.services.calendar import (
    add_days,
    build_schedule,
    expand_program_assignment,
    group_by_date,
    parse_calendar_date,
    program_dates,
    program_end_date,
    scheduled_dates,
    week_bounds,
)


def _exercise_entry(name, order=1):
    return SimpleNamespace(
        id=order, exercise_id=order, order=order, sets=3, reps="10", rest="60s", notes="",
        exercise=SimpleNamespace(name=name, category="Strength", video_url=None),
    )


def _day(number, name, exercises=("Squats",), rest=False):
    return SimpleNamespace(
        day_number=number, name=name, is_rest_day=rest, estimated_duration=45,
        exercises=[_exercise_entry(n, i) for i, n in enumerate(exercises, start=1)],
    )


def _program_assignment(start, total_days, days, assignment_id=7):
    program = SimpleNamespace(id=3, name="4-Week Strength Builder", total_days=total_days, days=days)
    return SimpleNamespace(
        id=assignment_id, client_id=11, start_date=start, status="SCHEDULED", notes="", program=program,
    )


def _workout_assignment(day, assignment_id=1):
    workout = SimpleNamespace(id=5, name="Quick Circuit", estimated_duration=30, exercises=[_exercise_entry("Wall Ball")])
    return SimpleNamespace(
        id=assignment_id, client_id=11, scheduled_date=day, status="SCHEDULED", notes="", workout=workout,
    )


class TestProgramDates:
    """Tests for program date derivation."""

    def test_strength_builder_across_month_end(self):
        """Four days from 2024-01-30 run into February."""
        assert program_dates(date(2024, 1, 30), 4) == [
            date(2024, 1, 30), date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2),
        ]

    def test_leap_day(self):
        assert program_dates(date(2024, 2, 28), 3) == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_year_boundary(self):
        assert program_dates(date(2023, 12, 30), 4) == [
            date(2023, 12, 30), date(2023, 12, 31), date(2024, 1, 1), date(2024, 1, 2),
        ]

    @pytest.mark.parametrize("start", [date(2024, 3, 9), date(2024, 3, 30), date(2024, 11, 2), date(2024, 10, 26)])
    def test_dst_transitions_do_not_shift_days(self, start):
        """Consecutive calendar days around spring-forward and fall-back weekends."""
        dates = program_dates(start, 5)
        assert len(set(dates)) == 5
        assert all((b - a).days == 1 for a, b in zip(dates, dates[1:]))

    def test_dst_with_local_timezone(self, monkeypatch):
        if not hasattr(time, "tzset"):
            pytest.skip("tzset not available")
        monkeypatch.setenv("TZ", "America/New_York")
        time.tzset()
        try:
            assert program_dates(date(2024, 3, 9), 3) == [date(2024, 3, 9), date(2024, 3, 10), date(2024, 3, 11)]
        finally:
            monkeypatch.delenv("TZ")
            time.tzset()

    def test_end_date(self):
        assert program_end_date(date(2024, 1, 30), 4) == date(2024, 2, 2)
        assert program_end_date(date(2024, 1, 30), 1) == date(2024, 1, 30)

    def test_add_days_negative(self):
        assert add_days(date(2024, 3, 1), -1) == date(2024, 2, 29)


class TestParseCalendarDate:
    """Tests for parse_calendar_date."""

    def test_plain_date(self):
        assert parse_calendar_date("2024-01-30") == date(2024, 1, 30)

    def test_datetime_string_keeps_written_day(self):
        """No UTC conversion: late-evening timestamps stay on their day."""
        assert parse_calendar_date("2024-01-30T23:30:00-05:00") == date(2024, 1, 30)
        assert parse_calendar_date("2024-01-30T00:00:00.000Z") == date(2024, 1, 30)

    def test_date_and_datetime_objects(self):
        assert parse_calendar_date(datetime(2024, 1, 30, 22, 0)) == date(2024, 1, 30)
        assert parse_calendar_date(date(2024, 1, 30)) == date(2024, 1, 30)

    @pytest.mark.parametrize("value", [
        "", "tomorrow", "2024-13-01", None, 20240130,
        "2024-01-30NOT-A-DATE", "2024-01-30 junk", "2024-01-30T25:00:00",
    ])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_calendar_date(value)


class TestExpandProgramAssignment:
    """Tests for expand_program_assignment."""

    def test_one_cell_per_day(self):
        days = [_day(n, f"Day {n}") for n in range(1, 5)]
        cells = expand_program_assignment(_program_assignment(date(2024, 1, 30), 4, days))

        assert [c.date for c in cells] == program_dates(date(2024, 1, 30), 4)
        assert [c.day_number for c in cells] == [1, 2, 3, 4]
        assert [c.id for c in cells] == ["7-day-1", "7-day-2", "7-day-3", "7-day-4"]
        assert all(c.total_days == 4 and c.kind == "program_day" for c in cells)
        assert cells[0].name == "4-Week Strength Builder - Day 1: Day 1"
        assert cells[0].exercises[0]["name"] == "Squats"

    def test_missing_day_is_rest_day(self):
        days = [_day(1, "Push"), _day(3, "Legs")]
        cells = expand_program_assignment(_program_assignment(date(2024, 1, 30), 3, days))

        assert [c.is_rest_day for c in cells] == [False, True, False]
        assert cells[1].exercises == []
        assert cells[1].date == date(2024, 1, 31)

    def test_flagged_and_empty_days_are_rest_days(self):
        days = [_day(1, "Recovery", rest=True), _day(2, "Nothing", exercises=())]
        cells = expand_program_assignment(_program_assignment(date(2024, 1, 1), 2, days))
        assert all(c.is_rest_day for c in cells)
        assert all(c.estimated_duration == 0 for c in cells)

    def test_numbering_gap_expands_as_rest(self):
        days = [_day(1, "A"), _day(3, "C")]
        cells = expand_program_assignment(_program_assignment(date(2024, 1, 1), 3, days))

        assert [(c.day_number, c.is_rest_day) for c in cells] == [(1, False), (2, True), (3, False)]
        assert cells[2].name.endswith("Day 3: C")


class TestSchedule:
    """Tests for build_schedule, scheduled_dates and week helpers."""

    def test_build_schedule_filters_and_sorts(self):
        program = _program_assignment(date(2024, 1, 30), 4, [_day(n, f"Day {n}") for n in range(1, 5)])
        workout = _workout_assignment(date(2024, 1, 31))

        cells = build_schedule([workout], [program], date(2024, 1, 31), date(2024, 2, 1))

        assert [(c.date, c.kind) for c in cells] == [
            (date(2024, 1, 31), "workout"),
            (date(2024, 1, 31), "program_day"),
            (date(2024, 2, 1), "program_day"),
        ]
        assert cells[0].id == "workout-1"

    def test_scheduled_dates_are_unique_and_sorted(self):
        program = _program_assignment(date(2024, 1, 30), 4, [])
        workouts = [_workout_assignment(date(2024, 2, 1)), _workout_assignment(date(2024, 1, 15), 2)]

        assert scheduled_dates(workouts, [program]) == [
            "2024-01-15", "2024-01-30", "2024-01-31", "2024-02-01", "2024-02-02",
        ]

    def test_week_bounds_start_on_sunday(self):
        assert week_bounds(date(2024, 1, 31)) == (date(2024, 1, 28), date(2024, 2, 3))
        assert week_bounds(date(2024, 1, 28)) == (date(2024, 1, 28), date(2024, 2, 3))
        assert week_bounds(date(2024, 2, 3)) == (date(2024, 1, 28), date(2024, 2, 3))

    def test_group_by_date_includes_empty_days(self):
        cells = build_schedule([_workout_assignment(date(2024, 1, 31))], [])
        grouped = group_by_date(cells, date(2024, 1, 28), date(2024, 2, 3))
        assert len(grouped) == 7
        assert len(grouped[date(2024, 1, 31)]) == 1
        assert grouped[date(2024, 1, 28)] == []
