"""
Calendar expansion of workout assignments.

A program assignment only stores its start date. The dates it occupies are
derived here, in one place, with plain ``datetime.date`` arithmetic so month,
year and daylight-saving boundaries never shift a day.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional


@dataclass
class DayCell:
    """One calendar day of an assignment, built for display and never persisted."""

    id: str
    kind: str  # "workout" or "program_day"
    assignment_id: int
    client_id: int
    date: date
    name: str
    status: str
    notes: str = ""
    day_number: int = 1
    total_days: int = 1
    is_rest_day: bool = False
    estimated_duration: int = 0
    exercises: list = field(default_factory=list)
    program_id: Optional[int] = None
    workout_id: Optional[int] = None

    def to_dict(self):
        return {
            "id": self.id,
            "kind": self.kind,
            "assignment_id": self.assignment_id,
            "client_id": self.client_id,
            "date": self.date.isoformat(),
            "name": self.name,
            "status": self.status,
            "notes": self.notes,
            "day_number": self.day_number,
            "total_days": self.total_days,
            "is_rest_day": self.is_rest_day,
            "estimated_duration": self.estimated_duration,
            "exercises": self.exercises,
            "program_id": self.program_id,
            "workout_id": self.workout_id,
        }


def parse_calendar_date(value) -> date:
    """
    Read a calendar date from a ``date``, a ``datetime`` or an ISO string.

    Datetime strings keep the date as written ("2024-01-30T23:00:00Z" is the
    30th); no timezone conversion is applied.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid date: {value!r}")
    text = value.strip()
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if "T" not in text:
            raise ValueError(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValueError(f"Invalid date: {value!r}, expected YYYY-MM-DD")


def add_days(start: date, days: int) -> date:
    return start + timedelta(days=days)


def program_dates(start: date, total_days: int) -> list:
    """The dates occupied by a program of ``total_days`` days starting on ``start``."""
    return [add_days(start, i) for i in range(max(total_days, 0))]


def program_end_date(start: date, total_days: int) -> date:
    return add_days(start, max(total_days, 1) - 1)


def week_bounds(day: date):
    """Sunday-to-Saturday week containing ``day``."""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def _exercise_entry(entry):
    exercise = entry.exercise
    return {
        "id": entry.id,
        "exercise_id": entry.exercise_id,
        "name": exercise.name if exercise else None,
        "category": exercise.category if exercise else None,
        "video_url": exercise.video_url if exercise else None,
        "order": entry.order,
        "sets": entry.sets,
        "reps": entry.reps,
        "rest": entry.rest,
        "notes": entry.notes or "",
    }


def workout_cell(assignment) -> DayCell:
    workout = assignment.workout
    return DayCell(
        id=f"workout-{assignment.id}",
        kind="workout",
        assignment_id=assignment.id,
        client_id=assignment.client_id,
        date=assignment.scheduled_date,
        name=workout.name,
        status=assignment.status,
        notes=assignment.notes or "",
        estimated_duration=workout.estimated_duration or 0,
        exercises=[_exercise_entry(e) for e in workout.exercises],
        workout_id=workout.id,
    )


def expand_program_assignment(assignment) -> list:
    """
    Expand a program assignment into one DayCell per program day.

    Day ``i`` (0-based) falls on ``start_date + i``. A day number with no
    WorkoutDay record, a day flagged as rest, or a day without exercises is
    rendered as a rest day.
    """
    program = assignment.program
    days_by_number = {day.day_number: day for day in program.days}
    cells = []
    for index, cell_date in enumerate(program_dates(assignment.start_date, program.total_days)):
        day_number = index + 1
        program_day = days_by_number.get(day_number)
        exercises = [_exercise_entry(e) for e in program_day.exercises] if program_day else []
        is_rest_day = program_day is None or program_day.is_rest_day or not exercises
        if program_day is not None:
            name = f"{program.name} - Day {day_number}: {program_day.name}"
        else:
            name = f"{program.name} - Day {day_number}"
        cells.append(DayCell(
            id=f"{assignment.id}-day-{day_number}",
            kind="program_day",
            assignment_id=assignment.id,
            client_id=assignment.client_id,
            date=cell_date,
            name=name,
            status=assignment.status,
            notes=assignment.notes or "",
            day_number=day_number,
            total_days=program.total_days,
            is_rest_day=is_rest_day,
            estimated_duration=0 if is_rest_day else (program_day.estimated_duration or 0),
            exercises=[] if is_rest_day else exercises,
            program_id=program.id,
        ))
    return cells


def build_schedule(workout_assignments, program_assignments, start: date = None, end: date = None) -> list:
    """All day-cells of the given assignments inside ``[start, end]``, ordered by date."""
    cells = [workout_cell(a) for a in workout_assignments]
    for assignment in program_assignments:
        cells.extend(expand_program_assignment(assignment))
    if start is not None:
        cells = [c for c in cells if c.date >= start]
    if end is not None:
        cells = [c for c in cells if c.date <= end]
    return sorted(cells, key=lambda c: (c.date, c.kind != "workout", c.id))


def scheduled_dates(workout_assignments, program_assignments) -> list:
    """Sorted, de-duplicated ``YYYY-MM-DD`` strings of every occupied date."""
    dates = {a.scheduled_date for a in workout_assignments}
    for assignment in program_assignments:
        dates.update(program_dates(assignment.start_date, assignment.program.total_days))
    return [d.isoformat() for d in sorted(dates)]


def group_by_date(cells, start: date, end: date):
    """Map every date in ``[start, end]`` to its cells, empty days included."""
    grouped = {add_days(start, i): [] for i in range((end - start).days + 1)}
    for cell in cells:
        if cell.date in grouped:
            grouped[cell.date].append(cell)
    return grouped
