"""Shared building blocks for workouts and programs."""

from fitcoach.extensions import db
from fitcoach.models import Exercise, WorkoutDay
from fitcoach.utils.errors import BadRequest, NotFound


def check_exercises_exist(exercise_ids):
    ids = set(exercise_ids)
    if not ids:
        return
    found = {row[0] for row in db.session.query(Exercise.id).filter(Exercise.id.in_(ids)).all()}
    missing = sorted(ids - found)
    if missing:
        raise BadRequest(f"Exercises not found: {', '.join(str(i) for i in missing)}")


def build_entries(entry_cls, entries):
    """Ordered ``entry_cls`` rows for the validated exercise ``entries``."""
    check_exercises_exist(e["exercise_id"] for e in entries)
    return [
        entry_cls(
            exercise_id=e["exercise_id"],
            order=e.get("order") or position,
            sets=e.get("sets", 3),
            reps=e.get("reps") or "10",
            rest=e.get("rest") or "60s",
            notes=e.get("notes") or "",
        )
        for position, e in enumerate(entries, start=1)
    ]


def build_days(days, entry_cls):
    built = []
    for day in sorted(days, key=lambda d: d["day_number"]):
        workout_day = WorkoutDay(
            day_number=day["day_number"],
            name=day["name"],
            is_rest_day=day.get("is_rest_day", False),
            estimated_duration=day.get("estimated_duration"),
            notes=day.get("notes") or "",
        )
        if not workout_day.is_rest_day:
            workout_day.exercises = build_entries(entry_cls, day.get("exercises") or [])
        built.append(workout_day)
    return built


def program_length(days):
    """Days a program spans; gaps in the numbering expand as rest days."""
    return max(day.day_number for day in days)


def get_owned_or_404(model, record_id, user, label):
    """A catalog entry the user may edit: its creator, or any admin."""
    record = db.session.get(model, record_id)
    if record is None or not (user.is_admin or record.creator_id == user.id):
        raise NotFound(f"{label} not found or not created by you")
    return record
