"""
CSV import of the exercise catalog and of workouts/programs.

Rows are parsed into plain dicts first, so the JSON variant of the workout
import (an already grouped ``{"workouts": [...]}`` body) goes through the
same creation code as an uploaded file.
"""

import csv
import io
import logging
import re

from sqlalchemy import func

from fitcoach.extensions import db
from fitcoach.models import (
    Exercise, Workout, WorkoutExercise, WorkoutProgram, WorkoutDay, WorkoutDayExercise,
)
from fitcoach.models.exercise import DIFFICULTIES
from fitcoach.services.catalog import program_length
from fitcoach.utils.errors import BadRequest

logger = logging.getLogger(__name__)

SINGLE_DAY = "single-day"
MULTI_DAY = "multi-day"

_CAMEL = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def normalize_header(name):
    """``muscleGroups`` / ``Muscle Groups`` / ``muscle_groups`` -> ``muscle_groups``."""
    name = (name or "").strip()
    name = _CAMEL.sub("_", name)
    return re.sub(r"[\s\-_]+", "_", name).lower()


def read_csv(stream):
    """Decode an uploaded file and return its rows keyed by normalized header."""
    raw = stream.read()
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            raise BadRequest("CSV file must be UTF-8 encoded")
    reader = csv.DictReader(io.StringIO(raw))
    if not reader.fieldnames:
        raise BadRequest("CSV file is empty")
    rows = []
    for row in reader:
        rows.append({normalize_header(k): (v or "").strip() for k, v in row.items() if k is not None})
    return rows


def _split_list(value):
    return [part.strip() for part in (value or "").split(",") if part.strip()]


def _to_int(value, default=0):
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _to_bool(value):
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in ("true", "1", "yes", "y")


def find_exercise_by_name(name):
    if not name:
        return None
    return Exercise.query.filter(func.lower(Exercise.name) == name.strip().lower()).first()


# --- Exercises -------------------------------------------------------------

def parse_exercise_row(row):
    difficulty = (row.get("difficulty") or "INTERMEDIATE").upper()
    if difficulty not in DIFFICULTIES:
        logger.warning("Invalid difficulty %r for exercise %r, using INTERMEDIATE", difficulty, row.get("name"))
        difficulty = "INTERMEDIATE"
    return {
        "name": row.get("name", "").strip(),
        "category": row.get("category") or "General",
        "description": row.get("description") or "",
        "muscle_groups": _split_list(row.get("muscle_groups")),
        "equipment": _split_list(row.get("equipment")),
        "difficulty": difficulty,
        "instructions": row.get("instructions") or "",
        "video_url": row.get("video_url") or None,
    }


def import_exercises(rows):
    """Create the exercises of ``rows``; names already in the catalog are skipped."""
    created, skipped, errors = 0, 0, []
    seen = set()
    for line, row in enumerate(rows, start=2):
        data = parse_exercise_row(row)
        if not data["name"]:
            errors.append({"row": line, "error": "Missing exercise name"})
            continue
        key = data["name"].lower()
        if key in seen or find_exercise_by_name(data["name"]) is not None:
            skipped += 1
            continue
        seen.add(key)
        db.session.add(Exercise(**data))
        created += 1
    db.session.commit()
    logger.info("Exercise import: %d created, %d skipped, %d errors", created, skipped, len(errors))
    return {"created": created, "skipped": skipped, "errors": errors}


# --- Workouts and programs -------------------------------------------------

def parse_workout_rows(rows):
    """
    Group flat CSV rows by ``(workout_type, name)`` into workout dicts.

    Single-day workouts collect ``exercises``; multi-day ones collect ``days``,
    each with its own exercises. Exercises are ordered by ``exercise_order``
    and days by ``day_number``. Exercise rows on a rest day are ignored.
    """
    grouped = {}
    for row in rows:
        workout_type = (row.get("workout_type") or SINGLE_DAY).strip().lower()
        key = (workout_type, row.get("name", ""))
        workout = grouped.get(key)
        if workout is None:
            workout = grouped[key] = {
                "type": workout_type,
                "name": row.get("name", ""),
                "description": row.get("description", ""),
                "exercises": [],
                "days": [],
            }

        exercise = {
            "exercise_name": row.get("exercise_name", ""),
            "sets": _to_int(row.get("sets")),
            "reps": row.get("reps") or "10",
            "rest": row.get("rest") or "60s",
            "notes": row.get("notes", ""),
            "order": _to_int(row.get("exercise_order")),
        }

        if workout_type == SINGLE_DAY:
            if exercise["exercise_name"]:
                workout["exercises"].append(exercise)
            continue

        day_number = _to_int(row.get("day_number"), default=1)
        day = next((d for d in workout["days"] if d["day_number"] == day_number), None)
        if day is None:
            day = {
                "day_number": day_number,
                "name": row.get("day_name") or f"Day {day_number}",
                "is_rest_day": _to_bool(row.get("is_rest_day")),
                "exercises": [],
            }
            workout["days"].append(day)
        if not day["is_rest_day"] and exercise["exercise_name"]:
            day["exercises"].append(exercise)

    for workout in grouped.values():
        workout["exercises"].sort(key=lambda e: e["order"])
        workout["days"].sort(key=lambda d: d["day_number"])
        for day in workout["days"]:
            day["exercises"].sort(key=lambda e: e["order"])
    return list(grouped.values())


def _resolve_exercises(entries, context):
    resolved = []
    for position, entry in enumerate(entries, start=1):
        name = entry.get("exercise_name", "")
        exercise = find_exercise_by_name(name)
        if exercise is None:
            logger.info("Skipping exercise %r in %s, not found in exercise library", name, context)
            continue
        resolved.append({
            "exercise_id": exercise.id,
            "order": entry.get("order") or position,
            "sets": entry.get("sets") or 3,
            "reps": str(entry.get("reps") or "10"),
            "rest": str(entry.get("rest") or "60s"),
            "notes": entry.get("notes") or "",
        })
    return resolved


def _import_single_day(data, creator):
    exercises = _resolve_exercises(data.get("exercises") or [], f"workout {data['name']!r}")
    if not exercises:
        logger.info("Skipping workout %r, no valid exercises found", data["name"])
        return None
    workout = Workout(
        name=data["name"],
        description=data.get("description") or "",
        category=data.get("category") or "Custom",
        difficulty=(data.get("difficulty") or "INTERMEDIATE").upper(),
        estimated_duration=_to_int(data.get("estimated_duration"), default=60) or 60,
        is_public=_to_bool(data.get("is_public", True)),
        creator_id=creator.id,
    )
    workout.exercises = [WorkoutExercise(**e) for e in exercises]
    db.session.add(workout)
    db.session.commit()
    return {
        "type": SINGLE_DAY,
        "id": workout.id,
        "name": workout.name,
        "exercises_count": len(exercises),
        "total_exercises_in_csv": len(data.get("exercises") or []),
    }


def _import_multi_day(data, creator):
    duration = _to_int(data.get("estimated_duration"), default=60) or 60
    days = []
    for day_data in data.get("days") or []:
        day_number = _to_int(day_data.get("day_number"), default=1)
        day_name = day_data.get("name") or day_data.get("day_name") or f"Day {day_number}"
        if _to_bool(day_data.get("is_rest_day")):
            days.append(WorkoutDay(
                day_number=day_number, name=day_name, is_rest_day=True,
                estimated_duration=duration, notes="Rest day",
            ))
            continue
        exercises = _resolve_exercises(day_data.get("exercises") or [], f"day {day_name!r}")
        if not exercises:
            logger.info("Skipping day %r of %r, no valid exercises found", day_name, data["name"])
            continue
        day = WorkoutDay(day_number=day_number, name=day_name, is_rest_day=False, estimated_duration=duration)
        day.exercises = [WorkoutDayExercise(**e) for e in exercises]
        days.append(day)

    if not days:
        logger.info("Skipping program %r, no valid days found", data["name"])
        return None

    program = WorkoutProgram(
        name=data["name"],
        description=data.get("description") or "",
        category=data.get("category") or "Custom",
        difficulty=(data.get("difficulty") or "INTERMEDIATE").upper(),
        # skipped days keep their slot and expand as rest days
        total_days=program_length(days),
        is_public=_to_bool(data.get("is_public", True)),
        creator_id=creator.id,
    )
    program.days = days
    db.session.add(program)
    db.session.commit()
    return {
        "type": MULTI_DAY,
        "id": program.id,
        "name": program.name,
        "days_count": len(days),
        "total_days_in_csv": len(data.get("days") or []),
    }


def import_workouts(workouts, creator):
    """
    Create workouts and programs from grouped workout dicts.

    Each workout is committed on its own; a failing one is rolled back and
    reported in ``errors`` while the rest are kept.
    """
    results, errors = [], []
    for data in workouts:
        name = data.get("name") or ""
        if not name:
            errors.append({"name": name, "error": "Missing workout name"})
            continue
        try:
            if data.get("type", SINGLE_DAY) == SINGLE_DAY:
                result = _import_single_day(data, creator)
            else:
                result = _import_multi_day(data, creator)
        except Exception:
            db.session.rollback()
            logger.exception("Error importing workout %r", name)
            errors.append({"name": name, "error": "Could not import workout"})
            continue
        if result is not None:
            results.append(result)
    logger.info("Workout import by user %s: %d imported, %d errors", creator.id, len(results), len(errors))
    return results, errors
