import os

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func, or_

from fitcoach.extensions import db
from fitcoach.models import Exercise, WorkoutExercise, WorkoutDayExercise, WorkoutProgress
from fitcoach.schemas.exercise import ExerciseSchema, ExerciseInputSchema
from fitcoach.services.csv_import import read_csv, import_exercises
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.errors import BadRequest, Conflict, NotFound
from fitcoach.utils.validation import load_json

exercises_bp = Blueprint("exercises", __name__)
exercise_schema = ExerciseSchema()
exercises_schema = ExerciseSchema(many=True)
exercise_input_schema = ExerciseInputSchema()


def _get_exercise_or_404(exercise_id):
    exercise = db.session.get(Exercise, exercise_id)
    if exercise is None:
        raise NotFound("Exercise not found")
    return exercise


def _name_taken(name, exclude_id=None):
    query = Exercise.query.filter(func.lower(Exercise.name) == name.strip().lower())
    if exclude_id is not None:
        query = query.filter(Exercise.id != exclude_id)
    return query.first() is not None


def uploaded_csv():
    """The ``file`` part of a multipart upload, checked for a CSV extension."""
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise BadRequest("No file uploaded")
    ext = os.path.splitext(upload.filename)[1].lower()
    if ext not in current_app.config.get("UPLOAD_EXTENSIONS", [".csv"]):
        raise BadRequest("File must be a CSV")
    return upload


@exercises_bp.route("", methods=["GET"])
@login_required
def list_exercises(current_user):
    query = Exercise.query
    search = request.args.get("search", "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Exercise.name.ilike(pattern),
            Exercise.description.ilike(pattern),
            Exercise.category.ilike(pattern),
        ))
    category = request.args.get("category", "").strip()
    if category:
        query = query.filter(Exercise.category == category)
    exercises = query.order_by(Exercise.category, Exercise.name).all()
    return jsonify(exercises_schema.dump(exercises)), 200


@exercises_bp.route("/categories", methods=["GET"])
@login_required
def list_categories(current_user):
    rows = (
        db.session.query(Exercise.category)
        .filter(Exercise.category.isnot(None), Exercise.category != "")
        .distinct()
        .order_by(Exercise.category)
        .all()
    )
    return jsonify([row[0] for row in rows]), 200


@exercises_bp.route("/<int:exercise_id>", methods=["GET"])
@login_required
def get_exercise(exercise_id, current_user):
    return jsonify(exercise_schema.dump(_get_exercise_or_404(exercise_id))), 200


@exercises_bp.route("", methods=["POST"])
@roles_required("trainer", "admin")
def create_exercise(current_user):
    data = load_json(exercise_input_schema)
    data["name"] = data["name"].strip()
    if _name_taken(data["name"]):
        raise Conflict("Exercise with this name already exists")

    exercise = Exercise(**data)
    db.session.add(exercise)
    db.session.commit()
    current_app.logger.info("Exercise %s created by user %s", exercise.id, current_user.id)
    return jsonify(exercise_schema.dump(exercise)), 201


@exercises_bp.route("/<int:exercise_id>", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_exercise(exercise_id, current_user):
    data = load_json(exercise_input_schema, partial=True)
    exercise = _get_exercise_or_404(exercise_id)
    if "name" in data:
        data["name"] = data["name"].strip()
        if _name_taken(data["name"], exclude_id=exercise.id):
            raise Conflict("Exercise with this name already exists")

    for key, value in data.items():
        setattr(exercise, key, value)
    db.session.commit()
    return jsonify(exercise_schema.dump(exercise)), 200


@exercises_bp.route("/<int:exercise_id>", methods=["DELETE"])
@roles_required("trainer", "admin")
def delete_exercise(exercise_id, current_user):
    exercise = _get_exercise_or_404(exercise_id)
    in_workouts = WorkoutExercise.query.filter_by(exercise_id=exercise.id).count()
    in_programs = WorkoutDayExercise.query.filter_by(exercise_id=exercise.id).count()
    if in_workouts or in_programs:
        raise BadRequest(
            f"Cannot delete exercise. It is used in {in_workouts} workout(s) and {in_programs} program day(s)."
        )
    if WorkoutProgress.query.filter_by(exercise_id=exercise.id).first():
        raise BadRequest("Cannot delete exercise. Clients have logged progress against it.")

    db.session.delete(exercise)
    db.session.commit()
    current_app.logger.info("Exercise %s deleted by user %s", exercise_id, current_user.id)
    return jsonify({"msg": "Exercise deleted successfully"}), 200


@exercises_bp.route("/import", methods=["POST"])
@roles_required("trainer", "admin")
def import_exercises_csv(current_user):
    rows = read_csv(uploaded_csv().stream)
    result = import_exercises(rows)
    result["msg"] = f"Imported {result['created']} exercises, skipped {result['skipped']}"
    return jsonify(result), 201
