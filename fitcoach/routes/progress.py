from flask import Blueprint, current_app, jsonify

from fitcoach.extensions import db
from fitcoach.models import ClientWorkout, ClientWorkoutProgram, Exercise, WorkoutProgress
from fitcoach.schemas.assignment import WorkoutProgressSchema, ProgressInputSchema
from fitcoach.services.visibility import scoped_assignments
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.errors import BadRequest, NotFound
from fitcoach.utils.validation import load_json, query_int

progress_bp = Blueprint("progress", __name__)
progress_schema = WorkoutProgressSchema()
progress_list_schema = WorkoutProgressSchema(many=True)
progress_input_schema = ProgressInputSchema()


@progress_bp.route("", methods=["POST"])
@roles_required("client")
def log_progress(current_user):
    data = load_json(progress_input_schema)

    if db.session.get(Exercise, data["exercise_id"]) is None:
        raise NotFound("Exercise not found")

    if data["client_workout_id"] is not None:
        assignment = ClientWorkout.query.filter_by(
            id=data["client_workout_id"], client_id=current_user.id
        ).first()
        data["day_number"] = None
    else:
        assignment = ClientWorkoutProgram.query.filter_by(
            id=data["client_workout_program_id"], client_id=current_user.id
        ).first()
        if assignment is not None and data["day_number"] > assignment.program.total_days:
            raise BadRequest(f"day_number must be between 1 and {assignment.program.total_days}")
    if assignment is None:
        raise NotFound("Assignment not found")

    entry = WorkoutProgress(client_id=current_user.id, **data)
    db.session.add(entry)
    if assignment.status == "SCHEDULED":
        assignment.set_status("IN_PROGRESS")
    db.session.commit()
    current_app.logger.info("Progress %s logged by client %s", entry.id, current_user.id)
    return jsonify(progress_schema.dump(entry)), 201


@progress_bp.route("", methods=["GET"])
@login_required
def list_progress(current_user):
    query = scoped_assignments(WorkoutProgress, current_user, query_int("client_id"))
    entries = query.order_by(WorkoutProgress.logged_at.desc(), WorkoutProgress.id.desc()).all()
    return jsonify(progress_list_schema.dump(entries)), 200
