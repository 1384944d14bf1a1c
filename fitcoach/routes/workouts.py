from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import or_

from fitcoach.extensions import db
from fitcoach.models import ClientWorkout, ClientWorkoutProgram, Workout, WorkoutExercise, WorkoutProgram
from fitcoach.schemas.workout import WorkoutSchema, WorkoutInputSchema, StatusSchema, WorkoutImportSchema
from fitcoach.services.catalog import build_entries, get_owned_or_404
from fitcoach.services.visibility import scoped_assignments
from fitcoach.services.csv_import import SINGLE_DAY, MULTI_DAY, read_csv, parse_workout_rows, import_workouts
from fitcoach.routes.exercises import uploaded_csv
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.errors import BadRequest, NotFound
from fitcoach.utils.validation import load_json, query_int

workouts_bp = Blueprint("workouts", __name__)
workout_schema = WorkoutSchema()
workouts_schema = WorkoutSchema(many=True)
workout_input_schema = WorkoutInputSchema()
status_schema = StatusSchema()
import_schema = WorkoutImportSchema()


@workouts_bp.route("", methods=["GET"])
@login_required
def list_workouts(current_user):
    query = Workout.query
    if current_user.is_client:
        query = query.filter(Workout.status == "ACTIVE")
    search = request.args.get("search", "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Workout.name.ilike(pattern), Workout.description.ilike(pattern)))
    return jsonify(workouts_schema.dump(query.order_by(Workout.created_at.desc()).all())), 200


@workouts_bp.route("/<int:workout_id>", methods=["GET"])
@login_required
def get_workout(workout_id, current_user):
    workout = db.session.get(Workout, workout_id)
    if workout is None or (current_user.is_client and workout.status != "ACTIVE"):
        raise NotFound("Workout not found")
    return jsonify(workout_schema.dump(workout)), 200


@workouts_bp.route("", methods=["POST"])
@roles_required("trainer", "admin")
def create_workout(current_user):
    data = load_json(workout_input_schema)
    exercises = build_entries(WorkoutExercise, data.pop("exercises"))

    workout = Workout(creator_id=current_user.id, status="DRAFT", **data)
    workout.exercises = exercises
    db.session.add(workout)
    db.session.commit()
    current_app.logger.info("Workout %s created by user %s", workout.id, current_user.id)
    return jsonify(workout_schema.dump(workout)), 201


@workouts_bp.route("/<int:workout_id>", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_workout(workout_id, current_user):
    data = load_json(workout_input_schema, partial=("name", "exercises"))
    workout = get_owned_or_404(Workout, workout_id, current_user, "Workout")

    if "exercises" in data:
        # the exercise list is replaced as a whole
        workout.exercises = build_entries(WorkoutExercise, data.pop("exercises"))
    for key, value in data.items():
        setattr(workout, key, value)
    db.session.commit()
    return jsonify(workout_schema.dump(workout)), 200


@workouts_bp.route("/<int:workout_id>", methods=["DELETE"])
@roles_required("trainer", "admin")
def delete_workout(workout_id, current_user):
    workout = get_owned_or_404(Workout, workout_id, current_user, "Workout")
    assigned = workout.assignments.count()
    if assigned:
        raise BadRequest(f"Cannot delete workout. It is assigned to {assigned} client(s).")

    db.session.delete(workout)
    db.session.commit()
    current_app.logger.info("Workout %s deleted by user %s", workout_id, current_user.id)
    return jsonify({"msg": "Workout deleted successfully"}), 200


@workouts_bp.route("/<int:workout_id>/status", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_workout_status(workout_id, current_user):
    data = load_json(status_schema)
    workout = db.session.get(Workout, workout_id)
    if workout is None:
        raise NotFound("Workout not found")
    workout.status = data["status"]
    db.session.commit()
    current_app.logger.info("Workout %s set to %s by user %s", workout.id, workout.status, current_user.id)
    return jsonify(workout_schema.dump(workout)), 200


@workouts_bp.route("/available", methods=["GET"])
@roles_required("trainer", "admin")
def available_workouts(current_user):
    """
    Active workouts and programs in one list, for the assignment picker.

    With ``client_id`` each entry also says whether that client already has
    it assigned, and the status of the latest such assignment.
    """
    client_id = query_int("client_id")
    workout_status, program_status = {}, {}
    if client_id is not None:
        for a in scoped_assignments(ClientWorkout, current_user, client_id).order_by(ClientWorkout.created_at).all():
            workout_status[a.workout_id] = a.status
        programs = scoped_assignments(ClientWorkoutProgram, current_user, client_id)
        for a in programs.order_by(ClientWorkoutProgram.created_at).all():
            program_status[a.program_id] = a.status

    items = []
    for workout in Workout.query.filter_by(status="ACTIVE").order_by(Workout.name).all():
        items.append({
            "id": workout.id,
            "name": workout.name,
            "description": workout.description,
            "category": workout.category,
            "difficulty": workout.difficulty,
            "type": SINGLE_DAY,
            "total_days": 1,
            "estimated_duration": workout.estimated_duration,
            "exercise_count": len(workout.exercises),
            "is_assigned": workout.id in workout_status,
            "assignment_status": workout_status.get(workout.id),
        })
    for program in WorkoutProgram.query.filter_by(status="ACTIVE").order_by(WorkoutProgram.name).all():
        items.append({
            "id": program.id,
            "name": program.name,
            "description": program.description,
            "category": program.category,
            "difficulty": program.difficulty,
            "type": MULTI_DAY,
            "total_days": program.total_days,
            "estimated_duration": program.estimated_duration,
            "exercise_count": sum(len(day.exercises) for day in program.days),
            "is_assigned": program.id in program_status,
            "assignment_status": program_status.get(program.id),
        })
    return jsonify(items), 200


@workouts_bp.route("/import", methods=["POST"])
@roles_required("trainer", "admin")
def import_workouts_route(current_user):
    if request.files:
        workouts = parse_workout_rows(read_csv(uploaded_csv().stream))
    else:
        workouts = load_json(import_schema)["workouts"]
    if not workouts:
        raise BadRequest("No workouts to import")

    results, errors = import_workouts(workouts, current_user)
    body = {"msg": f"Successfully imported {len(results)} workouts", "results": results}
    if errors:
        body["errors"] = errors
    return jsonify(body), 201
