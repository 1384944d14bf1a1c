from flask import Blueprint, current_app, jsonify

from fitcoach.extensions import db
from fitcoach.models import ClientWorkout, ClientWorkoutProgram
from fitcoach.schemas.assignment import (
    ClientWorkoutSchema, ClientWorkoutProgramSchema,
    WorkoutAssignSchema, BulkWorkoutAssignSchema, ProgramAssignSchema, AssignmentUpdateSchema,
)
from fitcoach.services import assignments as assignment_service
from fitcoach.services.calendar import expand_program_assignment
from fitcoach.services.visibility import scoped_assignments, get_scoped_or_404
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.validation import load_json, query_int

workout_assign_bp = Blueprint("workout_assignments", __name__)
program_assign_bp = Blueprint("program_assignments", __name__)

client_workout_schema = ClientWorkoutSchema()
client_workouts_schema = ClientWorkoutSchema(many=True)
client_program_schema = ClientWorkoutProgramSchema()
workout_assign_schema = WorkoutAssignSchema()
bulk_assign_schema = BulkWorkoutAssignSchema()
program_assign_schema = ProgramAssignSchema()
assignment_update_schema = AssignmentUpdateSchema()


def _update_assignment(model, assignment_id, user):
    data = load_json(assignment_update_schema)
    assignment = get_scoped_or_404(model, assignment_id, user)
    assignment.set_status(data["status"])
    if "notes" in data:
        assignment.notes = data["notes"] or ""
    db.session.commit()
    current_app.logger.info(
        "%s %s set to %s by user %s", model.__name__, assignment.id, assignment.status, user.id
    )
    return assignment


def _delete_assignment(model, assignment_id, user):
    # the catalog entry it points to is left untouched
    assignment = get_scoped_or_404(model, assignment_id, user)
    db.session.delete(assignment)
    db.session.commit()
    current_app.logger.info("%s %s deleted by user %s", model.__name__, assignment_id, user.id)


# --- single workouts -------------------------------------------------------

@workout_assign_bp.route("", methods=["POST"])
@roles_required("trainer", "admin")
def assign_workout(current_user):
    data = load_json(workout_assign_schema)
    assignment = assignment_service.create_workout_assignment(
        current_user, data["client_id"], data["workout_id"], data["scheduled_date"], data.get("notes"),
    )
    return jsonify(client_workout_schema.dump(assignment)), 201


@workout_assign_bp.route("/bulk", methods=["POST"])
@roles_required("trainer", "admin")
def bulk_assign_workout(current_user):
    data = load_json(bulk_assign_schema)
    created, errors = assignment_service.create_bulk_workout_assignments(
        current_user, data["client_id"], data["workout_id"], data["dates"], data.get("notes"),
    )
    body = {
        "msg": f"Workout assigned to {len(created)} dates, {len(errors)} failed",
        "assigned": len(created),
        "failed": len(errors),
        "assignments": client_workouts_schema.dump(created),
    }
    if errors:
        body["errors"] = errors
    return jsonify(body), 201


@workout_assign_bp.route("", methods=["GET"])
@login_required
def list_workout_assignments(current_user):
    query = scoped_assignments(ClientWorkout, current_user, query_int("client_id"))
    assignments = query.order_by(ClientWorkout.scheduled_date, ClientWorkout.id).all()
    return jsonify(client_workouts_schema.dump(assignments)), 200


@workout_assign_bp.route("/<int:assignment_id>", methods=["PATCH"])
@login_required
def update_workout_assignment(assignment_id, current_user):
    assignment = _update_assignment(ClientWorkout, assignment_id, current_user)
    return jsonify(client_workout_schema.dump(assignment)), 200


@workout_assign_bp.route("/<int:assignment_id>", methods=["DELETE"])
@roles_required("trainer", "admin")
def delete_workout_assignment(assignment_id, current_user):
    _delete_assignment(ClientWorkout, assignment_id, current_user)
    return jsonify({"msg": "Workout assignment deleted successfully"}), 200


# --- programs --------------------------------------------------------------

def _dump_program_assignment(assignment):
    data = client_program_schema.dump(assignment)
    data["days"] = [cell.to_dict() for cell in expand_program_assignment(assignment)]
    return data


@program_assign_bp.route("", methods=["POST"])
@roles_required("trainer", "admin")
def assign_program(current_user):
    data = load_json(program_assign_schema)
    assignment = assignment_service.create_program_assignment(
        current_user, data["client_id"], data["program_id"], data["start_date"], data.get("notes"),
    )
    return jsonify(_dump_program_assignment(assignment)), 201


@program_assign_bp.route("", methods=["GET"])
@login_required
def list_program_assignments(current_user):
    query = scoped_assignments(ClientWorkoutProgram, current_user, query_int("client_id"))
    assignments = query.order_by(ClientWorkoutProgram.start_date, ClientWorkoutProgram.id).all()
    return jsonify([_dump_program_assignment(a) for a in assignments]), 200


@program_assign_bp.route("/<int:assignment_id>", methods=["PATCH"])
@login_required
def update_program_assignment(assignment_id, current_user):
    assignment = _update_assignment(ClientWorkoutProgram, assignment_id, current_user)
    return jsonify(_dump_program_assignment(assignment)), 200


@program_assign_bp.route("/<int:assignment_id>", methods=["DELETE"])
@roles_required("trainer", "admin")
def delete_program_assignment(assignment_id, current_user):
    _delete_assignment(ClientWorkoutProgram, assignment_id, current_user)
    return jsonify({"msg": "Program assignment deleted successfully"}), 200
