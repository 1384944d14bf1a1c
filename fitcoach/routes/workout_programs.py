from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import or_

from fitcoach.extensions import db
from fitcoach.models import WorkoutProgram, WorkoutDayExercise
from fitcoach.schemas.workout import WorkoutProgramSchema, WorkoutProgramInputSchema, StatusSchema
from fitcoach.services.catalog import build_days, get_owned_or_404, program_length
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.errors import BadRequest, NotFound
from fitcoach.utils.validation import load_json

programs_bp = Blueprint("workout_programs", __name__)
program_schema = WorkoutProgramSchema()
programs_schema = WorkoutProgramSchema(many=True)
program_input_schema = WorkoutProgramInputSchema()
status_schema = StatusSchema()

LIST_TYPES = ("all", "own", "active")


@programs_bp.route("", methods=["GET"])
@login_required
def list_programs(current_user):
    query = WorkoutProgram.query

    list_type = request.args.get("type", "all")
    if list_type not in LIST_TYPES:
        raise BadRequest(f"Invalid type. Must be one of {', '.join(LIST_TYPES)}")
    if current_user.is_client or list_type == "active":
        query = query.filter(WorkoutProgram.status == "ACTIVE")
    elif list_type == "own":
        query = query.filter(WorkoutProgram.creator_id == current_user.id)

    search = request.args.get("search", "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(WorkoutProgram.name.ilike(pattern), WorkoutProgram.description.ilike(pattern)))
    category = request.args.get("category", "").strip()
    if category:
        query = query.filter(WorkoutProgram.category == category)

    programs = query.order_by(WorkoutProgram.created_at.desc()).all()
    return jsonify(programs_schema.dump(programs)), 200


@programs_bp.route("/<int:program_id>", methods=["GET"])
@login_required
def get_program(program_id, current_user):
    program = db.session.get(WorkoutProgram, program_id)
    if program is None or (current_user.is_client and program.status != "ACTIVE"):
        raise NotFound("Workout program not found")
    return jsonify(program_schema.dump(program)), 200


@programs_bp.route("", methods=["POST"])
@roles_required("trainer", "admin")
def create_program(current_user):
    data = load_json(program_input_schema)
    days = build_days(data.pop("days"), WorkoutDayExercise)

    program = WorkoutProgram(creator_id=current_user.id, status="DRAFT", total_days=program_length(days), **data)
    program.days = days
    db.session.add(program)
    db.session.commit()
    current_app.logger.info(
        "Program %s (%d days) created by user %s", program.id, program.total_days, current_user.id
    )
    return jsonify(program_schema.dump(program)), 201


@programs_bp.route("/<int:program_id>", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_program(program_id, current_user):
    data = load_json(program_input_schema, partial=("name", "days"))
    program = get_owned_or_404(WorkoutProgram, program_id, current_user, "Workout program")

    if "days" in data:
        days = build_days(data.pop("days"), WorkoutDayExercise)
        # old days must be gone before new ones reuse their day numbers
        program.days = []
        db.session.flush()
        program.days = days
        program.total_days = program_length(days)
    for key, value in data.items():
        setattr(program, key, value)
    db.session.commit()
    return jsonify(program_schema.dump(program)), 200


@programs_bp.route("/<int:program_id>", methods=["DELETE"])
@roles_required("trainer", "admin")
def delete_program(program_id, current_user):
    program = get_owned_or_404(WorkoutProgram, program_id, current_user, "Workout program")
    assigned = program.assignments.count()
    if assigned:
        raise BadRequest(f"Cannot delete workout program. It is assigned to {assigned} client(s).")

    db.session.delete(program)
    db.session.commit()
    current_app.logger.info("Program %s deleted by user %s", program_id, current_user.id)
    return jsonify({"msg": "Workout program deleted successfully"}), 200


@programs_bp.route("/<int:program_id>/status", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_program_status(program_id, current_user):
    data = load_json(status_schema)
    program = db.session.get(WorkoutProgram, program_id)
    if program is None:
        raise NotFound("Workout program not found")
    program.status = data["status"]
    db.session.commit()
    current_app.logger.info("Program %s set to %s by user %s", program.id, program.status, current_user.id)
    return jsonify(program_schema.dump(program)), 200
