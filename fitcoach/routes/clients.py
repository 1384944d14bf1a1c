from flask import Blueprint, current_app, jsonify

from fitcoach.extensions import db
from fitcoach.models import Client, ClientWorkout, ClientWorkoutProgram, User
from fitcoach.schemas.user import (
    ClientSchema, ClientUpdateSchema, ClientRefSchema, ReassignSchema, SubscriptionSchema,
)
from fitcoach.services import clients as client_service
from fitcoach.services.calendar import scheduled_dates
from fitcoach.services.visibility import ensure_client_in_scope, scoped_assignments
from fitcoach.utils.decorators import roles_required, login_required
from fitcoach.utils.errors import NotFound
from fitcoach.utils.validation import load_json

clients_bp = Blueprint("clients", __name__)
coach_bp = Blueprint("coach", __name__)

client_schema = ClientSchema()
clients_schema = ClientSchema(many=True)
client_update_schema = ClientUpdateSchema()
client_ref_schema = ClientRefSchema()
reassign_schema = ReassignSchema()
subscription_schema = SubscriptionSchema()


@clients_bp.route("", methods=["GET"])
@roles_required("trainer", "admin")
def list_clients(current_user):
    clients = Client.query.join(User, User.id == Client.user_id).order_by(User.name).all()
    return jsonify(clients_schema.dump(clients)), 200


@clients_bp.route("/available", methods=["GET"])
@roles_required("trainer", "admin")
def available_clients(current_user):
    """Unassigned clients with an active subscription."""
    clients = (
        Client.query.join(User, User.id == Client.user_id)
        .filter(Client.trainer_id.is_(None), Client.subscription_status == "ACTIVE")
        .order_by(User.name)
        .all()
    )
    return jsonify(clients_schema.dump(clients)), 200


@clients_bp.route("/<int:client_id>", methods=["GET"])
@login_required
def get_client(client_id, current_user):
    ensure_client_in_scope(current_user, client_id)
    client = client_service.get_client_profile_or_404(client_id)
    return jsonify(client_schema.dump(client)), 200


@clients_bp.route("/<int:client_id>", methods=["PATCH"])
@roles_required("trainer", "admin")
def update_client(client_id, current_user):
    data = load_json(client_update_schema, partial=True)
    ensure_client_in_scope(current_user, client_id)
    client = client_service.get_client_profile_or_404(client_id)
    for key, value in data.items():
        setattr(client, key, value)
    db.session.commit()
    return jsonify(client_schema.dump(client)), 200


@clients_bp.route("/assign", methods=["POST"])
@roles_required("trainer")
def assign_client(current_user):
    data = load_json(client_ref_schema)
    client = client_service.assign_to_trainer(data["client_id"], current_user)
    return jsonify({"msg": "Client assigned successfully", "client": client_schema.dump(client)}), 200


@clients_bp.route("/unassign", methods=["POST"])
@roles_required("trainer", "admin")
def unassign_client(current_user):
    data = load_json(client_ref_schema)
    client = client_service.unassign_from_trainer(data["client_id"], current_user)
    return jsonify({"msg": "Client unassigned successfully", "client": client_schema.dump(client)}), 200


@clients_bp.route("/reassign", methods=["POST"])
@roles_required("admin")
def reassign_client(current_user):
    data = load_json(reassign_schema)
    client = client_service.reassign_to_trainer(data["client_id"], data["new_trainer_id"])
    return jsonify({"msg": "Client reassigned successfully", "client": client_schema.dump(client)}), 200


@clients_bp.route("/subscription", methods=["PUT"])
@roles_required("admin")
def update_subscription(current_user):
    data = load_json(subscription_schema)
    client_id = data.pop("client_id")
    client = client_service.update_subscription(client_id, data)
    return jsonify({"msg": "Subscription updated successfully", "client": client_schema.dump(client)}), 200


@clients_bp.route("/<int:client_id>/assignments", methods=["GET"])
@login_required
def client_assignment_dates(client_id, current_user):
    """Every date occupied by a workout or a program day, for calendar highlighting."""
    workouts = scoped_assignments(ClientWorkout, current_user, client_id).all()
    programs = scoped_assignments(ClientWorkoutProgram, current_user, client_id).all()
    return jsonify({"client_id": client_id, "dates": scheduled_dates(workouts, programs)}), 200


@coach_bp.route("", methods=["GET"])
@roles_required("client")
def my_coach(current_user):
    client = current_user.client_profile
    if client is None or client.trainer is None:
        raise NotFound("No coach assigned")
    trainer = client.trainer
    current_app.logger.debug("Client %s looked up coach %s", current_user.id, trainer.id)
    return jsonify({
        "id": trainer.id,
        "name": trainer.name,
        "email": trainer.email,
        "created_at": trainer.created_at.isoformat() if trainer.created_at else None,
        "client_count": trainer.clients.count(),
        "workout_count": trainer.created_workouts.count(),
        "program_count": trainer.created_programs.count(),
    }), 200
