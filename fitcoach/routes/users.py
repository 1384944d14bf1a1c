from flask import Blueprint, jsonify, request

from fitcoach.models import User
from fitcoach.models.user import ROLES
from fitcoach.schemas.user import UserSchema
from fitcoach.utils.decorators import roles_required
from fitcoach.utils.errors import BadRequest

users_bp = Blueprint("users", __name__)
users_schema = UserSchema(many=True)


@users_bp.route("", methods=["GET"])
@roles_required("admin")
def list_users(current_user):
    query = User.query
    role = request.args.get("role")
    if role:
        if role not in ROLES:
            raise BadRequest(f"Invalid role. Must be one of {', '.join(ROLES)}")
        query = query.filter_by(role=role)
    return jsonify(users_schema.dump(query.order_by(User.name).all())), 200
