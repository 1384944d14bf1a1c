import re

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import create_access_token, set_access_cookies, unset_jwt_cookies

from fitcoach.extensions import db, limiter
from fitcoach.models import User, Client
from fitcoach.schemas.user import RegisterSchema, LoginSchema, MeSchema
from fitcoach.utils.decorators import login_required
from fitcoach.utils.errors import BadRequest, Unauthorized
from fitcoach.utils.validation import load_json

auth_bp = Blueprint("auth", __name__)
register_schema = RegisterSchema()
login_schema = LoginSchema()
me_schema = MeSchema()


def validate_password(password):
    """Validate password strength."""
    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 8)
    if len(password) < min_length:
        return False, f"Password must be at least {min_length} characters"
    if not re.search(r"[A-Za-z]", password):
        return False, "Password must contain at least one letter"
    if not re.search(r"\d", password):
        return False, "Password must contain at least one number"
    return True, "Password is valid"


def login_rate_limit():
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per 15 minutes")


@auth_bp.route("/register", methods=["POST"])
def register():
    data = load_json(register_schema)
    email = data["email"].strip().lower()
    name = data["name"].strip()

    is_valid, msg = validate_password(data["password"])
    if not is_valid:
        raise BadRequest(msg)

    if User.query.filter_by(email=email).first():
        raise BadRequest("User with this email already exists")

    user = User(email=email, name=name, role=data["role"])
    user.set_password(data["password"])
    db.session.add(user)
    db.session.flush()

    if user.is_client:
        db.session.add(Client(user_id=user.id, subscription_status="INACTIVE"))
    db.session.commit()

    current_app.logger.info("Registered %s %s", user.role, user.email)
    return jsonify({"msg": "User created successfully", "user": me_schema.dump(user)}), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(login_rate_limit)
def login():
    data = load_json(login_schema)
    email = data["email"].strip().lower()

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(data["password"]):
        current_app.logger.warning("Failed login for %s", email)
        raise Unauthorized("Invalid credentials")

    access_token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})

    response = jsonify({
        "msg": "Login successful",
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
        },
    })
    set_access_cookies(response, access_token)
    current_app.logger.info("User %s logged in", user.id)
    return response, 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"msg": "Logout successful"})
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me(current_user):
    return jsonify(me_schema.dump(current_user)), 200
