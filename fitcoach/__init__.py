import logging
import os
import sys

from flask import Flask, jsonify

from fitcoach.config import config
from fitcoach.extensions import db, ma, jwt, migrate, cors, limiter
from fitcoach.filters import register_filters
from fitcoach.utils.errors import register_error_handlers

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    # app.logger and the service module loggers share the "fitcoach" hierarchy
    package_logger = logging.getLogger("fitcoach")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    app.logger.setLevel(level)


def register_jwt_callbacks():
    from fitcoach.models import User

    @jwt.user_lookup_loader
    def user_lookup_callback(_jwt_header, jwt_data):
        identity = jwt_data["sub"]
        try:
            return db.session.get(User, int(identity))
        except (TypeError, ValueError):
            return None

    @jwt.user_lookup_error_loader
    def user_lookup_error_callback(_jwt_header, jwt_data):
        return jsonify({"msg": "User not found"}), 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"msg": "Token has expired"}), 401

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return jsonify({"msg": "Invalid token"}), 401

    @jwt.unauthorized_loader
    def unauthorized_callback(error):
        return jsonify({"msg": "Unauthorized"}), 401


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config[config_name])

    configure_logging(app)

    db.init_app(app)
    ma.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    cors.init_app(app, resources={r"/api/*": {
        "origins": app.config["CORS_ORIGINS"],
        "allow_headers": ["Content-Type", "Authorization", "X-CSRF-TOKEN"],
        "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    }}, supports_credentials=True)
    limiter.init_app(app)

    register_jwt_callbacks()
    register_error_handlers(app)
    register_filters(app)

    from fitcoach.routes.auth import auth_bp
    from fitcoach.routes.users import users_bp
    from fitcoach.routes.clients import clients_bp, coach_bp
    from fitcoach.routes.exercises import exercises_bp
    from fitcoach.routes.workouts import workouts_bp
    from fitcoach.routes.workout_programs import programs_bp
    from fitcoach.routes.assignments import workout_assign_bp, program_assign_bp
    from fitcoach.routes.schedule import schedule_bp
    from fitcoach.routes.progress import progress_bp
    from fitcoach.routes.chat import chat_bp

    app.register_blueprint(workout_assign_bp, url_prefix="/api/workouts/assign")
    app.register_blueprint(program_assign_bp, url_prefix="/api/workout-programs/assign")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(clients_bp, url_prefix="/api/clients")
    app.register_blueprint(coach_bp, url_prefix="/api/coach")
    app.register_blueprint(exercises_bp, url_prefix="/api/exercises")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(programs_bp, url_prefix="/api/workout-programs")
    app.register_blueprint(progress_bp, url_prefix="/api/progress")
    app.register_blueprint(chat_bp, url_prefix="/api/chat")
    app.register_blueprint(schedule_bp)

    app.logger.info("FitCoach started with %s config", config_name)
    return app
