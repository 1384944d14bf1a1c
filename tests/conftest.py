"""Pytest configuration and fixtures."""

from datetime import date

import pytest
from flask_jwt_extended import create_access_token

from fitcoach import create_app
from fitcoach.extensions import db as _db
from fitcoach.models import (
    User, Client, Exercise, Workout, WorkoutExercise,
    WorkoutProgram, WorkoutDay, WorkoutDayExercise,
    ClientWorkout, ClientWorkoutProgram,
)

PASSWORD = "secret123"


@pytest.fixture
def app():
    """An application bound to a fresh in-memory database."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, role, name=None):
    user = User(email=email, name=name or email.split("@")[0].title(), role=role)
    user.set_password(PASSWORD)
    _db.session.add(user)
    _db.session.flush()
    return user


def make_client(email, trainer=None, status="ACTIVE"):
    user = make_user(email, "client")
    _db.session.add(Client(
        user_id=user.id,
        trainer_id=trainer.id if trainer else None,
        subscription_status=status,
    ))
    _db.session.flush()
    return user


def auth_headers(user):
    token = create_access_token(identity=str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def users(app):
    """
    admin, two trainers, and clients:
    alice (trainer1, ACTIVE), bob (trainer2, ACTIVE),
    carol (trainer1, INACTIVE), dave (unassigned, ACTIVE).
    """
    admin = make_user("admin@example.com", "admin")
    trainer1 = make_user("trainer1@example.com", "trainer")
    trainer2 = make_user("trainer2@example.com", "trainer")
    alice = make_client("alice@example.com", trainer1)
    bob = make_client("bob@example.com", trainer2)
    carol = make_client("carol@example.com", trainer1, status="INACTIVE")
    dave = make_client("dave@example.com")
    _db.session.commit()
    return {
        "admin": admin, "trainer1": trainer1, "trainer2": trainer2,
        "alice": alice, "bob": bob, "carol": carol, "dave": dave,
    }


@pytest.fixture
def exercises(app):
    items = {}
    for name, category in [
        ("Bench Press", "Strength"), ("Squats", "Strength"), ("Deadlift", "Strength"),
        ("Wall Ball", "MetCon"), ("Running", "Cardio"),
    ]:
        exercise = Exercise(name=name, category=category, description=f"{name} description")
        _db.session.add(exercise)
        items[name] = exercise
    _db.session.commit()
    return items


@pytest.fixture
def workout(users, exercises):
    workout = Workout(name="Quick Circuit", creator_id=users["trainer1"].id, status="ACTIVE")
    workout.exercises = [
        WorkoutExercise(exercise_id=exercises["Wall Ball"].id, order=1, sets=3, reps="12"),
        WorkoutExercise(exercise_id=exercises["Running"].id, order=2, sets=1, reps="400m"),
    ]
    _db.session.add(workout)
    _db.session.commit()
    return workout


@pytest.fixture
def program(users, exercises):
    """The 4-Week Strength Builder: four days, all with exercises."""
    program = WorkoutProgram(
        name="4-Week Strength Builder",
        total_days=4,
        creator_id=users["trainer1"].id,
        status="ACTIVE",
    )
    for number, (day_name, exercise_name) in enumerate(
        [("Push Day", "Bench Press"), ("Pull Day", "Deadlift"), ("Leg Day", "Squats"), ("Full Body", "Wall Ball")],
        start=1,
    ):
        day = WorkoutDay(day_number=number, name=day_name, estimated_duration=60)
        day.exercises = [WorkoutDayExercise(exercise_id=exercises[exercise_name].id, order=1, sets=4, reps="8")]
        program.days.append(day)
    _db.session.add(program)
    _db.session.commit()
    return program


def assign_workout(client_user, workout, day):
    assignment = ClientWorkout(client_id=client_user.id, workout_id=workout.id, scheduled_date=day)
    _db.session.add(assignment)
    _db.session.commit()
    return assignment


def assign_program(client_user, program, start):
    assignment = ClientWorkoutProgram(client_id=client_user.id, program_id=program.id, start_date=start)
    _db.session.add(assignment)
    _db.session.commit()
    return assignment


@pytest.fixture
def assignments(users, workout, program):
    """One workout and one program assignment for alice (trainer1) and bob (trainer2)."""
    return {
        "alice_workout": assign_workout(users["alice"], workout, date(2024, 1, 29)),
        "alice_program": assign_program(users["alice"], program, date(2024, 1, 30)),
        "bob_workout": assign_workout(users["bob"], workout, date(2024, 1, 31)),
        "bob_program": assign_program(users["bob"], program, date(2024, 2, 5)),
    }
