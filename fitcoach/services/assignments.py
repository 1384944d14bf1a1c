"""
Creation of workout and program assignments.

Checks run in a fixed order and every one of them happens before the first
insert: client exists, trainer link, client profile, active subscription,
catalog entry exists. The checks are plain reads, not a transaction.
"""

import logging

from fitcoach.extensions import db
from fitcoach.models import ClientWorkout, ClientWorkoutProgram, Workout, WorkoutProgram
from fitcoach.services.clients import get_client_profile_or_404, require_active_subscription
from fitcoach.services.visibility import ensure_client_in_scope, get_client_user_or_404
from fitcoach.utils.errors import NotFound

logger = logging.getLogger(__name__)


def check_assignable_client(user, client_id, what):
    get_client_user_or_404(client_id)
    ensure_client_in_scope(user, client_id)
    client = get_client_profile_or_404(client_id)
    require_active_subscription(client, what)
    return client


def create_workout_assignment(user, client_id, workout_id, scheduled_date, notes=""):
    check_assignable_client(user, client_id, "assigned workouts")
    workout = db.session.get(Workout, workout_id)
    if workout is None:
        raise NotFound("Workout not found")

    assignment = ClientWorkout(
        client_id=client_id,
        workout_id=workout.id,
        scheduled_date=scheduled_date,
        notes=notes or "",
        status="SCHEDULED",
    )
    db.session.add(assignment)
    db.session.commit()
    logger.info("Workout %s assigned to client %s on %s", workout.id, client_id, scheduled_date)
    return assignment


def create_bulk_workout_assignments(user, client_id, workout_id, dates, notes=""):
    """
    Assign one workout on several dates. Checks run once; each date is then
    inserted on its own so one bad date does not undo the others.
    """
    check_assignable_client(user, client_id, "assigned workouts")
    workout = db.session.get(Workout, workout_id)
    if workout is None:
        raise NotFound("Workout not found")

    created, errors = [], []
    for scheduled_date in dates:
        try:
            assignment = ClientWorkout(
                client_id=client_id,
                workout_id=workout.id,
                scheduled_date=scheduled_date,
                notes=notes or "",
                status="SCHEDULED",
            )
            db.session.add(assignment)
            db.session.commit()
            created.append(assignment)
        except Exception:
            db.session.rollback()
            logger.exception("Error assigning workout %s on %s", workout.id, scheduled_date)
            errors.append({"date": scheduled_date.isoformat(), "error": "Could not create assignment"})
    logger.info("Bulk assignment of workout %s to client %s: %d assigned, %d failed",
                workout.id, client_id, len(created), len(errors))
    return created, errors


def create_program_assignment(user, client_id, program_id, start_date, notes=""):
    check_assignable_client(user, client_id, "assigned workout programs")
    program = db.session.get(WorkoutProgram, program_id)
    if program is None:
        raise NotFound("Workout program not found")

    assignment = ClientWorkoutProgram(
        client_id=client_id,
        program_id=program.id,
        start_date=start_date,
        notes=notes or "",
        status="SCHEDULED",
    )
    db.session.add(assignment)
    db.session.commit()
    logger.info("Program %s assigned to client %s starting %s", program.id, client_id, start_date)
    return assignment
