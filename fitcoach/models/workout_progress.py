from datetime import datetime
from fitcoach.extensions import db


class WorkoutProgress(db.Model):
    """A client's logged result for one exercise of an assigned session."""

    __tablename__ = "workout_progress"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercises.id"), nullable=False)

    # Exactly one of the two assignment links is set; program logs also carry the day
    client_workout_id = db.Column(
        db.Integer, db.ForeignKey("client_workouts.id", ondelete="CASCADE"), nullable=True
    )
    client_workout_program_id = db.Column(
        db.Integer, db.ForeignKey("client_workout_programs.id", ondelete="CASCADE"), nullable=True
    )
    day_number = db.Column(db.Integer, nullable=True)

    sets_completed = db.Column(db.Integer, default=0)
    reps_completed = db.Column(db.String(50))
    weight = db.Column(db.Float)  # kg
    notes = db.Column(db.Text, default="")
    logged_at = db.Column(db.DateTime, default=datetime.utcnow)

    client = db.relationship("User")
    exercise = db.relationship("Exercise")
    client_workout = db.relationship(
        "ClientWorkout",
        backref=db.backref("progress_entries", cascade="all, delete-orphan"),
    )
    client_workout_program = db.relationship(
        "ClientWorkoutProgram",
        backref=db.backref("progress_entries", cascade="all, delete-orphan"),
    )

    __table_args__ = (
        db.CheckConstraint(
            "(client_workout_id IS NULL) <> (client_workout_program_id IS NULL)",
            name="ck_workout_progress_single_assignment",
        ),
        db.Index("idx_workout_progress_client_id", "client_id"),
    )
