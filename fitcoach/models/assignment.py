from datetime import datetime
from fitcoach.extensions import db

ASSIGNMENT_STATUSES = ("SCHEDULED", "IN_PROGRESS", "COMPLETED", "MISSED", "CANCELLED")

_STATUS_CHECK = "status IN ('SCHEDULED','IN_PROGRESS','COMPLETED','MISSED','CANCELLED')"


class AssignmentMixin:
    """Columns shared by single-workout and program assignments."""

    status = db.Column(db.String(20), nullable=False, default="SCHEDULED")
    notes = db.Column(db.Text, default="")
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def set_status(self, status):
        self.status = status
        self.completed_at = datetime.utcnow() if status == "COMPLETED" else None


class ClientWorkout(AssignmentMixin, db.Model):
    __tablename__ = "client_workouts"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workout_id = db.Column(db.Integer, db.ForeignKey("workouts.id"), nullable=False)
    scheduled_date = db.Column(db.Date, nullable=False)

    client = db.relationship("User")
    workout = db.relationship("Workout", back_populates="assignments")

    # Multiple assignments of the same workout on the same date are allowed
    __table_args__ = (
        db.CheckConstraint(_STATUS_CHECK, name="ck_client_workouts_status"),
        db.Index("idx_client_workouts_client_id", "client_id"),
        db.Index("idx_client_workouts_scheduled_date", "scheduled_date"),
    )


class ClientWorkoutProgram(AssignmentMixin, db.Model):
    __tablename__ = "client_workout_programs"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    program_id = db.Column(db.Integer, db.ForeignKey("workout_programs.id"), nullable=False)
    start_date = db.Column(db.Date, nullable=False)

    client = db.relationship("User")
    program = db.relationship("WorkoutProgram", back_populates="assignments")

    __table_args__ = (
        db.CheckConstraint(_STATUS_CHECK, name="ck_client_workout_programs_status"),
        db.Index("idx_client_workout_programs_client_id", "client_id"),
        db.Index("idx_client_workout_programs_start_date", "start_date"),
    )
