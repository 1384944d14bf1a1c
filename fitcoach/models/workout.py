from datetime import datetime
from fitcoach.extensions import db

CATALOG_STATUSES = ("DRAFT", "ACTIVE", "ARCHIVED")


class Workout(db.Model):
    """A named single-day collection of ordered exercise entries."""

    __tablename__ = "workouts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="Custom")
    difficulty = db.Column(
        db.String(20),
        db.CheckConstraint("difficulty IN ('BEGINNER','INTERMEDIATE','ADVANCED')", name="ck_workouts_difficulty"),
        default="INTERMEDIATE",
    )
    estimated_duration = db.Column(db.Integer, default=60)  # minutes
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('DRAFT','ACTIVE','ARCHIVED')", name="ck_workouts_status"),
        nullable=False,
        default="DRAFT",
    )
    is_public = db.Column(db.Boolean, default=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = db.relationship("User", back_populates="created_workouts")
    exercises = db.relationship(
        "WorkoutExercise",
        back_populates="workout",
        order_by="WorkoutExercise.order",
        cascade="all, delete-orphan",
    )
    assignments = db.relationship("ClientWorkout", back_populates="workout", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_workouts_creator_id", "creator_id"),
        db.Index("idx_workouts_status", "status"),
    )

    def __repr__(self):
        return f"<Workout {self.name}>"


class WorkoutExercise(db.Model):
    __tablename__ = "workout_exercises"

    id = db.Column(db.Integer, primary_key=True)
    workout_id = db.Column(db.Integer, db.ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercises.id"), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=1)
    sets = db.Column(db.Integer, nullable=False, default=3)
    reps = db.Column(db.String(50), nullable=False, default="10")  # "10", "8-12", "AMRAP"
    rest = db.Column(db.String(50), default="60s")
    notes = db.Column(db.Text, default="")

    workout = db.relationship("Workout", back_populates="exercises")
    exercise = db.relationship("Exercise")

    __table_args__ = (
        db.Index("idx_workout_exercises_workout_id", "workout_id"),
        db.Index("idx_workout_exercises_exercise_id", "exercise_id"),
    )
