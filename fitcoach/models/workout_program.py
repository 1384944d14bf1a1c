from datetime import datetime
from fitcoach.extensions import db


class WorkoutProgram(db.Model):
    """A named multi-day container of WorkoutDay entries."""

    __tablename__ = "workout_programs"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, default="")
    category = db.Column(db.String(50), default="Custom")
    difficulty = db.Column(
        db.String(20),
        db.CheckConstraint("difficulty IN ('BEGINNER','INTERMEDIATE','ADVANCED')", name="ck_programs_difficulty"),
        default="INTERMEDIATE",
    )
    total_days = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('DRAFT','ACTIVE','ARCHIVED')", name="ck_programs_status"),
        nullable=False,
        default="DRAFT",
    )
    is_public = db.Column(db.Boolean, default=True)
    creator_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator = db.relationship("User", back_populates="created_programs")
    days = db.relationship(
        "WorkoutDay",
        back_populates="program",
        order_by="WorkoutDay.day_number",
        cascade="all, delete-orphan",
    )
    assignments = db.relationship("ClientWorkoutProgram", back_populates="program", lazy="dynamic")

    __table_args__ = (
        db.CheckConstraint("total_days >= 1", name="ck_programs_total_days"),
        db.Index("idx_programs_creator_id", "creator_id"),
        db.Index("idx_programs_status", "status"),
    )

    @property
    def estimated_duration(self):
        return sum(day.estimated_duration or 0 for day in self.days)

    def __repr__(self):
        return f"<WorkoutProgram {self.name} ({self.total_days} days)>"


class WorkoutDay(db.Model):
    __tablename__ = "workout_days"

    id = db.Column(db.Integer, primary_key=True)
    program_id = db.Column(db.Integer, db.ForeignKey("workout_programs.id", ondelete="CASCADE"), nullable=False)
    day_number = db.Column(db.Integer, nullable=False)  # 1-based
    name = db.Column(db.String(150), nullable=False)
    is_rest_day = db.Column(db.Boolean, nullable=False, default=False)
    estimated_duration = db.Column(db.Integer)  # minutes
    notes = db.Column(db.Text, default="")

    program = db.relationship("WorkoutProgram", back_populates="days")
    exercises = db.relationship(
        "WorkoutDayExercise",
        back_populates="day",
        order_by="WorkoutDayExercise.order",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        db.UniqueConstraint("program_id", "day_number", name="uq_workout_days_program_day"),
        db.Index("idx_workout_days_program_id", "program_id"),
    )


class WorkoutDayExercise(db.Model):
    __tablename__ = "workout_day_exercises"

    id = db.Column(db.Integer, primary_key=True)
    day_id = db.Column(db.Integer, db.ForeignKey("workout_days.id", ondelete="CASCADE"), nullable=False)
    exercise_id = db.Column(db.Integer, db.ForeignKey("exercises.id"), nullable=False)
    order = db.Column(db.Integer, nullable=False, default=1)
    sets = db.Column(db.Integer, nullable=False, default=3)
    reps = db.Column(db.String(50), nullable=False, default="10")
    rest = db.Column(db.String(50), default="60s")
    notes = db.Column(db.Text, default="")

    day = db.relationship("WorkoutDay", back_populates="exercises")
    exercise = db.relationship("Exercise")

    __table_args__ = (
        db.Index("idx_workout_day_exercises_day_id", "day_id"),
        db.Index("idx_workout_day_exercises_exercise_id", "exercise_id"),
    )
