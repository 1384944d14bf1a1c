from datetime import datetime
from fitcoach.extensions import db

DIFFICULTIES = ("BEGINNER", "INTERMEDIATE", "ADVANCED")


class Exercise(db.Model):
    __tablename__ = "exercises"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, unique=True)
    description = db.Column(db.Text, default="")

    # Exercise categorization
    category = db.Column(db.String(50), nullable=False, default="General")  # Strength, MetCon, Cardio...
    difficulty = db.Column(
        db.String(20),
        db.CheckConstraint("difficulty IN ('BEGINNER','INTERMEDIATE','ADVANCED')", name="ck_exercises_difficulty"),
        nullable=False,
        default="INTERMEDIATE",
    )
    muscle_groups = db.Column(db.JSON, default=list)  # ["Quadriceps", "Glutes"]
    equipment = db.Column(db.JSON, default=list)  # ["Barbell", "Weight Plates"]

    instructions = db.Column(db.Text, default="")
    video_url = db.Column(db.String(255))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.Index("idx_exercises_name", "name"),
        db.Index("idx_exercises_category", "category"),
    )

    def __repr__(self):
        return f"<Exercise {self.name}>"
