from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from fitcoach.extensions import db

USERS_TABLE = "users"

ROLES = ("admin", "trainer", "client")


class User(db.Model):
    __tablename__ = USERS_TABLE

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    name = db.Column(db.String(150), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('admin','trainer','client')", name="ck_users_role"),
        nullable=False,
        default="client",
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Client profile (for role=client) and the clients a trainer is linked to
    client_profile = db.relationship(
        "Client",
        foreign_keys="Client.user_id",
        uselist=False,
        back_populates="user",
        cascade="all, delete-orphan",
    )
    clients = db.relationship(
        "Client",
        foreign_keys="Client.trainer_id",
        back_populates="trainer",
        lazy="dynamic",
    )

    # Catalog ownership
    created_workouts = db.relationship("Workout", back_populates="creator", lazy="dynamic")
    created_programs = db.relationship("WorkoutProgram", back_populates="creator", lazy="dynamic")

    __table_args__ = (
        db.Index("idx_users_email", "email"),
        db.Index("idx_users_role", "role"),
    )

    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == "admin"

    @property
    def is_trainer(self):
        return self.role == "trainer"

    @property
    def is_client(self):
        return self.role == "client"

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
