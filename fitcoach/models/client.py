from datetime import datetime
from fitcoach.extensions import db

SUBSCRIPTION_STATUSES = ("ACTIVE", "INACTIVE", "CANCELLED", "EXPIRED")
SUBSCRIPTION_PLANS = ("BASIC", "PRO", "ELITE")


class Client(db.Model):
    __tablename__ = "clients"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    goals = db.Column(db.Text)
    notes = db.Column(db.Text)

    subscription_status = db.Column(
        db.String(20),
        db.CheckConstraint(
            "subscription_status IN ('ACTIVE','INACTIVE','CANCELLED','EXPIRED')",
            name="ck_clients_subscription_status",
        ),
        nullable=False,
        default="INACTIVE",
    )
    subscription_plan = db.Column(
        db.String(20),
        db.CheckConstraint(
            "subscription_plan IS NULL OR subscription_plan IN ('BASIC','PRO','ELITE')",
            name="ck_clients_subscription_plan",
        ),
        nullable=True,
    )
    subscription_start = db.Column(db.DateTime, nullable=True)
    subscription_end = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship("User", foreign_keys=[user_id], back_populates="client_profile")
    trainer = db.relationship("User", foreign_keys=[trainer_id], back_populates="clients")

    __table_args__ = (
        db.Index("idx_clients_trainer_id", "trainer_id"),
        db.Index("idx_clients_subscription_status", "subscription_status"),
    )

    @property
    def has_active_subscription(self):
        return self.subscription_status == "ACTIVE"

    def __repr__(self):
        return f"<Client user={self.user_id} trainer={self.trainer_id}>"
