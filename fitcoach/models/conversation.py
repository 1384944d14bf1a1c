from datetime import datetime
from fitcoach.extensions import db


class Conversation(db.Model):
    """The message thread between one client and one trainer."""

    __tablename__ = "conversations"

    id = db.Column(db.Integer, primary_key=True)
    client_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    trainer_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    client = db.relationship("User", foreign_keys=[client_id])
    trainer = db.relationship("User", foreign_keys=[trainer_id])
    messages = db.relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )

    __table_args__ = (
        db.UniqueConstraint("client_id", "trainer_id", name="uq_conversations_pair"),
        db.Index("idx_conversations_trainer_id", "trainer_id"),
    )

    def has_participant(self, user):
        return user.id in (self.client_id, self.trainer_id)

    def last_message(self):
        return self.messages.order_by(Message.sent_at.desc(), Message.id.desc()).first()

    def unread_for(self, user):
        return self.messages.filter(Message.is_read.is_(False), Message.sender_id != user.id).count()

    def __repr__(self):
        return f"<Conversation client={self.client_id} trainer={self.trainer_id}>"


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.Integer, primary_key=True)
    conversation_id = db.Column(
        db.Integer, db.ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    sender_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = db.Column(db.Text, nullable=False)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    is_read = db.Column(db.Boolean, default=False, index=True)

    conversation = db.relationship("Conversation", back_populates="messages")
    sender = db.relationship("User")

    __table_args__ = (
        db.Index("idx_messages_conversation_id", "conversation_id"),
        db.Index("idx_messages_sender_id", "sender_id"),
    )
