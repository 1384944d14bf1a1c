"""
Trainer/client messaging.

A conversation belongs to exactly one client and one trainer (an admin may
take the trainer side). Opening one requires the pair to be linked the same
way assignments are; once open, only its two participants can read or post.
"""

import logging
from datetime import datetime

from fitcoach.extensions import db
from fitcoach.models import Client, Conversation, Message
from fitcoach.services.visibility import ensure_client_in_scope, get_client_user_or_404
from fitcoach.utils.errors import BadRequest, NotFound

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def conversations_for(user):
    if user.is_client:
        query = Conversation.query.filter_by(client_id=user.id)
    else:
        query = Conversation.query.filter_by(trainer_id=user.id)
    return query.order_by(Conversation.updated_at.desc(), Conversation.id.desc()).all()


def _client_side_pair(user, trainer_id):
    profile = Client.query.filter_by(user_id=user.id).first()
    if profile is None or profile.trainer_id is None:
        raise NotFound("No coach assigned")
    if trainer_id is not None and trainer_id != profile.trainer_id:
        raise NotFound("Trainer not found or not assigned to you")
    return user.id, profile.trainer_id


def open_conversation(user, client_id=None, trainer_id=None):
    """
    Return ``(conversation, created)`` for the pair the caller belongs to.

    A client talks to their current trainer. A trainer talks to one of their
    clients; admins may open a conversation with any client.
    """
    if user.is_client:
        client_id, trainer_id = _client_side_pair(user, trainer_id)
    else:
        if client_id is None:
            raise BadRequest("client_id is required")
        get_client_user_or_404(client_id)
        ensure_client_in_scope(user, client_id)
        trainer_id = user.id

    conversation = Conversation.query.filter_by(client_id=client_id, trainer_id=trainer_id).first()
    if conversation is not None:
        return conversation, False

    conversation = Conversation(client_id=client_id, trainer_id=trainer_id)
    db.session.add(conversation)
    db.session.commit()
    logger.info("Conversation %s opened between client %s and trainer %s", conversation.id, client_id, trainer_id)
    return conversation, True


def get_conversation_or_404(conversation_id, user):
    conversation = db.session.get(Conversation, conversation_id)
    if conversation is None or not conversation.has_participant(user):
        raise NotFound("Conversation not found")
    return conversation


def list_messages(conversation, user, page=1, limit=DEFAULT_PAGE_SIZE):
    """
    One page of messages, oldest first within the page. Pages count back
    from the newest message. Messages from the other participant are marked
    as read.
    """
    if page < 1:
        raise BadRequest("page must be at least 1")
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise BadRequest(f"limit must be between 1 and {MAX_PAGE_SIZE}")

    messages = (
        conversation.messages
        .order_by(Message.sent_at.desc(), Message.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    messages.reverse()

    Message.query.filter(
        Message.conversation_id == conversation.id,
        Message.sender_id != user.id,
        Message.is_read.is_(False),
    ).update({Message.is_read: True}, synchronize_session=False)
    db.session.commit()
    return messages, len(messages) == limit


def send_message(conversation, sender, content):
    message = Message(conversation_id=conversation.id, sender_id=sender.id, content=content)
    db.session.add(message)
    conversation.updated_at = datetime.utcnow()
    db.session.commit()
    logger.info("Message %s sent in conversation %s by user %s", message.id, conversation.id, sender.id)
    return message


def unread_count(user):
    return (
        Message.query
        .join(Conversation, Conversation.id == Message.conversation_id)
        .filter(
            (Conversation.client_id == user.id) | (Conversation.trainer_id == user.id),
            Message.sender_id != user.id,
            Message.is_read.is_(False),
        )
        .count()
    )
