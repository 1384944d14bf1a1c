from flask import Blueprint, jsonify

from fitcoach.schemas.chat import (
    ConversationSchema, ConversationInputSchema, MessageSchema, MessageInputSchema,
)
from fitcoach.services import chat
from fitcoach.utils.decorators import login_required
from fitcoach.utils.errors import BadRequest
from fitcoach.utils.validation import load_json, query_int

chat_bp = Blueprint("chat", __name__)
conversation_schema = ConversationSchema()
conversation_input_schema = ConversationInputSchema()
message_schema = MessageSchema()
messages_schema = MessageSchema(many=True)
message_input_schema = MessageInputSchema()


def _dump_conversation(conversation, user):
    data = conversation_schema.dump(conversation)
    last = conversation.last_message()
    data["last_message"] = message_schema.dump(last) if last is not None else None
    data["unread_count"] = conversation.unread_for(user)
    return data


@chat_bp.route("/conversations", methods=["GET"])
@login_required
def list_conversations(current_user):
    conversations = chat.conversations_for(current_user)
    return jsonify({"conversations": [_dump_conversation(c, current_user) for c in conversations]}), 200


@chat_bp.route("/conversations", methods=["POST"])
@login_required
def open_conversation(current_user):
    data = load_json(conversation_input_schema)
    conversation, created = chat.open_conversation(current_user, data["client_id"], data["trainer_id"])
    return jsonify(_dump_conversation(conversation, current_user)), 201 if created else 200


@chat_bp.route("/conversations/<int:conversation_id>/messages", methods=["GET"])
@login_required
def list_messages(conversation_id, current_user):
    conversation = chat.get_conversation_or_404(conversation_id, current_user)
    page = query_int("page")
    limit = query_int("limit")
    if page is None:
        page = 1
    if limit is None:
        limit = chat.DEFAULT_PAGE_SIZE
    messages, has_more = chat.list_messages(conversation, current_user, page, limit)
    return jsonify({
        "messages": messages_schema.dump(messages),
        "pagination": {"page": page, "limit": limit, "has_more": has_more},
    }), 200


@chat_bp.route("/conversations/<int:conversation_id>/messages", methods=["POST"])
@login_required
def send_message(conversation_id, current_user):
    conversation = chat.get_conversation_or_404(conversation_id, current_user)
    data = load_json(message_input_schema)
    content = data["content"].strip()
    if not content:
        raise BadRequest("Message content cannot be empty")
    message = chat.send_message(conversation, current_user, content)
    return jsonify(message_schema.dump(message)), 201


@chat_bp.route("/unread-count", methods=["GET"])
@login_required
def unread_count(current_user):
    return jsonify({"unread_count": chat.unread_count(current_user)}), 200
