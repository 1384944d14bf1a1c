from marshmallow import fields, validate, EXCLUDE

from fitcoach.extensions import ma
from fitcoach.models import Conversation, Message
from fitcoach.schemas.user import UserSummarySchema


class MessageSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Message
        include_fk = True

    sender = fields.Nested(UserSummarySchema, dump_only=True)


class ConversationSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Conversation
        include_fk = True

    client = fields.Nested(UserSummarySchema, dump_only=True)
    trainer = fields.Nested(UserSummarySchema, dump_only=True)


# --- input ---

class ConversationInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    client_id = fields.Integer(load_default=None)
    trainer_id = fields.Integer(load_default=None)


class MessageInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    content = fields.String(required=True, validate=validate.Length(min=1, max=5000))
