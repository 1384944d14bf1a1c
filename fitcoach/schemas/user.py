from marshmallow import fields, validate, EXCLUDE

from fitcoach.extensions import ma
from fitcoach.schemas.fields import DateOrDateTime
from fitcoach.models import User, Client
from fitcoach.models.client import SUBSCRIPTION_PLANS, SUBSCRIPTION_STATUSES


class UserSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = User
        load_instance = False
        exclude = ("password_hash",)


class UserSummarySchema(ma.Schema):
    id = fields.Integer()
    name = fields.String()
    email = fields.String()


class ClientSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Client
        include_fk = True

    id = fields.Integer(attribute="user_id", dump_only=True)
    profile_id = fields.Integer(attribute="id", dump_only=True)
    name = fields.String(attribute="user.name", dump_only=True)
    email = fields.String(attribute="user.email", dump_only=True)
    trainer = fields.Nested(UserSummarySchema, allow_none=True, dump_only=True)


class MeSchema(UserSchema):
    client_profile = fields.Nested(ClientSchema, allow_none=True, dump_only=True)


class RegisterSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=2, max=150))
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)
    role = fields.String(load_default="client", validate=validate.OneOf(("client", "trainer")))


class LoginSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(required=True)
    password = fields.String(required=True, load_only=True)


class ClientUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    goals = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)


class ClientRefSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    client_id = fields.Integer(required=True)


class ReassignSchema(ClientRefSchema):
    new_trainer_id = fields.Integer(required=True)


class SubscriptionSchema(ClientRefSchema):
    subscription_status = fields.String(validate=validate.OneOf(SUBSCRIPTION_STATUSES))
    subscription_plan = fields.String(allow_none=True, validate=validate.OneOf(SUBSCRIPTION_PLANS))
    subscription_start = DateOrDateTime(allow_none=True)
    subscription_end = DateOrDateTime(allow_none=True)
