from marshmallow import fields, validate, EXCLUDE

from fitcoach.extensions import ma
from fitcoach.models import Exercise
from fitcoach.models.exercise import DIFFICULTIES
from fitcoach.schemas.fields import CommaList


class ExerciseSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Exercise


class ExerciseInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=100))
    description = fields.String(required=True)
    category = fields.String(required=True, validate=validate.Length(min=1, max=50))
    difficulty = fields.String(required=True, validate=validate.OneOf(DIFFICULTIES))
    muscle_groups = CommaList(load_default=list)
    equipment = CommaList(load_default=list)
    instructions = fields.String(load_default="")
    video_url = fields.String(allow_none=True, load_default=None)
