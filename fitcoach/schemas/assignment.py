from marshmallow import fields, validate, validates_schema, ValidationError, EXCLUDE

from fitcoach.extensions import ma
from fitcoach.models import ClientWorkout, ClientWorkoutProgram, WorkoutProgress
from fitcoach.models.assignment import ASSIGNMENT_STATUSES
from fitcoach.schemas.fields import CalendarDate
from fitcoach.schemas.user import UserSummarySchema
from fitcoach.schemas.workout import WorkoutSchema
from fitcoach.services.calendar import program_end_date


class ClientWorkoutSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = ClientWorkout
        include_fk = True

    scheduled_date = CalendarDate()
    client = fields.Nested(UserSummarySchema, dump_only=True)
    workout = fields.Nested(WorkoutSchema, dump_only=True)


class ProgramSummarySchema(ma.Schema):
    id = fields.Integer()
    name = fields.String()
    description = fields.String()
    category = fields.String()
    difficulty = fields.String()
    total_days = fields.Integer()
    status = fields.String()


class ClientWorkoutProgramSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = ClientWorkoutProgram
        include_fk = True

    start_date = CalendarDate()
    end_date = fields.Method("get_end_date", dump_only=True)
    client = fields.Nested(UserSummarySchema, dump_only=True)
    program = fields.Nested(ProgramSummarySchema, dump_only=True)

    def get_end_date(self, obj):
        return program_end_date(obj.start_date, obj.program.total_days).isoformat()


class WorkoutProgressSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = WorkoutProgress
        include_fk = True

    exercise_name = fields.String(attribute="exercise.name", dump_only=True)


# --- input ---

class WorkoutAssignSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    client_id = fields.Integer(required=True)
    workout_id = fields.Integer(required=True)
    scheduled_date = CalendarDate(required=True)
    notes = fields.String(load_default="", allow_none=True)


class BulkWorkoutAssignSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    client_id = fields.Integer(required=True)
    workout_id = fields.Integer(required=True)
    dates = fields.List(CalendarDate(), required=True, validate=validate.Length(min=1))
    notes = fields.String(load_default="", allow_none=True)


class ProgramAssignSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    client_id = fields.Integer(required=True)
    program_id = fields.Integer(required=True)
    start_date = CalendarDate(required=True)
    notes = fields.String(load_default="", allow_none=True)


class AssignmentUpdateSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(required=True, validate=validate.OneOf(ASSIGNMENT_STATUSES))
    notes = fields.String(allow_none=True)


class ProgressInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    exercise_id = fields.Integer(required=True)
    client_workout_id = fields.Integer(load_default=None, allow_none=True)
    client_workout_program_id = fields.Integer(load_default=None, allow_none=True)
    day_number = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=1))
    sets_completed = fields.Integer(load_default=0, validate=validate.Range(min=0))
    reps_completed = fields.String(load_default=None, allow_none=True)
    weight = fields.Float(load_default=None, allow_none=True, validate=validate.Range(min=0))
    notes = fields.String(load_default="", allow_none=True)

    @validates_schema
    def validate_assignment_link(self, data, **kwargs):
        single = data.get("client_workout_id") is not None
        program = data.get("client_workout_program_id") is not None
        if single == program:
            raise ValidationError(
                "Provide exactly one of client_workout_id or client_workout_program_id",
                "client_workout_id",
            )
        if program and data.get("day_number") is None:
            raise ValidationError("day_number is required for program assignments", "day_number")
