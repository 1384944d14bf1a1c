from marshmallow import fields, validate, validates_schema, ValidationError, EXCLUDE

from fitcoach.extensions import ma
from fitcoach.models import Workout, WorkoutExercise, WorkoutProgram, WorkoutDay, WorkoutDayExercise
from fitcoach.models.exercise import DIFFICULTIES
from fitcoach.models.workout import CATALOG_STATUSES


class _ExerciseInfo:
    name = fields.String(attribute="exercise.name", dump_only=True)
    category = fields.String(attribute="exercise.category", dump_only=True)
    video_url = fields.String(attribute="exercise.video_url", dump_only=True)


class ExerciseEntrySchema(_ExerciseInfo, ma.SQLAlchemyAutoSchema):
    """An ordered exercise line of a workout."""

    class Meta:
        model = WorkoutExercise
        include_fk = True
        exclude = ("workout_id",)


class DayExerciseEntrySchema(_ExerciseInfo, ma.SQLAlchemyAutoSchema):
    """An ordered exercise line of a program day."""

    class Meta:
        model = WorkoutDayExercise
        include_fk = True
        exclude = ("day_id",)


class WorkoutSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Workout
        include_fk = True

    creator_name = fields.String(attribute="creator.name", dump_only=True)
    exercises = fields.Nested(ExerciseEntrySchema, many=True, dump_only=True)


class WorkoutDaySchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = WorkoutDay
        include_fk = True

    exercises = fields.Nested(DayExerciseEntrySchema, many=True, dump_only=True)


class WorkoutProgramSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = WorkoutProgram
        include_fk = True

    creator_name = fields.String(attribute="creator.name", dump_only=True)
    estimated_duration = fields.Integer(dump_only=True)
    days = fields.Nested(WorkoutDaySchema, many=True, dump_only=True)


# --- input ---

class ExerciseEntryInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    exercise_id = fields.Integer(required=True)
    order = fields.Integer(load_default=None)
    sets = fields.Integer(load_default=3, validate=validate.Range(min=0))
    reps = fields.String(load_default="10")
    rest = fields.String(load_default="60s")
    notes = fields.String(load_default="", allow_none=True)


class _CatalogHeaderSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    description = fields.String(allow_none=True)
    category = fields.String(validate=validate.Length(max=50))
    difficulty = fields.String(validate=validate.OneOf(DIFFICULTIES))
    is_public = fields.Boolean()


class WorkoutInputSchema(_CatalogHeaderSchema):
    estimated_duration = fields.Integer(validate=validate.Range(min=1))
    exercises = fields.List(
        fields.Nested(ExerciseEntryInputSchema),
        required=True,
        validate=validate.Length(min=1, error="At least one exercise is required"),
    )


class WorkoutDayInputSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    day_number = fields.Integer(required=True, validate=validate.Range(min=1))
    name = fields.String(required=True, validate=validate.Length(min=1, max=150))
    is_rest_day = fields.Boolean(load_default=False)
    estimated_duration = fields.Integer(allow_none=True, load_default=None)
    notes = fields.String(load_default="", allow_none=True)
    exercises = fields.List(fields.Nested(ExerciseEntryInputSchema), load_default=None)

    @validates_schema
    def validate_exercises(self, data, **kwargs):
        if not data.get("is_rest_day") and data.get("exercises") is None:
            raise ValidationError("Non-rest days must have an exercises list", "exercises")


class WorkoutProgramInputSchema(_CatalogHeaderSchema):
    days = fields.List(
        fields.Nested(WorkoutDayInputSchema),
        required=True,
        validate=validate.Length(min=1, error="At least one day is required"),
    )

    @validates_schema
    def validate_day_numbers(self, data, **kwargs):
        numbers = [day["day_number"] for day in data.get("days") or []]
        if len(numbers) != len(set(numbers)):
            raise ValidationError("Day numbers must be unique", "days")


class StatusSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    status = fields.String(required=True, validate=validate.OneOf(CATALOG_STATUSES))


class WorkoutImportSchema(ma.Schema):
    class Meta:
        unknown = EXCLUDE

    workouts = fields.List(fields.Dict(), required=True)
