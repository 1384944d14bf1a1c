from datetime import date, datetime

from marshmallow import fields, ValidationError

from fitcoach.services.calendar import parse_calendar_date


class CalendarDate(fields.Field):
    """A date given as ``YYYY-MM-DD`` or a full ISO datetime; the calendar day is kept as written."""

    default_error_messages = {"invalid": "Not a valid date."}

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return parse_calendar_date(value).isoformat()

    def _deserialize(self, value, attr, data, **kwargs):
        try:
            return parse_calendar_date(value)
        except ValueError:
            raise self.make_error("invalid")


class CommaList(fields.List):
    """A list of strings that also accepts a single comma-separated string."""

    def __init__(self, **kwargs):
        super().__init__(fields.String(), **kwargs)

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str):
            value = [part.strip() for part in value.split(",") if part.strip()]
        if not isinstance(value, (list, tuple)):
            raise ValidationError("Not a valid list.")
        return super()._deserialize(value, attr, data, **kwargs)


class DateOrDateTime(fields.DateTime):
    """A DateTime that also accepts a bare ``YYYY-MM-DD`` (midnight)."""

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, str) and len(value.strip()) == 10:
            try:
                day = date.fromisoformat(value.strip())
            except ValueError:
                raise self.make_error("invalid", input=value, obj_type=self.OBJ_TYPE)
            return datetime(day.year, day.month, day.day)
        return super()._deserialize(value, attr, data, **kwargs)
