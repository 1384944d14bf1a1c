from flask import request

from fitcoach.utils.errors import BadRequest


def load_json(schema, partial=False):
    """Validate the JSON body of the current request with ``schema``."""
    if not request.is_json:
        raise BadRequest("Missing JSON")
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Invalid JSON body")
    return schema.load(data, partial=partial)


def query_int(name):
    """An optional integer query parameter; a non-numeric value is a 400."""
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise BadRequest(f"Invalid {name}")
