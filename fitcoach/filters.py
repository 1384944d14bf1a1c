from datetime import date, datetime


def format_date(value, fmt="%b %d, %Y"):
    """Format a date or datetime; empty values render as an empty string."""
    if not value:
        return ""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime(fmt)


def weekday_name(value):
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime("%A") if value else ""


def status_class(status):
    return {
        "SCHEDULED": "status-scheduled",
        "IN_PROGRESS": "status-in-progress",
        "COMPLETED": "status-completed",
        "MISSED": "status-missed",
        "CANCELLED": "status-cancelled",
    }.get(status, "status-unknown")


def register_filters(app):
    """Register custom Jinja2 filters."""
    app.jinja_env.filters['format_date'] = format_date
    app.jinja_env.filters['weekday_name'] = weekday_name
    app.jinja_env.filters['status_class'] = status_class
