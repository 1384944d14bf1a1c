from datetime import date

from flask import Blueprint, jsonify, render_template, request

from fitcoach.models import ClientWorkout, ClientWorkoutProgram
from fitcoach.services.calendar import (
    add_days, build_schedule, group_by_date, parse_calendar_date, week_bounds,
)
from fitcoach.services.visibility import scoped_assignments
from fitcoach.utils.decorators import login_required
from fitcoach.utils.errors import BadRequest
from fitcoach.utils.validation import query_int

schedule_bp = Blueprint("schedule", __name__)


def _date_arg(name, default=None):
    value = request.args.get(name)
    if not value:
        return default
    try:
        return parse_calendar_date(value)
    except ValueError:
        raise BadRequest(f"Invalid {name} date, expected YYYY-MM-DD")


def load_schedule(user, start, end, client_id=None):
    workouts = (
        scoped_assignments(ClientWorkout, user, client_id)
        .filter(ClientWorkout.scheduled_date >= start, ClientWorkout.scheduled_date <= end)
        .all()
    )
    # a program that started before the range can still have days inside it
    programs = (
        scoped_assignments(ClientWorkoutProgram, user, client_id)
        .filter(ClientWorkoutProgram.start_date <= end)
        .all()
    )
    return build_schedule(workouts, programs, start, end)


@schedule_bp.route("/api/schedule", methods=["GET"])
@login_required
def schedule_api(current_user):
    week_start, week_end = week_bounds(date.today())
    start = _date_arg("start", week_start)
    end = _date_arg("end", week_end if start == week_start else add_days(start, 6))
    if end < start:
        raise BadRequest("end must not be before start")

    cells = load_schedule(current_user, start, end, query_int("client_id"))
    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "days": [cell.to_dict() for cell in cells],
    }), 200


@schedule_bp.route("/schedule", methods=["GET"])
@login_required
def schedule_page(current_user):
    start, end = week_bounds(_date_arg("week", date.today()))
    cells = load_schedule(current_user, start, end)
    return render_template(
        "schedule/week.html",
        user=current_user,
        start=start,
        end=end,
        days=group_by_date(cells, start, end),
        previous_week=add_days(start, -7),
        next_week=add_days(start, 7),
        today=date.today(),
    )
