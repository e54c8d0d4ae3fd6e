from flask import Blueprint, request

from ..real_time.websocket import competition_realtime
from ..services.flight_service import (
    FlightService,
    parse_flight_status,
    parse_group_specs,
)
from ..utils.validation import parse_datetime, parse_int, require_fields
from .common import api_success, handle_error, require_user

flights_bp = Blueprint("flights", __name__, url_prefix="/flights")

ACTION = "manage flights"


def _broadcast(flight):
    competition_realtime.broadcast_flight_update(
        flight.competition_id, flight.to_dict(include_groups=False)
    )


@flights_bp.route("/competition/<int:competition_id>", methods=["GET"])
def get_flights_by_competition(competition_id):
    """All flights of a competition with groups and nominated athletes"""
    try:
        flights = FlightService.get_flights_by_competition(competition_id)
        return api_success([f.to_dict() for f in flights])
    except Exception as e:
        return handle_error(e, "Server error while fetching flights")


@flights_bp.route("", methods=["POST"])
def create_flight():
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}
        require_fields(data, "competitionId", "number")

        flight = FlightService.create_flight(
            competition_id=parse_int(data["competitionId"], "competitionId", minimum=1),
            number=parse_int(data["number"], "number", minimum=1),
            start_time=parse_datetime(data.get("startTime"), "startTime"),
            group_specs=parse_group_specs(data.get("groups")),
        )
        _broadcast(flight)
        return api_success(flight.to_dict(), 201)
    except Exception as e:
        return handle_error(e, "Server error while creating flight")


@flights_bp.route("/<int:flight_id>", methods=["PUT"])
def update_flight(flight_id):
    """Replace start time and the complete group layout (not a merge)"""
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}

        flight = FlightService.update_flight(
            flight_id,
            start_time=parse_datetime(data.get("startTime"), "startTime"),
            group_specs=parse_group_specs(data.get("groups")),
        )
        _broadcast(flight)
        return api_success(flight.to_dict())
    except Exception as e:
        return handle_error(e, "Server error while updating flight")


@flights_bp.route("/<int:flight_id>/status", methods=["PATCH"])
def update_flight_status(flight_id):
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}

        flight = FlightService.update_flight_status(
            flight_id, parse_flight_status(data.get("status"))
        )
        _broadcast(flight)
        return api_success(flight.to_dict(include_groups=False))
    except Exception as e:
        return handle_error(e, "Server error while updating flight status")


@flights_bp.route("/<int:flight_id>/recalculate-status", methods=["POST"])
def recalculate_flight_status(flight_id):
    try:
        require_user(ACTION)
        flight = FlightService.recalculate_flight_status(flight_id)
        _broadcast(flight)
        return api_success(flight.to_dict(include_groups=False))
    except Exception as e:
        return handle_error(e, "Server error while recalculating flight status")
