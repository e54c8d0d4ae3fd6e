from flask import Blueprint, request

from ..errors import ValidationError
from ..models import AgeCategory, AttemptStatus, LiftType, WeightCategory
from ..real_time.websocket import competition_realtime
from ..services.result_service import ResultService
from ..utils.scoring import ScoringCalculator
from ..utils.validation import (
    parse_enum,
    parse_id_list,
    parse_int,
    parse_optional_int,
    parse_weight,
    require_fields,
)
from .common import api_success, handle_error, require_user

results_bp = Blueprint("results", __name__, url_prefix="/results")

ACTION = "manage results"


def _parse_start_weights(value):
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError("startWeights must be an object")
    return {
        lift: parse_weight(value.get(lift.value), f"startWeights.{lift.value}")
        for lift in LiftType
    }


@results_bp.route("/weigh-in", methods=["POST"])
def save_weigh_in():
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}
        require_fields(
            data, "athleteId", "nominationId", "competitionId",
            "ageCategory", "weightCategory",
        )

        result = ResultService.save_weigh_in(
            athlete_id=parse_int(data["athleteId"], "athleteId", minimum=1),
            nomination_id=parse_int(data["nominationId"], "nominationId", minimum=1),
            competition_id=parse_int(data["competitionId"], "competitionId", minimum=1),
            bodyweight=parse_weight(data.get("bodyweight"), "bodyweight"),
            lot_number=parse_optional_int(data.get("lotNumber"), "lotNumber", minimum=1),
            start_weights=_parse_start_weights(data.get("startWeights")),
            flight_id=parse_optional_int(data.get("flightId"), "flightId", minimum=1),
            group_id=parse_optional_int(data.get("groupId"), "groupId", minimum=1),
            age_category=parse_enum(AgeCategory, data["ageCategory"], "ageCategory"),
            weight_category=parse_enum(WeightCategory, data["weightCategory"], "weightCategory"),
        )
        payload = result.to_dict()
        competition_realtime.broadcast_result_update(result.competition_id, payload)
        return api_success(payload)
    except Exception as e:
        return handle_error(e, "Server error while saving weigh-in data")


@results_bp.route("/attempt", methods=["POST"])
def save_attempt():
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}
        require_fields(
            data, "athleteId", "competitionId", "liftType",
            "attemptNumber", "weight", "status",
        )

        result = ResultService.save_attempt(
            athlete_id=parse_int(data["athleteId"], "athleteId", minimum=1),
            competition_id=parse_int(data["competitionId"], "competitionId", minimum=1),
            lift=parse_enum(LiftType, data["liftType"], "liftType"),
            attempt_number=parse_int(data["attemptNumber"], "attemptNumber", minimum=1, maximum=3),
            weight=parse_weight(data["weight"], "weight"),
            status=parse_enum(AttemptStatus, data["status"], "status"),
            flight_id=parse_optional_int(data.get("flightId"), "flightId", minimum=1),
            group_id=parse_optional_int(data.get("groupId"), "groupId", minimum=1),
        )
        payload = result.to_dict()
        competition_realtime.broadcast_result_update(result.competition_id, payload)
        return api_success(payload)
    except Exception as e:
        return handle_error(e, "Server error while saving attempt data")


@results_bp.route(
    "/competition/<int:competition_id>/flight/<int:flight_number>/group/<int:group_number>",
    methods=["GET"],
)
def get_results_by_competition_and_flight(competition_id, flight_number, group_number):
    try:
        require_user(ACTION)
        results = ResultService.get_results_by_flight_and_group(
            competition_id, flight_number, group_number
        )
        return api_success([r.to_dict(include_athlete=True) for r in results])
    except Exception as e:
        return handle_error(e, "Server error while fetching results")


@results_bp.route("/competition/<int:competition_id>/athletes", methods=["POST"])
def get_results_by_competition_and_athletes(competition_id):
    try:
        require_user(ACTION)
        data = request.get_json(silent=True) or {}
        athlete_ids = data.get("athleteIds")
        if not isinstance(athlete_ids, list) or not athlete_ids:
            raise ValidationError("athleteIds must be a non-empty array")

        results = ResultService.get_results_by_athletes(
            competition_id, parse_id_list(athlete_ids, "athleteIds")
        )
        return api_success([r.to_dict(include_athlete=True) for r in results])
    except Exception as e:
        return handle_error(e, "Server error while fetching results")


@results_bp.route("/rankings/competition/<int:competition_id>", methods=["GET"])
def get_competition_rankings(competition_id):
    """Standings within each age and weight category, computed without writing"""
    try:
        standings = ScoringCalculator.competition_standings(competition_id)
        data = []
        for result, place in standings:
            entry = result.to_dict(include_athlete=True)
            entry["place"] = place
            data.append(entry)
        return api_success(data)
    except Exception as e:
        return handle_error(e, "Server error while calculating rankings")


@results_bp.route("/rankings/competition/<int:competition_id>/recalculate", methods=["POST"])
def recalculate_competition_rankings(competition_id):
    """Store the current places on every result of the competition"""
    try:
        require_user(ACTION)
        results = ScoringCalculator.calculate_competition_rankings(competition_id)
        return api_success([r.to_dict(include_athlete=True) for r in results])
    except Exception as e:
        return handle_error(e, "Server error while storing rankings")
