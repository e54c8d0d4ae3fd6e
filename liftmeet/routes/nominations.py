from flask import Blueprint, request

from ..models import AgeCategory, WeightCategory
from ..services.nomination_service import NominationService
from ..utils.validation import parse_enum, parse_int, require_fields
from .common import api_success, handle_error, require_user

nominations_bp = Blueprint("nominations", __name__, url_prefix="/nominations")

ACTION = "manage nominations"


@nominations_bp.route("/competition/<int:competition_id>", methods=["GET"])
def get_nominations_by_competition(competition_id):
    try:
        nominations = NominationService.get_nominations_by_competition(competition_id)
        return api_success([n.to_dict() for n in nominations])
    except Exception as e:
        return handle_error(e, "Server error while fetching nominations")


@nominations_bp.route("", methods=["POST"])
def create_nomination():
    """Enter an athlete after checking the competition's age categories"""
    try:
        user_id = require_user(ACTION)
        data = request.get_json(silent=True) or {}
        require_fields(data, "athleteId", "competitionId", "weightCategory", "ageCategory")

        nomination = NominationService.create_nomination(
            nominated_by=user_id,
            athlete_id=parse_int(data["athleteId"], "athleteId", minimum=1),
            competition_id=parse_int(data["competitionId"], "competitionId", minimum=1),
            weight_category=parse_enum(WeightCategory, data["weightCategory"], "weightCategory"),
            age_category=parse_enum(AgeCategory, data["ageCategory"], "ageCategory"),
        )
        return api_success(nomination.to_dict(), 201)
    except Exception as e:
        return handle_error(e, "Server error while creating nomination")


@nominations_bp.route("/<int:nomination_id>", methods=["DELETE"])
def delete_nomination(nomination_id):
    try:
        require_user(ACTION)
        NominationService.delete_nomination(nomination_id)
        return api_success({"id": nomination_id})
    except Exception as e:
        return handle_error(e, "Server error while deleting nomination")
