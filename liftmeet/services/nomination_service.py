"""
Nomination Service - entering athletes into competitions
"""

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import (
    AgeCategory,
    Athlete,
    Competition,
    Nomination,
    NominationStatus,
    Result,
    WeightCategory,
)
from ..utils.eligibility import is_eligible_for_age_category

logger = logging.getLogger(__name__)

ALREADY_NOMINATED = "Athlete is already nominated for this competition"


class NominationService:

    @staticmethod
    def create_nomination(
        nominated_by: int,
        athlete_id: int,
        competition_id: int,
        weight_category: WeightCategory,
        age_category: AgeCategory,
    ) -> Nomination:
        athlete = db.session.get(Athlete, athlete_id)
        if not athlete:
            raise NotFound("Athlete not found")

        competition = db.session.get(Competition, competition_id)
        if not competition:
            raise NotFound("Competition not found")

        if not competition.supports_age_category(age_category):
            raise ValidationError("Competition does not support age category")

        if not is_eligible_for_age_category(athlete.date_of_birth, age_category):
            raise ValidationError("Athlete not in age category")

        if Nomination.query.filter_by(athlete_id=athlete_id, competition_id=competition_id).first():
            raise ValidationError(ALREADY_NOMINATED)

        nomination = Nomination(
            athlete_id=athlete_id,
            competition_id=competition_id,
            weight_category=weight_category,
            age_category=age_category,
            status=NominationStatus.PENDING,
            nominated_by=nominated_by,
        )
        db.session.add(nomination)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError(ALREADY_NOMINATED)

        logger.info(
            "Nominated athlete %d for competition %d (%s, %s)",
            athlete_id, competition_id, age_category.value, weight_category.value,
        )
        return nomination

    @staticmethod
    def get_nominations_by_competition(competition_id: int) -> List[Nomination]:
        return (
            Nomination.query.options(joinedload(Nomination.athlete))
            .filter_by(competition_id=competition_id)
            .order_by(Nomination.id.asc())
            .all()
        )

    @staticmethod
    def delete_nomination(nomination_id: int) -> None:
        nomination = db.session.get(Nomination, nomination_id)
        if not nomination:
            raise NotFound("Nomination not found")

        if Result.query.filter_by(nomination_id=nomination_id).first():
            raise ValidationError("Cannot delete a nomination that already has results")

        db.session.delete(nomination)
        db.session.commit()
        logger.info("Deleted nomination %d", nomination_id)
