"""
Result Service - weigh-ins and attempts (the scoring ledger)
One result row per athlete per competition, created lazily on first write.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload
from sqlalchemy.orm.exc import StaleDataError

from ..errors import ConflictError, NotFound, ValidationError
from ..extensions import db
from ..models import (
    AgeCategory,
    AttemptStatus,
    Flight,
    Group,
    LiftType,
    Nomination,
    Result,
    WeightCategory,
)
from ..utils.scoring import ScoringCalculator

logger = logging.getLogger(__name__)

STALE_RESULT = "Result was modified by another scorer. Reload and resubmit."


def _commit_result(result: Result) -> None:
    # Touch the row so its version is checked and bumped even when only
    # attempt rows changed
    result.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        logger.warning("Concurrent update rejected for result %s", result.id)
        raise ConflictError(STALE_RESULT)


class ResultService:

    @staticmethod
    def find_result(athlete_id: int, competition_id: int) -> Optional[Result]:
        return Result.query.filter_by(
            athlete_id=athlete_id, competition_id=competition_id
        ).first()

    @staticmethod
    def get_or_create_result(
        athlete_id: int,
        competition_id: int,
        nomination_id: int,
        age_category: Optional[AgeCategory] = None,
        weight_category: Optional[WeightCategory] = None,
    ) -> Result:
        """
        Return the athlete's result for the competition, creating an empty one
        if needed. Categories are only required when a row has to be created.

        Creation is committed on its own; if a concurrent request created the
        row first the unique constraint rejects ours and the winner is re-read.
        Call this before staging any other change in the session.
        """
        result = ResultService.find_result(athlete_id, competition_id)
        if result:
            return result

        if age_category is None or weight_category is None:
            raise ValidationError(
                "ageCategory and weightCategory are required when creating a new result"
            )

        result = Result.skeleton(
            athlete_id=athlete_id,
            competition_id=competition_id,
            nomination_id=nomination_id,
            age_category=age_category,
            weight_category=weight_category,
        )
        db.session.add(result)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            result = ResultService.find_result(athlete_id, competition_id)
            if result is None:
                raise
            logger.info(
                "Result for athlete %d in competition %d was created concurrently",
                athlete_id, competition_id,
            )
            return result

        logger.info(
            "Created result %d for athlete %d in competition %d",
            result.id, athlete_id, competition_id,
        )
        return result

    @staticmethod
    def save_weigh_in(
        athlete_id: int,
        nomination_id: int,
        competition_id: int,
        bodyweight: Optional[float],
        lot_number: Optional[int],
        start_weights: Optional[Dict[LiftType, Optional[float]]],
        flight_id: Optional[int],
        group_id: Optional[int],
        age_category: AgeCategory,
        weight_category: WeightCategory,
    ) -> Result:
        """
        Record a weigh-in. Re-submitting overwrites the weigh-in, the
        cross-references and the categories, and declared start weights
        replace attempt 1 of each lift.
        """
        result = ResultService.get_or_create_result(
            athlete_id, competition_id, nomination_id, age_category, weight_category
        )

        now = datetime.utcnow()
        result.bodyweight = bodyweight
        result.lot_number = lot_number
        result.weighed_in_at = now
        result.nomination_id = nomination_id
        result.flight_id = flight_id
        result.group_id = group_id
        result.age_category = age_category
        result.weight_category = weight_category

        if start_weights:
            for lift in LiftType:
                attempt = result.attempt_slot(lift, 0)
                attempt.weight = start_weights.get(lift)
                attempt.status = AttemptStatus.PENDING
                attempt.timestamp = now

        _commit_result(result)
        logger.info(
            "Weigh-in saved for athlete %d in competition %d: %s kg, lot %s",
            athlete_id, competition_id, bodyweight, lot_number,
        )
        return result

    @staticmethod
    def save_attempt(
        athlete_id: int,
        competition_id: int,
        lift: LiftType,
        attempt_number: int,
        weight: float,
        status: AttemptStatus,
        flight_id: Optional[int] = None,
        group_id: Optional[int] = None,
    ) -> Result:
        """Record one attempt (1-based number) and update best/total on a heavier good lift."""
        if not 1 <= attempt_number <= 3:
            raise ValidationError("attemptNumber must be 1, 2 or 3")

        nomination = Nomination.query.filter_by(
            athlete_id=athlete_id, competition_id=competition_id
        ).first()
        if not nomination:
            raise NotFound("Nomination not found for athlete")

        result = ResultService.get_or_create_result(
            athlete_id,
            competition_id,
            nomination.id,
            nomination.age_category,
            nomination.weight_category,
        )

        if flight_id is not None:
            result.flight_id = flight_id
        if group_id is not None:
            result.group_id = group_id

        best_changed = ScoringCalculator.record_attempt(
            result, lift, attempt_number - 1, weight, status
        )

        _commit_result(result)
        logger.info(
            "Attempt %d %s saved for athlete %d: %s kg %s%s",
            attempt_number, lift.value, athlete_id, weight, status.value,
            " (new best)" if best_changed else "",
        )
        return result

    @staticmethod
    def get_results_by_flight_and_group(
        competition_id: int, flight_number: int, group_number: int
    ) -> List[Result]:
        """Results of the athletes currently assigned to a group, by lot number."""
        flight = Flight.query.filter_by(
            competition_id=competition_id, number=flight_number
        ).first()
        group = None
        if flight:
            group = Group.query.filter_by(flight_id=flight.id, number=group_number).first()

        results = []
        if group:
            results = (
                Result.query.options(joinedload(Result.athlete))
                .join(Nomination, Result.nomination_id == Nomination.id)
                .filter(
                    Result.competition_id == competition_id,
                    Nomination.group_id == group.id,
                )
                .order_by(Result.lot_number.is_(None), Result.lot_number.asc())
                .all()
            )

        if not results:
            raise NotFound("No results found for this competition, flight, and group")
        return results

    @staticmethod
    def get_results_by_athletes(competition_id: int, athlete_ids: List[int]) -> List[Result]:
        if not athlete_ids:
            raise ValidationError("athleteIds must be a non-empty array")
        return (
            Result.query.options(joinedload(Result.athlete))
            .filter(
                Result.competition_id == competition_id,
                Result.athlete_id.in_(athlete_ids),
            )
            .order_by(Result.lot_number.is_(None), Result.lot_number.asc())
            .all()
        )
