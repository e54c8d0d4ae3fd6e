import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..extensions import db
from ..models import AttemptStatus, LiftType, Result

logger = logging.getLogger(__name__)


class ScoringCalculator:
    """Best-lift, total and placing rules for powerlifting results"""

    @staticmethod
    def record_attempt(
        result: Result,
        lift: LiftType,
        slot: int,
        weight: Optional[float],
        status: AttemptStatus,
        timestamp: Optional[datetime] = None,
    ) -> bool:
        """
        Write one attempt slot and apply the best-lift rule.

        The best only moves up: a good lift replaces it when heavier than the
        current best (null counts as 0). Missed and pending attempts never
        touch best or total. Returns True when the best changed.
        """
        attempt = result.attempt_slot(lift, slot)
        attempt.weight = weight
        attempt.status = status
        attempt.timestamp = timestamp or datetime.utcnow()

        if status != AttemptStatus.GOOD or weight is None:
            return False

        current_best = result.get_best(lift) or 0
        if weight > current_best:
            result.set_best(lift, weight)
            result.calculate_totals()
            return True
        return False

    @staticmethod
    def _ranking_key(result: Result):
        # Heavier total first, then lighter lifter, then earlier lot
        return (
            -result.total,
            result.bodyweight if result.bodyweight is not None else float("inf"),
            result.lot_number if result.lot_number is not None else float("inf"),
        )

    @staticmethod
    def rank(results: List[Result]) -> List[Tuple[Result, Optional[int]]]:
        """
        Place results within their (age category, weight category) bracket
        without touching the rows. Results with no total are unplaced.
        Returned bracket by bracket, best place first.
        """
        brackets: Dict[tuple, List[Result]] = {}
        unplaced: List[Result] = []
        for result in results:
            if result.total is None:
                unplaced.append(result)
                continue
            key = (result.age_category, result.weight_category)
            brackets.setdefault(key, []).append(result)

        placed = []
        for bracket in brackets.values():
            bracket.sort(key=ScoringCalculator._ranking_key)
            placed.extend((result, place) for place, result in enumerate(bracket, 1))
        placed.extend((result, None) for result in unplaced)

        def sort_key(entry):
            result, place = entry
            return (
                result.age_category.value,
                result.weight_category.value,
                place is None,
                place or 0,
            )

        return sorted(placed, key=sort_key)

    @staticmethod
    def assign_places(results: List[Result]) -> None:
        for result, place in ScoringCalculator.rank(results):
            result.place = place

    @staticmethod
    def competition_standings(competition_id: int) -> List[Tuple[Result, Optional[int]]]:
        """Current standings, computed on read; stored places are left alone."""
        results = Result.query.filter_by(competition_id=competition_id).all()
        return ScoringCalculator.rank(results)

    @staticmethod
    def calculate_competition_rankings(competition_id: int) -> List[Result]:
        """Persist every result's place and return them in standings order."""
        standings = ScoringCalculator.competition_standings(competition_id)
        for result, place in standings:
            result.place = place
        db.session.commit()
        logger.info(
            "Stored places for %d results in competition %d", len(standings), competition_id
        )
        return [result for result, _ in standings]
