"""
Flight status inference.

A flight's status is never stored by hand; it is read off the data. The
classification only looks at nominations assigned to the flight's groups and
the results recorded against those nominations:

- pending:    nobody assigned, no results, or no result shows a weigh-in
              bodyweight or any attempt weight
- completed:  every assigned nomination has a result whose three lifts each
              have three judged (good / noGood) attempts
- inProgress: anything in between
"""

from typing import Iterable, List

from ..extensions import db
from ..models import (
    ATTEMPTS_PER_LIFT,
    FlightStatus,
    Group,
    LiftType,
    Nomination,
    Result,
)


def result_has_started(result: Result) -> bool:
    if result.bodyweight is not None:
        return True
    return any(attempt.weight is not None for attempt in result.attempts)


def result_is_complete(result: Result) -> bool:
    for lift in LiftType:
        attempts = result.attempts_for(lift)
        if len(attempts) != ATTEMPTS_PER_LIFT:
            return False
        if not all(attempt.is_judged for attempt in attempts):
            return False
    return True


def derive_flight_status(
    nominations: Iterable[Nomination], results: Iterable[Result]
) -> FlightStatus:
    """Pure classification over already-loaded rows."""
    nominations = list(nominations)
    if not nominations:
        return FlightStatus.PENDING

    results = list(results)
    if not results:
        return FlightStatus.PENDING

    if not any(result_has_started(r) for r in results):
        return FlightStatus.PENDING

    by_nomination = {r.nomination_id: r for r in results}
    all_completed = all(
        n.id in by_nomination and result_is_complete(by_nomination[n.id])
        for n in nominations
    )
    return FlightStatus.COMPLETED if all_completed else FlightStatus.IN_PROGRESS


def calculate_flight_status(flight_id: int) -> FlightStatus:
    """Load a flight's nominations and results and classify them (read-only)."""
    group_ids: List[int] = [
        gid for (gid,) in db.session.query(Group.id).filter(Group.flight_id == flight_id)
    ]
    if not group_ids:
        return FlightStatus.PENDING

    nominations = Nomination.query.filter(Nomination.group_id.in_(group_ids)).all()
    if not nominations:
        return FlightStatus.PENDING

    results = Result.query.filter(
        Result.nomination_id.in_([n.id for n in nominations])
    ).all()
    return derive_flight_status(nominations, results)
