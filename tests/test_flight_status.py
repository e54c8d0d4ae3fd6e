"""
Tests for flight status inference
"""
from liftmeet.extensions import db
from liftmeet.models import (
    AgeCategory,
    AttemptStatus,
    Flight,
    FlightStatus,
    Group,
    LiftType,
    Nomination,
    Result,
    WeightCategory,
)
from liftmeet.utils.flight_status import (
    calculate_flight_status,
    derive_flight_status,
    result_has_started,
    result_is_complete,
)


def _result(nomination_id, **kwargs):
    return Result.skeleton(
        nomination_id=nomination_id,
        age_category=AgeCategory.OPEN,
        weight_category=WeightCategory.U83,
        **kwargs,
    )


def _judge_everything(result, status=AttemptStatus.GOOD):
    for lift in LiftType:
        for slot in range(3):
            attempt = result.attempt_slot(lift, slot)
            attempt.weight = 100.0 + slot * 5
            attempt.status = status


class TestDeriveFlightStatus:

    def test_no_nominations_is_pending(self):
        assert derive_flight_status([], []) == FlightStatus.PENDING

    def test_nominations_without_results_is_pending(self):
        assert derive_flight_status([Nomination(id=1)], []) == FlightStatus.PENDING

    def test_empty_results_are_pending(self):
        nominations = [Nomination(id=1), Nomination(id=2)]
        results = [_result(1), _result(2)]
        assert derive_flight_status(nominations, results) == FlightStatus.PENDING

    def test_bodyweight_alone_starts_the_flight(self):
        nominations = [Nomination(id=1), Nomination(id=2)]
        results = [_result(1, bodyweight=82.4), _result(2)]
        assert derive_flight_status(nominations, results) == FlightStatus.IN_PROGRESS

    def test_declared_weight_starts_the_flight(self):
        result = _result(1)
        result.attempt_slot(LiftType.SQUAT, 0).weight = 150.0
        assert result_has_started(result)
        assert derive_flight_status([Nomination(id=1)], [result]) == FlightStatus.IN_PROGRESS

    def test_all_judged_is_completed(self):
        nominations = [Nomination(id=1), Nomination(id=2)]
        first, second = _result(1, bodyweight=80.0), _result(2, bodyweight=90.0)
        _judge_everything(first)
        _judge_everything(second, AttemptStatus.NO_GOOD)
        assert derive_flight_status(nominations, [first, second]) == FlightStatus.COMPLETED

    def test_nomination_without_result_blocks_completion(self):
        nominations = [Nomination(id=1), Nomination(id=2)]
        finished = _result(1, bodyweight=80.0)
        _judge_everything(finished)
        assert derive_flight_status(nominations, [finished]) == FlightStatus.IN_PROGRESS

    def test_pending_attempt_is_not_judged(self):
        result = _result(1, bodyweight=80.0)
        _judge_everything(result)
        result.attempt_slot(LiftType.DEADLIFT, 2).status = AttemptStatus.PENDING
        assert not result_is_complete(result)
        assert derive_flight_status([Nomination(id=1)], [result]) == FlightStatus.IN_PROGRESS


class TestCalculateFlightStatus:

    def _flight_with_group(self, competition, nominations):
        flight = Flight(competition_id=competition.id, number=1)
        db.session.add(flight)
        db.session.flush()
        group = Group(flight_id=flight.id, number=1, name="A")
        db.session.add(group)
        db.session.flush()
        for nomination in nominations:
            nomination.group_id = group.id
        db.session.commit()
        return flight

    def test_flight_without_groups_is_pending(self, factory):
        competition = factory.create_competition()
        flight = Flight(competition_id=competition.id, number=1)
        db.session.add(flight)
        db.session.commit()
        assert calculate_flight_status(flight.id) == FlightStatus.PENDING

    def test_only_grouped_nominations_count(self, factory):
        competition = factory.create_competition()
        (a1, n1), (a2, n2) = factory.create_nominated_athletes(competition, 2)
        flight = self._flight_with_group(competition, [n1])

        # A result for an athlete outside the flight does not start it
        db.session.add(_result(n2.id, athlete_id=a2.id, competition_id=competition.id, bodyweight=90.0))
        db.session.commit()
        assert calculate_flight_status(flight.id) == FlightStatus.PENDING

        finished = _result(n1.id, athlete_id=a1.id, competition_id=competition.id, bodyweight=82.0)
        _judge_everything(finished)
        db.session.add(finished)
        db.session.commit()
        assert calculate_flight_status(flight.id) == FlightStatus.COMPLETED

    def test_calculation_does_not_write(self, factory):
        competition = factory.create_competition()
        (athlete, nomination), = factory.create_nominated_athletes(competition, 1)
        flight = self._flight_with_group(competition, [nomination])
        db.session.add(_result(
            nomination.id, athlete_id=athlete.id, competition_id=competition.id, bodyweight=82.0,
        ))
        db.session.commit()

        assert calculate_flight_status(flight.id) == FlightStatus.IN_PROGRESS
        db.session.expire_all()
        assert db.session.get(Flight, flight.id).status == FlightStatus.PENDING
