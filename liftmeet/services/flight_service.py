"""
Flight Service - competition-day scheduling
Creates flights with their groups, assigns nominations to groups and keeps
the stored flight status in line with what the results say.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from ..errors import NotFound, ValidationError
from ..extensions import db
from ..models import Competition, Flight, FlightStatus, Group, Nomination, Result
from ..utils.flight_status import calculate_flight_status
from ..utils.validation import (
    parse_datetime,
    parse_enum,
    parse_id_list,
    parse_int,
    require_fields,
)

logger = logging.getLogger(__name__)

NUMBER_IN_USE = "Flight or group number already in use for this competition"


@dataclass
class GroupSpec:
    number: int
    name: str
    start_time: Optional[datetime] = None
    nomination_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "GroupSpec":
        if not isinstance(data, dict):
            raise ValidationError("Each group must be an object")
        require_fields(data, "number", "name")
        name = str(data["name"]).strip()
        if not name:
            raise ValidationError("Group name cannot be empty")
        return cls(
            number=parse_int(data["number"], "group number", minimum=1),
            name=name,
            start_time=parse_datetime(data.get("startTime"), "group startTime"),
            nomination_ids=parse_id_list(data.get("nominationIds"), "nominationIds"),
        )


def parse_group_specs(groups) -> List[GroupSpec]:
    if groups is None:
        return []
    if not isinstance(groups, list):
        raise ValidationError("groups must be an array")
    return [GroupSpec.from_payload(g) for g in groups]


class FlightService:

    @staticmethod
    def get_flight(flight_id: int) -> Flight:
        flight = db.session.get(Flight, flight_id)
        if not flight:
            raise NotFound("Flight not found")
        return flight

    @staticmethod
    def load_flight(flight_id: int) -> Flight:
        """Flight with groups, their nominations and each nomination's athlete."""
        flight = db.session.get(
            Flight,
            flight_id,
            options=[
                selectinload(Flight.groups)
                .selectinload(Group.nominations)
                .joinedload(Nomination.athlete)
            ],
            populate_existing=True,
        )
        if not flight:
            raise NotFound("Flight not found")
        return flight

    @staticmethod
    def get_flights_by_competition(competition_id: int) -> List[Flight]:
        return (
            Flight.query.options(
                selectinload(Flight.groups)
                .selectinload(Group.nominations)
                .joinedload(Nomination.athlete)
            )
            .filter(Flight.competition_id == competition_id)
            .order_by(Flight.number.asc())
            .all()
        )

    @staticmethod
    def _assign_groups(flight: Flight, group_specs: List[GroupSpec]) -> None:
        """Create each group under the flight and point its nominations at it."""
        for spec in group_specs:
            group = Group(
                flight_id=flight.id,
                number=spec.number,
                name=spec.name,
                start_time=spec.start_time,
            )
            db.session.add(group)
            db.session.flush()

            if not spec.nomination_ids:
                continue

            wanted = set(spec.nomination_ids)
            found = {
                nid for (nid,) in db.session.query(Nomination.id).filter(
                    Nomination.id.in_(wanted),
                    Nomination.competition_id == flight.competition_id,
                )
            }
            missing = sorted(wanted - found)
            if missing:
                raise NotFound(
                    "Nomination(s) not found in this competition: "
                    + ", ".join(str(m) for m in missing)
                )

            Nomination.query.filter(Nomination.id.in_(wanted)).update(
                {Nomination.group_id: group.id}, synchronize_session=False
            )

    @staticmethod
    def create_flight(
        competition_id: int,
        number: int,
        start_time: Optional[datetime],
        group_specs: List[GroupSpec],
    ) -> Flight:
        """
        Create a pending flight with its groups in one transaction.
        Any failure rolls back the flight, its groups and every nomination
        reassignment made so far.
        """
        if number < 1:
            raise ValidationError("Flight number must be at least 1")
        if not db.session.get(Competition, competition_id):
            raise NotFound("Competition not found")

        try:
            flight = Flight(
                competition_id=competition_id,
                number=number,
                start_time=start_time,
                status=FlightStatus.PENDING,
            )
            db.session.add(flight)
            db.session.flush()

            FlightService._assign_groups(flight, group_specs)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning(
                "Duplicate flight/group number creating flight %d for competition %d",
                number, competition_id,
            )
            raise ValidationError(NUMBER_IN_USE)
        except Exception:
            db.session.rollback()
            raise

        logger.info(
            "Created flight %d (number %d) for competition %d with %d groups",
            flight.id, number, competition_id, len(group_specs),
        )
        return FlightService.load_flight(flight.id)

    @staticmethod
    def update_flight(
        flight_id: int,
        start_time: Optional[datetime],
        group_specs: List[GroupSpec],
    ) -> Flight:
        """
        Replace a flight's start time and its whole group layout.

        This is a total replacement, not a merge: every existing group is
        deleted and its nominations unassigned before the supplied groups are
        created. The flight number never changes.
        """
        flight = FlightService.get_flight(flight_id)

        try:
            flight.start_time = start_time

            existing_groups = Group.query.filter(Group.flight_id == flight.id).all()
            existing_group_ids = [g.id for g in existing_groups]
            if existing_group_ids:
                Nomination.query.filter(Nomination.group_id.in_(existing_group_ids)).update(
                    {Nomination.group_id: None}, synchronize_session="fetch"
                )
                # Results keep their flight but lose the reference to a discarded group
                Result.query.filter(Result.group_id.in_(existing_group_ids)).update(
                    {Result.group_id: None}, synchronize_session="fetch"
                )
                for group in existing_groups:
                    db.session.delete(group)
            db.session.flush()
            db.session.expire(flight, ["groups"])

            FlightService._assign_groups(flight, group_specs)
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            logger.warning("Duplicate group number updating flight %d", flight_id)
            raise ValidationError(NUMBER_IN_USE)
        except Exception:
            db.session.rollback()
            raise

        logger.info("Updated flight %d with %d groups", flight_id, len(group_specs))
        return FlightService.load_flight(flight_id)

    @staticmethod
    def update_flight_status(flight_id: int, status: FlightStatus) -> Flight:
        """
        Store a status chosen by an official.

        Only a 'completed' claim is audited against the results; any other
        status is accepted as given.
        """
        flight = FlightService.get_flight(flight_id)

        if status == FlightStatus.COMPLETED:
            derived = calculate_flight_status(flight.id)
            if derived != FlightStatus.COMPLETED:
                raise ValidationError(
                    "Cannot mark flight as completed until all lifts are finished"
                )

        flight.status = status
        db.session.commit()
        logger.info("Flight %d status set to %s", flight_id, status.value)
        return flight

    @staticmethod
    def recalculate_flight_status(flight_id: int) -> Flight:
        """Overwrite the stored status with the derived one."""
        flight = FlightService.get_flight(flight_id)
        previous = flight.status
        flight.status = calculate_flight_status(flight.id)
        db.session.commit()
        logger.info(
            "Flight %d status recalculated: %s -> %s",
            flight_id, previous.value if previous else None, flight.status.value,
        )
        return flight


def parse_flight_status(value) -> FlightStatus:
    if value is None:
        raise ValidationError("Missing required field(s): status")
    return parse_enum(FlightStatus, value, "status")
