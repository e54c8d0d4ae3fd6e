from datetime import datetime
from enum import Enum
from .extensions import db


# Enums
class Gender(Enum):
    MALE = "male"
    FEMALE = "female"


class CompetitionStatus(Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class AgeCategory(Enum):
    SUB_JUNIORS = "SUB_JUNIORS"
    JUNIORS = "JUNIORS"
    OPEN = "OPEN"
    MASTERS_1 = "MASTERS_1"
    MASTERS_2 = "MASTERS_2"
    MASTERS_3 = "MASTERS_3"
    MASTERS_4 = "MASTERS_4"


class WeightCategory(Enum):
    # Female
    U43 = "u43"
    U47 = "u47"
    U52 = "u52"
    U57 = "u57"
    U63 = "u63"
    U69 = "u69"
    U76 = "u76"
    U84 = "u84"
    O84 = "o84"
    # Male
    U53 = "u53"
    U59 = "u59"
    U66 = "u66"
    U74 = "u74"
    U83 = "u83"
    U93 = "u93"
    U105 = "u105"
    U120 = "u120"
    O120 = "o120"


FEMALE_WEIGHT_CATEGORIES = (
    WeightCategory.U43, WeightCategory.U47, WeightCategory.U52,
    WeightCategory.U57, WeightCategory.U63, WeightCategory.U69,
    WeightCategory.U76, WeightCategory.U84, WeightCategory.O84,
)
MALE_WEIGHT_CATEGORIES = tuple(
    c for c in WeightCategory if c not in FEMALE_WEIGHT_CATEGORIES
)


class NominationStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class FlightStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"


class LiftType(Enum):
    SQUAT = "squat"
    BENCH = "bench"
    DEADLIFT = "deadlift"


class AttemptStatus(Enum):
    PENDING = "pending"
    GOOD = "good"
    NO_GOOD = "noGood"


ATTEMPTS_PER_LIFT = 3


def _iso(value):
    return value.isoformat() if value else None


# Collaborators owned by the wider federation system
class User(db.Model):
    """Officials who log in to run competitions"""
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Competition(db.Model):
    """A sanctioned meet that athletes are nominated into"""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date)
    location = db.Column(db.String(200))
    age_categories = db.Column(db.JSON, default=list)
    status = db.Column(db.Enum(CompetitionStatus), nullable=False, default=CompetitionStatus.UPCOMING)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    flights = db.relationship("Flight", backref="competition", lazy=True, order_by="Flight.number")

    def supports_age_category(self, age_category: AgeCategory) -> bool:
        return age_category.value in (self.age_categories or [])


class Athlete(db.Model):
    """Registered lifter"""
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=False)
    gender = db.Column(db.Enum(Gender), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "dateOfBirth": _iso(self.date_of_birth),
            "gender": self.gender.value if self.gender else None,
        }


# Competition entry
class Nomination(db.Model):
    """One athlete's entry into one competition"""
    id = db.Column(db.Integer, primary_key=True)
    athlete_id = db.Column(db.Integer, db.ForeignKey("athlete.id"), nullable=False)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id"), nullable=False)
    weight_category = db.Column(db.Enum(WeightCategory), nullable=False)
    age_category = db.Column(db.Enum(AgeCategory), nullable=False)
    status = db.Column(db.Enum(NominationStatus), nullable=False, default=NominationStatus.PENDING)
    nominated_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)
    nominated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    # Weak reference: the group does not own the nomination
    group_id = db.Column(db.Integer, db.ForeignKey("flight_group.id"), nullable=True)

    # Relationships
    athlete = db.relationship("Athlete", backref="nominations")
    competition = db.relationship("Competition", backref="nominations")

    __table_args__ = (
        db.UniqueConstraint("athlete_id", "competition_id", name="uq_nomination_athlete_competition"),
    )

    def to_dict(self, include_athlete=True):
        data = {
            "id": self.id,
            "athleteId": self.athlete_id,
            "competitionId": self.competition_id,
            "weightCategory": self.weight_category.value,
            "ageCategory": self.age_category.value,
            "status": self.status.value,
            "nominatedBy": self.nominated_by,
            "nominatedAt": _iso(self.nominated_at),
            "groupId": self.group_id,
        }
        if include_athlete:
            data["athlete"] = self.athlete.to_dict() if self.athlete else None
        return data


# Competition-day scheduling
class Flight(db.Model):
    """Numbered competition-day session"""
    id = db.Column(db.Integer, primary_key=True)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id"), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    status = db.Column(db.Enum(FlightStatus), nullable=False, default=FlightStatus.PENDING)
    start_time = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    groups = db.relationship(
        "Group", backref="flight", lazy=True,
        cascade="all, delete-orphan", order_by="Group.number",
    )

    __table_args__ = (
        db.UniqueConstraint("competition_id", "number", name="uq_flight_competition_number"),
        db.CheckConstraint("number >= 1", name="ck_flight_number_positive"),
    )

    def to_dict(self, include_groups=True):
        data = {
            "id": self.id,
            "competitionId": self.competition_id,
            "number": self.number,
            "status": self.status.value,
            "startTime": _iso(self.start_time),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if include_groups:
            data["groups"] = [group.to_dict() for group in self.groups]
        return data


class Group(db.Model):
    """Lifting-order cohort within a flight"""
    __tablename__ = "flight_group"
    id = db.Column(db.Integer, primary_key=True)
    flight_id = db.Column(db.Integer, db.ForeignKey("flight.id"), nullable=False)
    number = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(100), nullable=False)
    start_time = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Back-reference collection, not an owned list
    nominations = db.relationship("Nomination", backref="group", lazy=True, order_by="Nomination.id")

    __table_args__ = (
        db.UniqueConstraint("flight_id", "number", name="uq_group_flight_number"),
        db.CheckConstraint("number >= 1", name="ck_group_number_positive"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "flightId": self.flight_id,
            "number": self.number,
            "name": self.name,
            "startTime": _iso(self.start_time),
            "nominations": [n.to_dict() for n in self.nominations],
        }


# Scoring
class Result(db.Model):
    """Scoring record for one athlete in one competition"""
    id = db.Column(db.Integer, primary_key=True)
    athlete_id = db.Column(db.Integer, db.ForeignKey("athlete.id"), nullable=False)
    competition_id = db.Column(db.Integer, db.ForeignKey("competition.id"), nullable=False)
    nomination_id = db.Column(db.Integer, db.ForeignKey("nomination.id"), nullable=False)
    flight_id = db.Column(db.Integer, db.ForeignKey("flight.id"))
    group_id = db.Column(db.Integer, db.ForeignKey("flight_group.id"))
    age_category = db.Column(db.Enum(AgeCategory), nullable=False)
    weight_category = db.Column(db.Enum(WeightCategory), nullable=False)

    # Weigh-in
    bodyweight = db.Column(db.Float)
    lot_number = db.Column(db.Integer)
    weighed_in_at = db.Column(db.DateTime)

    # Derived
    best_squat = db.Column(db.Float)
    best_bench = db.Column(db.Float)
    best_deadlift = db.Column(db.Float)
    total = db.Column(db.Float)
    wilks = db.Column(db.Float)
    ipf_points = db.Column(db.Float)
    place = db.Column(db.Integer)

    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    athlete = db.relationship("Athlete", backref="results")
    attempts = db.relationship(
        "Attempt", backref="result", lazy=True,
        cascade="all, delete-orphan", order_by="Attempt.id",
    )

    __table_args__ = (
        db.UniqueConstraint("athlete_id", "competition_id", name="uq_result_athlete_competition"),
        db.Index("ix_result_competition_flight_group", "competition_id", "flight_id", "group_id"),
    )
    # Concurrent writers to the same row fail with StaleDataError instead of overwriting
    __mapper_args__ = {"version_id_col": version}

    @classmethod
    def skeleton(cls, **kwargs):
        """Fresh result with every attempt slot present and empty."""
        result = cls(**kwargs)
        for lift in LiftType:
            for slot in range(ATTEMPTS_PER_LIFT):
                result.attempts.append(Attempt(lift_type=lift, slot=slot))
        return result

    def attempts_for(self, lift: LiftType):
        return sorted(
            (a for a in self.attempts if a.lift_type == lift), key=lambda a: a.slot
        )

    def attempt_slot(self, lift: LiftType, slot: int):
        for attempt in self.attempts:
            if attempt.lift_type == lift and attempt.slot == slot:
                return attempt
        # Slot rows are created with the result; recreate one if it went missing
        attempt = Attempt(lift_type=lift, slot=slot)
        self.attempts.append(attempt)
        return attempt

    def get_best(self, lift: LiftType):
        return getattr(self, f"best_{lift.value}")

    def set_best(self, lift: LiftType, weight):
        setattr(self, f"best_{lift.value}", weight)

    def calculate_totals(self):
        """Total stays null until every lift has a best."""
        bests = [self.get_best(lift) for lift in LiftType]
        if all(best is not None for best in bests):
            self.total = sum(bests)
        else:
            self.total = None
        # Wilks and IPF points are filled in by an external calculator

    def to_dict(self, include_athlete=False):
        data = {
            "id": self.id,
            "athleteId": self.athlete_id,
            "competitionId": self.competition_id,
            "nominationId": self.nomination_id,
            "flightId": self.flight_id,
            "groupId": self.group_id,
            "ageCategory": self.age_category.value,
            "weightCategory": self.weight_category.value,
            "weighIn": {
                "bodyweight": self.bodyweight,
                "lotNumber": self.lot_number,
                "timestamp": _iso(self.weighed_in_at),
            },
            "attempts": {
                lift.value: [a.to_dict() for a in self.attempts_for(lift)]
                for lift in LiftType
            },
            "best": {lift.value: self.get_best(lift) for lift in LiftType},
            "total": self.total,
            "wilks": self.wilks,
            "ipfPoints": self.ipf_points,
            "place": self.place,
            "version": self.version,
            "updatedAt": _iso(self.updated_at),
        }
        if include_athlete and self.athlete:
            data["athlete"] = {
                "id": self.athlete.id,
                "firstName": self.athlete.first_name,
                "lastName": self.athlete.last_name,
            }
        return data


class Attempt(db.Model):
    """One of the three attempt slots of a lift"""
    id = db.Column(db.Integer, primary_key=True)
    result_id = db.Column(db.Integer, db.ForeignKey("result.id"), nullable=False)
    lift_type = db.Column(db.Enum(LiftType), nullable=False)
    slot = db.Column(db.Integer, nullable=False)  # 0-based
    weight = db.Column(db.Float)
    status = db.Column(db.Enum(AttemptStatus))
    timestamp = db.Column(db.DateTime)

    __table_args__ = (
        db.UniqueConstraint("result_id", "lift_type", "slot", name="uq_attempt_result_lift_slot"),
        db.CheckConstraint("slot >= 0 AND slot < 3", name="ck_attempt_slot_range"),
    )

    @property
    def is_judged(self) -> bool:
        return self.status in (AttemptStatus.GOOD, AttemptStatus.NO_GOOD)

    def to_dict(self):
        return {
            "weight": self.weight,
            "status": self.status.value if self.status else None,
            "timestamp": _iso(self.timestamp),
        }
