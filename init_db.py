#!/usr/bin/env python3
"""
Database initialization script for the LiftMeet API
Creates all database tables and seeds a demo competition with nominated athletes
"""

import os
from datetime import date

from werkzeug.security import generate_password_hash

from liftmeet import create_app
from liftmeet.extensions import db
from liftmeet.models import (
    AgeCategory,
    Athlete,
    Competition,
    CompetitionStatus,
    Gender,
    Nomination,
    NominationStatus,
    User,
    WeightCategory,
)

DEMO_ATHLETES = [
    ("Anna", "Berg", date(1996, 3, 14), Gender.FEMALE, WeightCategory.U63),
    ("Sofia", "Lind", date(1999, 7, 2), Gender.FEMALE, WeightCategory.U69),
    ("Erik", "Dahl", date(1993, 11, 21), Gender.MALE, WeightCategory.U83),
    ("Jonas", "Holm", date(1990, 1, 9), Gender.MALE, WeightCategory.U93),
    ("Mikael", "Strand", date(1988, 5, 30), Gender.MALE, WeightCategory.U105),
    ("Lena", "Ek", date(1995, 9, 17), Gender.FEMALE, WeightCategory.U57),
]


def initialize_database():
    """Initialize the database with all tables"""
    app = create_app(os.environ.get('FLASK_ENV', 'development'))

    with app.app_context():
        print("Creating database tables...")
        db.create_all()

        if Competition.query.first() is None:
            print("Creating sample competition...")
            create_sample_competition()

        print("Database initialization completed successfully!")


def create_sample_competition():
    """Create a demo meet with approved open-category nominations"""
    try:
        official = User.query.filter_by(email="official@example.com").first()
        if official is None:
            official = User(
                email="official@example.com",
                password_hash=generate_password_hash(
                    os.environ.get("DEMO_OFFICIAL_PASSWORD", "change-me")
                ),
                first_name="Meet",
                last_name="Official",
            )
            db.session.add(official)

        competition = Competition(
            name="Regional Classic Powerlifting Open",
            start_date=date.today(),
            end_date=date.today(),
            location="Main Hall",
            age_categories=[c.value for c in AgeCategory],
            status=CompetitionStatus.UPCOMING,
        )
        db.session.add(competition)
        db.session.flush()
        print(f"Created competition: {competition.name}")

        for first_name, last_name, born, gender, weight_category in DEMO_ATHLETES:
            athlete = Athlete(
                first_name=first_name,
                last_name=last_name,
                date_of_birth=born,
                gender=gender,
            )
            db.session.add(athlete)
            db.session.flush()

            db.session.add(Nomination(
                athlete_id=athlete.id,
                competition_id=competition.id,
                weight_category=weight_category,
                age_category=AgeCategory.OPEN,
                status=NominationStatus.APPROVED,
                nominated_by=official.id,
            ))
            print(f"  Nominated {first_name} {last_name} ({weight_category.value})")

        db.session.commit()
    except Exception as e:
        db.session.rollback()
        print(f"Error creating sample competition: {e}")
        raise


if __name__ == "__main__":
    initialize_database()
