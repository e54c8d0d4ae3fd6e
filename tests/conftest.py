import gc
import os
import tempfile
from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from liftmeet import create_app
from liftmeet.extensions import db
from liftmeet.models import (
    AgeCategory,
    Athlete,
    Competition,
    Gender,
    Nomination,
    NominationStatus,
    User,
    WeightCategory,
)


def pytest_configure(config):
    import warnings

    warnings.filterwarnings("ignore", category=ResourceWarning)


@pytest.fixture()
def app():
    """Create and configure a new app instance for each test."""
    db_fd, db_path = tempfile.mkstemp(suffix=".db")

    app = create_app(
        "testing",
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
            "SECRET_KEY": "test-secret",
        },
    )

    with app.app_context():
        db.create_all()
        yield app

        db.session.close()
        db.session.remove()
        db.drop_all()
        db.engine.dispose()

    os.close(db_fd)
    os.unlink(db_path)
    gc.collect()


@pytest.fixture()
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture()
def factory(app):
    return TestDataFactory()


@pytest.fixture()
def official(factory):
    return factory.create_user()


@pytest.fixture()
def auth_client(client, official):
    """Test client whose session belongs to a logged-in official."""
    with client.session_transaction() as sess:
        sess["user_id"] = official.id
    return client


class TestDataFactory:
    """Builds and commits the rows the scheduling and scoring code reads"""

    __test__ = False

    def create_user(self, email="official@example.com", password="secret"):
        user = User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name="Meet",
            last_name="Official",
        )
        db.session.add(user)
        db.session.commit()
        return user

    def create_competition(self, name="Test Open", **kwargs):
        defaults = {
            "name": name,
            "start_date": date(2025, 6, 1),
            "end_date": date(2025, 6, 1),
            "age_categories": [c.value for c in AgeCategory],
        }
        defaults.update(kwargs)
        competition = Competition(**defaults)
        db.session.add(competition)
        db.session.commit()
        return competition

    def create_athlete(self, first_name="Test", last_name="Lifter", **kwargs):
        defaults = {
            "first_name": first_name,
            "last_name": last_name,
            "date_of_birth": date(1995, 5, 5),
            "gender": Gender.MALE,
        }
        defaults.update(kwargs)
        athlete = Athlete(**defaults)
        db.session.add(athlete)
        db.session.commit()
        return athlete

    def create_nomination(self, athlete, competition, nominated_by=None, **kwargs):
        if nominated_by is None:
            nominated_by = User.query.first() or self.create_user(email="nominator@example.com")
        defaults = {
            "athlete_id": athlete.id,
            "competition_id": competition.id,
            "weight_category": WeightCategory.U83,
            "age_category": AgeCategory.OPEN,
            "status": NominationStatus.APPROVED,
            "nominated_by": nominated_by.id,
        }
        defaults.update(kwargs)
        nomination = Nomination(**defaults)
        db.session.add(nomination)
        db.session.commit()
        return nomination

    def create_nominated_athletes(self, competition, count):
        """Athletes with approved nominations, returned as (athlete, nomination) pairs"""
        pairs = []
        for i in range(count):
            athlete = self.create_athlete(first_name=f"Lifter{i + 1}")
            pairs.append((athlete, self.create_nomination(athlete, competition)))
        return pairs
