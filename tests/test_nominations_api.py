from datetime import date

from liftmeet.models import AttemptStatus, LiftType, Nomination
from liftmeet.services.result_service import ResultService


def _nominate(client, athlete, competition, age="OPEN", weight="u83"):
    return client.post("/nominations", json={
        "athleteId": athlete.id,
        "competitionId": competition.id,
        "ageCategory": age,
        "weightCategory": weight,
    })


def test_nominate_athlete(auth_client, factory, official):
    competition = factory.create_competition()
    athlete = factory.create_athlete()

    response = _nominate(auth_client, athlete, competition)
    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["status"] == "pending"
    assert data["nominatedBy"] == official.id
    assert data["groupId"] is None
    assert data["athlete"]["lastName"] == "Lifter"


def test_duplicate_nomination(auth_client, factory):
    competition = factory.create_competition()
    athlete = factory.create_athlete()
    _nominate(auth_client, athlete, competition)

    response = _nominate(auth_client, athlete, competition, weight="u93")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Athlete is already nominated for this competition"
    assert Nomination.query.count() == 1


def test_unsupported_age_category(auth_client, factory):
    competition = factory.create_competition(age_categories=["OPEN"])
    athlete = factory.create_athlete(date_of_birth=date(1950, 1, 1))

    response = _nominate(auth_client, athlete, competition, age="MASTERS_4")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Competition does not support age category"


def test_athlete_outside_age_category(auth_client, factory):
    competition = factory.create_competition()
    athlete = factory.create_athlete(date_of_birth=date(1990, 1, 1))

    response = _nominate(auth_client, athlete, competition, age="SUB_JUNIORS")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Athlete not in age category"


def test_unknown_athlete_or_competition(auth_client, factory):
    competition = factory.create_competition()
    athlete = factory.create_athlete()
    response = auth_client.post("/nominations", json={
        "athleteId": 999, "competitionId": competition.id,
        "ageCategory": "OPEN", "weightCategory": "u83",
    })
    assert response.status_code == 404
    response = auth_client.post("/nominations", json={
        "athleteId": athlete.id, "competitionId": 999,
        "ageCategory": "OPEN", "weightCategory": "u83",
    })
    assert response.status_code == 404


def test_list_nominations(client, factory):
    competition = factory.create_competition()
    factory.create_nominated_athletes(competition, 3)
    other = factory.create_competition(name="Other")
    factory.create_nominated_athletes(other, 1)

    response = client.get(f"/nominations/competition/{competition.id}")
    assert response.status_code == 200
    assert len(response.get_json()["data"]) == 3


def test_delete_nomination(auth_client, factory):
    competition = factory.create_competition()
    (_, nomination), = factory.create_nominated_athletes(competition, 1)

    response = auth_client.delete(f"/nominations/{nomination.id}")
    assert response.status_code == 200
    assert Nomination.query.count() == 0

    assert auth_client.delete(f"/nominations/{nomination.id}").status_code == 404


def test_cannot_delete_scored_nomination(auth_client, factory):
    competition = factory.create_competition()
    (athlete, nomination), = factory.create_nominated_athletes(competition, 1)
    ResultService.save_attempt(
        athlete.id, competition.id, LiftType.SQUAT, 1, 120.0, AttemptStatus.GOOD
    )

    response = auth_client.delete(f"/nominations/{nomination.id}")
    assert response.status_code == 400
    assert Nomination.query.count() == 1


def test_nominating_requires_login(client, factory):
    competition = factory.create_competition()
    athlete = factory.create_athlete()
    assert _nominate(client, athlete, competition).status_code == 401
