def test_login_starts_session(client, official):
    response = client.post("/auth/login", json={"email": official.email, "password": "secret"})
    assert response.status_code == 200
    assert response.get_json()["data"]["id"] == official.id

    with client.session_transaction() as sess:
        assert sess["user_id"] == official.id


def test_login_rejects_bad_password(client, official):
    response = client.post("/auth/login", json={"email": official.email, "password": "nope"})
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Invalid email or password"}


def test_login_requires_credentials(client):
    assert client.post("/auth/login", json={}).status_code == 400


def test_logout_ends_session(auth_client):
    assert auth_client.post("/auth/logout").status_code == 200
    assert auth_client.post("/flights", json={"competitionId": 1, "number": 1}).status_code == 401
