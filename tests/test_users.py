def test_login_with_username(client, operator):
    response = client.post("/api/users/login", json={"username": "registrar", "password": "registrar-pass"})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["username"] == "registrar"
    assert data["user"]["last_login_at"] is not None


def test_login_with_email(client, operator):
    response = client.post("/api/users/login", json={"username": "registrar@example.edu", "password": "registrar-pass"})

    assert response.status_code == 200


def test_login_with_wrong_password(client, operator):
    response = client.post("/api/users/login", json={"username": "registrar", "password": "wrong-password"})

    assert response.status_code == 401


def test_token_from_login_is_accepted(client, operator):
    token = client.post(
        "/api/users/login", json={"username": "registrar", "password": "registrar-pass"}
    ).json()["access_token"]

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["email"] == "registrar@example.edu"


def test_invalid_token_is_rejected(client):
    response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


def test_superuser_creates_operator(client, auth_headers):
    response = client.post(
        "/api/users/",
        json={"username": "printdesk", "name": "Print Desk", "password": "printdesk-pass"},
        headers=auth_headers
    )

    assert response.status_code == 201
    assert response.json()["superuser"] is False
    assert "hashed_password" not in response.json()


def test_regular_operator_cannot_create_operators(client, auth_headers):
    client.post(
        "/api/users/",
        json={"username": "printdesk", "name": "Print Desk", "password": "printdesk-pass"},
        headers=auth_headers
    )
    token = client.post(
        "/api/users/login", json={"username": "printdesk", "password": "printdesk-pass"}
    ).json()["access_token"]

    response = client.post(
        "/api/users/",
        json={"username": "another", "name": "Another", "password": "another-pass"},
        headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 403


def test_duplicate_username(client, auth_headers):
    response = client.post(
        "/api/users/",
        json={"username": "registrar", "name": "Imposter", "password": "imposter-pass"},
        headers=auth_headers
    )

    assert response.status_code == 400


def test_deactivated_operator_cannot_log_in(client, auth_headers):
    user_id = client.post(
        "/api/users/",
        json={"username": "printdesk", "name": "Print Desk", "password": "printdesk-pass"},
        headers=auth_headers
    ).json()["id"]

    client.put(f"/api/users/{user_id}", json={"is_active": False}, headers=auth_headers)
    response = client.post("/api/users/login", json={"username": "printdesk", "password": "printdesk-pass"})

    assert response.status_code == 403


def test_cannot_delete_own_account(client, auth_headers, operator):
    response = client.delete(f"/api/users/{operator.id}", headers=auth_headers)

    assert response.status_code == 400
