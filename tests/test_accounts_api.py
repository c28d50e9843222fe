from conftest import register_assistant, register_doctor, register_user


def test_user_registration_and_login(client) -> None:
    user_id = register_user(client, email="Alice@Example.com ")

    response = client.post("/user/login", json={"email": "alice@example.com", "password": "secret1"})
    assert response.status_code == 200
    body = response.json()
    assert body["user_id"] == user_id
    assert body["email"] == "alice@example.com"
    assert body["token_type"] == "bearer"

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json() == {"role": "user", "id": user_id, "name": "Alice", "email": "alice@example.com"}


def test_duplicate_email_is_a_conflict(client) -> None:
    register_user(client)
    response = client.post(
        "/user/register", json={"name": "Other", "email": "alice@example.com", "password": "secret1"}
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_EXISTS"


def test_login_failures(client) -> None:
    register_user(client)

    unknown = client.post("/user/login", json={"email": "nobody@example.com", "password": "secret1"})
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "USER_NOT_FOUND"

    wrong = client.post("/user/login", json={"email": "alice@example.com", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json()["error"]["kind"] == "INVALID_CREDENTIALS"


def test_registration_validation(client) -> None:
    response = client.post("/assistant/register", json={"name": "Bob", "email": "bob@example.com", "password": "secret1"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_me_requires_a_valid_token(client) -> None:
    missing = client.get("/auth/me")
    assert missing.status_code == 401

    bad = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401
    assert bad.json()["error"]["code"] == "INVALID_TOKEN"


def test_assistant_login_and_me(client) -> None:
    assistant_id = register_assistant(client)
    login = client.post("/assistant/login", json={"email": "bob@example.com", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["assistant_id"] == assistant_id

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {login.json()['access_token']}"})
    assert me.json()["role"] == "assistant"
    assert me.json()["id"] == assistant_id


def test_assistant_directory_sorted_by_distance(client) -> None:
    far = register_assistant(client, "Far", "far@example.com", latitude=13.3392, longitude=77.1140)
    near = register_assistant(client, "Near", "near@example.com", latitude=12.9720, longitude=77.5950)

    plain = client.get("/assistant/all").json()
    assert {item["assistant_id"] for item in plain} == {far, near}
    assert all(item["distance_m"] is None for item in plain)

    ranked = client.get("/assistant/all", params={"latitude": 12.9716, "longitude": 77.5946}).json()
    assert [item["assistant_id"] for item in ranked] == [near, far]
    assert ranked[0]["distance_m"] < 100
    assert ranked[1]["distance_m"] > 50_000


def test_doctor_registration_login_and_listing(client) -> None:
    doctor_id = register_doctor(client)

    login = client.post("/doctor/login", json={"email": "rao@example.com", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["doctor_id"] == doctor_id

    doctors = client.get("/doctor/all").json()
    assert doctors == [
        {
            "doctor_id": doctor_id,
            "name": "Dr. Rao",
            "profile_picture": None,
            "gender": "female",
            "specialization": "Geriatrics",
            "experience": 12,
            "address": "MG Road, Bengaluru",
        }
    ]


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get("/no/such/route")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ROUTE_NOT_FOUND"


def test_root_and_health(client) -> None:
    assert client.get("/").json()["version"] == "1.0.0"
    assert client.get("/healthz").json() == {"status": "ok"}
