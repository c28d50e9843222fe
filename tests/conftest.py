import os

# Must be set before careconnect.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from careconnect import models  # noqa: F401
from careconnect import schemas
from careconnect.database import Base, SessionLocal, engine
from careconnect.main import app
from careconnect.services import accounts


@pytest.fixture(autouse=True)
def _tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_user(db):
    def _make(name: str = "Alice", email: str = "alice@example.com"):
        return accounts.register_user(db, schemas.UserRegister(name=name, email=email, password="secret1"))

    return _make


@pytest.fixture
def make_assistant(db):
    def _make(name: str = "Bob", email: str = "bob@example.com", latitude: float = 12.9716, longitude: float = 77.5946):
        return accounts.register_assistant(
            db,
            schemas.AssistantRegister(
                name=name, email=email, password="secret1", latitude=latitude, longitude=longitude
            ),
        )

    return _make


def register_user(client: TestClient, name: str = "Alice", email: str = "alice@example.com") -> int:
    response = client.post("/user/register", json={"name": name, "email": email, "password": "secret1"})
    assert response.status_code == 201, response.text
    return response.json()["user_id"]


def register_assistant(
    client: TestClient,
    name: str = "Bob",
    email: str = "bob@example.com",
    latitude: float = 12.9716,
    longitude: float = 77.5946,
) -> int:
    response = client.post(
        "/assistant/register",
        json={"name": name, "email": email, "password": "secret1", "latitude": latitude, "longitude": longitude},
    )
    assert response.status_code == 201, response.text
    return response.json()["assistant_id"]


def register_doctor(client: TestClient, name: str = "Dr. Rao", email: str = "rao@example.com") -> int:
    response = client.post(
        "/doctor/register",
        json={
            "name": name,
            "email": email,
            "password": "secret1",
            "gender": "female",
            "reg_no": "KMC-1001",
            "specialization": "Geriatrics",
            "experience": 12,
            "address": "MG Road, Bengaluru",
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["doctor_id"]
