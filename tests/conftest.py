import datetime as dt

import pytest
from fastapi.testclient import TestClient

from carpool.config import Settings
from carpool.database import crud
from carpool.main import create_app

PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'carpool-test.db'}",
        SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app, client):
    session = app.state.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db, settings):
    counter = {"n": 0}

    def _make(name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        return crud.create_user(
            db,
            name=name or f"User {n}",
            email=email or f"user{n}@example.com",
            password=PASSWORD,
            settings=settings
        )

    return _make


@pytest.fixture
def make_ride(db):

    def _make(driver, seats=3, price=100.0, origin="Ahmedabad", destination="Baroda", **extra):
        data = {
            "origin": origin,
            "destination": destination,
            "date": dt.date(2030, 1, 15),
            "time": "09:30",
            "seats_available": seats,
            "price": price,
            "description": "",
        }
        data.update(extra)
        return crud.create_ride(db, driver.id, data)

    return _make


def register(client, name="Asha Patel", email="asha@example.com", password=PASSWORD):
    response = client.post("/api/auth/register", json={
        "name": name, "email": email, "password": password
    })
    assert response.status_code == 201, response.text
    body = response.json()
    return body["token"], body["user"]


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}
