import os
import tempfile

# Point the app at a throwaway SQLite database before it is imported.
_tmpdir = tempfile.mkdtemp(prefix="relief-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "test.db")
os.environ["JWT_SECRET"] = "test-secret-for-the-relief-dashboard-suite"
for _var in ("OPENWEATHER_API_KEY", "TWILIO_SID", "TWILIO_AUTH", "TWILIO_PHONE"):
    os.environ[_var] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from relief_dashboard import models  # noqa: E402,F401
from relief_dashboard.database import Base, SessionLocal, engine  # noqa: E402
from relief_dashboard.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def signup_and_login(client, email="officer@example.org", password="secret123", role="district_officer"):
    r = client.post("/api/auth/signup", json={
        "email": email,
        "password": password,
        "first_name": "Asha",
        "role": role,
        "district": "Alappuzha",
    })
    assert r.status_code == 201, r.text
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return signup_and_login(client)


@pytest.fixture
def current_user_id(client, auth_headers):
    return client.get("/api/auth/user", headers=auth_headers).json()["id"]


@pytest.fixture
def zone(client, auth_headers):
    r = client.post("/api/flood-zones", headers=auth_headers, json={
        "name": "Kuttanad Low Lands",
        "district": "Alappuzha",
        "latitude": 9.4981,
        "longitude": 76.3388,
        "risk_level": "high",
        "radius": 1000,
        "water_level": 4.5,
        "danger_mark": 5.0,
    })
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def rice(client, auth_headers):
    r = client.post("/api/resources", headers=auth_headers, json={
        "name": "Rice bags",
        "type": "food",
        "unit": "packets",
        "total_quantity": 100,
        "priority": "high",
        "location": "Taluk Office",
    })
    assert r.status_code == 200, r.text
    return r.json()
