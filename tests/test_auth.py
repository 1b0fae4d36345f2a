from relief_dashboard.auth import utils_auth

from conftest import signup_and_login


def test_root_is_public(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "message" in r.json()


def test_signup_returns_user_without_password(client):
    r = client.post("/api/auth/signup", json={"email": "Worker@Example.org", "password": "secret123"})
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "worker@example.org"
    assert body["role"] == "field_worker"
    assert "password_hash" not in body


def test_duplicate_signup_rejected(client):
    signup_and_login(client, email="dup@example.org")
    r = client.post("/api/auth/signup", json={"email": "dup@example.org", "password": "another1"})
    assert r.status_code == 400


def test_signup_validates_role_and_password(client):
    r = client.post("/api/auth/signup", json={"email": "x@example.org", "password": "secret123", "role": "admin"})
    assert r.status_code == 422
    r = client.post("/api/auth/signup", json={"email": "x@example.org", "password": "123"})
    assert r.status_code == 422


def test_login_wrong_password(client):
    signup_and_login(client, email="ngo@example.org", role="ngo")
    r = client.post("/api/auth/login", json={"email": "ngo@example.org", "password": "wrong-pass"})
    assert r.status_code == 401


def test_protected_routes_need_token(client):
    assert client.get("/api/flood-zones").status_code == 401
    assert client.get("/api/dashboard/stats", headers={"Authorization": "Token abc"}).status_code == 401
    assert client.get("/api/resources", headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_token_for_deleted_user_rejected(client):
    token = utils_auth.create_access_token("no-such-user", "ngo")
    r = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_current_user_and_profile_update(client, auth_headers):
    r = client.get("/api/auth/user", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["role"] == "district_officer"

    r = client.patch("/api/auth/user", headers=auth_headers, json={"organization": "KSDMA", "district": "Kottayam"})
    assert r.status_code == 200
    assert r.json()["organization"] == "KSDMA"
    assert r.json()["district"] == "Kottayam"
    assert r.json()["first_name"] == "Asha"


def test_profile_role_cannot_be_null(client, auth_headers):
    r = client.patch("/api/auth/user", headers=auth_headers, json={"role": None})
    assert r.status_code == 422


def test_password_hashing_roundtrip():
    hashed = utils_auth.hash_password("secret123")
    assert hashed != "secret123"
    assert utils_auth.verify_password("secret123", hashed)
    assert not utils_auth.verify_password("secret124", hashed)
    assert not utils_auth.verify_password("secret123", None)
