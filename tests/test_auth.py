import pytest

from cems.models import User
from cems.models.enums import UserRole
from tests.conftest import TEST_PASSWORD


def signup_payload(**overrides):
    payload = {
        "name": "Jane Student",
        "email": "a@b.edu",
        "password": "secret123",
        "role": "STUDENT",
    }
    payload.update(overrides)
    return payload


def test_signup_returns_token_and_user(client):
    response = client.post("/api/auth/signup", json=signup_payload())

    assert response.status_code == 201
    data = response.get_json()
    assert data["token"]
    assert data["user"]["email"] == "a@b.edu"
    assert data["user"]["role"] == "STUDENT"
    assert "password" not in data["user"]


def test_signup_duplicate_email_conflicts(client):
    client.post("/api/auth/signup", json=signup_payload())
    response = client.post("/api/auth/signup", json=signup_payload(name="Someone Else"))

    assert response.status_code == 409
    assert response.get_json()["message"] == "Email already exists"
    assert User.query.filter_by(email="a@b.edu").count() == 1


def test_signup_accepts_lowercase_role(client):
    response = client.post(
        "/api/auth/signup", json=signup_payload(role="organizer", email="org@b.edu")
    )

    assert response.status_code == 201
    assert response.get_json()["user"]["role"] == "ORGANIZER"


def test_signup_cannot_create_admin(client):
    response = client.post("/api/auth/signup", json=signup_payload(role="ADMIN"))

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid role"


def test_signup_missing_fields(client):
    response = client.post("/api/auth/signup", json={"email": "x@b.edu"})

    assert response.status_code == 400
    data = response.get_json()
    assert set(data["missing_fields"]) == {"name", "password", "role"}


def test_signup_without_body(client):
    response = client.post("/api/auth/signup")

    assert response.status_code == 400


def test_login_success(client, student):
    response = client.post(
        "/api/auth/login", json={"email": student.email, "password": TEST_PASSWORD}
    )

    assert response.status_code == 200
    data = response.get_json()
    assert data["token"]
    assert data["user"]["id"] == student.id


def test_login_wrong_password(client, student):
    response = client.post(
        "/api/auth/login", json={"email": student.email, "password": "nope"}
    )

    assert response.status_code == 401
    assert response.get_json()["message"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login", json={"email": "ghost@b.edu", "password": "whatever"}
    )

    assert response.status_code == 401


def test_signup_token_authenticates(client):
    token = client.post("/api/auth/signup", json=signup_payload()).get_json()["token"]

    response = client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.get_json()["user"]["role"] == UserRole.STUDENT.value


def test_protected_route_without_token(client):
    response = client.get("/api/users/me")

    assert response.status_code == 401
    assert response.get_json()["message"] == "Access token required"


def test_protected_route_with_garbage_token(client):
    response = client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


@pytest.mark.parametrize(
    "body",
    [
        signup_payload(email=123),
        signup_payload(name=["Jane"]),
        signup_payload(password=42),
    ],
)
def test_signup_rejects_non_string_fields(client, body):
    response = client.post("/api/auth/signup", json=body)

    assert response.status_code == 400
    assert "must be a string" in response.get_json()["message"]
    assert User.query.count() == 0


def test_signup_rejects_array_body(client):
    response = client.post("/api/auth/signup", json=[signup_payload()])

    assert response.status_code == 400
    assert response.get_json()["message"] == "No data provided"


@pytest.mark.parametrize(
    "body",
    [
        {"email": 123, "password": TEST_PASSWORD},
        {"email": "a@b.edu", "password": ["x"]},
        {"email": 123},
        ["a@b.edu", TEST_PASSWORD],
    ],
)
def test_login_rejects_malformed_body(client, body):
    response = client.post("/api/auth/login", json=body)

    assert response.status_code == 400
    assert "message" in response.get_json()
