"""Registration and login through the HTTP surface."""

from __future__ import annotations

from sqlalchemy import func, select

from app.config.settings import settings
from app.models import Passenger, User
from app.services import AuthService

REGISTRATION = {
    "username": "kari.nordmann",
    "email": "kari@airops.io",
    "password": "fjord2024",
    "first_name": "Kari",
    "last_name": "Nordmann",
    "phone": "+47 400 00 000",
    "date_of_birth": "1990-04-12",
    "passport_number": "N1234567",
    "nationality": "Norwegian",
}


def _count(model):
    async def _work(session):
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()

    return _work


def test_register_creates_user_with_default_role(client):
    response = client.post("/auth/register", json=REGISTRATION)

    assert response.status_code == 201
    payload = response.json()
    assert payload["user"]["username"] == "kari.nordmann"
    assert payload["user"]["passport_number"] == "N1234567"
    assert [role["name"] for role in payload["roles"]] == ["passenger"]
    assert payload["missing_passenger_fields"] == []
    assert "password_hash" not in response.text
    assert "fjord2024" not in response.text


def test_register_without_identity_fields_reports_them(client, run_db):
    body = {
        key: value
        for key, value in REGISTRATION.items()
        if key not in {"phone", "date_of_birth", "passport_number"}
    }

    response = client.post("/auth/register", json=body)

    assert response.status_code == 201
    assert response.json()["missing_passenger_fields"] == [
        "passport_number",
        "date_of_birth",
        "phone",
    ]

    async def _passenger(session):
        result = await session.execute(select(Passenger))
        return result.scalar_one()

    passenger = run_db(_passenger)
    assert passenger.passport_number is None
    assert passenger.date_of_birth is None
    assert passenger.phone is None
    assert passenger.email == "kari@airops.io"


def test_register_duplicate_email_conflicts(client):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201

    duplicate = dict(REGISTRATION, username="someone.else")
    response = client.post("/auth/register", json=duplicate)

    assert response.status_code == 409
    assert response.json() == {"detail": "User with this email or username already exists"}


def test_register_duplicate_username_leaves_first_user_intact(client, run_db):
    first = client.post("/auth/register", json=REGISTRATION).json()

    duplicate = dict(REGISTRATION, email="other@airops.io", password="another99")
    response = client.post("/auth/register", json=duplicate)

    assert response.status_code == 409
    assert run_db(_count(User)) == 1

    login = client.post(
        "/auth/login",
        json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]},
    )
    assert login.status_code == 200
    assert login.json()["user"]["id"] == first["user"]["id"]
    assert login.json()["user"]["email"] == "kari@airops.io"


def test_register_race_on_unique_columns_conflicts(client, run_db, monkeypatch):
    assert client.post("/auth/register", json=REGISTRATION).status_code == 201

    async def identity_free(self, email, username):
        return False

    monkeypatch.setattr(AuthService, "_identity_taken", identity_free)

    response = client.post("/auth/register", json=REGISTRATION)

    assert response.status_code == 409
    assert run_db(_count(User)) == 1
    assert run_db(_count(Passenger)) == 1


def test_register_rejects_weak_password(client):
    response = client.post("/auth/register", json=dict(REGISTRATION, password="abc"))

    assert response.status_code == 422


def test_register_without_default_role_persists_nothing(client, run_db, monkeypatch):
    monkeypatch.setattr(settings.auth, "default_role", "ghost")

    response = client.post("/auth/register", json=REGISTRATION)

    assert response.status_code == 500
    assert "ghost" in response.json()["detail"]
    assert run_db(_count(User)) == 0
    assert run_db(_count(Passenger)) == 0


def test_login_returns_user_and_roles(client):
    client.post("/auth/register", json=REGISTRATION)

    response = client.post(
        "/auth/login",
        json={"email": REGISTRATION["email"], "password": REGISTRATION["password"]},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["user"]["email"] == "kari@airops.io"
    assert payload["roles"][0]["name"] == "passenger"
    assert "tickets:write" in payload["roles"][0]["permissions"]
    assert "password_hash" not in response.text


def test_login_with_wrong_password_is_unauthorized(client):
    client.post("/auth/register", json=REGISTRATION)

    response = client.post(
        "/auth/login",
        json={"email": REGISTRATION["email"], "password": "wrong-password1"},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}


def test_login_with_unknown_email_is_unauthorized(client):
    response = client.post(
        "/auth/login",
        json={"email": "nobody@airops.io", "password": "whatever1"},
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Invalid credentials"}
