"""Error handling tests for auth and RSVP edge cases."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from fastapi.testclient import TestClient
from jose import jwt

from evently.config import get_settings
from evently.main import app
from evently.models.event import Event
from evently.models.user import User

settings = get_settings()


def make_token(claims: dict) -> str:
    """Sign arbitrary claims with the app's secret."""
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def test_unhandled_error_returns_generic_500(client):
    """Unexpected exceptions are logged and hidden behind a generic message."""
    with patch(
        "evently.services.events.EventService.list_events",
        side_effect=RuntimeError("database exploded"),
    ):
        with TestClient(app, raise_server_exceptions=False) as unsafe_client:
            response = unsafe_client.get("/api/events")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


def test_signup_race_on_email_returns_400(client, auth_headers):
    """A duplicate that slips past the lookup is caught by the unique index."""
    with patch("evently.services.auth.get_user_by_email", return_value=None):
        response = client.post(
            "/api/auth/signup",
            json={"name": "Racer", "email": auth_headers.email, "password": "password123"},
        )

    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_rsvp_race_returns_400_and_keeps_one_row(
    client, auth_headers, other_auth_headers, signup_user, create_event
):
    """A duplicate RSVP that slips past the membership check hits the unique pair."""
    event = create_event(auth_headers, capacity=3)
    client.post(f"/api/events/{event['id']}/rsvp", headers=other_auth_headers)

    with patch.object(Event, "has_attendee", return_value=False):
        response = client.post(f"/api/events/{event['id']}/rsvp", headers=other_auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"] == "Already registered for this event"
    assert client.get(f"/api/events/{event['id']}").json()["attendee_count"] == 1

    # The session is still usable after the rollback
    late = signup_user("late@example.com")
    response = client.post(f"/api/events/{event['id']}/rsvp", headers=late)
    assert response.status_code == 200
    assert response.json()["attendee_count"] == 2


def test_huge_event_id_is_404(client, auth_headers):
    """Ids beyond the integer column range are simply not found."""
    assert client.get("/api/events/99999999999").status_code == 404
    response = client.post("/api/events/99999999999/rsvp", headers=auth_headers)
    assert response.status_code == 404


def test_expired_token_rejected(client, auth_headers):
    """Test that a token past its expiry is refused."""
    token = make_token(
        {
            "sub": str(auth_headers.user_id),
            "email": auth_headers.email,
            "exp": datetime.now(UTC) - timedelta(minutes=1),
        }
    )

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_token_for_deleted_user_rejected(client, db, auth_headers):
    """Test that a valid token stops working once its user is gone."""
    db.query(User).filter(User.id == auth_headers.user_id).delete()
    db.commit()

    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["detail"] == "User not found"


def test_token_with_non_numeric_subject_rejected(client):
    """A signed token whose subject is not an integer id is a 401, not a crash."""
    for subject in ("²", "abc", None):
        token = make_token({"sub": subject, "exp": datetime.now(UTC) + timedelta(minutes=5)})

        response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401


def test_token_without_subject_rejected(client):
    """Test that a signed token missing its subject is refused."""
    token = make_token({"exp": datetime.now(UTC) + timedelta(minutes=5)})

    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
