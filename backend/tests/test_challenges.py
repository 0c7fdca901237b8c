from fastapi.testclient import TestClient
from sqlmodel import Session

from prompthub.models.challenge import Challenge, JoinRequest
from prompthub.models.user import User

from conftest import auth_headers


def _challenge(session: Session, owner: User) -> Challenge:
    challenge = Challenge(user_id=owner.id, title="30-day prompt challenge")
    session.add(challenge)
    session.commit()
    session.refresh(challenge)
    return challenge


def test_join_status_requires_login(client: TestClient, session: Session, user: User):
    challenge = _challenge(session, user)
    response = client.get(f"/api/challenges/{challenge.id}/join-status")
    assert response.status_code == 401
    assert response.json() == {"error": "로그인이 필요합니다"}


def test_join_status_without_request_is_null(client: TestClient, session: Session, user: User, other_user: User):
    challenge = _challenge(session, other_user)

    response = client.get(f"/api/challenges/{challenge.id}/join-status", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"status": None}


def test_join_status_for_unknown_challenge_is_null(client: TestClient, user: User):
    response = client.get("/api/challenges/777/join-status", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json() == {"status": None}


def test_join_status_returns_callers_request(client: TestClient, session: Session, user: User, other_user: User):
    challenge = _challenge(session, other_user)
    session.add(JoinRequest(challenge_id=challenge.id, user_id=user.id, status="approved"))
    session.add(JoinRequest(challenge_id=challenge.id, user_id=other_user.id, status="rejected"))
    session.commit()

    response = client.get(f"/api/challenges/{challenge.id}/join-status", headers=auth_headers(user))

    assert response.status_code == 200
    assert response.json() == {"status": "approved"}
