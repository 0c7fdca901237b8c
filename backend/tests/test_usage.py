"""Tests for the daily prompt-copy quota and plan endpoints."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, select

from prompthub.errors import QuotaExceeded, ValidationFailed
from prompthub.models.usage_log import UsageLog
from prompthub.models.user import User
from prompthub.services import plan_service

from conftest import auth_headers

TODAY = date(2026, 5, 20)


# ---------------------------------------------------------------------------
# plan_service
# ---------------------------------------------------------------------------


def test_plan_limits():
    assert plan_service.get_plan_limits("free").prompt_copies_per_day == 10
    assert plan_service.get_plan_limits("pro").prompt_copies_per_day is None


def test_free_plan_allows_ten_copies_per_day(session: Session, user: User):
    for expected in range(1, 11):
        assert plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY) == expected

    with pytest.raises(QuotaExceeded) as exc:
        plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY)
    assert exc.value.status_code == 429
    assert "10" in exc.value.message

    logs = session.exec(select(UsageLog).where(UsageLog.user_id == user.id)).all()
    assert len(logs) == 10
    assert all(log.type == "prompt_copy" for log in logs)


def test_counter_resets_on_a_new_day(session: Session, user: User):
    user.prompt_copies_today = 10
    user.prompt_copies_reset_on = TODAY - timedelta(days=1)
    session.add(user)
    session.commit()

    assert plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY) == 1
    session.refresh(user)
    assert user.prompt_copies_reset_on == TODAY


def test_pro_plan_is_unlimited(session: Session, user: User):
    plan_service.set_user_plan(session, user.id, "pro", today=TODAY)
    for _ in range(15):
        plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY)
    session.refresh(user)
    assert user.prompt_copies_today == 15


def test_set_user_plan_rejects_unknown_plan(session: Session, user: User):
    with pytest.raises(ValidationFailed):
        plan_service.set_user_plan(session, user.id, "enterprise")


def test_plan_status_and_usage_logs(session: Session, user: User):
    plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY)
    plan_service.ensure_prompt_copy_allowed(session, user.id, today=TODAY)

    status = plan_service.get_plan_status(session, user.id, today=TODAY)
    assert status == {"plan": "free", "prompt_copies_today": 2, "prompt_copy_limit": 10}

    logs = plan_service.get_usage_logs(session, user.id)
    assert [log["metadata"] for log in logs] == [{"total": 2}, {"total": 1}]


# ---------------------------------------------------------------------------
# POST /api/usage/prompt-copy
# ---------------------------------------------------------------------------


def test_prompt_copy_requires_login(client: TestClient):
    response = client.post("/api/usage/prompt-copy")
    assert response.status_code == 401
    assert response.json() == {"error": "로그인이 필요합니다"}


def test_prompt_copy_success(client: TestClient, session: Session, user: User):
    response = client.post("/api/usage/prompt-copy", headers=auth_headers(user))
    assert response.status_code == 200
    assert response.json() == {"success": True}
    session.refresh(user)
    assert user.prompt_copies_today == 1


def test_prompt_copy_over_quota_is_429(client: TestClient, session: Session, user: User):
    user.prompt_copies_today = 10
    user.prompt_copies_reset_on = date.today()
    session.add(user)
    session.commit()

    response = client.post("/api/usage/prompt-copy", headers=auth_headers(user))

    assert response.status_code == 429
    assert response.json() == {"error": "무료 플랜은 하루 최대 10개의 프롬프트만 복사할 수 있습니다"}


# ---------------------------------------------------------------------------
# /api/billing/plan
# ---------------------------------------------------------------------------


def test_get_plan(client: TestClient, user: User):
    client.post("/api/usage/prompt-copy", headers=auth_headers(user))

    response = client.get("/api/billing/plan", headers=auth_headers(user))

    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "free"
    assert data["promptCopiesToday"] == 1
    assert data["promptCopyLimit"] == 10
    assert len(data["logs"]) == 1
    assert data["logs"][0]["type"] == "prompt_copy"


def test_switch_to_pro(client: TestClient, user: User):
    response = client.post("/api/billing/plan", json={"plan": "pro"}, headers=auth_headers(user))
    assert response.status_code == 200
    data = response.json()
    assert data["plan"] == "pro"
    assert data["promptCopyLimit"] is None
    assert data["promptCopiesToday"] == 0


def test_switch_to_unknown_plan_is_400(client: TestClient, user: User):
    response = client.post("/api/billing/plan", json={"plan": "gold"}, headers=auth_headers(user))
    assert response.status_code == 400
    assert response.json() == {"error": "잘못된 플랜입니다"}


def test_billing_requires_login(client: TestClient):
    assert client.get("/api/billing/plan").status_code == 401
