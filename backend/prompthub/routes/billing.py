from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import guarded
from prompthub.schemas import CamelModel
from prompthub.services import plan_service
from prompthub.services.session_resolver import Identity
from prompthub.routes.deps import require_user

router = APIRouter()

MSG_PLAN_FETCH_FAILED = "플랜 정보를 불러오는데 실패했습니다"
MSG_PLAN_UPDATE_FAILED = "플랜을 변경하는 중 오류가 발생했습니다"


class UsageLogEntry(CamelModel):
    id: int
    type: str
    metadata: Optional[Any] = None
    created_at: datetime


class PlanStatusResponse(CamelModel):
    plan: str
    prompt_copies_today: int
    prompt_copy_limit: Optional[int] = None  # None = unlimited
    logs: List[UsageLogEntry]


class PlanUpdateRequest(CamelModel):
    plan: Optional[str] = None


def _plan_status(session: Session, user_id: int) -> PlanStatusResponse:
    status = plan_service.get_plan_status(session, user_id)
    logs = plan_service.get_usage_logs(session, user_id, limit=20)
    return PlanStatusResponse(**status, logs=logs)


@router.get("/billing/plan", response_model=PlanStatusResponse)
def get_plan(
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Current plan, today's usage and recent usage log"""
    with guarded("billing.plan", MSG_PLAN_FETCH_FAILED):
        return _plan_status(session, identity.id)


@router.post("/billing/plan", response_model=PlanStatusResponse)
def update_plan(
    body: PlanUpdateRequest,
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Switch plan (free|pro); today's counter starts over"""
    with guarded("billing.plan.update", MSG_PLAN_UPDATE_FAILED):
        plan_service.set_user_plan(session, identity.id, body.plan or plan_service.PLAN_FREE)
        return _plan_status(session, identity.id)
