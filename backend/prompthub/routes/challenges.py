from typing import Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import guarded
from prompthub.schemas import CamelModel
from prompthub.services import challenge_service
from prompthub.services.session_resolver import Identity
from prompthub.routes.deps import require_user

router = APIRouter()

MSG_JOIN_STATUS_FAILED = "상태 확인 중 오류가 발생했습니다"


class JoinStatusResponse(CamelModel):
    status: Optional[str] = None  # pending|approved|rejected, None = never requested


@router.get("/challenges/{challenge_id}/join-status", response_model=JoinStatusResponse)
def get_join_status(
    challenge_id: int,
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """The caller's join-request status for a challenge"""
    with guarded("challenges.join_status", MSG_JOIN_STATUS_FAILED):
        status = challenge_service.get_join_status(session, challenge_id, identity.id)
        return JoinStatusResponse(status=status)
