from fastapi import APIRouter, Depends
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import QuotaExceeded, guarded
from prompthub.schemas import SuccessResponse
from prompthub.services import plan_service
from prompthub.services.session_resolver import Identity
from prompthub.routes.deps import require_user

router = APIRouter()


@router.post("/usage/prompt-copy", response_model=SuccessResponse)
def track_prompt_copy(
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Count a prompt copy against the caller's daily quota"""
    # Any failure here is reported to the client as a quota refusal
    with guarded("usage.prompt_copy", QuotaExceeded.default_message, error_cls=QuotaExceeded):
        plan_service.ensure_prompt_copy_allowed(session, identity.id)
        return SuccessResponse()
