"""
Admin moderation endpoints.

Every route requires an admin caller; the role is read from the user row on
each request.
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import guarded
from prompthub.schemas import CamelModel, SuccessResponse, UserSummary
from prompthub.services import admin_service
from prompthub.services.session_resolver import Identity
from prompthub.routes.deps import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin")

MSG_PROMPTS_FAILED = "프롬프트 목록을 불러오는 중 오류가 발생했습니다"
MSG_SPACES_FAILED = "채팅방 목록을 불러오는 중 오류가 발생했습니다"
MSG_DELETE_SPACE_FAILED = "채팅방 삭제 중 오류가 발생했습니다"


class AdminPrompt(CamelModel):
    id: int
    topic: str
    created_at: datetime
    user: UserSummary
    refinement_count: int


class AdminPromptsResponse(CamelModel):
    prompts: List[AdminPrompt]


class ChallengeSummary(CamelModel):
    id: int
    title: str
    user: UserSummary


class ChatRoomCounts(CamelModel):
    members: int
    messages: int


class AdminChatRoom(CamelModel):
    id: int
    created_at: datetime
    challenge: ChallengeSummary
    counts: ChatRoomCounts


class AdminChatRoomsResponse(CamelModel):
    chat_rooms: List[AdminChatRoom]


@router.get("/prompts", response_model=AdminPromptsResponse)
def list_prompts(
    identity: Identity = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """All public prompts with author and refinement count"""
    with guarded("admin.prompts", MSG_PROMPTS_FAILED):
        return AdminPromptsResponse(prompts=admin_service.list_admin_prompts(session))


@router.get("/spaces", response_model=AdminChatRoomsResponse)
def list_spaces(
    identity: Identity = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """All chat rooms with challenge, author and member/message counts"""
    with guarded("admin.spaces", MSG_SPACES_FAILED):
        return AdminChatRoomsResponse(chat_rooms=admin_service.list_chat_rooms(session))


@router.delete("/spaces/{chat_room_id}", response_model=SuccessResponse)
def delete_space(
    chat_room_id: int,
    identity: Identity = Depends(require_admin),
    session: Session = Depends(get_session),
):
    """Delete a chat room; members and messages go with it"""
    with guarded("admin.spaces.delete", MSG_DELETE_SPACE_FAILED):
        admin_service.delete_chat_room(session, chat_room_id)
        logger.info(f"Admin {identity.id} deleted chat room {chat_room_id}")
        return SuccessResponse()
