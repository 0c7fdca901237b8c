"""
Admin moderation queries: prompt and chat-room listings, chat-room removal.

Listings return plain dicts (already shaped for the response models) since
they combine rows from several tables with aggregate counts.
"""
import logging
from typing import Any, Dict, List

from sqlmodel import Session, col, func, select

from prompthub.errors import NotFound
from prompthub.models.challenge import Challenge, ChatMessage, ChatRoom, ChatRoomMember
from prompthub.models.prompt import Prompt
from prompthub.models.user import User

logger = logging.getLogger(__name__)

MSG_CHAT_ROOM_NOT_FOUND = "채팅방을 찾을 수 없습니다"


def _count_by(session: Session, column, ids: List[int]) -> Dict[int, int]:
    if not ids:
        return {}
    rows = session.exec(
        select(column, func.count()).where(col(column).in_(ids)).group_by(column)
    ).all()
    return {key: int(count or 0) for key, count in rows}


def list_admin_prompts(session: Session) -> List[Dict[str, Any]]:
    """Public prompts with author and refinement count, newest first."""
    rows = session.exec(
        select(Prompt, User)
        .join(User, Prompt.user_id == User.id)
        .where(Prompt.is_public == True)  # noqa: E712
        .order_by(col(Prompt.created_at).desc(), col(Prompt.id).desc())
    ).all()

    refinement_counts = _count_by(session, Prompt.parent_id, [p.id for p, _ in rows])

    return [
        {
            "id": prompt.id,
            "topic": prompt.topic,
            "created_at": prompt.created_at,
            "user": {"id": user.id, "name": user.name, "email": user.email},
            "refinement_count": refinement_counts.get(prompt.id, 0),
        }
        for prompt, user in rows
    ]


def list_chat_rooms(session: Session) -> List[Dict[str, Any]]:
    """Every chat room with its challenge, author and member/message counts."""
    rows = session.exec(
        select(ChatRoom, Challenge, User)
        .join(Challenge, ChatRoom.challenge_id == Challenge.id)
        .join(User, Challenge.user_id == User.id)
        .order_by(col(ChatRoom.created_at).desc(), col(ChatRoom.id).desc())
    ).all()

    room_ids = [room.id for room, _, _ in rows]
    member_counts = _count_by(session, ChatRoomMember.chat_room_id, room_ids)
    message_counts = _count_by(session, ChatMessage.chat_room_id, room_ids)

    return [
        {
            "id": room.id,
            "created_at": room.created_at,
            "challenge": {
                "id": challenge.id,
                "title": challenge.title,
                "user": {"id": user.id, "name": user.name, "email": user.email},
            },
            "counts": {
                "members": member_counts.get(room.id, 0),
                "messages": message_counts.get(room.id, 0),
            },
        }
        for room, challenge, user in rows
    ]


def delete_chat_room(session: Session, chat_room_id: int) -> None:
    """Delete a chat room and its members and messages in one transaction.

    A missing id raises NotFound without touching the database.
    """
    room = session.get(ChatRoom, chat_room_id)
    if room is None:
        raise NotFound(MSG_CHAT_ROOM_NOT_FOUND)

    try:
        session.delete(room)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info(f"Chat room {chat_room_id} deleted")
