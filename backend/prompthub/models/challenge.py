"""Challenge-side models: the challenge, its chat room and join requests.

Challenges and join requests are written by other services; this API only
reads them (admin listings, join status) and deletes chat rooms.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from prompthub.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Challenge(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    title: str
    created_at: datetime = Field(default_factory=_utcnow)

    # Relationships
    user: "User" = Relationship()


class ChatRoom(SQLModel, table=True):
    __tablename__ = "chat_room"

    id: Optional[int] = Field(default=None, primary_key=True)
    challenge_id: int = Field(foreign_key="challenge.id", unique=True, index=True)
    created_at: datetime = Field(default_factory=_utcnow)

    # Relationships (members and messages go with the room)
    challenge: Challenge = Relationship()
    members: List["ChatRoomMember"] = Relationship(
        back_populates="chat_room",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )
    messages: List["ChatMessage"] = Relationship(
        back_populates="chat_room",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )


class ChatRoomMember(SQLModel, table=True):
    __tablename__ = "chat_room_member"
    __table_args__ = (
        SAUniqueConstraint("chat_room_id", "user_id", name="uq_chat_room_member"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    chat_room_id: int = Field(foreign_key="chat_room.id", index=True)
    user_id: int = Field(foreign_key="user.id")
    joined_at: datetime = Field(default_factory=_utcnow)

    chat_room: ChatRoom = Relationship(back_populates="members")


class ChatMessage(SQLModel, table=True):
    __tablename__ = "chat_message"

    id: Optional[int] = Field(default=None, primary_key=True)
    chat_room_id: int = Field(foreign_key="chat_room.id", index=True)
    user_id: int = Field(foreign_key="user.id")
    content: str
    created_at: datetime = Field(default_factory=_utcnow)

    chat_room: ChatRoom = Relationship(back_populates="messages")


class JoinRequest(SQLModel, table=True):
    __tablename__ = "join_request"
    __table_args__ = (
        SAUniqueConstraint("challenge_id", "user_id", name="uq_join_request_challenge_user"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    challenge_id: int = Field(foreign_key="challenge.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    status: str = Field(default="pending")  # pending|approved|rejected
    message: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
