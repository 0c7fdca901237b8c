from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Text
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from prompthub.models.user import User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Prompt(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    topic: str
    prompt: str = Field(sa_column=Column(Text, nullable=False))
    category: Optional[str] = None

    # JSON-encoded lists stored as text (see utils.json_helper)
    recommended_tools: str = Field(default="[]", sa_column=Column(Text, nullable=False, default="[]"))
    tips: str = Field(default="[]", sa_column=Column(Text, nullable=False, default="[]"))

    # May hold an inline data: URL, hence Text
    image_url: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    # Refinement of another prompt; None for root prompts
    parent_id: Optional[int] = Field(default=None, foreign_key="prompt.id", index=True)
    is_public: bool = Field(default=False, index=True)

    ai_provider: Optional[str] = None  # gpt|claude|grok|midjourney|gemini|sora
    ai_model: Optional[str] = None
    views: int = Field(default=0)

    created_at: datetime = Field(default_factory=_utcnow, index=True)
    updated_at: datetime = Field(default_factory=_utcnow, sa_column_kwargs={"onupdate": _utcnow})

    # Relationships
    user: "User" = Relationship(back_populates="prompts")
