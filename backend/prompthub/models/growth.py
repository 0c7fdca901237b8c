from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel


class GrowthTopic(SQLModel, table=True):
    __tablename__ = "growth_topic"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    title: str
    description: Optional[str] = None
    level: str = Field(default="beginner")  # beginner|intermediate|advanced
    duration: int = Field(default=0)  # Planned length in days
    goal: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    progress: List["GrowthProgress"] = Relationship(back_populates="topic")


class GrowthProgress(SQLModel, table=True):
    __tablename__ = "growth_progress"
    __table_args__ = (
        SAUniqueConstraint("topic_id", "day", name="uq_growth_progress_topic_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    topic_id: int = Field(foreign_key="growth_topic.id", index=True)
    day: int  # 1-based
    status: str = Field(default="pending")  # pending|in_progress|completed

    topic: GrowthTopic = Relationship(back_populates="progress")
