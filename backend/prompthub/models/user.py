from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from prompthub.models.prompt import Prompt

ROLE_ADMIN = "admin"
ROLE_USER = "user"


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: Optional[str] = None
    email: str = Field(index=True, unique=True)
    role: str = Field(default=ROLE_USER)  # admin|user

    # Plan + daily copy quota
    plan: str = Field(default="free")  # free|pro
    prompt_copies_today: int = Field(default=0)
    prompt_copies_reset_on: Optional[date] = Field(default=None)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    prompts: List["Prompt"] = Relationship(back_populates="user")
