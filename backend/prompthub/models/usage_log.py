"""Usage log model for metered actions (prompt copies)."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class UsageLog(SQLModel, table=True):
    """One row per counted action, newest read first."""

    __tablename__ = "usage_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    type: str  # prompt_copy
    metadata_json: Optional[str] = Field(default=None)  # JSON text, e.g. {"total": 3}
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
