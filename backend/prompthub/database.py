from pathlib import Path
from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from prompthub.config import Settings


class Database:
    """
    Owns the engine (and its connection pool) for the lifetime of the process.

    Built once by `create_app()` and stored on `app.state.db`; handlers reach
    it only through the `get_session` dependency.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

        if settings.is_sqlite and ":memory:" not in settings.database_url:
            db_path = settings.database_url.replace("sqlite:///", "", 1)
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        engine = create_engine(
            settings.database_url,
            echo=settings.sql_echo,
            connect_args=connect_args,
        )
        return cls(engine)

    def init_db(self) -> None:
        """Create all tables"""
        # Import all models to ensure they're registered with SQLModel metadata
        from prompthub.models.challenge import (  # noqa: F401
            Challenge,
            ChatMessage,
            ChatRoom,
            ChatRoomMember,
            JoinRequest,
        )
        from prompthub.models.growth import GrowthProgress, GrowthTopic  # noqa: F401
        from prompthub.models.prompt import Prompt  # noqa: F401
        from prompthub.models.usage_log import UsageLog  # noqa: F401
        from prompthub.models.user import User  # noqa: F401

        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_session(request: Request) -> Generator[Session, None, None]:
    """Get database session"""
    with request.app.state.db.session() as session:
        yield session
