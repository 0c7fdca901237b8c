import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from prompthub.config import Settings
from prompthub.database import Database
from prompthub.main import create_app
from prompthub.models.user import ROLE_ADMIN, ROLE_USER, User

TEST_SECRET = "test-secret"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so ALL sessions share the same DB
# 2. A fresh engine per test, so tests never see each other's rows
# 3. The Database is injected into create_app(); the app never builds its own
# 4. Tables are created explicitly, not left to app startup


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        auth_secret=TEST_SECRET,
        database_url="sqlite:///:memory:",
        environment="test",
        cors_origins=[],
        max_body_bytes=50 * 1024 * 1024,
    )


@pytest.fixture(name="database")
def database_fixture():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database = Database(engine)
    database.init_db()
    yield database
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(database: Database):
    with database.session() as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(settings: Settings, database: Database):
    app = create_app(settings, database=database)
    with TestClient(app) as client:
        yield client


def make_token(user_id, secret: str = TEST_SECRET) -> str:
    return jwt.encode({"sub": str(user_id)}, secret, algorithm="HS256")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user.id)}"}


def _make_user(session: Session, email: str, role: str, name: str) -> User:
    user = User(email=email, name=name, role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user(session: Session) -> User:
    return _make_user(session, "alice@example.com", ROLE_USER, "Alice")


@pytest.fixture
def other_user(session: Session) -> User:
    return _make_user(session, "bob@example.com", ROLE_USER, "Bob")


@pytest.fixture
def admin(session: Session) -> User:
    return _make_user(session, "admin@example.com", ROLE_ADMIN, "Admin")
