"""
Resolve the caller behind a request.

Sessions are issued by the external auth provider as signed JWTs whose `sub`
claim is the user id. This module only verifies the token and loads the
user; the role always comes from the database row, never from the token.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import jwt
from sqlmodel import Session

from prompthub.models.user import ROLE_ADMIN, User

logger = logging.getLogger(__name__)


class SessionTokenError(ValueError):
    pass


@dataclass(frozen=True)
class Identity:
    id: int
    role: str
    email: str
    name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` header, else None."""
    raw = (authorization or "").strip()
    if not raw:
        return None
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None
    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def decode_session_token(token: str, secret: str, algorithm: str = "HS256") -> Dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise SessionTokenError("Session token is empty.")
    try:
        payload = jwt.decode(raw, secret, algorithms=[algorithm], options={"require": ["sub"]})
    except jwt.InvalidTokenError as exc:
        raise SessionTokenError(f"Invalid session token: {exc}") from exc
    return payload


def resolve_identity(
    session: Session,
    token: Optional[str],
    secret: str,
    algorithm: str = "HS256",
) -> Optional[Identity]:
    """Identity for `token`, or None when there is no valid session."""
    if not token:
        return None

    try:
        payload = decode_session_token(token, secret, algorithm)
    except SessionTokenError as e:
        logger.info(f"Rejected session token: {e}")
        return None

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        logger.info(f"Session token has non-numeric subject: {payload.get('sub')!r}")
        return None

    user = session.get(User, user_id)
    if user is None:
        logger.info(f"Session token for unknown user {user_id}")
        return None

    return Identity(id=user.id, role=user.role, email=user.email, name=user.name)
