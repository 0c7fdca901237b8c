"""
Request-scoped dependencies: settings, caller identity, access requirements.

`require_user` / `require_admin` run before the request body is validated,
so an anonymous caller gets 401 regardless of what they sent.
"""
from typing import Optional

from fastapi import Depends, Header, Request
from sqlmodel import Session

from prompthub.config import Settings
from prompthub.database import get_session
from prompthub.errors import guarded
from prompthub.services.authorization import Requirement, require
from prompthub.services.session_resolver import Identity, extract_bearer_token, resolve_identity


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_identity(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
) -> Optional[Identity]:
    with guarded("session.resolve"):
        return resolve_identity(
            session,
            extract_bearer_token(authorization),
            settings.auth_secret,
            settings.auth_algorithm,
        )


def require_user(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    return require(identity, Requirement.AUTHENTICATED)


def require_admin(identity: Optional[Identity] = Depends(get_identity)) -> Identity:
    return require(identity, Requirement.ADMIN)
