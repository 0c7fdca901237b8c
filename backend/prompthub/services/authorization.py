"""
Authorization gate shared by every protected route.

`authorize()` is a pure predicate; `enforce()` turns a deny decision into the
matching ApiError. Callers that need ownership must load the resource first
so a missing resource is reported as 404 before ownership is considered.
"""
from enum import Enum
from typing import Optional

from prompthub.errors import Forbidden, Unauthenticated
from prompthub.services.session_resolver import Identity


class Requirement(str, Enum):
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"
    OWNER = "owner"


class Decision(str, Enum):
    ALLOW = "allow"
    DENY_UNAUTHENTICATED = "deny_unauthenticated"
    DENY_FORBIDDEN = "deny_forbidden"


def authorize(
    identity: Optional[Identity],
    requirement: Requirement,
    owner_id: Optional[int] = None,
) -> Decision:
    if identity is None:
        return Decision.DENY_UNAUTHENTICATED

    if requirement == Requirement.AUTHENTICATED:
        return Decision.ALLOW

    if requirement == Requirement.ADMIN:
        return Decision.ALLOW if identity.is_admin else Decision.DENY_FORBIDDEN

    if requirement == Requirement.OWNER:
        if owner_id is not None and owner_id == identity.id:
            return Decision.ALLOW
        return Decision.DENY_FORBIDDEN

    raise ValueError(f"Unknown requirement: {requirement!r}")


def enforce(
    decision: Decision,
    unauthenticated_message: Optional[str] = None,
    forbidden_message: Optional[str] = None,
) -> None:
    if decision == Decision.DENY_UNAUTHENTICATED:
        raise Unauthenticated(unauthenticated_message)
    if decision == Decision.DENY_FORBIDDEN:
        raise Forbidden(forbidden_message)


def require(
    identity: Optional[Identity],
    requirement: Requirement,
    owner_id: Optional[int] = None,
    forbidden_message: Optional[str] = None,
) -> Identity:
    """authorize + enforce; returns the (now known non-None) identity."""
    enforce(authorize(identity, requirement, owner_id), forbidden_message=forbidden_message)
    return identity
