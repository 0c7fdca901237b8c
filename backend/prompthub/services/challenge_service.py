from typing import Optional

from sqlmodel import Session, select

from prompthub.models.challenge import JoinRequest


def get_join_status(session: Session, challenge_id: int, user_id: int) -> Optional[str]:
    """Status of the user's join request, or None if they never asked to join."""
    join_request = session.exec(
        select(JoinRequest).where(
            JoinRequest.challenge_id == challenge_id,
            JoinRequest.user_id == user_id,
        )
    ).first()
    if join_request is None:
        return None
    return join_request.status
