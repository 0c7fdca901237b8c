"""Public growth-topic listing with a derived completion percentage."""

from typing import Any, Dict, List

from sqlmodel import Session, col, func, select

from prompthub.models.growth import GrowthProgress, GrowthTopic

GROWTH_PAGE_SIZE = 10


def progress_percentage(duration: int, completed_days: int) -> int:
    """Completed days as a rounded percentage of the planned duration (0 if no duration)."""
    if not duration or duration <= 0:
        return 0
    # Round half up
    return int(completed_days * 100 / duration + 0.5)


def find_public_growth_topics(session: Session, limit: int = GROWTH_PAGE_SIZE) -> List[Dict[str, Any]]:
    topics = session.exec(
        select(GrowthTopic)
        .order_by(col(GrowthTopic.created_at).desc(), col(GrowthTopic.id).desc())
        .limit(limit)
    ).all()

    topic_ids = [t.id for t in topics]
    completed: Dict[int, int] = {}
    if topic_ids:
        rows = session.exec(
            select(GrowthProgress.topic_id, func.count())
            .where(col(GrowthProgress.topic_id).in_(topic_ids), GrowthProgress.status == "completed")
            .group_by(GrowthProgress.topic_id)
        ).all()
        completed = {topic_id: int(count or 0) for topic_id, count in rows}

    return [
        {
            "id": t.id,
            "title": t.title,
            "description": t.description,
            "level": t.level,
            "duration": t.duration,
            "goal": t.goal,
            "created_at": t.created_at,
            "progress": progress_percentage(t.duration, completed.get(t.id, 0)),
        }
        for t in topics
    ]
