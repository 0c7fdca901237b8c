from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import guarded
from prompthub.schemas import CamelModel
from prompthub.services import growth_service

router = APIRouter()

MSG_TOPICS_FAILED = "성장하기 목록을 가져오는 중 오류가 발생했습니다"


class PublicGrowthTopic(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    level: str
    duration: int
    goal: Optional[str] = None
    created_at: datetime
    progress: int  # percent of days completed


class PublicGrowthTopicsResponse(CamelModel):
    topics: List[PublicGrowthTopic]


@router.get("/growth/topics/public", response_model=PublicGrowthTopicsResponse)
def list_public_topics(session: Session = Depends(get_session)):
    """Newest growth topics (no auth)"""
    with guarded("growth.topics.public", MSG_TOPICS_FAILED):
        return PublicGrowthTopicsResponse(topics=growth_service.find_public_growth_topics(session))
