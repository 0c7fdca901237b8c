import logging
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from prompthub.database import get_session
from prompthub.errors import NotFound, guarded
from prompthub.models.prompt import Prompt
from prompthub.schemas import CamelModel, SuccessResponse, UserSummary
from prompthub.services import prompt_service
from prompthub.services.authorization import Requirement, require
from prompthub.services.prompt_service import PromptFields
from prompthub.services.session_resolver import Identity
from prompthub.routes.deps import require_user
from prompthub.utils.json_helper import parse_json_list
from prompthub.utils.logger import log_info

logger = logging.getLogger(__name__)

router = APIRouter()

MSG_PROMPT_NOT_FOUND = "프롬프트를 찾을 수 없습니다"
MSG_PROMPT_FORBIDDEN = "접근 권한이 없습니다"
MSG_EDIT_FORBIDDEN = "수정 권한이 없습니다"
MSG_DELETE_FORBIDDEN = "삭제 권한이 없습니다"
MSG_LIST_PUBLIC_FAILED = "프롬프트 목록을 불러오는데 실패했습니다"
MSG_LIST_OWN_FAILED = "프롬프트 목록을 가져오는 중 오류가 발생했습니다"
MSG_FETCH_FAILED = "프롬프트를 불러오는데 실패했습니다"
MSG_SAVE_FAILED = "프롬프트 저장 중 오류가 발생했습니다"
MSG_DELETE_FAILED = "프롬프트 삭제에 실패했습니다"


# ── Request/response models ──────────────────────────────────────────────

class PublicPromptAuthor(UserSummary):
    role: Optional[str] = None


class PublicPrompt(CamelModel):
    id: int
    topic: str
    prompt: str
    category: Optional[str] = None
    recommended_tools: List[Any]
    tips: List[Any]
    image_url: Optional[str] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None
    views: int
    created_at: datetime
    user: PublicPromptAuthor


class PublicPromptsResponse(CamelModel):
    prompts: List[PublicPrompt]
    total: int
    limit: int
    offset: int


class Refinement(CamelModel):
    id: int
    topic: str
    created_at: datetime


class OwnPrompt(CamelModel):
    id: int
    topic: str
    prompt: str
    recommended_tools: List[Any]
    tips: List[Any]
    parent_id: Optional[int] = None
    is_public: bool
    created_at: datetime
    refinements: List[Refinement]


class OwnPromptsResponse(CamelModel):
    prompts: List[OwnPrompt]


class PromptDetail(CamelModel):
    id: int
    topic: str
    prompt: str
    category: Optional[str] = None
    recommended_tools: List[Any]
    tips: List[Any]
    image_url: Optional[str] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None
    parent_id: Optional[int] = None
    is_public: bool
    views: int
    is_owner: bool
    created_at: datetime
    user: UserSummary


class SavePromptRequest(CamelModel):
    id: Optional[int] = None
    topic: Optional[str] = None
    prompt: Optional[str] = None
    category: Optional[str] = None
    recommended_tools: Optional[List[Any]] = None
    tips: Optional[List[Any]] = None
    parent_id: Optional[int] = None
    image_url: Optional[str] = None
    is_public: Optional[bool] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None

    def to_fields(self) -> PromptFields:
        return PromptFields(
            topic=self.topic or "",
            prompt=self.prompt or "",
            category=self.category,
            recommended_tools=self.recommended_tools,
            tips=self.tips,
            image_url=self.image_url,
            parent_id=self.parent_id,
            is_public=self.is_public,
            ai_provider=self.ai_provider,
            ai_model=self.ai_model,
        )


class SavedPrompt(CamelModel):
    id: int
    topic: str
    image_url: Optional[str] = None
    created_at: datetime


class SavePromptResponse(CamelModel):
    success: bool = True
    id: int
    prompt: SavedPrompt


# ── Projections ──────────────────────────────────────────────────────────

def _public_prompt(prompt: Prompt) -> PublicPrompt:
    user = prompt.user
    return PublicPrompt(
        id=prompt.id,
        topic=prompt.topic,
        prompt=prompt.prompt,
        category=prompt.category,
        recommended_tools=parse_json_list(prompt.recommended_tools),
        tips=parse_json_list(prompt.tips),
        image_url=prompt.image_url,
        ai_provider=prompt.ai_provider,
        ai_model=prompt.ai_model,
        views=prompt.views,
        created_at=prompt.created_at,
        user=PublicPromptAuthor(id=user.id, name=user.name, email=user.email, role=user.role),
    )


def _prompt_detail(prompt: Prompt, identity: Identity) -> PromptDetail:
    user = prompt.user
    return PromptDetail(
        id=prompt.id,
        topic=prompt.topic,
        prompt=prompt.prompt,
        category=prompt.category,
        recommended_tools=parse_json_list(prompt.recommended_tools),
        tips=parse_json_list(prompt.tips),
        image_url=prompt.image_url,
        ai_provider=prompt.ai_provider,
        ai_model=prompt.ai_model,
        parent_id=prompt.parent_id,
        is_public=prompt.is_public,
        views=prompt.views,
        is_owner=prompt.user_id == identity.id,
        created_at=prompt.created_at,
        user=UserSummary(id=user.id, name=user.name, email=user.email),
    )


def _load_owned(session: Session, prompt_id: int, identity: Identity, forbidden_message: str) -> Prompt:
    """Existence first (404), then ownership (403)."""
    prompt = prompt_service.find_prompt_by_id(session, prompt_id)
    if prompt is None:
        raise NotFound(MSG_PROMPT_NOT_FOUND)
    require(identity, Requirement.OWNER, owner_id=prompt.user_id, forbidden_message=forbidden_message)
    return prompt


# ── Routes ───────────────────────────────────────────────────────────────

@router.get("/prompts/public", response_model=PublicPromptsResponse)
def list_public_prompts(
    q: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
    ai_provider: Optional[str] = Query(default=None, alias="aiProvider"),
    sort: str = Query(default=prompt_service.SORT_LATEST),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_session),
):
    """Root, public prompts (no auth), a page of 20 at `offset`.

    `sort` is "latest" (default) or "popular" (most viewed); other values
    fall back to latest.
    """
    with guarded("prompts.public", MSG_LIST_PUBLIC_FAILED):
        filters = {
            "query": (q or "").strip() or None,
            "category": category or None,
            "ai_provider": ai_provider or None,
        }
        if sort not in prompt_service.SORTS:
            sort = prompt_service.SORT_LATEST
        prompts = prompt_service.find_public_prompts(session, sort=sort, offset=offset, **filters)
        total = prompt_service.count_public_prompts(session, **filters)
        return PublicPromptsResponse(
            prompts=[_public_prompt(p) for p in prompts],
            total=total,
            limit=prompt_service.PUBLIC_PAGE_SIZE,
            offset=offset,
        )


@router.get("/prompts/list", response_model=OwnPromptsResponse)
def list_own_prompts(
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """The caller's prompts with their direct refinements"""
    with guarded("prompts.list", MSG_LIST_OWN_FAILED):
        prompts = prompt_service.list_user_prompts(session, identity.id)
        refinements = prompt_service.refinements_by_parent(session, [p.id for p in prompts])
        return OwnPromptsResponse(
            prompts=[
                OwnPrompt(
                    id=p.id,
                    topic=p.topic,
                    prompt=p.prompt,
                    recommended_tools=parse_json_list(p.recommended_tools),
                    tips=parse_json_list(p.tips),
                    parent_id=p.parent_id,
                    is_public=p.is_public,
                    created_at=p.created_at,
                    refinements=[
                        Refinement(id=r.id, topic=r.topic, created_at=r.created_at)
                        for r in refinements.get(p.id, [])
                    ],
                )
                for p in prompts
            ]
        )


@router.post("/prompts/save", response_model=SavePromptResponse)
def save_prompt(
    body: SavePromptRequest,
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Create a prompt, or update one of the caller's prompts when `id` is given"""
    with guarded("prompts.save", MSG_SAVE_FAILED):
        fields = body.to_fields()
        if body.id is not None:
            existing = _load_owned(session, body.id, identity, MSG_EDIT_FORBIDDEN)
            saved = prompt_service.update_prompt(session, existing, fields)
        else:
            saved = prompt_service.create_prompt(session, identity.id, fields)
        log_info("prompts.save", "saved prompt", {"id": saved.id, "updated": body.id is not None})

        return SavePromptResponse(
            id=saved.id,
            prompt=SavedPrompt(
                id=saved.id,
                topic=saved.topic,
                image_url=saved.image_url,
                created_at=saved.created_at,
            ),
        )


@router.get("/prompts/{prompt_id}", response_model=PromptDetail)
def get_prompt(
    prompt_id: int,
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Full prompt with decoded JSON fields (owner only)"""
    with guarded("prompts.detail", MSG_FETCH_FAILED):
        prompt = _load_owned(session, prompt_id, identity, MSG_PROMPT_FORBIDDEN)
        prompt_service.increment_views(session, prompt)
        return _prompt_detail(prompt, identity)


@router.delete("/prompts/{prompt_id}", response_model=SuccessResponse)
def delete_prompt(
    prompt_id: int,
    identity: Identity = Depends(require_user),
    session: Session = Depends(get_session),
):
    """Delete one of the caller's prompts and its refinements"""
    with guarded("prompts.delete", MSG_DELETE_FAILED):
        prompt = _load_owned(session, prompt_id, identity, MSG_DELETE_FORBIDDEN)
        deleted = prompt_service.delete_prompt(session, prompt)
        logger.info(f"User {identity.id} deleted prompt {prompt_id} ({deleted} rows)")
        return SuccessResponse()
