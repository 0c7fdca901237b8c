"""
Prompt persistence.

Narrow, purpose-built queries over the `prompt` table. JSON list columns are
encoded here on write; decoding happens in the route projections.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlmodel import Session, col, func, or_, select

from prompthub.errors import ValidationFailed
from prompthub.models.prompt import Prompt
from prompthub.utils.json_helper import safe_json_stringify
from prompthub.utils.sanitizer import MAX_CODE_LENGTH, sanitize_code, sanitize_html, sanitize_text, sanitize_url

logger = logging.getLogger(__name__)

PUBLIC_PAGE_SIZE = 20

SORT_LATEST = "latest"
SORT_POPULAR = "popular"
SORTS = (SORT_LATEST, SORT_POPULAR)

MSG_TOPIC_AND_PROMPT_REQUIRED = "주제와 프롬프트는 필수입니다"
MSG_PARENT_NOT_FOUND = "원본 프롬프트를 찾을 수 없습니다"
MSG_PROMPT_TOO_LONG = "프롬프트는 최대 {limit}자까지 저장할 수 있습니다"


@dataclass
class PromptFields:
    """Writable prompt fields as received from a save request."""

    topic: str = ""
    prompt: str = ""
    category: Optional[str] = None
    recommended_tools: Optional[list] = None
    tips: Optional[list] = None
    image_url: Optional[str] = None
    parent_id: Optional[int] = None
    is_public: Optional[bool] = None
    ai_provider: Optional[str] = None
    ai_model: Optional[str] = None


def _clean_image_url(value: Optional[str]) -> Optional[str]:
    """Inline image data is kept as is; anything else must be an http(s) URL."""
    if not value:
        return None
    if value.startswith("data:image/"):
        return value
    return sanitize_url(value) or None


def _clean_tips(tips: Optional[list]) -> list:
    # Tips may carry light formatting
    return [sanitize_html(t) if isinstance(t, str) else t for t in (tips or [])]


def _validate_required(fields: PromptFields) -> Tuple[str, str]:
    topic = sanitize_text(fields.topic or "")
    if len(fields.prompt or "") > MAX_CODE_LENGTH:
        raise ValidationFailed(MSG_PROMPT_TOO_LONG.format(limit=MAX_CODE_LENGTH))
    text = sanitize_code(fields.prompt or "")
    if not topic or not text.strip():
        raise ValidationFailed(MSG_TOPIC_AND_PROMPT_REQUIRED)
    return topic, text


def _public_filters(query: Optional[str], category: Optional[str], ai_provider: Optional[str]) -> list:
    filters = [Prompt.parent_id == None, Prompt.is_public == True]  # noqa: E711,E712
    if query:
        pattern = f"%{query}%"
        filters.append(or_(col(Prompt.topic).ilike(pattern), col(Prompt.prompt).ilike(pattern)))
    if category:
        filters.append(Prompt.category == category)
    if ai_provider:
        filters.append(Prompt.ai_provider == ai_provider)
    return filters


def find_public_prompts(
    session: Session,
    limit: int = PUBLIC_PAGE_SIZE,
    query: Optional[str] = None,
    category: Optional[str] = None,
    ai_provider: Optional[str] = None,
    sort: str = SORT_LATEST,
    offset: int = 0,
) -> List[Prompt]:
    """Root, public prompts, newest first (or most viewed with sort="popular")."""
    stmt = select(Prompt).where(*_public_filters(query, category, ai_provider))

    if sort == SORT_POPULAR:
        stmt = stmt.order_by(col(Prompt.views).desc(), col(Prompt.created_at).desc(), col(Prompt.id).desc())
    else:
        stmt = stmt.order_by(col(Prompt.created_at).desc(), col(Prompt.id).desc())

    stmt = stmt.offset(max(offset, 0)).limit(limit)
    return list(session.exec(stmt).all())


def count_public_prompts(
    session: Session,
    query: Optional[str] = None,
    category: Optional[str] = None,
    ai_provider: Optional[str] = None,
) -> int:
    """Number of prompts `find_public_prompts` would match without paging."""
    total = session.exec(
        select(func.count()).select_from(Prompt).where(*_public_filters(query, category, ai_provider))
    ).one()
    return int(total or 0)


def find_prompt_by_id(session: Session, prompt_id: int) -> Optional[Prompt]:
    return session.get(Prompt, prompt_id)


def create_prompt(session: Session, user_id: int, fields: PromptFields) -> Prompt:
    """Create a prompt owned by `user_id`. Nothing is written if validation fails."""
    topic, text = _validate_required(fields)

    if fields.parent_id is not None and session.get(Prompt, fields.parent_id) is None:
        raise ValidationFailed(MSG_PARENT_NOT_FOUND)

    prompt = Prompt(
        user_id=user_id,
        topic=topic,
        prompt=text,
        category=fields.category or None,
        recommended_tools=safe_json_stringify(fields.recommended_tools or []),
        tips=safe_json_stringify(_clean_tips(fields.tips)),
        image_url=_clean_image_url(fields.image_url),
        parent_id=fields.parent_id,
        is_public=bool(fields.is_public) if fields.is_public is not None else False,
        ai_provider=fields.ai_provider or None,
        ai_model=fields.ai_model or None,
    )
    session.add(prompt)
    session.commit()
    session.refresh(prompt)
    logger.info(f"Prompt {prompt.id} created by user {user_id} (parent={prompt.parent_id})")
    return prompt


def update_prompt(session: Session, prompt: Prompt, fields: PromptFields) -> Prompt:
    """Overwrite the editable content of an existing prompt.

    parent_id and is_public are not changed by an update.
    """
    topic, text = _validate_required(fields)

    prompt.topic = topic
    prompt.prompt = text
    prompt.category = fields.category or None
    prompt.recommended_tools = safe_json_stringify(fields.recommended_tools or [])
    prompt.tips = safe_json_stringify(_clean_tips(fields.tips))
    prompt.image_url = _clean_image_url(fields.image_url)
    prompt.ai_provider = fields.ai_provider or None
    prompt.ai_model = fields.ai_model or None
    prompt.updated_at = datetime.now(timezone.utc)

    session.add(prompt)
    session.commit()
    session.refresh(prompt)
    return prompt


def delete_prompt(session: Session, prompt: Prompt) -> int:
    """Delete a prompt together with the owner's refinements below it. Returns rows deleted.

    Refinements saved by other users are detached and become root prompts.
    """
    to_delete = [prompt]
    detached = []
    frontier = [prompt.id]
    while frontier:
        children = session.exec(select(Prompt).where(col(Prompt.parent_id).in_(frontier))).all()
        own = [c for c in children if c.user_id == prompt.user_id]
        detached.extend(c for c in children if c.user_id != prompt.user_id)
        to_delete.extend(own)
        frontier = [c.id for c in own]

    for row in detached:
        row.parent_id = None
        session.add(row)
    session.flush()

    # Leaves first so no row is left pointing at a deleted parent
    for row in reversed(to_delete):
        session.delete(row)
        session.flush()
    session.commit()
    if detached:
        logger.info(f"Prompt {prompt.id} deleted; detached {len(detached)} refinement(s) of other users")
    return len(to_delete)


def increment_views(session: Session, prompt: Prompt) -> None:
    prompt.views = (prompt.views or 0) + 1
    session.add(prompt)
    session.commit()
    session.refresh(prompt)


def list_user_prompts(session: Session, user_id: int) -> List[Prompt]:
    stmt = (
        select(Prompt)
        .where(Prompt.user_id == user_id)
        .order_by(col(Prompt.created_at).desc(), col(Prompt.id).desc())
    )
    return list(session.exec(stmt).all())


def refinements_by_parent(session: Session, parent_ids: List[int]) -> Dict[int, List[Prompt]]:
    """Direct refinements for each parent id, newest first."""
    if not parent_ids:
        return {}
    stmt = (
        select(Prompt)
        .where(col(Prompt.parent_id).in_(parent_ids))
        .order_by(col(Prompt.created_at).desc(), col(Prompt.id).desc())
    )
    grouped: Dict[int, List[Prompt]] = {pid: [] for pid in parent_ids}
    for child in session.exec(stmt).all():
        grouped[child.parent_id].append(child)
    return grouped
