"""
Plans and daily usage quota.

Free users may copy a limited number of prompts per day; pro users are
unlimited. The counter lives on the user row and is reset lazily the first
time it is touched on a new day. Every counted copy is also written to
`usage_log`.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional

from sqlmodel import Session, col, select

from prompthub.errors import NotFound, QuotaExceeded, ValidationFailed
from prompthub.models.usage_log import UsageLog
from prompthub.models.user import User
from prompthub.utils.json_helper import safe_json_parse, safe_json_stringify

logger = logging.getLogger(__name__)

PLAN_FREE = "free"
PLAN_PRO = "pro"
PLANS = (PLAN_FREE, PLAN_PRO)

USAGE_PROMPT_COPY = "prompt_copy"

MSG_USER_NOT_FOUND = "사용자를 찾을 수 없습니다"
MSG_INVALID_PLAN = "잘못된 플랜입니다"
MSG_FREE_COPY_LIMIT = "무료 플랜은 하루 최대 {limit}개의 프롬프트만 복사할 수 있습니다"


@dataclass(frozen=True)
class PlanLimits:
    prompt_copies_per_day: Optional[int]  # None = unlimited


def get_plan_limits(plan: str) -> PlanLimits:
    if plan == PLAN_PRO:
        return PlanLimits(prompt_copies_per_day=None)
    return PlanLimits(prompt_copies_per_day=10)


def _get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound(MSG_USER_NOT_FOUND)
    return user


def _reset_counters_if_needed(user: User, today: date) -> bool:
    if user.prompt_copies_reset_on is None or user.prompt_copies_reset_on < today:
        user.prompt_copies_today = 0
        user.prompt_copies_reset_on = today
        return True
    return False


def log_usage(session: Session, user_id: int, usage_type: str, metadata: Optional[Dict[str, Any]] = None) -> UsageLog:
    entry = UsageLog(
        user_id=user_id,
        type=usage_type,
        metadata_json=safe_json_stringify(metadata) if metadata is not None else None,
    )
    session.add(entry)
    return entry


def ensure_prompt_copy_allowed(session: Session, user_id: int, today: Optional[date] = None) -> int:
    """Count one prompt copy for the user, or raise QuotaExceeded.

    Returns the user's copy count for today after this copy.
    """
    today = today or date.today()
    user = _get_user(session, user_id)

    reset = _reset_counters_if_needed(user, today)
    limits = get_plan_limits(user.plan or PLAN_FREE)

    if limits.prompt_copies_per_day is not None and user.prompt_copies_today >= limits.prompt_copies_per_day:
        if reset:
            session.add(user)
            session.commit()
        raise QuotaExceeded(MSG_FREE_COPY_LIMIT.format(limit=limits.prompt_copies_per_day))

    user.prompt_copies_today += 1
    session.add(user)
    log_usage(session, user.id, USAGE_PROMPT_COPY, {"total": user.prompt_copies_today})
    session.commit()
    return user.prompt_copies_today


def get_plan_status(session: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    user = _get_user(session, user_id)
    if _reset_counters_if_needed(user, today):
        session.add(user)
        session.commit()
        session.refresh(user)

    plan = user.plan or PLAN_FREE
    return {
        "plan": plan,
        "prompt_copies_today": user.prompt_copies_today,
        "prompt_copy_limit": get_plan_limits(plan).prompt_copies_per_day,
    }


def set_user_plan(session: Session, user_id: int, plan: str, today: Optional[date] = None) -> None:
    if plan not in PLANS:
        raise ValidationFailed(MSG_INVALID_PLAN)
    user = _get_user(session, user_id)
    user.plan = plan
    user.prompt_copies_today = 0
    user.prompt_copies_reset_on = today or date.today()
    session.add(user)
    session.commit()
    logger.info(f"User {user_id} switched to plan {plan}")


def get_usage_logs(session: Session, user_id: int, limit: int = 20) -> List[Dict[str, Any]]:
    rows = session.exec(
        select(UsageLog)
        .where(UsageLog.user_id == user_id)
        .order_by(col(UsageLog.created_at).desc(), col(UsageLog.id).desc())
        .limit(limit)
    ).all()
    return [
        {
            "id": row.id,
            "type": row.type,
            "metadata": safe_json_parse(row.metadata_json, None),
            "created_at": row.created_at,
        }
        for row in rows
    ]
