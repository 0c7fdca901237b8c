"""
Logging wrapper for handler boundaries.

In development the full exception (with traceback) is logged. Elsewhere only
the message and a timestamp are logged, so query text and stack frames stay
out of production logs.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger("prompthub")

_development = False


def configure(level: str = "INFO", development: bool = False) -> None:
    global _development
    _development = development
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.setLevel(level)


def log_error(context: str, error: BaseException) -> None:
    if _development:
        logger.error(f"[{context}] {error}", exc_info=error)
    else:
        message = str(error) if isinstance(error, Exception) else "Unknown error"
        logger.error(
            f"[{context}] %s",
            {"message": message, "timestamp": datetime.now(timezone.utc).isoformat()},
        )


def log_info(context: str, message: str, data: Optional[Dict[str, Any]] = None) -> None:
    if _development:
        logger.info(f"[{context}] {message} {data or ''}".rstrip())


def log_warning(context: str, message: str, data: Optional[Dict[str, Any]] = None) -> None:
    logger.warning(f"[{context}] {message} {data or ''}".rstrip())
