"""
JSON helpers for text columns that hold JSON (`recommended_tools`, `tips`).

Stored text can be empty or malformed (legacy rows, manual edits). Reads must
fall back to a caller-supplied default instead of failing the request, and
writes must never raise on unserializable input.
"""
import json
import logging
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_JSON_PAYLOAD = "{}"


def safe_json_parse(json_string: Any, fallback: T) -> Any:
    """Parse JSON text; return `fallback` for None, blank or malformed input."""
    if json_string is None or not isinstance(json_string, (str, bytes, bytearray)):
        return fallback
    if isinstance(json_string, str) and not json_string.strip():
        return fallback
    if isinstance(json_string, (bytes, bytearray)) and not json_string.strip():
        return fallback

    try:
        return json.loads(json_string)
    except (ValueError, TypeError) as e:
        logger.warning(f"JSON parse error: {e}")
        return fallback


def safe_json_stringify(data: Any, fallback: str = DEFAULT_JSON_PAYLOAD) -> str:
    """Serialize `data` to JSON text; return `fallback` if it can't be serialized."""
    try:
        return json.dumps(data, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        logger.error(f"JSON stringify error: {e}")
        return fallback


def is_valid_array(value: Any) -> bool:
    return isinstance(value, list)


def is_valid_object(value: Any) -> bool:
    return isinstance(value, dict)


def parse_json_list(json_string: Any) -> list:
    """Decode a stored JSON list column; anything that isn't a list becomes []."""
    value = safe_json_parse(json_string, [])
    return value if is_valid_array(value) else []
