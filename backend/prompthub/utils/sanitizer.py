"""
Sanitizers for user-supplied text.

- sanitize_html: keep a small set of formatting tags
- sanitize_text: plain text fields (titles, names, topics)
- sanitize_code: code snippets, formatting preserved
- sanitize_url: http/https only
"""
import re
from urllib.parse import urlsplit

import bleach

ALLOWED_TAGS = ["b", "i", "em", "strong", "a", "p", "br", "ul", "ol", "li", "code", "pre"]
ALLOWED_ATTRIBUTES = {"a": ["href"]}
ALLOWED_PROTOCOLS = ["http", "https", "mailto"]

MAX_TEXT_LENGTH = 10_000
MAX_CODE_LENGTH = 50_000

_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE)
_SCRIPT_BLOCK_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_BLOCK_RE = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)


def sanitize_html(value: str) -> str:
    return bleach.clean(
        value or "",
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )


def sanitize_text(value: str) -> str:
    # bleach strips the tags; whatever angle brackets survive are dropped
    s = bleach.clean(value or "", tags=[], attributes={}, strip=True, strip_comments=True)
    s = s.replace("&lt;", "").replace("&gt;", "").replace("&amp;", "&")
    s = s.replace("<", "").replace(">", "")
    s = _JS_PROTOCOL_RE.sub("", s)
    s = _EVENT_HANDLER_RE.sub("", s)
    return s.strip()[:MAX_TEXT_LENGTH]


def sanitize_code(value: str) -> str:
    s = _SCRIPT_BLOCK_RE.sub("", value or "")
    s = _IFRAME_BLOCK_RE.sub("", s)
    return s[:MAX_CODE_LENGTH]


def sanitize_url(value: str) -> str:
    raw = (value or "").strip()
    if not raw:
        return ""
    try:
        parts = urlsplit(raw)
    except ValueError:
        return ""
    if parts.scheme.lower() not in ("http", "https") or not parts.netloc:
        return ""
    return parts.geturl()
