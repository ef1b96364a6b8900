"""
Field coercers for loosely-typed Xano payloads.

Every function here is total: malformed input degrades to an empty string,
``None`` or the input itself. Nothing raises.
"""
import json
import math
import re
from typing import Any, Optional, Union
from urllib.parse import urlsplit

# Image CDNs that refuse hotlinked requests (profile-photo hosts)
BLOCKED_IMAGE_HOSTS = ("licdn.com",)

_NUMERIC_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_INTEGRAL_RE = re.compile(r"[+-]?\d+", re.ASCII)
_BASE64_RE = re.compile(r"[A-Za-z0-9+/]+={0,2}")
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)

Number = Union[int, float]


def to_safe_string(value: Any) -> str:
    """Render any JSON value as display text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # bool is an int subclass, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def coerce_number(value: Any) -> Optional[Number]:
    """Return a finite number for numeric values and numeric-looking strings, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text or not _NUMERIC_RE.fullmatch(text):
            return None
        if _INTEGRAL_RE.fullmatch(text):
            return int(text)
        parsed = float(text)
        return parsed if math.isfinite(parsed) else None
    return None


def coerce_int(value: Any) -> Optional[int]:
    """Like coerce_number but truncates to int."""
    number = coerce_number(value)
    if number is None:
        return None
    return int(number)


def leading_int(value: Any) -> Optional[int]:
    """Parse the leading integer of a string the way ``parseInt`` does ("12abc" → 12)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = re.match(r"\s*([+-]?\d+)", value, re.ASCII)
        if match:
            return int(match.group(1))
    return None


def _is_blocked_host(hostname: str) -> bool:
    host = hostname.lower()
    return any(host == blocked or host.endswith("." + blocked) for blocked in BLOCKED_IMAGE_HOSTS)


def build_image_src(raw_value: Any = None) -> Optional[str]:
    """
    Classify a logo field into something an <img> can render.

    - data URIs pass through
    - http(s) URLs pass through unless the host blocks hotlinking
    - bare base64 blobs are wrapped as a JPEG data URI
    - anything else is None
    """
    if raw_value is None:
        return None
    text = to_safe_string(raw_value).strip()
    if not text:
        return None
    if text[:5].lower() == "data:":
        return text
    if _HTTP_RE.match(text):
        try:
            hostname = urlsplit(text).hostname
        except ValueError:
            return None
        if not hostname or _is_blocked_host(hostname):
            return None
        return text
    if _BASE64_RE.fullmatch(text):
        return f"data:image/jpeg;base64,{text}"
    return None


def _unquote(part: str) -> str:
    if part.startswith('"'):
        part = part[1:]
    if part.endswith('"'):
        part = part[:-1]
    return part


def clean_braced_list(raw: Any) -> Any:
    """Turn a serialized set like ``{"Fund A","Fund B"}`` into ``Fund A, Fund B``."""
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if not (len(text) >= 2 and text.startswith("{") and text.endswith("}")):
        return raw
    parts = [_unquote(part.strip()).strip() for part in text[1:-1].split(",")]
    return ", ".join(part for part in parts if part)


def decode_html_entities(html: Any) -> str:
    """Decode an entity-escaped HTML blob (thesis text is stored escaped)."""
    text = to_safe_string(html)
    if "&lt;" in text and "&gt;" in text:
        return text.replace("&lt;", "<").replace("&gt;", ">").replace("&amp;", "&")
    return text
