"""Encoding and decoding of what a student scans or types.

The QR code carries a URI ``{base}/student/class/{class_id}?qr={token}``.
For manual entry the same pair may be typed as ``CLASS_ID:TOKEN`` or
``CLASS_ID TOKEN``. Every accepted form parses to the same ScanPayload.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, quote, unquote, urlencode, urlsplit

from ..core.constants import SCAN_PATH_PREFIX, SCAN_TOKEN_PARAM
from ..core.exceptions import WrongSessionError
from .model import ScanPayload

_MANUAL_RE = re.compile(r"^(?P<class_id>[^\s:/?]+)\s*[:\s]\s*(?P<token>[^\s]+)$")


def build_scan_uri(base_url: str, class_id: str, token: str) -> str:
    base = (base_url or "").rstrip("/")
    query = urlencode({SCAN_TOKEN_PARAM: token})
    return f"{base}{SCAN_PATH_PREFIX}{quote(class_id, safe='')}?{query}"


def parse_scan_payload(raw: str) -> ScanPayload:
    text = (raw or "").strip()
    if not text:
        raise WrongSessionError("Empty code")

    if "://" in text or text.startswith("/"):
        return _parse_uri(text)

    m = _MANUAL_RE.match(text)
    if not m:
        raise WrongSessionError("Unrecognized attendance code")
    return ScanPayload(class_id=m.group("class_id"), token=m.group("token"))


def _parse_uri(text: str) -> ScanPayload:
    parts = urlsplit(text)
    path = parts.path or ""

    idx = path.find(SCAN_PATH_PREFIX)
    if idx < 0:
        raise WrongSessionError("Not an attendance link")

    segment = path[idx + len(SCAN_PATH_PREFIX):].strip("/")
    class_id = unquote(segment.split("/", 1)[0]) if segment else ""
    tokens = parse_qs(parts.query).get(SCAN_TOKEN_PARAM) or []
    token = tokens[0].strip() if tokens else ""

    if not class_id:
        raise WrongSessionError("Attendance link has no class")
    if not token:
        raise WrongSessionError("Attendance link has no session token")
    return ScanPayload(class_id=class_id, token=token)
