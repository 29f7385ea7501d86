"""Identity helpers for clients and stored résumés."""
from __future__ import annotations

import re
from typing import Mapping, Optional

UNKNOWN_CLIENT = "unknown"
MAX_CV_ID_LENGTH = 80

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def client_identity(headers: Mapping[str, str]) -> str:
    """Return the first ``X-Forwarded-For`` address, or ``"unknown"``.

    Clients without the header share one identity and therefore one budget.
    """

    forwarded: Optional[str] = headers.get("x-forwarded-for")
    if not forwarded:
        return UNKNOWN_CLIENT
    first = forwarded.split(",")[0].strip()
    return first or UNKNOWN_CLIENT


def sanitize_cv_id(name: str) -> str:
    """Strip everything but letters, digits, ``_`` and ``-`` and cap the length."""

    return _UNSAFE_ID_CHARS.sub("", name or "")[:MAX_CV_ID_LENGTH]
