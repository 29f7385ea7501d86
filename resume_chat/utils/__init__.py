"""Utility helpers."""
from .identity import UNKNOWN_CLIENT, client_identity, sanitize_cv_id  # noqa: F401
from .text import normalize_whitespace  # noqa: F401
