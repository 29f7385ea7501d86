"""Text helpers."""
from __future__ import annotations

import re

_TABS_AND_CR = re.compile(r"[\t\r]+")
_SPACE_RUNS = re.compile(r" {2,}")
_BLANK_LINES = re.compile(r"\n{3,}")


def normalize_whitespace(text: str) -> str:
    """Collapse tabs, repeated spaces and long blank runs left by PDF extraction."""

    text = _TABS_AND_CR.sub(" ", text)
    text = _SPACE_RUNS.sub(" ", text)
    text = _BLANK_LINES.sub("\n\n", text)
    return text.strip()
