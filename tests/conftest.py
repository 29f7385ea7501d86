from __future__ import annotations

from pathlib import Path

import fitz
import pytest


def make_pdf(path: Path, *lines: str) -> Path:
    """Write a one-page PDF containing ``lines``."""

    doc = fitz.open()
    page = doc.new_page()
    y = 72
    for line in lines:
        page.insert_text((72, y), line)
        y += 18
    doc.save(str(path))
    doc.close()
    return path


@pytest.fixture()
def sample_pdf(tmp_path: Path) -> Path:
    return make_pdf(tmp_path / "sample.pdf", "Jane Doe", "Senior Python Engineer")
