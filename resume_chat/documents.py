"""PDF text extraction and preview rendering backed by PyMuPDF."""
from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF

from resume_chat.utils import normalize_whitespace

LOGGER = logging.getLogger(__name__)

THUMBNAIL_WIDTH = 200
THUMBNAIL_HEIGHT = 280


class DocumentUnreadableError(RuntimeError):
    """Raised when a document is missing or its content cannot be parsed."""


class PdfTextExtractor:
    """Convert a stored PDF into normalized plain text."""

    def extract(self, path: Path | str) -> str:
        path = Path(path)
        if not path.is_file():
            raise DocumentUnreadableError(f"Resume file not found: {path}")

        try:
            with fitz.open(path) as doc:
                pages = [page.get_text("text") for page in doc]
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("pdf extraction failed", extra={"detail": f"{path}: {exc}"})
            raise DocumentUnreadableError(f"Resume file is unreadable: {path}") from exc

        return normalize_whitespace("\n".join(pages))


def render_thumbnail(pdf_path: Path | str, output_path: Path | str) -> bool:
    """Render the first page of ``pdf_path`` as a PNG preview.

    Returns ``True`` when the preview was written. Failures are logged and
    reported as ``False``; a missing preview never blocks an upload.
    """

    try:
        with fitz.open(pdf_path) as doc:
            if doc.page_count == 0:
                return False
            page = doc.load_page(0)
            zoom = min(THUMBNAIL_WIDTH / page.rect.width, THUMBNAIL_HEIGHT / page.rect.height)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom))
            pix.save(str(output_path))
    except Exception:  # noqa: BLE001
        LOGGER.exception("Thumbnail generation failed", extra={"detail": str(pdf_path)})
        return False
    return Path(output_path).exists()
