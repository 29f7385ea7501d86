"""Filesystem-backed résumé storage."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from resume_chat.utils import sanitize_cv_id

LOGGER = logging.getLogger(__name__)


@dataclass
class CvItem:
    id: str
    name: str
    path: Path
    size: int
    mtime_ms: float
    has_thumbnail: bool
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Project into the listing schema; stored metadata keys take precedence."""

        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "mtimeMs": self.mtime_ms,
            "hasThumbnail": self.has_thumbnail,
            **self.metadata,
        }


class ResumeStore:
    """Keeps ``<id>.pdf`` documents with optional ``<id>.png`` and ``<id>.json`` siblings."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def ensure_dir(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def pdf_path(self, cv_id: str) -> Path:
        return self.root / f"{cv_id}.pdf"

    def thumbnail_path(self, cv_id: str) -> Path:
        return self.root / f"{cv_id}.png"

    def metadata_path(self, cv_id: str) -> Path:
        return self.root / f"{cv_id}.json"

    def resolve(self, cv_id: str) -> Optional[Path]:
        """Return the stored document for ``cv_id`` or ``None`` when absent."""

        if not cv_id or sanitize_cv_id(cv_id) != cv_id:
            return None
        path = self.pdf_path(cv_id)
        return path if path.is_file() else None

    def list(self) -> List[CvItem]:
        """Return stored résumés, most recently modified first."""

        self.ensure_dir()
        items: List[CvItem] = []
        for path in self.root.iterdir():
            if not path.is_file() or path.suffix.lower() != ".pdf":
                continue
            cv_id = path.stem
            stat = path.stat()
            items.append(
                CvItem(
                    id=cv_id,
                    name=path.name,
                    path=path,
                    size=stat.st_size,
                    mtime_ms=stat.st_mtime * 1000,
                    has_thumbnail=self.thumbnail_path(cv_id).exists(),
                    metadata=self.read_metadata(cv_id),
                )
            )
        items.sort(key=lambda item: item.mtime_ms, reverse=True)
        return items

    def save(self, cv_id: str, data: bytes) -> Path:
        self.ensure_dir()
        path = self.pdf_path(cv_id)
        path.write_bytes(data)
        LOGGER.info("stored resume", extra={"resume_id": cv_id, "detail": f"{len(data)} bytes"})
        return path

    def read_metadata(self, cv_id: str) -> Dict[str, Any]:
        path = self.metadata_path(cv_id)
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            LOGGER.exception("Failed to parse resume metadata", extra={"resume_id": cv_id})
            return {}
        return data if isinstance(data, dict) else {}

    def write_metadata(self, cv_id: str, metadata: Dict[str, Any]) -> None:
        self.ensure_dir()
        self.metadata_path(cv_id).write_text(json.dumps(metadata), encoding="utf-8")
