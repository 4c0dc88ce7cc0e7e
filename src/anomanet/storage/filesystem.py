"""FilesystemDocumentStore: JSON documents as files under a root directory."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from anomanet.logging import get_logger
from anomanet.storage.protocol import Document, DocumentStore

logger = get_logger(__name__)


class FilesystemDocumentStore(DocumentStore):
    """Store that maps each document path to a file below `root_dir`."""

    def __init__(self, root_dir: str | Path) -> None:
        self.root = Path(root_dir).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _resolve_path(self, key: str) -> Path:
        """Resolve a document path with traversal checks."""
        vpath = key if key.startswith("/") else "/" + key
        if ".." in vpath or vpath.startswith("/~"):
            raise ValueError("Path traversal not allowed")
        full = (self.root / vpath.lstrip("/")).resolve()
        try:
            full.relative_to(self.root)
        except ValueError:
            raise ValueError(f"Path {full} outside root directory {self.root}") from None
        return full

    def get(self, path: str) -> Document | None:
        resolved = self._resolve_path(path)
        if not resolved.is_file():
            return None
        try:
            data = json.loads(resolved.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Unreadable document at %s, treating as absent", path)
            return None
        return data if isinstance(data, dict) else None

    def put(self, path: str, document: Document) -> None:
        resolved = self._resolve_path(path)
        resolved.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(document, ensure_ascii=False, indent=2)
        # Atomic replace via a sibling temp file
        fd, tmp_name = tempfile.mkstemp(dir=resolved.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, resolved)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, path: str) -> None:
        self._resolve_path(path).unlink(missing_ok=True)

    def list(self, prefix: str) -> list[str]:  # noqa: A003
        results: list[str] = []
        for file_path in self.root.rglob("*"):
            if not file_path.is_file() or file_path.suffix == ".tmp":
                continue
            key = file_path.relative_to(self.root).as_posix()
            if key.startswith(prefix):
                results.append(key)
        results.sort()
        return results
