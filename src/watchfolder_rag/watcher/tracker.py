"""The set of files confirmed as fully ingested."""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


class TrackedFiles:
    """Paths the watcher has fully ingested.

    The set lives in memory.  When *persist_path* is given it is loaded
    from and saved to that JSON file after every change, so a restart does
    not re-ingest the whole folder.  A lock serialises mutations in case
    uploads are ever run in parallel.
    """

    def __init__(self, persist_path: str | Path | None = None) -> None:
        self._persist_path = Path(persist_path) if persist_path else None
        self._lock = threading.Lock()
        self._paths: set[str] = self._load()

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def add(self, path: str) -> None:
        with self._lock:
            self._paths.add(path)
            self._save()

    def prune(self, existing: Iterable[str]) -> list[str]:
        """Forget every tracked path not in *existing*; return the removed paths."""
        existing = set(existing)
        with self._lock:
            removed = sorted(self._paths - existing)
            if removed:
                self._paths.difference_update(removed)
                self._save()
        return removed

    # -- persistence ----------------------------------------------------------

    def _load(self) -> set[str]:
        if self._persist_path is None or not self._persist_path.exists():
            return set()
        try:
            data = json.loads(self._persist_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.error("Could not read tracker %s; starting empty", self._persist_path, exc_info=True)
            return set()
        paths = {p for p in data if isinstance(p, str)} if isinstance(data, list) else set()
        logger.info("Loaded %d tracked files from %s", len(paths), self._persist_path)
        return paths

    def _save(self) -> None:
        if self._persist_path is None:
            return
        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._persist_path.with_suffix(self._persist_path.suffix + ".tmp")
        tmp.write_text(json.dumps(sorted(self._paths), indent=2), encoding="utf-8")
        os.replace(tmp, self._persist_path)
