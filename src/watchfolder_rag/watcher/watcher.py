"""Polling folder watcher.

Each scan lists the folder, submits every untracked file and forgets
tracked files that disappeared.  A file is tracked only after a fully
successful ingestion, so failed or partial files are retried on the
next scan.  All waiting goes through a :class:`threading.Event`, which
lets :meth:`FolderWatcher.stop` interrupt the poll interval, the settle
delay and the remaining backlog of a scan.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path

from watchfolder_rag.watcher.tracker import TrackedFiles
from watchfolder_rag.watcher.uploader import Submitter

logger = logging.getLogger(__name__)


class WatcherState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    UPLOADING = "uploading"


class FolderWatcher:
    """Polls *directory* and submits new files matching *pattern*.

    Parameters
    ----------
    directory:
        Folder to watch; created when missing.
    submitter:
        Performs the actual ingestion of one file.
    pattern:
        Glob selecting candidate files, e.g. ``"*.txt"``.
    poll_interval:
        Seconds between scans.
    settle_delay:
        Seconds to wait before reading a new file so its writer can finish.
    tracked:
        Tracked-file set; a fresh in-memory one by default.
    """

    def __init__(
        self,
        directory: str | Path,
        submitter: Submitter,
        *,
        pattern: str = "*.txt",
        poll_interval: float = 2.0,
        settle_delay: float = 0.5,
        tracked: TrackedFiles | None = None,
    ) -> None:
        self.directory = Path(directory)
        self.pattern = pattern
        self.poll_interval = poll_interval
        self.settle_delay = settle_delay
        self.tracked = tracked if tracked is not None else TrackedFiles()
        self.state = WatcherState.IDLE
        self._submitter = submitter
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    # -- lifecycle ------------------------------------------------------------

    def run(self) -> None:
        """Scan until :meth:`stop` is called.  Scan errors never end the loop."""
        self.directory.mkdir(parents=True, exist_ok=True)
        logger.info("Watching for new documents in: %s (%s)", self.directory, self.pattern)
        while not self._stop.is_set():
            try:
                self.scan_once()
            except Exception:
                logger.exception("Scan of %s failed", self.directory)
            finally:
                self.state = WatcherState.IDLE
            if self._stop.wait(self.poll_interval):
                break
        logger.info("Watcher for %s stopped", self.directory)

    def start(self) -> threading.Thread:
        """Run the loop in a daemon thread."""
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("watcher already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="folder-watcher", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        """Request cancellation and wait for the background thread, if any."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    # -- scanning -------------------------------------------------------------

    def list_files(self) -> set[str]:
        """Current candidate paths in the watch folder."""
        if not self.directory.is_dir():
            raise FileNotFoundError(f"watch folder {self.directory} does not exist")
        return {str(p) for p in self.directory.glob(self.pattern) if p.is_file()}

    def scan_once(self) -> list[str]:
        """Run one scan and return the paths that became tracked."""
        self.state = WatcherState.SCANNING
        current = self.list_files()
        pending = sorted(p for p in current if p not in self.tracked)
        if pending:
            logger.info("Found %d new file(s) in %s", len(pending), self.directory)

        ingested: list[str] = []
        for index, path in enumerate(pending):
            if self._stop.is_set():
                logger.info("Stop requested; leaving %d file(s) for later", len(pending) - index)
                break
            if self.settle_delay > 0 and self._stop.wait(self.settle_delay):
                break
            self.state = WatcherState.UPLOADING
            if self._submit(path):
                self.tracked.add(path)
                ingested.append(path)
            self.state = WatcherState.SCANNING

        for path in self.tracked.prune(current):
            logger.info("Forgot deleted file %s", path)
        self.state = WatcherState.IDLE
        return ingested

    def _submit(self, path: str) -> bool:
        name = Path(path).name
        try:
            report = self._submitter.submit(path)
        except Exception as exc:
            logger.error("Error processing file %s: %s", path, exc)
            return False
        if not report.ok:
            logger.warning(
                "Partial ingestion of %s: %d/%d chunks indexed; will retry",
                name,
                report.chunks_indexed,
                report.total_chunks,
            )
            return False
        logger.info("Successfully processed: %s (%d chunks)", name, report.total_chunks)
        return True
