"""Unit tests for the polling folder watcher."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from watchfolder_rag.errors import TransportError
from watchfolder_rag.ingestion.coordinator import IngestionCoordinator, IngestionReport
from watchfolder_rag.watcher.uploader import LocalSubmitter
from watchfolder_rag.watcher.watcher import FolderWatcher, WatcherState


@pytest.fixture()
def watcher(tmp_path: Path, fake_embedder, fake_store) -> FolderWatcher:
    coordinator = IngestionCoordinator(fake_embedder, fake_store, chunk_size=5, chunk_overlap=1)
    return FolderWatcher(tmp_path, LocalSubmitter(coordinator), settle_delay=0, poll_interval=0.01)


def _report(source: str, total: int = 1, indexed: int = 1) -> IngestionReport:
    return IngestionReport(source=source, total_chunks=total, chunks_indexed=indexed)


class TestScan:
    def test_new_file_is_ingested_and_tracked(self, watcher: FolderWatcher, fake_store, tmp_path: Path) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello world")

        assert watcher.scan_once() == [str(path)]
        assert fake_store.documents() == ["hello", "o wor", "rld"]
        assert all(r.metadata["source"] == "a.txt" for r in fake_store.records)
        assert str(path) in watcher.tracked
        assert watcher.state is WatcherState.IDLE

    def test_tracked_file_is_not_reingested(self, watcher: FolderWatcher, fake_store, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("hello world")
        watcher.scan_once()
        assert watcher.scan_once() == []
        assert len(fake_store.records) == 3

    def test_deleted_file_is_forgotten_and_recreation_reingests(
        self, watcher: FolderWatcher, fake_store, tmp_path: Path
    ) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello world")
        watcher.scan_once()

        path.unlink()
        watcher.scan_once()
        assert str(path) not in watcher.tracked

        path.write_text("brand new")
        assert watcher.scan_once() == [str(path)]
        assert fake_store.documents()[3:] == ["brand", "d new"]

    def test_empty_file_stays_untracked_until_written(
        self, watcher: FolderWatcher, fake_store, tmp_path: Path
    ) -> None:
        path = tmp_path / "a.txt"
        path.write_text("")

        assert watcher.scan_once() == []
        assert str(path) not in watcher.tracked

        path.write_text("hello world")
        assert watcher.scan_once() == [str(path)]
        assert fake_store.documents() == ["hello", "o wor", "rld"]

    def test_other_extensions_ignored(self, watcher: FolderWatcher, fake_store, tmp_path: Path) -> None:
        (tmp_path / "notes.md").write_text("ignored")
        (tmp_path / "sub.txt").mkdir()
        assert watcher.scan_once() == []
        assert fake_store.records == []

    def test_partial_failure_leaves_file_untracked(
        self, watcher: FolderWatcher, fake_embedder, fake_store, tmp_path: Path
    ) -> None:
        path = tmp_path / "a.txt"
        path.write_text("hello world")
        fake_embedder.fail_on = {"o wor"}

        assert watcher.scan_once() == []
        assert str(path) not in watcher.tracked
        assert len(fake_store.records) == 2

        fake_embedder.fail_on = set()
        assert watcher.scan_once() == [str(path)]

    def test_transport_error_does_not_block_other_files(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("a")
        (tmp_path / "b.txt").write_text("b")
        submitter = MagicMock()
        submitter.submit.side_effect = [TransportError("connection refused"), _report("b.txt")]
        watcher = FolderWatcher(tmp_path, submitter, settle_delay=0)

        assert watcher.scan_once() == [str(tmp_path / "b.txt")]
        assert str(tmp_path / "a.txt") not in watcher.tracked

    def test_stop_abandons_remaining_backlog(self, tmp_path: Path) -> None:
        for name in ("a.txt", "b.txt", "c.txt"):
            (tmp_path / name).write_text(name)
        submitter = MagicMock()
        watcher = FolderWatcher(tmp_path, submitter, settle_delay=0)

        def _submit(path):
            watcher.stop()
            return _report(Path(path).name)

        submitter.submit.side_effect = _submit
        assert watcher.scan_once() == [str(tmp_path / "a.txt")]
        assert submitter.submit.call_count == 1

    def test_stop_reports_unattempted_files(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        for name in ("a.txt", "b.txt", "c.txt"):
            (tmp_path / name).write_text(name)
        submitter = MagicMock()
        watcher = FolderWatcher(tmp_path, submitter, settle_delay=0)

        def _stop_after_b(path):
            watcher.stop()
            return _report(Path(path).name)

        calls = []

        def _submit(path):
            calls.append(path)
            if len(calls) == 1:
                raise TransportError("refused")
            return _stop_after_b(path)

        submitter.submit.side_effect = _submit
        with caplog.at_level(logging.INFO, logger="watchfolder_rag.watcher.watcher"):
            assert watcher.scan_once() == [str(tmp_path / "b.txt")]
        assert "leaving 1 file(s) for later" in caplog.text

    def test_missing_folder_raises(self, tmp_path: Path) -> None:
        watcher = FolderWatcher(tmp_path / "gone", MagicMock(), settle_delay=0)
        with pytest.raises(FileNotFoundError):
            watcher.scan_once()


class TestLoop:
    def test_run_creates_folder_and_survives_scan_errors(self, tmp_path: Path) -> None:
        folder = tmp_path / "watch_folder"
        watcher = FolderWatcher(folder, MagicMock(), settle_delay=0, poll_interval=0)
        calls = []

        def _failing_scan():
            calls.append(1)
            if len(calls) == 1:
                raise OSError("listing failed")
            watcher.stop()
            return []

        watcher.scan_once = _failing_scan  # type: ignore[method-assign]
        watcher.run()

        assert folder.is_dir()
        assert len(calls) == 2
        assert watcher.state is WatcherState.IDLE

    def test_stop_interrupts_poll_wait(self, tmp_path: Path) -> None:
        watcher = FolderWatcher(tmp_path, MagicMock(), settle_delay=0, poll_interval=60)
        thread = watcher.start()
        time.sleep(0.05)

        started = time.monotonic()
        watcher.stop(timeout=5)
        assert not thread.is_alive()
        assert time.monotonic() - started < 5

    def test_background_thread_ingests(self, watcher: FolderWatcher, fake_store, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("hello world")
        watcher.start()
        try:
            deadline = time.monotonic() + 5
            while len(fake_store.records) < 3 and time.monotonic() < deadline:
                time.sleep(0.01)
        finally:
            watcher.stop(timeout=5)
        assert len(fake_store.records) == 3
