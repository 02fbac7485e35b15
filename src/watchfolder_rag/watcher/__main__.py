"""Run the folder watcher: ``python -m watchfolder_rag.watcher``."""

from __future__ import annotations

import logging
import signal

from watchfolder_rag.config import settings
from watchfolder_rag.ingestion.chunker import validate_chunk_params
from watchfolder_rag.watcher.tracker import TrackedFiles
from watchfolder_rag.watcher.uploader import HttpSubmitter, LocalSubmitter, Submitter
from watchfolder_rag.watcher.watcher import FolderWatcher

logger = logging.getLogger("watchfolder_rag.watcher")


def build_submitter() -> Submitter:
    """Upload over HTTP when ``AI_UPLOAD_URL`` is set, otherwise ingest in-process."""
    if settings.ai_upload_url:
        logger.info("Uploading new files to %s", settings.ai_upload_url)
        return HttpSubmitter(settings.ai_upload_url, timeout=settings.request_timeout)

    from watchfolder_rag.ingestion.coordinator import IngestionCoordinator
    from watchfolder_rag.ingestion.embedder import get_embedder
    from watchfolder_rag.retrieval.chroma_store import ChromaVectorStore

    logger.info("No upload url configured; ingesting in-process")
    coordinator = IngestionCoordinator(
        get_embedder(),
        ChromaVectorStore(settings.chroma_collection),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
    )
    return LocalSubmitter(coordinator)


def build_watcher(submitter: Submitter | None = None) -> FolderWatcher:
    """Create a watcher from the global settings."""
    validate_chunk_params(settings.chunk_size, settings.chunk_overlap)
    return FolderWatcher(
        settings.watch_folder,
        submitter or build_submitter(),
        pattern=settings.watch_pattern,
        poll_interval=settings.poll_interval,
        settle_delay=settings.settle_delay,
        tracked=TrackedFiles(settings.tracker_file or None),
    )


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    watcher = build_watcher()

    def _handle_signal(signum: int, _frame: object) -> None:
        logger.info("Received signal %d; shutting down", signum)
        watcher.stop()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)
    watcher.run()


if __name__ == "__main__":
    main()
