"""Submitters hand one file to the ingestion side and report the outcome."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

import requests

from watchfolder_rag.errors import ConfigurationError, TransportError
from watchfolder_rag.ingestion.coordinator import IngestionCoordinator, IngestionReport
from watchfolder_rag.ingestion.loader import load_text_file, read_file_bytes

logger = logging.getLogger(__name__)


class Submitter(ABC):
    """Ingests a single file."""

    @abstractmethod
    def submit(self, path: str | Path) -> IngestionReport:
        """Ingest *path* and return the report.

        Raises
        ------
        TransportError
            When the ingestion side could not be reached.
        """
        ...


class HttpSubmitter(Submitter):
    """Posts files as ``multipart/form-data`` to the upload endpoint.

    Parameters
    ----------
    url:
        The upload endpoint, normally ``AI_UPLOAD_URL``.
    timeout:
        Seconds to wait for the server to finish indexing the file.
    session:
        Optional pre-configured :class:`requests.Session`.
    """

    def __init__(self, url: str, *, timeout: float = 60.0, session: requests.Session | None = None) -> None:
        if not url:
            raise ConfigurationError("upload url must not be empty")
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def submit(self, path: str | Path) -> IngestionReport:
        path = Path(path)
        payload = read_file_bytes(path)
        try:
            resp = self._session.post(
                self.url,
                files={"file": (path.name, payload, "text/plain")},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Upload of {path.name} to {self.url} failed: {exc}") from exc

        # 502 carries a partial-ingestion report; anything else non-2xx is a failure.
        if not resp.ok and resp.status_code != 502:
            raise TransportError(f"Upload of {path.name} failed with status {resp.status_code}: {resp.text[:200]}")
        try:
            return IngestionReport.model_validate(resp.json())
        except ValueError as exc:
            raise TransportError(f"Unexpected upload response for {path.name} ({resp.status_code})") from exc


class LocalSubmitter(Submitter):
    """Ingests files in-process through an :class:`IngestionCoordinator`."""

    def __init__(self, coordinator: IngestionCoordinator) -> None:
        self._coordinator = coordinator

    def submit(self, path: str | Path) -> IngestionReport:
        return self._coordinator.ingest(load_text_file(path))
