"""
Watcher — polls a folder and drives new files through ingestion.

Polling is used instead of OS file-system events so bind-mounted and
network folders behave the same as local ones.
"""

from watchfolder_rag.watcher.tracker import TrackedFiles
from watchfolder_rag.watcher.uploader import HttpSubmitter, LocalSubmitter, Submitter
from watchfolder_rag.watcher.watcher import FolderWatcher, WatcherState

__all__ = [
    "FolderWatcher",
    "HttpSubmitter",
    "LocalSubmitter",
    "Submitter",
    "TrackedFiles",
    "WatcherState",
]
