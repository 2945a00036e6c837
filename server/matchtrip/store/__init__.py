"""Document store package."""

from .base import DocumentStore, Snapshot, Updater
from .json_store import JsonFileStore

__all__ = [
    "DocumentStore",
    "JsonFileStore",
    "Snapshot",
    "Updater",
]
