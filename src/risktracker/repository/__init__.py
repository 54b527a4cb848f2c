"""Persistence adapters for the session collection."""

from risktracker.repository.record_store import (
    BlobStore,
    FileBlobStore,
    MemoryBlobStore,
    RecordStore,
)

__all__ = ["BlobStore", "FileBlobStore", "MemoryBlobStore", "RecordStore"]
