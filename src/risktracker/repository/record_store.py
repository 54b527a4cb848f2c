"""JSON-backed record store for the session collection."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from risktracker.domain import models as dm

logger = logging.getLogger(__name__)

DEFAULT_KEY = "risk_games"


class BlobStore(Protocol):
    """Minimal get/set contract over named text blobs.

    ``get`` may hand back the raw stored bytes; decoding them is left to the
    record store so that a damaged blob reads as an empty collection.
    """

    def get(self, key: str) -> str | bytes | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryBlobStore:
    """Process-local blob store, useful for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._blobs: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value


class FileBlobStore:
    """Store each blob as ``<key>.json`` inside a directory."""

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        self.base_path.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.base_path / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        staging = path.with_suffix(".json.tmp")
        staging.write_text(value, encoding="utf-8")
        staging.replace(path)


class RecordStore:
    """Load and save the full session collection as one serialized document."""

    def __init__(self, blobs: BlobStore, *, key: str = DEFAULT_KEY) -> None:
        self._blobs = blobs
        self.key = key
        self._adapter: TypeAdapter[list[dm.Session]] = TypeAdapter(list[dm.Session])

    def load_all(self) -> list[dm.Session]:
        """Return the stored sessions, or an empty list when nothing usable is stored."""

        payload = self._blobs.get(self.key)
        if payload is None:
            return []
        try:
            return self._adapter.validate_json(payload)
        except ValidationError as exc:
            logger.warning(
                "stored payload under %r could not be decoded (%d errors); treating as empty",
                self.key,
                exc.error_count(),
            )
            return []

    def save_all(self, sessions: list[dm.Session]) -> None:
        """Serialize ``sessions`` and replace whatever was stored before."""

        self._blobs.set(self.key, self.encode(sessions))

    def encode(self, sessions: list[dm.Session]) -> str:
        return self._adapter.dump_json(sessions, by_alias=True).decode("utf-8")
