"""Runtime primitives backing the session tracker HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from risktracker.config import Settings, get_settings
from risktracker.domain import models as dm
from risktracker.repository import FileBlobStore, RecordStore
from risktracker.services import SessionRepository

SESSION_ADAPTER: TypeAdapter[dm.Session] = TypeAdapter(dm.Session)
TERRITORY_ADAPTER: TypeAdapter[dm.CatalogTerritory] = TypeAdapter(dm.CatalogTerritory)


def session_document(session: dm.Session) -> dict[str, Any]:
    """Return the camelCase JSON document for ``session``."""

    return SESSION_ADAPTER.dump_python(session, mode="json", by_alias=True)


def territory_document(entry: dm.CatalogTerritory) -> dict[str, Any]:
    return TERRITORY_ADAPTER.dump_python(entry, mode="json", by_alias=True)


def parse_session(document: dict[str, Any]) -> dm.Session:
    """Validate a client-supplied session document."""

    return SESSION_ADAPTER.validate_python(document)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: RecordStore | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.store = store or RecordStore(
            FileBlobStore(self.settings.data_dir), key=self.settings.storage_key
        )
        self.sessions = SessionRepository(self.store)


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
