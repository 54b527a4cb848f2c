"""HTTP routes for the session tracker API."""

from __future__ import annotations

import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from risktracker.api.runtime import (
    ApiState,
    parse_session,
    session_document,
    territory_document,
)
from risktracker.domain import catalog
from risktracker.domain import models as dm
from risktracker.domain.enums import CardType, SessionStatus

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]
Document = dict[str, Any]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerSpec(CamelModel):
    name: str = Field(min_length=1)
    color: str


class CreateSessionRequest(CamelModel):
    name: str = Field(min_length=1)
    date: datetime.date = Field(default_factory=datetime.date.today)
    players: list[PlayerSpec]


class RenameRequest(CamelModel):
    name: str = Field(min_length=1)


class StatusRequest(CamelModel):
    status: SessionStatus


class IssueCardRequest(CamelModel):
    type: CardType


class AssignTerritoryRequest(CamelModel):
    territory_id: str = Field(min_length=1)


class UnitsRequest(CamelModel):
    units: int = Field(ge=0)


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {"status": "ok", "storage_key": state.store.key}


@router.get("/territories")
async def list_territories() -> list[Document]:
    return [territory_document(entry) for entry in catalog.list_all()]


@router.get("/sessions")
async def list_sessions(state: ApiStateDep) -> list[Document]:
    return [session_document(session) for session in state.sessions.list_all()]


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(request: CreateSessionRequest, state: ApiStateDep) -> Document:
    draft = dm.SessionDraft(
        name=request.name,
        date=request.date,
        players=[dm.PlayerDraft(name=p.name, color=p.color) for p in request.players],
    )
    return session_document(state.sessions.create(draft))


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, state: ApiStateDep) -> Document:
    session = state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="session not found")
    return session_document(session)


@router.put("/sessions/{session_id}")
async def replace_session(
    session_id: str,
    document: Annotated[Document, Body()],
    state: ApiStateDep,
) -> Document:
    try:
        session = parse_session({**document, "id": session_id})
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
    return session_document(state.sessions.update(session))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, state: ApiStateDep) -> Response:
    state.sessions.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/sessions/{session_id}/name")
async def rename_session(session_id: str, request: RenameRequest, state: ApiStateDep) -> Document:
    return session_document(state.sessions.rename(session_id, request.name))


@router.post("/sessions/{session_id}/status")
async def set_status(session_id: str, request: StatusRequest, state: ApiStateDep) -> Document:
    return session_document(state.sessions.set_status(session_id, request.status))


@router.post("/sessions/{session_id}/turn/advance")
async def advance_turn(session_id: str, state: ApiStateDep) -> Document:
    return session_document(state.sessions.advance_turn(session_id))


@router.get("/sessions/{session_id}/territories/available")
async def available_territories(session_id: str, state: ApiStateDep) -> list[Document]:
    entries = state.sessions.list_available_territories(session_id)
    return [territory_document(entry) for entry in entries]


@router.post("/sessions/{session_id}/players/{player_id}/cards")
async def issue_card(
    session_id: str,
    player_id: str,
    request: IssueCardRequest,
    state: ApiStateDep,
) -> Document:
    return session_document(state.sessions.issue_card(session_id, player_id, request.type))


@router.delete("/sessions/{session_id}/players/{player_id}/cards/{card_id}")
async def remove_card(
    session_id: str,
    player_id: str,
    card_id: str,
    state: ApiStateDep,
) -> Document:
    return session_document(state.sessions.remove_card(session_id, player_id, card_id))


@router.post("/sessions/{session_id}/players/{player_id}/territories")
async def assign_territory(
    session_id: str,
    player_id: str,
    request: AssignTerritoryRequest,
    state: ApiStateDep,
) -> Document:
    session = state.sessions.assign_territory(session_id, player_id, request.territory_id)
    return session_document(session)


@router.delete("/sessions/{session_id}/players/{player_id}/territories/{territory_id}")
async def remove_territory(
    session_id: str,
    player_id: str,
    territory_id: str,
    state: ApiStateDep,
) -> Document:
    session = state.sessions.remove_territory(session_id, player_id, territory_id)
    return session_document(session)


@router.put("/sessions/{session_id}/territories/{territory_id}/units")
async def set_territory_units(
    session_id: str,
    territory_id: str,
    request: UnitsRequest,
    state: ApiStateDep,
) -> Document:
    session = state.sessions.set_territory_units(session_id, territory_id, request.units)
    return session_document(session)
