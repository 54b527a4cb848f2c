"""Tests for the FastAPI layer."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from risktracker.api.app import create_app
from risktracker.api.runtime import ApiState
from risktracker.config import Settings
from risktracker.repository import MemoryBlobStore, RecordStore


def _make_app(tmp_path):
    def factory() -> ApiState:
        settings = Settings(data_dir=tmp_path, storage_key="test_games")
        store = RecordStore(MemoryBlobStore(), key=settings.storage_key)
        return ApiState(settings=settings, store=store)

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


async def _create_session(client: AsyncClient, *names: str) -> dict:
    response = await client.post(
        "/sessions",
        json={
            "name": "Test",
            "date": "2024-05-01",
            "players": [{"name": name, "color": "#f00"} for name in names],
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_session_lifecycle_via_api(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "storage_key": "test_games"}

        session = await _create_session(client, "A", "B")
        assert session["status"] == "active"
        assert session["currentTurn"] == 0
        session_id = session["id"]
        player_a, player_b = (p["id"] for p in session["players"])

        response = await client.post(
            f"/sessions/{session_id}/players/{player_a}/territories",
            json={"territoryId": "brasil"},
        )
        assert response.status_code == 200
        assert response.json()["players"][0]["points"] == 2

        response = await client.post(
            f"/sessions/{session_id}/players/{player_b}/territories",
            json={"territoryId": "brasil"},
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "territory brasil already assigned"

        response = await client.put(
            f"/sessions/{session_id}/territories/brasil/units", json={"units": 4}
        )
        assert response.status_code == 200
        assert response.json()["players"][0]["territories"][0]["units"] == 4

        response = await client.get(f"/sessions/{session_id}/territories/available")
        assert response.status_code == 200
        assert "brasil" not in [entry["id"] for entry in response.json()]

        response = await client.post(f"/sessions/{session_id}/turn/advance")
        assert response.json()["currentTurn"] == 1

        response = await client.post(f"/sessions/{session_id}/status", json={"status": "finished"})
        assert response.json()["status"] == "finished"

        response = await client.patch(f"/sessions/{session_id}/name", json={"name": "Final"})
        assert response.json()["name"] == "Final"

        response = await client.get("/sessions")
        assert [s["id"] for s in response.json()] == [session_id]

        response = await client.delete(f"/sessions/{session_id}")
        assert response.status_code == 204
        response = await client.get(f"/sessions/{session_id}")
        assert response.status_code == 404


@pytest.mark.asyncio
async def test_card_routes(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        session = await _create_session(client, "A")
        session_id = session["id"]
        player_id = session["players"][0]["id"]

        response = await client.post(
            f"/sessions/{session_id}/players/{player_id}/cards", json={"type": "wild"}
        )
        assert response.status_code == 200
        cards = response.json()["players"][0]["cards"]
        assert [c["type"] for c in cards] == ["wild"]

        response = await client.post(
            f"/sessions/{session_id}/players/{player_id}/cards", json={"type": "dragon"}
        )
        assert response.status_code == 422

        response = await client.delete(
            f"/sessions/{session_id}/players/{player_id}/cards/{cards[0]['id']}"
        )
        assert response.json()["players"][0]["cards"] == []

        response = await client.delete(f"/sessions/{session_id}/players/{player_id}/cards/nope")
        assert response.status_code == 200


@pytest.mark.asyncio
async def test_error_translation(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post("/sessions", json={"name": "Empty", "players": []})
        assert response.status_code == 400
        assert response.json()["detail"] == "no players"

        response = await client.post("/sessions/missing/turn/advance")
        assert response.status_code == 404

        session = await _create_session(client, "A")
        response = await client.post(
            f"/sessions/{session['id']}/players/{session['players'][0]['id']}/territories",
            json={"territoryId": "atlantis"},
        )
        assert response.status_code == 404

        response = await client.put(
            f"/sessions/{session['id']}/territories/alaska/units", json={"units": -2}
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_replace_session_document(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        session = await _create_session(client, "A", "B")
        document = {**session, "name": "Edited", "currentTurn": 1}

        response = await client.put(f"/sessions/{session['id']}", json=document)
        assert response.status_code == 200
        assert response.json()["name"] == "Edited"
        assert response.json()["currentTurn"] == 1

        response = await client.put(
            f"/sessions/{session['id']}", json={**session, "status": "paused"}
        )
        assert response.status_code == 422

        response = await client.put("/sessions/unknown", json=session)
        assert response.status_code == 404


@pytest.mark.asyncio
async def test_catalog_route(tmp_path):
    app, transport = _make_app(tmp_path)

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/territories")
        assert response.status_code == 200
        payload = response.json()
        assert len(payload) == 20
        assert payload[10] == {"id": "brasil", "name": "Brasil", "points": 2}
