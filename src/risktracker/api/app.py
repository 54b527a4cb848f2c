"""FastAPI application wiring for the session tracker."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from risktracker.api import routes
from risktracker.api.runtime import ApiState, build_state
from risktracker.config import get_settings
from risktracker.domain.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    SessionError,
)

ERROR_STATUS: dict[type[SessionError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
}


async def session_error_handler(request: Request, exc: Exception) -> JSONResponse:
    code = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
        status.HTTP_400_BAD_REQUEST,
    )
    return JSONResponse(status_code=code, content={"detail": str(exc)})


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.api_state = state_factory()
        yield

    app = FastAPI(title="Risk Tracker API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SessionError, session_error_handler)
    app.include_router(routes.router)
    return app


app = create_app()
