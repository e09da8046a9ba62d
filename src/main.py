from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.vehicles import router as vehicles_router
from src.adapters.api.dependencies import build_vehicle_positions_service
from src.adapters.config import AppConfig
from src.domain.exceptions import VehicleFeedError

GENERIC_ERROR = "Internal Server Error"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # A LoadError here aborts startup: the app never becomes servable.
    app.state.vehicle_positions_service = build_vehicle_positions_service(
        app.state.config
    )
    yield


def create_app(config: AppConfig | None = None) -> FastAPI:
    config = config or AppConfig.from_env()

    app = FastAPI(title="Transit Vehicle Feed", lifespan=lifespan)
    app.state.config = config
    app.include_router(vehicles_router)

    if config.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.cors_allow_origins),
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    @app.exception_handler(VehicleFeedError)
    async def feed_error_handler(
        request: Request, exc: VehicleFeedError
    ) -> JSONResponse:
        """Upstream or reference failures: log the cause, answer a bare 500."""

        logging.getLogger("uvicorn.error").error(
            "Vehicle feed failure: %s",
            exc,
            exc_info=exc,
            extra={"path": str(request.url.path)},
        )
        detail = str(exc) if config.reveal_errors else GENERIC_ERROR
        return JSONResponse(status_code=500, content={"detail": detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Ensure API errors are JSON so the dashboard can display them.

        Starlette's default 500 handler may return plain text/HTML.
        """

        logging.getLogger("uvicorn.error").exception(
            "Unhandled exception", extra={"path": str(request.url.path)}
        )
        detail = GENERIC_ERROR
        if config.reveal_errors:
            detail = str(exc) or exc.__class__.__name__
        return JSONResponse(status_code=500, content={"detail": detail})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
