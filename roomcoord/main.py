"""FastAPI application entrypoint for the room coordinator."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

import roomcoord.runtime as runtime
from roomcoord.api.errors import handle_http_exception
from roomcoord.api.routers.rooms import router as rooms_router
from roomcoord.ws.routers import router as ws_router


def startup() -> None:
    """Reset in-memory runtime state before handling traffic."""
    runtime.startup()


def shutdown() -> None:
    runtime.shutdown()


@asynccontextmanager
async def lifespan(_: FastAPI):
    startup()
    try:
        yield
    finally:
        shutdown()


app = FastAPI(title="Room Coordinator", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime.settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(rooms_router)
app.include_router(ws_router)


@app.exception_handler(HTTPException)
async def handle_http_exception_route(request: Request, exc: HTTPException) -> JSONResponse:
    """Adapter used by FastAPI exception handling."""
    return await handle_http_exception(request, exc)


@app.get("/health")
async def health() -> dict[str, object]:
    return {
        "status": "ok",
        "rooms": len(runtime.room_manager.list_rooms()),
        "connections": len(runtime.connection_registry),
    }


def run() -> None:
    """Serve the app with uvicorn using the configured host/port."""
    settings = runtime.settings
    uvicorn.run(
        app,
        host=settings.roomcoord_app_host,
        port=settings.roomcoord_app_port,
        log_level=settings.roomcoord_log_level.lower(),
    )


if __name__ == "__main__":
    run()


__all__ = [
    "app",
    "run",
    "shutdown",
    "startup",
]
