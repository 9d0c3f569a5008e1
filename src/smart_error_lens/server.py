"""FastAPI application streaming analysis reports over WebSocket.

Clients connect to ``/ws`` and receive one JSON message per analyzed
failure. ``/api/health`` reports the active provider and subscriber count,
and ``/api/diagram`` holds the Mermaid diagram text shown by the viewer.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from smart_error_lens._version import __version__
from smart_error_lens.adapters.subscribers.websocket import WebSocketSubscriber
from smart_error_lens.core.broadcaster import Broadcaster, get_broadcaster
from smart_error_lens.core.config_store import ConfigStore, get_store

log = structlog.get_logger()

# Pipeline overview shown by the viewer until a client replaces it
DEFAULT_DIAGRAM = """
graph TD
    A[Call raises] -->|Intercepted| B[smart_error wrapper]
    B --> C[Capture error facts and context]
    C --> D[Render prompt]
    D -->|Calls| E[Analysis provider]
    E -->|Fails| F[Mock fallback]
    E --> G[AnalysisReport]
    F --> G
    G --> H[Broadcast to subscribers]
    H --> I[Re-raise original error]
"""


class DiagramUpdate(BaseModel):
    """Body of ``POST /api/diagram``."""

    diagram: Any = None


def create_app(
    broadcaster: Broadcaster | None = None,
    store: ConfigStore | None = None,
    static_dir: Path | None = None,
) -> FastAPI:
    """Build the report streaming application.

    Args:
        broadcaster: Broadcaster that WebSocket clients subscribe to.
        store: Configuration store reported by the health endpoint.
        static_dir: Optional directory served at ``/`` (e.g. a report viewer).
    """
    broadcaster = broadcaster or get_broadcaster()
    store = store or get_store()

    app = FastAPI(title="Smart Error Lens", version=__version__)
    app.state.diagram = DEFAULT_DIAGRAM

    # ---- Routes ----

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        snapshot = store.snapshot()
        return {
            "status": "ok",
            "provider": snapshot.provider.name,
            "model": snapshot.provider.model_name,
            "subscribers": broadcaster.subscriber_count,
        }

    @app.get("/api/diagram")
    async def get_diagram() -> dict[str, str]:
        return {"diagram": app.state.diagram}

    @app.post("/api/diagram", response_model=None)
    async def update_diagram(update: DiagramUpdate) -> dict[str, bool] | JSONResponse:
        if not isinstance(update.diagram, str) or not update.diagram.strip():
            return JSONResponse(status_code=400, content={"error": "Invalid diagram text"})
        app.state.diagram = update.diagram
        log.debug("diagram_updated", length=len(update.diagram))
        return {"success": True}

    @app.websocket("/ws")
    async def reports_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        subscriber = WebSocketSubscriber(websocket, asyncio.get_running_loop())
        broadcaster.register(subscriber)
        try:
            # Incoming messages are ignored; the loop only waits for close
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            log.debug("websocket_closed", client=str(websocket.client))
        finally:
            broadcaster.unregister(subscriber)

    # ---- Static files ----

    if static_dir is not None:
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app
