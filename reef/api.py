"""FastAPI server for the underwater scene."""
from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Set

import uvicorn
from fastapi import APIRouter, FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field
from starlette.websockets import WebSocketState

from .config import SceneConfig
from .scene import build_scene
from .scheduler import TickScheduler
from .simulation import PointerSample, ProximityEvent, World, log_proximity

logger = logging.getLogger(__name__)

# ============================================================================
# Pydantic Models
# ============================================================================

class PointerUpdate(BaseModel):
    """Normalized pointer position, clamped into [-1, 1] on arrival."""
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class ClientPointerUpdate(BaseModel):
    """Raw window coordinates plus the viewport size they refer to."""
    client_x: float = Field(allow_inf_nan=False)
    client_y: float = Field(allow_inf_nan=False)
    width: float = Field(gt=0.0, allow_inf_nan=False)
    height: float = Field(gt=0.0, allow_inf_nan=False)


# ============================================================================
# Session
# ============================================================================

class SceneSession:
    """World, scheduler and connected clients for one running server."""

    def __init__(self, config: SceneConfig):
        self.config = config
        self.world = World(config)
        self.scheduler = TickScheduler(self.world, on_proximity=log_proximity)
        self.clients: Set[WebSocket] = set()

    async def broadcast(self, state: Dict[str, Any], events: List[ProximityEvent]) -> None:
        """Render step: push the frame and its proximity events to all clients."""
        messages = [{"type": "state", "payload": state}]
        messages.extend(
            {"type": "proximity", "payload": {"shark_id": e.shark_id, "distance": e.distance}}
            for e in events
        )

        dead_clients = set()
        for client in list(self.clients):
            try:
                if client.client_state != WebSocketState.CONNECTED:
                    dead_clients.add(client)
                    continue
                for message in messages:
                    await client.send_json(message)
            except Exception as exc:
                logger.debug("Dropping client after send failure: %s: %s", type(exc).__name__, exc)
                dead_clients.add(client)

        if dead_clients:
            logger.info("Removing %d dead clients", len(dead_clients))
        self.clients.difference_update(dead_clients)

    def handle_message(self, message: Any) -> None:
        """Apply a client command; raises ValueError for anything malformed."""
        if not isinstance(message, dict):
            raise ValueError("Message must be a JSON object")

        msg_type = message.get("type")

        if msg_type == "pointer":
            update = PointerUpdate.model_validate(message)
            self.world.set_pointer(PointerSample.from_normalized(update.x, update.y))

        elif msg_type == "pointer_client":
            update = ClientPointerUpdate.model_validate(message)
            self.world.set_pointer(
                PointerSample.from_client(update.client_x, update.client_y, update.width, update.height)
            )

        elif msg_type == "reset":
            self.world.reset()

        else:
            raise ValueError(f"Unknown message type {msg_type!r}")


# ============================================================================
# FastAPI App with Lifespan
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the tick loop for as long as the app is being served."""
    session: SceneSession = app.state.session
    task = asyncio.create_task(
        session.scheduler.run(session.broadcast, session.config.frame_interval)
    )
    logger.info("Scene started: %d sharks, %d small fish", len(session.world.sharks), len(session.world.small_fish))

    yield

    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


router = APIRouter()


def _session(request: Request) -> SceneSession:
    return request.app.state.session


# ============================================================================
# REST Endpoints
# ============================================================================

@router.get("/health")
async def health() -> Dict[str, str]:
    """Health check."""
    return {"status": "ok"}


@router.get("/scene")
async def get_scene(request: Request) -> Dict[str, Any]:
    """Camera, lights, palette, bloom and terrain for the renderer."""
    return build_scene(_session(request).config)


@router.get("/state")
async def get_state(request: Request) -> Dict[str, Any]:
    """Current actor positions."""
    session = _session(request)
    async with session.scheduler.lock:
        return session.world.get_state()


@router.post("/pointer")
async def update_pointer(update: PointerUpdate, request: Request) -> Dict[str, Any]:
    """Set the pointer sample; the goldfish follows on the next tick."""
    session = _session(request)
    async with session.scheduler.lock:
        session.world.set_pointer(PointerSample.from_normalized(update.x, update.y))
        return {"pointer": session.world.get_state()["pointer"]}


@router.post("/reset")
async def reset_scene(request: Request) -> Dict[str, str]:
    """Respawn every actor."""
    session = _session(request)
    async with session.scheduler.lock:
        session.world.reset()
        return {"status": "reset"}


# ============================================================================
# WebSocket
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Stream frames to the client and take pointer input from it."""
    session: SceneSession = websocket.app.state.session
    await websocket.accept()
    session.clients.add(websocket)
    logger.info("Client connected, total clients: %d", len(session.clients))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
                async with session.scheduler.lock:
                    session.handle_message(message)
            except ValueError as exc:
                await websocket.send_json({"type": "error", "detail": str(exc)})
    except WebSocketDisconnect:
        pass
    finally:
        session.clients.discard(websocket)
        logger.info("Client disconnected, remaining clients: %d", len(session.clients))


# ============================================================================
# Static assets with single-page fallback
# ============================================================================

@router.get("/{path:path}")
async def serve_asset(path: str, request: Request) -> FileResponse:
    """Serve a file from the public directory, or index.html for anything else."""
    public_dir = _session(request).config.public_dir.resolve()

    if path:
        candidate = (public_dir / path).resolve()
        if candidate.is_file() and candidate.is_relative_to(public_dir):
            return FileResponse(candidate)

    index = public_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Frontend not found")
    return FileResponse(index)


def create_app(config: Optional[SceneConfig] = None) -> FastAPI:
    config = (config or SceneConfig.from_env()).validate()

    app = FastAPI(title="Voxel Reef", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.session = SceneSession(config)
    app.include_router(router)
    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")
    config = SceneConfig.from_env()
    logger.info("Server running on port %d", config.port)
    # uvicorn calls create_app(), which reads the same environment
    uvicorn.run("reef.api:create_app", factory=True, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
