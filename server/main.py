"""FastAPI WebSocket server for Daifugo rooms."""

import asyncio
import json
import logging
import os
import uuid
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from config import config
from handlers import ConnectionContext, dispatch
from logging_config import connection_id_var, setup_logging
from room import RoomManager
from session import handle_player_leave

# Initialize Sentry if configured
if config.SENTRY_DSN:
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.starlette import StarletteIntegration

    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.ENVIRONMENT,
        traces_sample_rate=0.1 if config.ENVIRONMENT == "production" else 1.0,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
    )
    logging.getLogger(__name__).info("Sentry error tracking initialized")

# Configure logging based on environment
setup_logging(
    level=config.LOG_LEVEL,
    environment=config.ENVIRONMENT,
)
logger = logging.getLogger(__name__)

room_manager = RoomManager()


async def _close_all_websockets():
    """Close all active WebSocket connections gracefully."""
    for room in list(room_manager.rooms.values()):
        for player in room.players.values():
            if player.websocket:
                try:
                    await player.websocket.close(code=1001, reason="Server shutting down")
                except Exception as e:
                    logger.debug(f"Close failed for {player.id}: {e}")
    logger.info("All WebSocket connections closed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Daifugo server started (environment={config.ENVIRONMENT})")

    yield

    logger.info("Shutdown initiated...")
    await _close_all_websockets()
    logger.info(f"Closing {room_manager.room_count()} rooms")
    for code in list(room_manager.rooms):
        room_manager.remove_room(code)
    logger.info("Shutdown complete")


app = FastAPI(
    title="Daifugo",
    debug=config.DEBUG,
    version="1.0.0",
    lifespan=lifespan,
)


async def _receive_message(websocket: WebSocket) -> Optional[dict]:
    """
    Read one frame as JSON.

    Returns None for binary frames and text that is not valid JSON.

    Raises:
        WebSocketDisconnect: The client went away.
    """
    message = await websocket.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", 1000))

    text = message.get("text")
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    await websocket.accept()

    connection_id = str(uuid.uuid4())
    connection_id_var.set(connection_id)
    logger.debug(f"WebSocket connected as {connection_id}")

    ctx = ConnectionContext(
        websocket=websocket,
        connection_id=connection_id,
        player_id=connection_id,
    )

    try:
        while True:
            data = await _receive_message(websocket)
            if data is None:
                await websocket.send_json({"type": "errorMessage", "message": "Invalid request."})
                continue
            await dispatch(data, ctx, room_manager=room_manager)
    except WebSocketDisconnect:
        logger.debug(f"WebSocket {connection_id} disconnected")
    finally:
        if ctx.current_room:
            # Runs to completion even if the endpoint task is cancelled
            await asyncio.shield(
                handle_player_leave(ctx.current_room, ctx.player_id, room_manager)
            )


# Serve static files if client directory exists
client_path = os.path.join(os.path.dirname(__file__), "..", "client")
if os.path.exists(client_path):
    @app.get("/")
    async def serve_index():
        return FileResponse(os.path.join(client_path, "index.html"))

    # Mount static files for everything else (JS, CSS, SVG, etc.)
    app.mount("/", StaticFiles(directory=client_path), name="static")


def run():
    """Run the server using uvicorn."""
    import uvicorn

    logger.info(f"Starting Daifugo server on {config.HOST}:{config.PORT}")
    logger.info(f"Debug mode: {config.DEBUG}")

    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.DEBUG,
        log_level=config.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
