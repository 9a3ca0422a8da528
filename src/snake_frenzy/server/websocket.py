"""WebSocket handler for real-time play."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from snake_frenzy.controls import key_from_name
from snake_frenzy.server.game_manager import GameManager

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> GameManager:
    return ws.app.state.game_manager


def _parse_key(raw: str) -> int | None:
    """Extract a key code from ``{"key": 38}`` or ``{"direction": "up"}``."""
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return None
    if not isinstance(msg, dict):
        return None

    key = msg.get("key")
    if isinstance(key, int) and not isinstance(key, bool):
        return key

    direction = msg.get("direction")
    if isinstance(direction, str):
        code = key_from_name(direction)
        return int(code) if code is not None else None
    return None


async def _pump(websocket: WebSocket, queue: asyncio.Queue) -> None:
    """Forward published states to the client until cancelled."""
    while True:
        state = await queue.get()
        if websocket.client_state != WebSocketState.CONNECTED:
            return
        await websocket.send_text(json.dumps(state, separators=(",", ":")))


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send keys, receive the state after every change."""
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    queue = session.subscribe()
    logger.info("Client connected to session %s.", session_id)

    # Send initial state snapshot so the client can draw the board at once.
    await websocket.send_text(
        json.dumps(session.engine.get_state(), separators=(",", ":")),
    )
    sender = asyncio.create_task(_pump(websocket, queue))

    try:
        while True:
            raw = await websocket.receive_text()
            code = _parse_key(raw)
            if code is None:
                continue
            if manager.get_session(session_id) is None:
                break
            await manager.handle_key(session_id, code)
    except WebSocketDisconnect:
        logger.info("Client disconnected from session %s.", session_id)
    finally:
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
        session.unsubscribe(queue)
