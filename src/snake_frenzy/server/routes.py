"""REST API route handlers for session management and board edits."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snake_frenzy.server.models import (
    CellRequest,
    CreateSessionRequest,
    KeyRequest,
    KeyResponse,
    ObstacleResponse,
    SessionSummary,
)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request):
    return request.app.state.game_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new idle session."""
    try:
        config = body.to_config()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    session = _get_manager(request).create_session(config)
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get session metadata and the current game state."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return {
        "session_id": session.session_id,
        "status": session.status.value,
        "config": session.config.to_dict(),
        "state": session.engine.get_state(),
    }


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, request: Request) -> None:
    try:
        await _get_manager(request).close_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{session_id}/keys")
async def press_key(
    session_id: str, body: KeyRequest, request: Request,
) -> KeyResponse:
    """Forward a raw key code; unrecognized codes are accepted and ignored."""
    try:
        accepted = await _get_manager(request).handle_key(session_id, body.key)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return KeyResponse(accepted=accepted)


@router.post("/{session_id}/obstacles/toggle")
async def toggle_obstacle(
    session_id: str, body: CellRequest, request: Request,
) -> ObstacleResponse:
    try:
        flag = await _get_manager(request).toggle_obstacle(
            session_id, body.row, body.col,
        )
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ObstacleResponse(row=body.row, col=body.col, obstacle=flag)


@router.post("/{session_id}/obstacles/randomize")
async def randomize_obstacles(session_id: str, request: Request) -> dict:
    try:
        return await _get_manager(request).randomize_obstacles(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/{session_id}/obstacles")
async def clear_obstacles(session_id: str, request: Request) -> dict:
    try:
        return await _get_manager(request).clear_obstacles(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("/{session_id}/restart")
async def restart(session_id: str, request: Request) -> dict:
    """Stop the tick loops and start a fresh game in the same session."""
    try:
        return await _get_manager(request).restart(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
