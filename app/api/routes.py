from __future__ import annotations

import logging
from uuid import uuid4

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import TypeAdapter, ValidationError

from app.api.deps import get_session_manager
from app.api.models import InboundMessage, InitMessage, SessionListResponse
from app.participants import WebSocketSink
from app.session_manager import SessionManager

logger = logging.getLogger(__name__)

router = APIRouter()

_inbound = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage | None:
    """Parse one client frame; None for anything unparseable or unknown."""

    try:
        return _inbound.validate_json(raw)
    except ValidationError:
        return None


@router.websocket("/ws")
async def play_ws(websocket: WebSocket, manager: SessionManager = Depends(get_session_manager)) -> None:
    await websocket.accept()
    sink = WebSocketSink(participant_id=str(uuid4()), websocket=websocket)
    await sink.send(InitMessage(id=sink.participant_id).model_dump())

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(frame.get("code", 1000))
            # Clients may send JSON as either text or binary frames.
            raw = frame.get("text") or frame.get("bytes")
            if not raw:
                continue
            message = parse_inbound(raw)
            if message is None:
                logger.debug("ignoring malformed frame from %s", sink.participant_id)
                continue
            await manager.dispatch(sink, message)
    except WebSocketDisconnect:
        await manager.disconnect(sink)
    except Exception:
        await manager.disconnect(sink)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/sessions", response_model=SessionListResponse)
async def list_sessions_route(manager: SessionManager = Depends(get_session_manager)) -> SessionListResponse:
    return SessionListResponse(
        sessions=manager.registry.list_states(),
        waiting=manager.registry.waiting_count,
    )
