from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol
from uuid import uuid4

from fastapi import WebSocket

CPU_ID_PREFIX = "cpu-"


def make_cpu_id() -> str:
    return f"{CPU_ID_PREFIX}{uuid4()}"


def is_cpu_id(participant_id: str) -> bool:
    return participant_id.startswith(CPU_ID_PREFIX)


class ParticipantSink(Protocol):
    """Where outbound messages for one participant go.

    Payloads are JSON-serializable dicts.
    """

    participant_id: str
    name: str | None

    async def send(self, payload: dict[str, Any]) -> None:  # pragma: no cover
        ...


@dataclass(eq=False, slots=True)
class WebSocketSink:
    participant_id: str
    websocket: WebSocket
    name: str | None = None

    async def send(self, payload: dict[str, Any]) -> None:
        await self.websocket.send_json(payload)


@dataclass(eq=False, slots=True)
class NullSink:
    """The computer opponent's end: it reads state from the registry, not from messages."""

    participant_id: str = field(default_factory=make_cpu_id)
    name: str | None = "CPU"

    async def send(self, payload: dict[str, Any]) -> None:
        return None
