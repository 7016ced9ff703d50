from __future__ import annotations

import random
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from app.session_manager import SessionManager

# No artificial pauses in tests; timers still go through the event loop.
FAST_SETTINGS = Settings(round_restart_delay=0.0, cpu_move_delay=0.0)


@dataclass(eq=False)
class RecordingSink:
    """ParticipantSink that keeps every payload it is sent."""

    participant_id: str
    name: str | None = None
    messages: list[dict[str, Any]] = field(default_factory=list)

    async def send(self, payload: dict[str, Any]) -> None:
        self.messages.append(payload)

    def of(self, event: str) -> list[dict[str, Any]]:
        return [m for m in self.messages if m["event"] == event]

    @property
    def last_state(self) -> dict[str, Any]:
        return self.of("state")[-1]["state"]

    @property
    def errors(self) -> list[str]:
        return [m["msg"] for m in self.of("error")]


@pytest.fixture()
def manager() -> SessionManager:
    return SessionManager(settings=FAST_SETTINGS, rng=random.Random(1234))


@pytest.fixture()
def alice() -> RecordingSink:
    return RecordingSink(participant_id="alice")


@pytest.fixture()
def bob() -> RecordingSink:
    return RecordingSink(participant_id="bob")


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    app = create_app(FAST_SETTINGS)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def make_sink() -> type[RecordingSink]:
    return RecordingSink
