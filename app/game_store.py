from __future__ import annotations

from dataclasses import dataclass

from app.api.models import GameState
from app.participants import NullSink, ParticipantSink


@dataclass(slots=True)
class SessionEntry:
    state: GameState
    # Slot order matches `state.players`.
    sinks: tuple[ParticipantSink, ParticipantSink]
    cpu: NullSink | None = None

    @property
    def game_id(self) -> str:
        return self.state.game_id

    @property
    def cpu_slot(self) -> int | None:
        if self.cpu is None:
            return None
        return self.state.players.index(self.cpu.participant_id)

    def others(self, participant_id: str) -> list[ParticipantSink]:
        return [s for s in self.sinks if s.participant_id != participant_id]


class SessionRegistry:
    """In-process store for the waiting queue and active sessions.

    Owned by a single SessionManager and only touched from the event loop, so
    no locking is needed. Everything lives for the process lifetime only.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, SessionEntry] = {}
        self._waiting: list[ParticipantSink] = []

    # Sessions

    def add(self, entry: SessionEntry) -> None:
        self._sessions[entry.game_id] = entry

    def get(self, game_id: str) -> SessionEntry | None:
        return self._sessions.get(game_id)

    def require(self, game_id: str) -> SessionEntry:
        entry = self.get(game_id)
        if entry is None:
            raise ValueError("Game not found")
        return entry

    def remove(self, game_id: str) -> SessionEntry | None:
        return self._sessions.pop(game_id, None)

    def find_by_participant(self, participant_id: str) -> SessionEntry | None:
        return next(
            (e for e in self._sessions.values() if any(s.participant_id == participant_id for s in e.sinks)),
            None,
        )

    def find_by_cpu(self, cpu_id: str) -> SessionEntry | None:
        return next(
            (e for e in self._sessions.values() if e.cpu is not None and e.cpu.participant_id == cpu_id),
            None,
        )

    def list_states(self) -> list[GameState]:
        return [e.state for e in self._sessions.values()]

    def __len__(self) -> int:
        return len(self._sessions)

    # Waiting queue

    def enqueue(self, sink: ParticipantSink) -> None:
        self._waiting.append(sink)

    def dequeue(self) -> ParticipantSink | None:
        if not self._waiting:
            return None
        return self._waiting.pop(0)

    def discard_waiting(self, sink: ParticipantSink) -> bool:
        before = len(self._waiting)
        self._waiting = [w for w in self._waiting if w is not sink]
        return len(self._waiting) != before

    def is_waiting(self, sink: ParticipantSink) -> bool:
        return any(w is sink for w in self._waiting)

    @property
    def waiting_count(self) -> int:
        return len(self._waiting)
