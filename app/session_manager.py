from __future__ import annotations

import logging
import random
from typing import Any

from app.actions import apply_move, concede_round, new_game_state, settle_round, start_next_round
from app.agent_runner import run_cpu_turn
from app.api.models import (
    ErrorMessage,
    GamePhase,
    InboundMessage,
    JoinCpuMessage,
    JoinMatchMessage,
    PlayTetrachordMessage,
    StateMessage,
)
from app.config import Settings
from app.game_store import SessionEntry, SessionRegistry
from app.participants import NullSink, ParticipantSink, is_cpu_id
from app.scheduler import SessionTimers

logger = logging.getLogger(__name__)

ROUND_RESTART = "round_restart"
CPU_MOVE = "cpu_move"


class SessionManager:
    """Matchmaking, routing and broadcast for every live game in the process.

    All entry points run on the event loop. A state transition is fully
    applied before anything is sent, and follow-ups (next round, computer
    move) always go through `SessionTimers` rather than being called inline.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        registry: SessionRegistry | None = None,
        timers: SessionTimers | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.registry = registry or SessionRegistry()
        self.timers = timers or SessionTimers()
        self.rng = rng or random.Random()

    # Inbound

    async def dispatch(self, sink: ParticipantSink, message: InboundMessage) -> None:
        if isinstance(message, JoinMatchMessage):
            await self.join_match(sink, name=message.name)
        elif isinstance(message, JoinCpuMessage):
            await self.join_cpu(sink, name=message.name)
        elif isinstance(message, PlayTetrachordMessage):
            await self.play_tetrachord(sink, message.notes)

    async def join_match(self, sink: ParticipantSink, *, name: str | None = None) -> SessionEntry | None:
        if await self._reject_if_busy(sink):
            return None
        sink.name = name

        opponent = self.registry.dequeue()
        if opponent is None:
            self.registry.enqueue(sink)
            logger.info("participant %s waiting for an opponent", sink.participant_id)
            await self._safe_send(sink, StateMessage(state={"phase": GamePhase.waiting.value}).model_dump(mode="json"))
            return None

        state = new_game_state(
            players=[opponent.participant_id, sink.participant_id],
            names=[opponent.name, sink.name],
        )
        entry = SessionEntry(state=state, sinks=(opponent, sink))
        self.registry.add(entry)
        logger.info("game %s created: %s vs %s", state.game_id, opponent.participant_id, sink.participant_id)
        await self.broadcast(entry)
        return entry

    async def join_cpu(self, sink: ParticipantSink, *, name: str | None = None) -> SessionEntry | None:
        if await self._reject_if_busy(sink):
            return None
        sink.name = name

        cpu = NullSink()
        # The computer sits in slot 0 so it always opens the first round.
        state = new_game_state(players=[cpu.participant_id, sink.participant_id], names=[cpu.name, sink.name])
        entry = SessionEntry(state=state, sinks=(cpu, sink), cpu=cpu)
        self.registry.add(entry)
        logger.info("cpu game %s created for %s", state.game_id, sink.participant_id)
        await self.broadcast(entry)
        self._schedule_cpu_if_due(entry)
        return entry

    async def play_tetrachord(self, sender: ParticipantSink, notes: Any) -> None:
        if is_cpu_id(sender.participant_id):
            entry = self.registry.find_by_cpu(sender.participant_id)
        else:
            entry = self.registry.find_by_participant(sender.participant_id)

        if entry is None:
            await self._send_error(sender, "Not in a game")
            return

        try:
            result = apply_move(state=entry.state, participant_id=sender.participant_id, notes=notes)
        except ValueError as e:
            logger.info("game %s rejected move from %s: %s", entry.game_id, sender.participant_id, e)
            await self._send_error(sender, str(e))
            return

        logger.debug("game %s: %s played %s", entry.game_id, sender.participant_id, list(result.tetrachord))
        if result.scored_slot is not None:
            await self._close_round(entry, winner=result.scored_slot)
            return

        await self.broadcast(entry)
        self._schedule_cpu_if_due(entry)

    async def concede_point(self, game_id: str, *, trapped_slot: int) -> None:
        """Award the round to the opponent of `trapped_slot` without a move."""

        entry = self.registry.get(game_id)
        if entry is None or entry.state.phase != GamePhase.playing:
            return
        winner = concede_round(state=entry.state, trapped_slot=trapped_slot)
        await self._close_round(entry, winner=winner)

    async def disconnect(self, sink: ParticipantSink) -> None:
        if self.registry.discard_waiting(sink):
            logger.info("participant %s left the waiting queue", sink.participant_id)

        entry = self.registry.find_by_participant(sink.participant_id)
        if entry is not None:
            await self._leave_session(entry, sink)

    # Outbound

    async def broadcast(self, entry: SessionEntry) -> None:
        # A torn-down session must never be broadcast.
        if self.registry.get(entry.game_id) is not entry:
            return
        payload = StateMessage(state=entry.state.model_dump(mode="json")).model_dump(mode="json")
        for sink in entry.sinks:
            await self._safe_send(sink, payload)

    async def _send_error(self, sink: ParticipantSink, msg: str) -> None:
        await self._safe_send(sink, ErrorMessage(msg=msg).model_dump())

    async def _safe_send(self, sink: ParticipantSink, payload: dict[str, Any]) -> None:
        try:
            await sink.send(payload)
        except Exception:
            # The receive loop of a dead socket tears the session down on its own.
            logger.warning("send to %s failed", sink.participant_id, exc_info=True)

    # Transitions

    async def _reject_if_busy(self, sink: ParticipantSink) -> bool:
        entry = self.registry.find_by_participant(sink.participant_id)
        if entry is not None and entry.state.phase == GamePhase.match_end:
            # A finished match is left behind rather than blocking a rematch.
            await self._leave_session(entry, sink)
            entry = None
        if self.registry.is_waiting(sink) or entry is not None:
            await self._send_error(sink, "Already in a game")
            return True
        return False

    async def _leave_session(self, entry: SessionEntry, sink: ParticipantSink) -> None:
        self.registry.remove(entry.game_id)
        logger.info("game %s closed: %s left", entry.game_id, sink.participant_id)
        for other in entry.others(sink.participant_id):
            await self._safe_send(other, ErrorMessage(msg="Opponent disconnected").model_dump())

    async def _close_round(self, entry: SessionEntry, *, winner: int) -> None:
        state = entry.state
        logger.info("game %s round %d to slot %d, score %s", state.game_id, state.round, winner, state.score)
        await self.broadcast(entry)

        if settle_round(state=state):
            logger.info("game %s match over, slot %d wins %s", state.game_id, winner, state.score)
            await self.broadcast(entry)
            return

        self.timers.schedule(state.game_id, ROUND_RESTART, self.settings.round_restart_delay, self._restart_round)

    async def _restart_round(self, game_id: str) -> None:
        entry = self.registry.get(game_id)
        if entry is None or entry.state.phase != GamePhase.round_end:
            return
        start_next_round(state=entry.state)
        await self.broadcast(entry)
        self._schedule_cpu_if_due(entry)

    def _schedule_cpu_if_due(self, entry: SessionEntry) -> None:
        state = entry.state
        if entry.cpu_slot is None or state.phase != GamePhase.playing or state.turn != entry.cpu_slot:
            return
        self.timers.schedule(state.game_id, CPU_MOVE, self.settings.cpu_move_delay, self._cpu_turn)

    async def _cpu_turn(self, game_id: str) -> None:
        await run_cpu_turn(manager=self, game_id=game_id)

    async def shutdown(self) -> None:
        self.timers.cancel_all()
