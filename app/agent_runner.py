from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from app.api.models import GamePhase, GameState
from app.turn_processing.voice_leading import legal_fourths

if TYPE_CHECKING:
    from app.session_manager import SessionManager

logger = logging.getLogger(__name__)

# G B D F: the computer always opens a round with this dominant seventh.
OPENING_TETRACHORD: tuple[int, int, int, int] = (7, 11, 2, 5)


def choose_notes(*, state: GameState, rng: random.Random) -> list[int] | None:
    """Pick the computer's next chord, or None when no legal fourth note exists."""

    if not state.chain:
        return list(OPENING_TETRACHORD)

    prev = state.chain[-1]
    options = legal_fourths(prev)
    if not options:
        return None
    return [prev[1], prev[2], prev[3], rng.choice(options)]


async def run_cpu_turn(*, manager: SessionManager, game_id: str) -> bool:
    """Play one computer move in `game_id` if it is the computer's turn.

    Returns True if it acted. The session is looked up again here since it
    may have ended while this turn was scheduled.
    """

    entry = manager.registry.get(game_id)
    if entry is None or entry.cpu is None:
        logger.debug("cpu turn skipped: game %s gone", game_id)
        return False

    state = entry.state
    cpu_slot = entry.cpu_slot
    if state.phase != GamePhase.playing or state.turn != cpu_slot:
        return False

    notes = choose_notes(state=state, rng=manager.rng)
    if notes is None:
        logger.info("game %s: cpu trapped after %s", game_id, list(state.chain[-1]))
        await manager.concede_point(game_id, trapped_slot=state.turn)
        return True

    await manager.play_tetrachord(entry.cpu, notes)
    return True
