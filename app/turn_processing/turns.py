from __future__ import annotations

from app.api.models import GameState


def require_slot(*, state: GameState, participant_id: str) -> int:
    try:
        return state.players.index(participant_id)
    except ValueError:
        raise ValueError("Not in a game") from None


def other_slot(slot: int) -> int:
    return 1 - slot


def current_turn_participant_id(*, state: GameState) -> str:
    return state.players[state.turn]


def assert_is_participants_turn(*, state: GameState, participant_id: str) -> None:
    if participant_id != current_turn_participant_id(state=state):
        raise ValueError("Not your turn")


def pass_turn(*, state: GameState) -> None:
    state.turn = other_slot(state.turn)
