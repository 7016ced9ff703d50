from __future__ import annotations

from dataclasses import dataclass
from uuid import uuid4

from app.api.models import GamePhase, GameState, Tetrachord
from app.fsm import GameFSM
from app.turn_processing.turns import other_slot, pass_turn, require_slot
from app.turn_processing.validators import ValidationContext, pipeline_for_action
from app.turn_processing.voice_leading import semitone_gap

MATCH_POINTS = 3
SCORING_GAP = 1


@dataclass(frozen=True, slots=True)
class MoveResult:
    """Result of an accepted move.

    - `tetrachord`: the chord appended to the chain.
    - `scored_slot`: slot that won the round with this move, if any.
    """

    tetrachord: Tetrachord
    scored_slot: int | None = None


def new_game_state(*, players: list[str], names: list[str | None] | None = None) -> GameState:
    if len(players) != 2:
        raise ValueError("A game needs exactly two participants")
    return GameState(
        game_id=str(uuid4()),
        players=list(players),
        names=list(names) if names is not None else [None, None],
        chain=[],
        turn=0,
        score=[0, 0],
        phase=GamePhase.playing,
        starting_player=0,
        round=1,
    )


def apply_move(*, state: GameState, participant_id: str, notes: object) -> MoveResult:
    """Validate and apply one `play_tetrachord` action.

    Raises `ValueError` (client-facing message) without touching `state` when
    the move is rejected.
    """

    ctx = ValidationContext(game_id=state.game_id, participant_id=participant_id, action="play_tetrachord", notes=notes)
    pipeline_for_action(ctx.action).validate(ctx=ctx, state=state)

    slot = require_slot(state=state, participant_id=participant_id)
    n0, n1, n2, n3 = notes  # type: ignore[misc]
    tet: Tetrachord = (n0, n1, n2, n3)
    state.chain.append(tet)

    if semitone_gap(tet) == SCORING_GAP:
        award_point(state=state, slot=slot)
        return MoveResult(tetrachord=tet, scored_slot=slot)

    pass_turn(state=state)
    return MoveResult(tetrachord=tet)


def award_point(*, state: GameState, slot: int) -> None:
    """Give `slot` the round and move to `round_end`."""

    fsm = GameFSM(state)
    fsm.score_point()
    state.score[slot] += 1
    fsm.sync_phase_to_model()


def concede_round(*, state: GameState, trapped_slot: int) -> int:
    """The side to move has no legal fourth note; the opponent takes the round."""

    winner = other_slot(trapped_slot)
    award_point(state=state, slot=winner)
    return winner


def match_winner(*, state: GameState) -> int | None:
    for slot, points in enumerate(state.score):
        if points >= MATCH_POINTS:
            return slot
    return None


def settle_round(*, state: GameState) -> bool:
    """Close a finished round. Returns True when the match is over."""

    if match_winner(state=state) is None:
        return False
    fsm = GameFSM(state)
    fsm.finish()
    fsm.sync_phase_to_model()
    return True


def start_next_round(*, state: GameState) -> None:
    fsm = GameFSM(state)
    fsm.next_round()
    state.starting_player = other_slot(state.starting_player)
    state.turn = state.starting_player
    state.chain = []
    state.round += 1
    fsm.sync_phase_to_model()
