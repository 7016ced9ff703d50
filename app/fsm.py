from __future__ import annotations

from statemachine import State, StateMachine

from app.api.models import GamePhase, GameState


class GameFSM(StateMachine):
    """FSM wrapper around GameState.

    - phases: playing -> round_end -> playing (next round) | match_end
    - moves are applied by `app.actions`; the FSM only guards phase transitions.
    """

    playing = State(GamePhase.playing.value, value=GamePhase.playing.value, initial=True)
    round_end = State(GamePhase.round_end.value, value=GamePhase.round_end.value)
    match_end = State(GamePhase.match_end.value, value=GamePhase.match_end.value, final=True)

    score_point = playing.to(round_end)
    next_round = round_end.to(playing)
    finish = round_end.to(match_end)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = GamePhase(str(self.current_state.value))
