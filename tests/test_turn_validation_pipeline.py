from __future__ import annotations

import pytest

from app.api.models import GamePhase, GameState
from app.turn_processing.validators import ValidationContext, pipeline_for_action


def _state(**overrides: object) -> GameState:
    data: dict[str, object] = {"game_id": "g1", "players": ["p0", "p1"]}
    data.update(overrides)
    return GameState.model_validate(data)


def _validate(state: GameState, *, participant_id: str, notes: object) -> None:
    ctx = ValidationContext(game_id=state.game_id, participant_id=participant_id, action="play_tetrachord", notes=notes)
    pipeline_for_action("play_tetrachord").validate(ctx=ctx, state=state)


@pytest.mark.parametrize("phase", [GamePhase.round_end, GamePhase.match_end])
def test_phase_validator_denies_when_not_playing(phase: GamePhase) -> None:
    with pytest.raises(ValueError) as e:
        _validate(_state(phase=phase), participant_id="p0", notes=[7, 11, 2, 5])
    assert str(e.value) == "Game not active"


def test_turn_owner_checked_before_notes() -> None:
    with pytest.raises(ValueError) as e:
        _validate(_state(), participant_id="p1", notes="garbage")
    assert str(e.value) == "Not your turn"


@pytest.mark.parametrize(
    "notes",
    [None, "7,11,2,5", [7, 11, 2], [7, 11, 2, 5, 0], [7, 11, 2, 12], [7, 11, -1, 5], [7, 11, 2, 5.0], [True, 11, 2, 5]],
)
def test_malformed_notes_rejected(notes: object) -> None:
    with pytest.raises(ValueError) as e:
        _validate(_state(), participant_id="p0", notes=notes)
    assert str(e.value) == "Invalid notes array"


def test_opening_requires_distinct_pitches() -> None:
    with pytest.raises(ValueError) as e:
        _validate(_state(), participant_id="p0", notes=[7, 11, 7, 5])
    assert str(e.value) == "Pitches must be distinct"


def test_opening_accepts_any_distinct_chord() -> None:
    _validate(_state(), participant_id="p0", notes=[0, 1, 2, 3])


def test_carry_over_violation() -> None:
    state = _state(chain=[(7, 11, 2, 5)], turn=1)
    with pytest.raises(ValueError) as e:
        _validate(state, participant_id="p1", notes=[11, 2, 6, 9])
    assert str(e.value) == "Carry-over violation"


def test_illegal_fourth_note() -> None:
    state = _state(chain=[(7, 11, 2, 5)], turn=1)
    with pytest.raises(ValueError) as e:
        _validate(state, participant_id="p1", notes=[11, 2, 5, 7])
    assert str(e.value) == "Illegal fourth note"


def test_continuation_with_legal_fourth_passes() -> None:
    state = _state(chain=[(7, 11, 2, 5)], turn=1)
    _validate(state, participant_id="p1", notes=[11, 2, 5, 9])


def test_fourth_note_repeating_a_carried_note_is_illegal() -> None:
    # 2 lies inside the (0, 6) window but is already in the chord.
    state = _state(chain=[(0, 6, 2, 4)], turn=1)
    with pytest.raises(ValueError) as e:
        _validate(state, participant_id="p1", notes=[6, 2, 4, 2])
    assert str(e.value) == "Illegal fourth note"


def test_unknown_action_pipeline_raises() -> None:
    with pytest.raises(ValueError) as e:
        pipeline_for_action("nope")
    assert "Unknown action" in str(e.value)
