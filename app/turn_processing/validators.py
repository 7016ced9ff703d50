from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.api.models import GamePhase, GameState
from app.turn_processing.voice_leading import is_pitch_class, legal_fourth


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators.

    Keep this tight and serializable-ish so we can safely log it.
    """

    game_id: str
    participant_id: str
    action: str
    notes: object = None


class TurnValidator(ABC):
    """A small, composable validation unit for an incoming action.

    Validators raise `ValueError` carrying the message shown to the sender and
    never mutate the state.
    """

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PhaseValidator(TurnValidator):
    allowed_phases: frozenset[GamePhase]

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if state.phase not in self.allowed_phases:
            raise ValueError("Game not active")


@dataclass(frozen=True, slots=True)
class TurnOwnerValidator(TurnValidator):
    """Only the participant whose turn it is may move."""

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        from app.turn_processing.turns import assert_is_participants_turn

        assert_is_participants_turn(state=state, participant_id=ctx.participant_id)


@dataclass(frozen=True, slots=True)
class NotesShapeValidator(TurnValidator):
    size: int = 4

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        notes = ctx.notes
        if not isinstance(notes, list) or len(notes) != self.size:
            raise ValueError("Invalid notes array")
        if not all(is_pitch_class(n) for n in notes):
            raise ValueError("Invalid notes array")


@dataclass(frozen=True, slots=True)
class OpeningChordValidator(TurnValidator):
    """The first chord of a round has no carry-over, only distinct pitches."""

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if state.chain:
            return
        notes = list(ctx.notes)  # type: ignore[call-overload]
        if len(set(notes)) != len(notes):
            raise ValueError("Pitches must be distinct")


@dataclass(frozen=True, slots=True)
class CarryOverValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if not state.chain:
            return
        prev = state.chain[-1]
        notes = list(ctx.notes)  # type: ignore[call-overload]
        if notes[:3] != list(prev[1:]):
            raise ValueError("Carry-over violation")


@dataclass(frozen=True, slots=True)
class LegalFourthValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        if not state.chain:
            return
        notes = list(ctx.notes)  # type: ignore[call-overload]
        if not legal_fourth(state.chain[-1], notes[3]):
            raise ValueError("Illegal fourth note")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, state: GameState) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, state=state)


# Order matters: shape checks must pass before the rule checks index into `notes`.
DEFAULT_ACTION_PIPELINES: dict[str, ValidatorPipeline] = {
    "play_tetrachord": ValidatorPipeline(
        validators=(
            PhaseValidator(allowed_phases=frozenset({GamePhase.playing})),
            TurnOwnerValidator(),
            NotesShapeValidator(),
            OpeningChordValidator(),
            CarryOverValidator(),
            LegalFourthValidator(),
        )
    ),
}


def pipeline_for_action(action: str) -> ValidatorPipeline:
    pipe = DEFAULT_ACTION_PIPELINES.get(action)
    if pipe is None:
        raise ValueError(f"Unknown action: {action}")
    return pipe
