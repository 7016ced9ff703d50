from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, field_validator

# One move: four pitch classes, immutable once appended to the chain.
Tetrachord = tuple[int, int, int, int]


class GamePhase(StrEnum):
    # Only ever sent to a participant sitting in the waiting queue.
    waiting = "waiting"
    playing = "playing"
    round_end = "round_end"
    match_end = "match_end"


class GameState(BaseModel):
    game_id: str
    players: list[str]

    # Display names as sent with the join request, by slot.
    names: list[str | None] = Field(default_factory=lambda: [None, None])

    chain: list[Tetrachord] = Field(default_factory=list)
    turn: int = 0
    score: list[int] = Field(default_factory=lambda: [0, 0])
    phase: GamePhase = GamePhase.playing
    starting_player: int = 0
    round: int = 1


class SessionListResponse(BaseModel):
    sessions: list[GameState]
    waiting: int


# Inbound messages. `notes` is deliberately loose so that a malformed array
# is reported to the sender instead of being dropped as an unparseable frame.


class _JoinMessage(BaseModel):
    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _name_as_text(cls, value: Any) -> Any:
        # Non-string names (e.g. numbers) are stored as text.
        if value is None or isinstance(value, str):
            return value
        return str(value)


class JoinMatchMessage(_JoinMessage):
    event: Literal["join_match"]


class JoinCpuMessage(_JoinMessage):
    event: Literal["join_cpu"]


class PlayTetrachordMessage(BaseModel):
    event: Literal["play_tetrachord"]
    notes: Any = None


InboundMessage = Annotated[
    Union[JoinMatchMessage, JoinCpuMessage, PlayTetrachordMessage],
    Field(discriminator="event"),
]


# Outbound messages.


class InitMessage(BaseModel):
    event: Literal["init"] = "init"
    id: str


class StateMessage(BaseModel):
    event: Literal["state"] = "state"
    state: dict[str, Any]


class ErrorMessage(BaseModel):
    event: Literal["error"] = "error"
    msg: str
