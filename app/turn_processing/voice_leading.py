from __future__ import annotations

from collections.abc import Sequence

PITCH_CLASS_COUNT = 12
PITCH_CLASSES: tuple[int, ...] = tuple(range(PITCH_CLASS_COUNT))


def is_pitch_class(value: object) -> bool:
    # bool is an int subclass; JSON true/false must not pass as 1/0.
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < PITCH_CLASS_COUNT


def legal_fourth(prev: Sequence[int], fourth: int) -> bool:
    """Return whether `fourth` may close the chord that follows `prev`.

    The new note must sit strictly inside the arc that runs upward from the
    previous chord's first note to its second note, wrapping past B when the
    second note is lower. It must also not repeat any of the three notes
    carried over from `prev`.
    """

    p1, p2 = prev[0], prev[1]
    if p1 == p2:
        return False

    low = p1
    high = p2 + PITCH_CLASS_COUNT if p1 > p2 else p2

    candidate = fourth + PITCH_CLASS_COUNT if fourth < low else fourth
    if candidate <= low or candidate >= high:
        return False

    return fourth not in prev[1:]


def legal_fourths(prev: Sequence[int]) -> list[int]:
    return [n for n in PITCH_CLASSES if legal_fourth(prev, n)]


def semitone_gap(tetrachord: Sequence[int]) -> int:
    """Distance between the first two notes, folded into one octave."""

    return abs(tetrachord[1] - tetrachord[0]) % PITCH_CLASS_COUNT
