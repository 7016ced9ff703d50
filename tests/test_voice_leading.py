from __future__ import annotations

import itertools

import pytest

from app.turn_processing.voice_leading import (
    PITCH_CLASSES,
    is_pitch_class,
    legal_fourth,
    legal_fourths,
    semitone_gap,
)


def _arc_interior(p1: int, p2: int) -> set[int]:
    # Walk upward from p1 (exclusive) to p2 (exclusive) around the circle.
    out: set[int] = set()
    n = (p1 + 1) % 12
    while n != p2:
        out.add(n)
        n = (n + 1) % 12
    return out


def test_legal_set_is_arc_interior_minus_carried_notes_for_all_outer_pairs() -> None:
    for p1, p2 in itertools.permutations(PITCH_CLASSES, 2):
        for rest in [(0, 1), (5, 9), (p1, p2)]:
            prev = (p1, p2, *rest)
            expected = _arc_interior(p1, p2) - set(prev[1:])
            assert set(legal_fourths(prev)) == expected, prev


@pytest.mark.parametrize("p", list(PITCH_CLASSES))
def test_equal_outer_notes_allow_nothing(p: int) -> None:
    assert legal_fourths((p, p, 3, 4)) == []


def test_g7_window_runs_from_g_up_to_b() -> None:
    # prev [7, 11, 2, 5]: inside (7, 11) are 8, 9, 10; none are carried over.
    assert legal_fourths((7, 11, 2, 5)) == [8, 9, 10]
    assert not legal_fourth((7, 11, 2, 5), 7)


def test_wrapped_window_crosses_the_octave() -> None:
    # A# (10) up to D# (3) wraps through B, C, C#, D.
    assert legal_fourths((10, 3, 6, 7)) == [0, 1, 2, 11]


def test_boundaries_are_illegal_including_wrapped_aliases() -> None:
    prev = (10, 3, 6, 7)
    assert not legal_fourth(prev, 10)
    assert not legal_fourth(prev, 3)
    # Adjacent outer notes leave an empty interior.
    assert legal_fourths((4, 5, 0, 1)) == []
    assert legal_fourths((11, 0, 5, 6)) == []


def test_carried_notes_are_excluded_from_window() -> None:
    # Window (0, 6) is 1..5; 2 and 4 are carried over.
    assert legal_fourths((0, 6, 2, 4)) == [1, 3, 5]


def test_semitone_gap_uses_absolute_difference() -> None:
    assert semitone_gap((0, 1, 5, 8)) == 1
    assert semitone_gap((1, 0, 5, 8)) == 1
    assert semitone_gap((7, 11, 2, 5)) == 4
    # 11 and 0 are a half step apart on the circle but 11 by absolute difference.
    assert semitone_gap((11, 0, 5, 8)) == 11


def test_is_pitch_class() -> None:
    assert is_pitch_class(0)
    assert is_pitch_class(11)
    assert not is_pitch_class(12)
    assert not is_pitch_class(-1)
    assert not is_pitch_class(True)
    assert not is_pitch_class(3.0)
    assert not is_pitch_class("3")
