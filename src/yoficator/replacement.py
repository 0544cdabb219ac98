"""Position-driven «е» → «ё» replacement."""

from __future__ import annotations

from typing import Sequence

from yoficator.alphabet import MARKED_LOWER, MARKED_UPPER


def apply_positions(word: str, positions: Sequence[int], *, first_upper: bool) -> str | None:
    """Put a marked letter at every position of *word*.

    Position 0 of a capitalized word gets «Ё», everything else «ё».  Returns
    ``None`` when a position falls outside the word.
    """
    letters = list(word)
    for position in positions:
        if position < 0 or position >= len(letters):
            return None
        letters[position] = MARKED_UPPER if position == 0 and first_upper else MARKED_LOWER
    return "".join(letters)
