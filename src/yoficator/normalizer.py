"""Dictionary lookup keys for scanned words."""

from __future__ import annotations

from dataclasses import dataclass

from yoficator.alphabet import MARKED_LOWER, PLAIN_LOWER, UPPER_TO_LOWER


@dataclass(frozen=True, slots=True)
class NormalizedWord:
    key: str
    first_upper: bool


def normalize_word(word: str) -> NormalizedWord:
    """Fold the leading capital and replace every «ё» with «е».

    Only letters from the alphabet's uppercase table are folded; any other
    first character leaves the word as is.
    """
    if not word:
        return NormalizedWord(key=word, first_upper=False)

    lowered = UPPER_TO_LOWER.get(word[0])
    working = word if lowered is None else lowered + word[1:]
    return NormalizedWord(
        key=working.replace(MARKED_LOWER, PLAIN_LOWER),
        first_upper=lowered is not None,
    )
