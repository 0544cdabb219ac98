"""Cyrillic alphabet tables shared by the scanner, normalizer and compiler.

Positions throughout the package are ``str`` indices: every letter of the
alphabet is a single code point, so a character offset inside a word is
stable regardless of how the surrounding text is encoded on disk.
"""

from __future__ import annotations

import re

PLAIN_UPPER = "Е"
PLAIN_LOWER = "е"
MARKED_UPPER = "Ё"
MARKED_LOWER = "ё"

# А-Я plus Ё; the contiguous range does not include the marked letter.
UPPERCASE = "".join(chr(code) for code in range(0x0410, 0x0430)) + MARKED_UPPER

UPPER_TO_LOWER: dict[str, str] = {upper: upper.lower() for upper in UPPERCASE}

# Character classes for ``re`` patterns.
RE_ALPHABET = "А-яЁё"
RE_UPPERCASE = "А-ЯЁ"
RE_LOWERCASE = "а-яё"

_TARGET_LETTERS_RE = re.compile(f"[{PLAIN_UPPER}{PLAIN_LOWER}{MARKED_UPPER}{MARKED_LOWER}]")
_TO_PLAIN = str.maketrans(MARKED_UPPER + MARKED_LOWER, PLAIN_UPPER + PLAIN_LOWER)


def has_target_letters(text: str) -> bool:
    """Return True if *text* contains any of Е, е, Ё, ё."""
    return bool(_TARGET_LETTERS_RE.search(text))


def to_plain(text: str) -> str:
    """Replace every Ё/ё with Е/е, keeping case."""
    return text.translate(_TO_PLAIN)
