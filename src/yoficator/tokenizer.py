"""Candidate word scanner with abbreviation-aware lookahead."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterator

from yoficator.alphabet import RE_ALPHABET, RE_LOWERCASE, RE_UPPERCASE

MIN_WORD_LENGTH = 3

# Printable ASCII punctuation: !"#$%&'()*+,-./ :;<=>?@ [\]^_` {|}~
_ASCII_PUNCT = r"!-/:-@\[-`{-~"

# A word is skipped when it looks like an abbreviation:
#   "мед. училище"   period, spacing, lowercase continuation
#   "долл. США"      period, spacing, two capitals
#   "стр.)", "илл. (" period followed by punctuation, with or without spacing
# The leading [а-яё] alternative keeps the tail possessive: a shorter prefix of
# a rejected word must not match.
_CANDIDATE_RE = re.compile(
    rf"""
    ([{RE_ALPHABET}])
    ([{RE_LOWERCASE}]{{{MIN_WORD_LENGTH - 1},}})
    (?!
        [{RE_LOWERCASE}]
      | \.(?:[\x00-\x20]|\xa0)+
        (?:
            [{RE_LOWERCASE}]
          | [{RE_UPPERCASE}]{{2}}
          | [{_ASCII_PUNCT}]
        )
      | \.[{_ASCII_PUNCT}]
    )
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class CandidateWord:
    """One scanned word and its span in the scanned text."""

    start: int
    end: int
    text: str
    first: str
    rest: str


def iter_candidates(text: str) -> Iterator[CandidateWord]:
    """Yield candidate words left to right; each call rescans *text*."""
    for match in _CANDIDATE_RE.finditer(text):
        yield CandidateWord(
            start=match.start(),
            end=match.end(),
            text=match.group(0),
            first=match.group(1),
            rest=match.group(2),
        )
