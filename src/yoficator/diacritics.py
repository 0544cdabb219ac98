"""Lossless removal of combining marks and soft hyphens around a scan.

Stress accents (U+0301) and soft hyphens (U+00AD) split words for a regex
scanner.  They are cut out before scanning and put back afterwards at the
offsets they originally occupied, shifted by any edits applied to the
stripped text in between.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence
import unicodedata

from yoficator.alphabet import MARKED_LOWER, MARKED_UPPER, PLAIN_LOWER, PLAIN_UPPER

SOFT_HYPHEN = "\u00ad"
COMBINING_DIAERESIS = "\u0308"
DEFAULT_ADDITIONAL_CHARS: frozenset[str] = frozenset({SOFT_HYPHEN})

_DECOMPOSED = {
    MARKED_LOWER: PLAIN_LOWER + COMBINING_DIAERESIS,
    MARKED_UPPER: PLAIN_UPPER + COMBINING_DIAERESIS,
}
_COMPOSED = {pair: marked for marked, pair in _DECOMPOSED.items()}


@dataclass(frozen=True, slots=True)
class TextEdit:
    """A replacement of ``text[start:end]`` by a span of ``new_length`` chars."""

    start: int
    end: int
    new_length: int

    @property
    def delta(self) -> int:
        return self.new_length - (self.end - self.start)


@dataclass(frozen=True, slots=True)
class RemovedRun:
    position: int
    chars: str


@dataclass(slots=True)
class RestoreTable:
    """Stripped characters keyed by their offset in the stripped text.

    ``composed`` lists offsets where a decomposed «е» + U+0308 was folded into
    one «ё» for scanning; restoring writes the original pair back.
    """

    runs: list[RemovedRun] = field(default_factory=list)
    composed: list[int] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.runs or self.composed)

    def __len__(self) -> int:
        return len(self.runs)

    def restore(self, text: str, edits: Sequence[TextEdit] = ()) -> str:
        """Reinsert removed characters into *text*.

        *edits* are spans in stripped-text coordinates that were replaced
        before restoring; they must not overlap.
        """
        if not self:
            return text

        ordered_edits = sorted(edits, key=lambda edit: edit.start)
        # Removed runs sort before a composed letter at the same offset.
        marks = [(_shift_position(run.position, ordered_edits), 0, run.chars) for run in self.runs]
        marks.extend((_shift_position(position, ordered_edits), 1, "") for position in self.composed)
        marks.sort(key=lambda mark: (mark[0], mark[1]))

        pieces: list[str] = []
        cursor = 0
        for position, kind, chars in marks:
            if kind == 1:
                decomposed = _DECOMPOSED.get(text[position]) if cursor <= position < len(text) else None
                if decomposed is None:
                    continue
                pieces.append(text[cursor:position])
                pieces.append(decomposed)
                cursor = position + 1
                continue
            position = max(cursor, min(position, len(text)))
            pieces.append(text[cursor:position])
            pieces.append(chars)
            cursor = position
        pieces.append(text[cursor:])
        return "".join(pieces)


def _shift_position(position: int, edits: Iterable[TextEdit]) -> int:
    shift = 0
    for edit in edits:
        if edit.start >= position:
            break
        if edit.end <= position:
            shift += edit.delta
            continue
        # Inside the edited span: keep the relative offset, clamped to the new span.
        return edit.start + shift + min(position - edit.start, edit.new_length)
    return position + shift


def _is_removable(char: str, additional_chars: frozenset[str] | set[str]) -> bool:
    return char in additional_chars or unicodedata.combining(char) != 0


def strip_diacritics(
    text: str,
    additional_chars: Iterable[str] = DEFAULT_ADDITIONAL_CHARS,
) -> tuple[str, RestoreTable]:
    """Remove combining marks and *additional_chars* from *text*.

    A decomposed «е» + U+0308 is scanned as one «ё», so the diaeresis of a
    marked letter is never stripped away from it; the table remembers the
    original spelling.
    """
    extra = frozenset(additional_chars)
    table = RestoreTable()
    if COMBINING_DIAERESIS not in text and not any(_is_removable(char, extra) for char in text):
        return text, table

    kept: list[str] = []
    pending: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        composed = _COMPOSED.get(text[index : index + 2])
        if composed is None and _is_removable(char, extra):
            pending.append(char)
            index += 1
            continue
        if pending:
            table.runs.append(RemovedRun(position=len(kept), chars="".join(pending)))
            pending.clear()
        if composed is not None:
            table.composed.append(len(kept))
            kept.append(composed)
            index += 2
            continue
        kept.append(char)
        index += 1
    if pending:
        table.runs.append(RemovedRun(position=len(kept), chars="".join(pending)))

    return "".join(kept), table
