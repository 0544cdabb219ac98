"""Selective «ё» restoration over a compiled dictionary."""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
import logging
from typing import Any, Iterator

from yoficator.alphabet import has_target_letters
from yoficator.config import YoficatorSettings
from yoficator.diacritics import TextEdit, strip_diacritics
from yoficator.dictionary.store import DictionaryStore, open_dictionary
from yoficator.errors import DictionaryUnavailableError
from yoficator.normalizer import normalize_word
from yoficator.replacement import apply_positions
from yoficator.tokenizer import iter_candidates

logger = logging.getLogger(__name__)


class WordState(str, enum.Enum):
    SKIPPED = "skipped"
    NOT_FOUND = "not_found"
    KEPT = "kept"
    INVALIDATED = "invalidated"


@dataclass(frozen=True, slots=True)
class Replacement:
    """Outcome for one scanned word; ``corrected`` is set only when kept."""

    start: int
    end: int
    original: str
    corrected: str | None
    state: WordState

    @property
    def changed(self) -> bool:
        return self.corrected is not None and self.corrected != self.original


@dataclass(frozen=True, slots=True)
class RestorationResult:
    text: Any
    corrections: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "corrections": dict(self.corrections)}


class Yoficator:
    """Restore «ё» only where the dictionary makes it unambiguous.

    The dictionary is injected and owned by the caller; the engine keeps no
    per-call state, so one instance can serve concurrent callers as long as
    the store allows concurrent reads.
    """

    def __init__(self, dictionary: DictionaryStore | None) -> None:
        self._dictionary = dictionary

    @classmethod
    def from_settings(cls, settings: YoficatorSettings | None = None) -> "Yoficator":
        """Open the configured dictionary; an unavailable one yields a pass-through engine."""
        resolved = settings or YoficatorSettings.from_env()
        try:
            dictionary = open_dictionary(resolved)
        except DictionaryUnavailableError as exc:
            logger.warning("Dictionary unavailable, text will pass through unchanged: %s", exc)
            dictionary = None
        return cls(dictionary)

    @property
    def dictionary(self) -> DictionaryStore | None:
        return self._dictionary

    def close(self) -> None:
        if self._dictionary is not None:
            self._dictionary.close()

    def __enter__(self) -> "Yoficator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def iter_replacements(self, text: str) -> Iterator[Replacement]:
        """Yield the decision for every candidate word of *text*.

        Raises ``DictionaryUnavailableError`` when there is no dictionary or
        the backend fails mid-scan.
        """
        dictionary = self._dictionary
        if dictionary is None:
            raise DictionaryUnavailableError("No dictionary configured")
        strategy = dictionary.strategy

        for candidate in iter_candidates(text):
            word = candidate.text
            if not has_target_letters(word):
                yield Replacement(candidate.start, candidate.end, word, None, WordState.SKIPPED)
                continue

            normalized = normalize_word(word)
            positions = dictionary.lookup(strategy.make_key(normalized.key))
            if positions is None:
                yield Replacement(candidate.start, candidate.end, word, None, WordState.NOT_FOUND)
                continue

            corrected = apply_positions(word, positions, first_upper=normalized.first_upper)
            if corrected == word:
                yield Replacement(candidate.start, candidate.end, word, corrected, WordState.KEPT)
                continue
            if corrected is None or not strategy.accepts(word, corrected):
                yield Replacement(candidate.start, candidate.end, word, None, WordState.INVALIDATED)
                continue

            yield Replacement(candidate.start, candidate.end, word, corrected, WordState.KEPT)

    def restore(self, text: Any) -> RestorationResult:
        """Return *text* with «ё» restored and the map of changed words.

        Never raises for bad input or an unusable dictionary: such text is
        returned unchanged with no corrections.
        """
        if not isinstance(text, str) or not has_target_letters(text) or self._dictionary is None:
            return RestorationResult(text)

        stripped, restore_table = strip_diacritics(text)
        pieces: list[str] = []
        edits: list[TextEdit] = []
        corrections: dict[str, str] = {}
        cursor = 0
        try:
            for replacement in self.iter_replacements(stripped):
                if replacement.corrected is None or not replacement.changed:
                    continue
                corrected = replacement.corrected
                pieces.append(stripped[cursor : replacement.start])
                pieces.append(corrected)
                edits.append(TextEdit(replacement.start, replacement.end, len(corrected)))
                corrections[replacement.original] = corrected
                cursor = replacement.end
        except DictionaryUnavailableError as exc:
            logger.warning("Dictionary lookup failed, text passed through unchanged: %s", exc)
            return RestorationResult(text)

        if not corrections:
            return RestorationResult(text)

        pieces.append(stripped[cursor:])
        return RestorationResult(restore_table.restore("".join(pieces), edits), corrections)

    def parse(self, text: Any) -> Any:
        """Shortcut for ``restore(text).text``."""
        return self.restore(text).text
