"""Domain errors for dictionary compilation and loading."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class YoficatorError(Exception):
    """Base error for the yoficator package."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class HashCollisionError(YoficatorError):
    """Two distinct word forms produced the same dictionary key.

    Fatal at compile time: re-key the dictionary with a wider hash or disable
    hashing, never drop one of the words.
    """

    key: str
    first_word: str
    second_word: str

    def __str__(self) -> str:
        return f"{self.message} (key={self.key}, words={self.first_word!r}/{self.second_word!r})"


@dataclass(slots=True)
class DictionaryUnavailableError(YoficatorError):
    """The compiled dictionary cannot be opened or read."""

    path: str | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} (path={self.path})"
