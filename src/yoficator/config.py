"""Runtime configuration for dictionary compilation and lookup."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_WORDLIST_PATH = "yoficator.dic.dat"
DEFAULT_DICTIONARY_PATH = ".yoficator.dic.json"
DEFAULT_DB_PATH = ".yoficator.dic.sqlite3"
DEFAULT_HASH_WIDTH = 4
MIN_HASH_WIDTH = 2
MAX_HASH_WIDTH = 16

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(*, name: str, raw_value: str) -> bool:
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw_value!r})")


def _parse_int_in_range(*, name: str, raw_value: str, minimum: int, maximum: int) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer (got {raw_value!r})") from exc
    if not minimum <= value <= maximum:
        raise ValueError(f"{name} must be between {minimum} and {maximum}")
    return value


def _parse_path(*, name: str, raw_value: str) -> Path:
    value = raw_value.strip()
    if not value:
        raise ValueError(f"{name} cannot be empty")
    return Path(value).expanduser()


@dataclass(frozen=True, slots=True)
class YoficatorSettings:
    """Validated dictionary settings.

    ``prefer_external_store`` pins lookups to the SQLite store with no
    in-memory fallback.  ``use_hashed_keys`` stores truncated MD5 keys, which
    shrinks the dictionary and turns on replacement validation.
    """

    prefer_external_store: bool = False
    use_hashed_keys: bool = True
    hash_width: int = DEFAULT_HASH_WIDTH
    wordlist_path: Path = Path(DEFAULT_WORDLIST_PATH)
    dictionary_path: Path = Path(DEFAULT_DICTIONARY_PATH)
    db_path: Path = Path(DEFAULT_DB_PATH)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "YoficatorSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        prefer_external_store = _parse_bool(
            name="YOFICATOR_PREFER_EXTERNAL_STORE",
            raw_value=source.get("YOFICATOR_PREFER_EXTERNAL_STORE", "false"),
        )
        use_hashed_keys = _parse_bool(
            name="YOFICATOR_USE_HASHED_KEYS",
            raw_value=source.get("YOFICATOR_USE_HASHED_KEYS", "true"),
        )
        hash_width = _parse_int_in_range(
            name="YOFICATOR_HASH_WIDTH",
            raw_value=source.get("YOFICATOR_HASH_WIDTH", str(DEFAULT_HASH_WIDTH)).strip(),
            minimum=MIN_HASH_WIDTH,
            maximum=MAX_HASH_WIDTH,
        )

        return cls(
            prefer_external_store=prefer_external_store,
            use_hashed_keys=use_hashed_keys,
            hash_width=hash_width,
            wordlist_path=_parse_path(
                name="YOFICATOR_WORDLIST_PATH",
                raw_value=source.get("YOFICATOR_WORDLIST_PATH", DEFAULT_WORDLIST_PATH),
            ),
            dictionary_path=_parse_path(
                name="YOFICATOR_DICTIONARY_PATH",
                raw_value=source.get("YOFICATOR_DICTIONARY_PATH", DEFAULT_DICTIONARY_PATH),
            ),
            db_path=_parse_path(
                name="YOFICATOR_DB_PATH",
                raw_value=source.get("YOFICATOR_DB_PATH", DEFAULT_DB_PATH),
            ),
        )
