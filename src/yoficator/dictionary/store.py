"""Read-only dictionary backends: resident mapping or SQLite keyed store."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import sqlite3
import threading
from types import MappingProxyType
from typing import Any, Mapping, Protocol, runtime_checkable

from yoficator.config import YoficatorSettings
from yoficator.dictionary.keys import KeyStrategy, key_strategy_for
from yoficator.dictionary.positions import decode_positions
from yoficator.dictionary.schema import read_metadata
from yoficator.errors import DictionaryUnavailableError

logger = logging.getLogger(__name__)


@runtime_checkable
class DictionaryStore(Protocol):
    """Lookup contract shared by every backend."""

    @property
    def strategy(self) -> KeyStrategy:
        """Key strategy the store was compiled with."""

    def lookup(self, key: str) -> tuple[int, ...] | None:
        """Return «ё» positions for a normalization key, ``None`` on a miss."""

    def close(self) -> None:
        """Release backend resources."""


def _check_header(
    *,
    hashed: bool,
    width: int | None,
    strategy: KeyStrategy,
    path: Path,
) -> None:
    if hashed != strategy.hashed or (hashed and width != strategy.width):
        raise DictionaryUnavailableError(
            "Dictionary was compiled with different key settings "
            f"(hashed={hashed}, width={width}); recompile it or adjust the configuration",
            path=str(path),
        )


def _decode_or_none(key: str, raw: Any) -> tuple[int, ...] | None:
    try:
        return decode_positions(raw)
    except (ValueError, TypeError):
        logger.warning("Ignoring malformed dictionary entry for key %r: %r", key, raw)
        return None


class InMemoryDictionary:
    """Whole dictionary resident in an immutable mapping."""

    def __init__(self, entries: Mapping[str, int | str], strategy: KeyStrategy) -> None:
        self._entries: Mapping[str, int | str] = MappingProxyType(dict(entries))
        self._strategy = strategy

    @classmethod
    def from_json(cls, path: str | Path, strategy: KeyStrategy) -> "InMemoryDictionary":
        source = Path(path)
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise DictionaryUnavailableError(f"Cannot read dictionary: {exc}", path=str(source)) from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("entries"), dict):
            raise DictionaryUnavailableError("Dictionary artifact has no entries table", path=str(source))

        width = payload.get("key_width")
        if width is not None and (isinstance(width, bool) or not isinstance(width, int)):
            raise DictionaryUnavailableError(f"Dictionary has an invalid key width: {width!r}", path=str(source))
        _check_header(
            hashed=bool(payload.get("hashed")),
            width=width,
            strategy=strategy,
            path=source,
        )
        logger.debug("Loaded %s dictionary entries from %s", len(payload["entries"]), source)
        return cls(payload["entries"], strategy)

    @property
    def strategy(self) -> KeyStrategy:
        return self._strategy

    @property
    def entries(self) -> Mapping[str, int | str]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, key: str) -> tuple[int, ...] | None:
        raw = self._entries.get(key)
        if raw is None:
            return None
        return _decode_or_none(key, raw)

    def close(self) -> None:
        return None

    def __enter__(self) -> "InMemoryDictionary":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class SqliteDictionary:
    """Per-word queries against a read-only SQLite artifact."""

    def __init__(self, db_path: str | Path, strategy: KeyStrategy) -> None:
        self._db_path = Path(db_path)
        self._strategy = strategy
        self._lock = threading.Lock()
        if not self._db_path.is_file():
            raise DictionaryUnavailableError("Dictionary database not found", path=str(self._db_path))

        try:
            self._connection = sqlite3.connect(
                f"{self._db_path.resolve().as_uri()}?mode=ro",
                uri=True,
                check_same_thread=False,
            )
            metadata = read_metadata(self._connection)
        except sqlite3.Error as exc:
            raise DictionaryUnavailableError(f"Cannot open dictionary database: {exc}", path=str(self._db_path)) from exc

        width_raw = metadata.get("key_width", "")
        try:
            width = int(width_raw) if width_raw else None
        except ValueError as exc:
            self._connection.close()
            raise DictionaryUnavailableError(
                f"Dictionary has an invalid key width: {width_raw!r}", path=str(self._db_path)
            ) from exc
        try:
            _check_header(
                hashed=metadata.get("hashed") == "1",
                width=width,
                strategy=strategy,
                path=self._db_path,
            )
        except DictionaryUnavailableError:
            self._connection.close()
            raise

    @property
    def strategy(self) -> KeyStrategy:
        return self._strategy

    def lookup(self, key: str) -> tuple[int, ...] | None:
        try:
            with self._lock:
                row = self._connection.execute(
                    "SELECT positions FROM entries WHERE key = ?",
                    (key,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise DictionaryUnavailableError(f"Dictionary lookup failed: {exc}", path=str(self._db_path)) from exc
        if row is None:
            return None
        return _decode_or_none(key, row[0])

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> "SqliteDictionary":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_dictionary(settings: YoficatorSettings) -> DictionaryStore:
    """Pick and open the backend once, according to *settings*.

    ``prefer_external_store`` pins the SQLite backend with no in-memory
    fallback.  Otherwise the SQLite artifact wins when it exists and the JSON
    artifact is loaded into memory when it does not.
    """
    strategy = key_strategy_for(settings.use_hashed_keys, settings.hash_width)

    if settings.prefer_external_store or settings.db_path.is_file():
        logger.debug("Using SQLite dictionary at %s", settings.db_path)
        return SqliteDictionary(settings.db_path, strategy)

    logger.debug("Using in-memory dictionary from %s", settings.dictionary_path)
    return InMemoryDictionary.from_json(settings.dictionary_path, strategy)
