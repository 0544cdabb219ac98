"""Build-time conversion of a raw «ё» wordlist into compiled dictionaries.

The raw list carries one word form per line with «ё» in place.  Lines
starting with ``#`` are comments; forms ending in ``?`` or ``*`` are
ambiguous (все/всё, передохнем/передохнём) and are left out so they are never
corrected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import sqlite3
import time
from typing import Iterable

from charset_normalizer import from_bytes

from yoficator.alphabet import MARKED_LOWER, PLAIN_LOWER, UPPER_TO_LOWER
from yoficator.config import YoficatorSettings
from yoficator.dictionary.keys import KeyStrategy, key_strategy_for
from yoficator.dictionary.positions import encode_positions
from yoficator.dictionary.schema import apply_build_pragmas, ensure_schema, write_metadata
from yoficator.dictionary.store import InMemoryDictionary
from yoficator.errors import HashCollisionError

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
EXCLUSION_MARKERS = ("?", "*")


@dataclass(frozen=True, slots=True)
class WordlistEntry:
    word: str
    plain: str
    positions: tuple[int, ...]


@dataclass(slots=True)
class CompiledDictionary:
    """Key-sorted entries plus the key settings they were built with."""

    strategy: KeyStrategy
    entries: dict[str, int | str] = field(default_factory=dict)
    source_lines: int = 0
    skipped_lines: int = 0
    duplicates: int = 0

    def metadata(self) -> dict[str, str]:
        return {
            "generator": "yoficator",
            "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "hashed": "1" if self.strategy.hashed else "0",
            "key_width": "" if self.strategy.width is None else str(self.strategy.width),
            "count": str(len(self.entries)),
        }


@dataclass(slots=True)
class CompileReport:
    wordforms: int = 0
    skipped_lines: int = 0
    duplicates: int = 0
    json_written: bool = False
    sqlite_written: bool = False
    duration_ms: int = 0

    def to_dict(self) -> dict[str, int | bool]:
        return {
            "wordforms": self.wordforms,
            "skipped_lines": self.skipped_lines,
            "duplicates": self.duplicates,
            "json_written": self.json_written,
            "sqlite_written": self.sqlite_written,
            "duration_ms": self.duration_ms,
        }


def parse_wordlist_line(line: str) -> WordlistEntry | None:
    """Return the plain form and «ё» positions of one wordlist line.

    ``None`` for blank lines, comments, ambiguous forms and lines with no «ё».
    """
    word = line.strip()
    if not word or word.startswith(COMMENT_MARKER) or word.endswith(EXCLUSION_MARKERS):
        return None

    lowered = UPPER_TO_LOWER.get(word[0])
    if lowered is not None:
        word = lowered + word[1:]

    positions = tuple(index for index, char in enumerate(word) if char == MARKED_LOWER)
    if not positions:
        logger.warning("Wordlist line has no «ё», skipped: %r", line.strip())
        return None

    return WordlistEntry(word=word, plain=word.replace(MARKED_LOWER, PLAIN_LOWER), positions=positions)


def compile_entries(lines: Iterable[str], strategy: KeyStrategy) -> CompiledDictionary:
    """Compile wordlist lines into a key-sorted dictionary.

    Raises ``HashCollisionError`` when two different word forms share a key.
    """
    compiled = CompiledDictionary(strategy=strategy)
    plains: dict[str, str] = {}
    unsorted: dict[str, int | str] = {}

    for line in lines:
        compiled.source_lines += 1
        entry = parse_wordlist_line(line)
        if entry is None:
            compiled.skipped_lines += 1
            continue

        key = strategy.make_key(entry.plain)
        seen = plains.get(key)
        if seen is not None:
            if seen != entry.plain:
                raise HashCollisionError(
                    "Hash collision found: widen the hash or disable hashed keys",
                    key=key,
                    first_word=seen,
                    second_word=entry.plain,
                )
            compiled.duplicates += 1
            logger.warning("Duplicate wordlist entry ignored: %s", entry.word)
            continue

        plains[key] = entry.plain
        unsorted[key] = encode_positions(entry.positions)

    # Key order keeps the artifacts compressible.
    compiled.entries = dict(sorted(unsorted.items()))
    logger.info(
        "Compiled %s word forms (%s lines skipped, %s duplicates, hashed=%s)",
        len(compiled.entries),
        compiled.skipped_lines,
        compiled.duplicates,
        strategy.hashed,
    )
    return compiled


def read_wordlist(path: str | Path) -> list[str]:
    """Decode a raw wordlist; the reference list ships in cp1251."""
    raw = Path(path).read_bytes()
    try:
        return raw.decode("utf-8").splitlines()
    except UnicodeDecodeError:
        pass

    encoding = "cp1251"
    best = from_bytes(raw).best()
    if best is not None and best.encoding and "cp1251" not in best.could_be_from_charset:
        encoding = best.encoding
    return raw.decode(encoding).splitlines()


def write_json_artifact(compiled: CompiledDictionary, path: str | Path) -> Path:
    """Write the in-memory dictionary artifact."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    metadata = compiled.metadata()
    payload = {
        "generator": metadata["generator"],
        "generated_at": metadata["generated_at"],
        "hashed": compiled.strategy.hashed,
        "key_width": compiled.strategy.width,
        "count": len(compiled.entries),
        "entries": compiled.entries,
    }
    target.write_text(json.dumps(payload, ensure_ascii=False, separators=(",", ":")), encoding="utf-8")
    return target


def write_sqlite_artifact(compiled: CompiledDictionary, path: str | Path) -> Path:
    """Write the external keyed-store artifact."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    connection = sqlite3.connect(str(target))
    try:
        apply_build_pragmas(connection)
        ensure_schema(connection)
        with connection:
            connection.execute("DELETE FROM entries")
            connection.executemany(
                "INSERT INTO entries(key, positions) VALUES(?, ?)",
                ((key, str(value)) for key, value in compiled.entries.items()),
            )
            write_metadata(connection, compiled.metadata())
        connection.execute("VACUUM")
    finally:
        connection.close()
    return target


def _load_json_entries(path: Path, strategy: KeyStrategy) -> CompiledDictionary:
    resident = InMemoryDictionary.from_json(path, strategy)
    return CompiledDictionary(strategy=strategy, entries=dict(resident.entries))


def ensure_compiled(settings: YoficatorSettings) -> CompileReport:
    """Build whichever artifacts are missing; existing ones are left alone."""
    started = time.perf_counter()
    report = CompileReport()
    strategy = key_strategy_for(settings.use_hashed_keys, settings.hash_width)

    json_exists = settings.dictionary_path.is_file()
    sqlite_exists = settings.db_path.is_file()
    if json_exists and sqlite_exists:
        logger.info("Dictionary artifacts already exist, nothing to compile")
        report.duration_ms = int((time.perf_counter() - started) * 1000)
        return report

    if json_exists:
        compiled = _load_json_entries(settings.dictionary_path, strategy)
    else:
        compiled = compile_entries(read_wordlist(settings.wordlist_path), strategy)
        write_json_artifact(compiled, settings.dictionary_path)
        report.json_written = True

    if not sqlite_exists:
        write_sqlite_artifact(compiled, settings.db_path)
        report.sqlite_written = True

    report.wordforms = len(compiled.entries)
    report.skipped_lines = compiled.skipped_lines
    report.duplicates = compiled.duplicates
    report.duration_ms = int((time.perf_counter() - started) * 1000)
    return report
