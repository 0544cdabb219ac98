from __future__ import annotations

from pathlib import Path
import sqlite3
import threading

import pytest

from yoficator.config import YoficatorSettings
from yoficator.dictionary.compiler import compile_entries, write_json_artifact, write_sqlite_artifact
from yoficator.dictionary.keys import HashedKeys, LiteralKeys
from yoficator.dictionary.store import DictionaryStore, InMemoryDictionary, SqliteDictionary, open_dictionary
from yoficator.engine import Yoficator
from yoficator.errors import DictionaryUnavailableError

WORDS = ["ёлка", "зелёный", "мёд", "трёхзвёздочный"]


def _settings(tmp_path: Path, **overrides: object) -> YoficatorSettings:
    values: dict[str, object] = {
        "dictionary_path": tmp_path / "dic.json",
        "db_path": tmp_path / "dic.sqlite3",
        "wordlist_path": tmp_path / "words.txt",
    }
    values.update(overrides)
    return YoficatorSettings(**values)  # type: ignore[arg-type]


def test_in_memory_lookup_hits_and_misses() -> None:
    strategy = LiteralKeys()
    store = InMemoryDictionary(compile_entries(WORDS, strategy).entries, strategy)

    assert store.lookup("елка") == (0,)
    assert store.lookup("трехзвездочный") == (2, 6)
    assert store.lookup("лес") is None
    assert len(store) == 4
    assert isinstance(store, DictionaryStore)


def test_in_memory_entries_are_read_only() -> None:
    store = InMemoryDictionary({"елка": 0}, LiteralKeys())

    with pytest.raises(TypeError):
        store.entries["мед"] = 1  # type: ignore[index]


def test_malformed_entry_is_treated_as_a_miss() -> None:
    store = InMemoryDictionary({"елка": "x"}, LiteralKeys())

    assert store.lookup("елка") is None


def test_json_artifact_round_trips_through_in_memory_store(tmp_path: Path) -> None:
    strategy = HashedKeys()
    path = write_json_artifact(compile_entries(WORDS, strategy), tmp_path / "dic.json")

    store = InMemoryDictionary.from_json(path, strategy)

    assert store.lookup(strategy.make_key("мед")) == (1,)


def test_json_artifact_with_other_key_settings_is_unavailable(tmp_path: Path) -> None:
    path = write_json_artifact(compile_entries(WORDS, HashedKeys()), tmp_path / "dic.json")

    with pytest.raises(DictionaryUnavailableError, match="different key settings"):
        InMemoryDictionary.from_json(path, LiteralKeys())
    with pytest.raises(DictionaryUnavailableError, match="different key settings"):
        InMemoryDictionary.from_json(path, HashedKeys(digest_width=8))


def test_missing_or_broken_json_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(DictionaryUnavailableError):
        InMemoryDictionary.from_json(tmp_path / "missing.json", LiteralKeys())

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DictionaryUnavailableError):
        InMemoryDictionary.from_json(broken, LiteralKeys())

    empty = tmp_path / "empty.json"
    empty.write_text("{}", encoding="utf-8")
    with pytest.raises(DictionaryUnavailableError, match="no entries"):
        InMemoryDictionary.from_json(empty, LiteralKeys())


def test_sqlite_lookup_matches_in_memory(tmp_path: Path) -> None:
    strategy = HashedKeys()
    compiled = compile_entries(WORDS, strategy)
    path = write_sqlite_artifact(compiled, tmp_path / "dic.sqlite3")
    resident = InMemoryDictionary(compiled.entries, strategy)

    with SqliteDictionary(path, strategy) as external:
        for plain in ("елка", "зеленый", "мед", "трехзвездочный", "лес"):
            key = strategy.make_key(plain)
            assert external.lookup(key) == resident.lookup(key)


def test_sqlite_store_is_opened_read_only(tmp_path: Path) -> None:
    strategy = LiteralKeys()
    path = write_sqlite_artifact(compile_entries(WORDS, strategy), tmp_path / "dic.sqlite3")

    with SqliteDictionary(path, strategy) as store:
        with pytest.raises(sqlite3.OperationalError):
            store._connection.execute("DELETE FROM entries")


def test_sqlite_store_serves_concurrent_readers(tmp_path: Path) -> None:
    strategy = LiteralKeys()
    path = write_sqlite_artifact(compile_entries(WORDS, strategy), tmp_path / "dic.sqlite3")
    results: list[tuple[int, ...] | None] = []

    with SqliteDictionary(path, strategy) as store:
        threads = [threading.Thread(target=lambda: results.append(store.lookup("мед"))) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert results == [(1,)] * 8


def test_sqlite_missing_or_mismatched_is_unavailable(tmp_path: Path) -> None:
    with pytest.raises(DictionaryUnavailableError, match="not found"):
        SqliteDictionary(tmp_path / "missing.sqlite3", LiteralKeys())

    path = write_sqlite_artifact(compile_entries(WORDS, LiteralKeys()), tmp_path / "dic.sqlite3")
    with pytest.raises(DictionaryUnavailableError, match="different key settings"):
        SqliteDictionary(path, HashedKeys())


def test_sqlite_closed_connection_raises_unavailable(tmp_path: Path) -> None:
    strategy = LiteralKeys()
    path = write_sqlite_artifact(compile_entries(WORDS, strategy), tmp_path / "dic.sqlite3")
    store = SqliteDictionary(path, strategy)
    store.close()

    with pytest.raises(DictionaryUnavailableError):
        store.lookup("мед")


def test_open_dictionary_prefers_sqlite_when_present(tmp_path: Path) -> None:
    settings = _settings(tmp_path)
    compiled = compile_entries(WORDS, HashedKeys())
    write_json_artifact(compiled, settings.dictionary_path)

    store = open_dictionary(settings)
    assert isinstance(store, InMemoryDictionary)
    store.close()

    write_sqlite_artifact(compiled, settings.db_path)
    store = open_dictionary(settings)
    assert isinstance(store, SqliteDictionary)
    store.close()


def test_open_dictionary_external_only_has_no_memory_fallback(tmp_path: Path) -> None:
    settings = _settings(tmp_path, prefer_external_store=True)
    write_json_artifact(compile_entries(WORDS, HashedKeys()), settings.dictionary_path)

    with pytest.raises(DictionaryUnavailableError):
        open_dictionary(settings)


def test_engine_from_settings_degrades_to_pass_through(tmp_path: Path) -> None:
    with Yoficator.from_settings(_settings(tmp_path)) as engine:
        assert engine.dictionary is None
        assert engine.restore("Зеленая елка").text == "Зеленая елка"


def test_engine_from_settings_uses_sqlite_store(tmp_path: Path) -> None:
    settings = _settings(tmp_path, prefer_external_store=True, use_hashed_keys=False)
    write_sqlite_artifact(compile_entries(WORDS, LiteralKeys()), settings.db_path)

    with Yoficator.from_settings(settings) as engine:
        result = engine.restore("Зеленый мед и трехзвездочная елка.")

    assert result.text == "Зелёный мёд и трехзвездочная ёлка."
    assert result.corrections == {"Зеленый": "Зелёный", "мед": "мёд", "елка": "ёлка"}


def test_sqlite_with_corrupt_key_width_is_unavailable(tmp_path: Path) -> None:
    settings = _settings(tmp_path, prefer_external_store=True)
    write_sqlite_artifact(compile_entries(WORDS, HashedKeys()), settings.db_path)
    with sqlite3.connect(settings.db_path) as connection:
        connection.execute("UPDATE dictionary_meta SET value = 'x' WHERE name = 'key_width'")
    connection.close()

    with pytest.raises(DictionaryUnavailableError, match="invalid key width"):
        SqliteDictionary(settings.db_path, HashedKeys())

    with Yoficator.from_settings(settings) as engine:
        assert engine.dictionary is None
        assert engine.restore("Зеленая елка").text == "Зеленая елка"


def test_json_with_corrupt_key_width_is_unavailable(tmp_path: Path) -> None:
    path = tmp_path / "dic.json"
    path.write_text('{"hashed": true, "key_width": "x", "entries": {}}', encoding="utf-8")

    with pytest.raises(DictionaryUnavailableError, match="invalid key width"):
        InMemoryDictionary.from_json(path, HashedKeys())
