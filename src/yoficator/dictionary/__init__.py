"""Compiled «ё» dictionaries: key strategies, stores and the compiler."""

from .compiler import CompiledDictionary, CompileReport, compile_entries, ensure_compiled, parse_wordlist_line
from .keys import HashedKeys, KeyStrategy, LiteralKeys, key_strategy_for
from .store import DictionaryStore, InMemoryDictionary, SqliteDictionary, open_dictionary

__all__ = [
    "CompileReport",
    "CompiledDictionary",
    "DictionaryStore",
    "HashedKeys",
    "InMemoryDictionary",
    "KeyStrategy",
    "LiteralKeys",
    "SqliteDictionary",
    "compile_entries",
    "ensure_compiled",
    "key_strategy_for",
    "open_dictionary",
    "parse_wordlist_line",
]
