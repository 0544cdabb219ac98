"""Literal and hashed dictionary keys, with the post-replacement check."""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import logging
from typing import Protocol, runtime_checkable

from yoficator.alphabet import to_plain

logger = logging.getLogger(__name__)

DEFAULT_HASH_WIDTH = 4
MAX_HASH_WIDTH = hashlib.md5().digest_size


@runtime_checkable
class KeyStrategy(Protocol):
    """How a normalization key is stored, and whether lookups need checking."""

    @property
    def hashed(self) -> bool:
        """True when keys are lossy and replacements must be validated."""

    @property
    def width(self) -> int | None:
        """Digest width in bytes, ``None`` for literal keys."""

    def make_key(self, plain: str) -> str:
        """Return the stored key for a plain-letter normalization key."""

    def accepts(self, original: str, corrected: str) -> bool:
        """Return True when *corrected* is a safe replacement for *original*."""


@dataclass(frozen=True, slots=True)
class LiteralKeys:
    """Keys are stored verbatim; a hit is exact, nothing to validate."""

    @property
    def hashed(self) -> bool:
        return False

    @property
    def width(self) -> int | None:
        return None

    def make_key(self, plain: str) -> str:
        return plain

    def accepts(self, original: str, corrected: str) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class HashedKeys:
    """Keys are the leading ``width`` bytes of an MD5 digest, hex encoded."""

    digest_width: int = DEFAULT_HASH_WIDTH

    def __post_init__(self) -> None:
        if not 1 <= self.digest_width <= MAX_HASH_WIDTH:
            raise ValueError(f"hash width must be between 1 and {MAX_HASH_WIDTH}")

    @property
    def hashed(self) -> bool:
        return True

    @property
    def width(self) -> int | None:
        return self.digest_width

    def make_key(self, plain: str) -> str:
        digest = hashlib.md5(plain.encode("utf-8")).digest()
        return digest[: self.digest_width].hex()

    def accepts(self, original: str, corrected: str) -> bool:
        if to_plain(corrected) == original:
            return True
        logger.warning(
            "Rejected replacement %r -> %r: possible hash collision (width=%s)",
            original,
            corrected,
            self.digest_width,
        )
        return False


def key_strategy_for(hashed: bool, width: int = DEFAULT_HASH_WIDTH) -> KeyStrategy:
    """Build the key strategy matching a configuration or artifact header."""
    if hashed:
        return HashedKeys(digest_width=width)
    return LiteralKeys()
