"""Compact encoding of «ё» positions stored as dictionary values."""

from __future__ import annotations

from typing import Sequence


def encode_positions(positions: Sequence[int]) -> int | str:
    """Encode one position as an int and several as ``"p1,p2"``."""
    if not positions:
        raise ValueError("positions cannot be empty")
    if len(positions) == 1:
        return int(positions[0])
    return ",".join(str(int(position)) for position in positions)


def decode_positions(value: int | str | bytes) -> tuple[int, ...]:
    if isinstance(value, bool) or not isinstance(value, (int, str, bytes)):
        raise ValueError(f"Malformed positions value: {value!r}")
    if isinstance(value, int):
        positions: tuple[int, ...] = (value,)
    else:
        try:
            raw = value.decode("ascii") if isinstance(value, bytes) else value
            positions = tuple(int(part) for part in raw.split(","))
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValueError(f"Malformed positions value: {value!r}") from exc

    if any(position < 0 for position in positions):
        raise ValueError(f"Negative position in value: {value!r}")
    return positions
