"""Expose the src-layout package when running `python -m yoficator.cli...` from a checkout."""

from __future__ import annotations

from pathlib import Path

_SRC_PACKAGE = Path(__file__).resolve().parent.parent / "src" / "yoficator"

if _SRC_PACKAGE.is_dir():
    __path__.append(str(_SRC_PACKAGE))
