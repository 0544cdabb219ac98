"""CLI entrypoint for restoring «ё» in a text or file."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path
import sys

from dotenv import load_dotenv

from yoficator.config import YoficatorSettings
from yoficator.engine import Yoficator


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    defaults = YoficatorSettings.from_env()

    parser = argparse.ArgumentParser(description="Restore the letter «ё» where the dictionary is unambiguous")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--text", help="Text to process")
    source.add_argument("--input", help="UTF-8 file to process (stdin when omitted)")
    parser.add_argument("--json-path", default=str(defaults.dictionary_path), help="In-memory dictionary artifact")
    parser.add_argument("--db-path", default=str(defaults.db_path), help="SQLite dictionary artifact")
    parser.add_argument(
        "--prefer-external-store",
        action="store_true",
        help="Query the SQLite dictionary only, never load it into memory",
    )
    parser.add_argument("--no-hash", action="store_true", help="Dictionary was compiled with literal keys")
    parser.add_argument("--json", action="store_true", help="Print text and corrections as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.WARNING)

    settings = replace(
        defaults,
        dictionary_path=Path(args.json_path),
        db_path=Path(args.db_path),
        prefer_external_store=defaults.prefer_external_store or args.prefer_external_store,
        use_hashed_keys=defaults.use_hashed_keys and not args.no_hash,
    )

    if args.text is not None:
        text = args.text
    elif args.input is not None:
        text = Path(args.input).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()

    with Yoficator.from_settings(settings) as engine:
        result = engine.restore(text)

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        sys.stdout.write(result.text)
        if args.text is not None:
            sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
