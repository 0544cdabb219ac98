"""CLI entrypoint for compiling the raw «ё» wordlist."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from yoficator.config import YoficatorSettings
from yoficator.dictionary.compiler import ensure_compiled
from yoficator.errors import DictionaryUnavailableError, HashCollisionError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    defaults = YoficatorSettings.from_env()

    parser = argparse.ArgumentParser(description="Compile the «ё» wordlist into JSON and SQLite dictionaries")
    parser.add_argument("--wordlist", default=str(defaults.wordlist_path), help="Raw wordlist path")
    parser.add_argument("--json-path", default=str(defaults.dictionary_path), help="In-memory dictionary artifact")
    parser.add_argument("--db-path", default=str(defaults.db_path), help="SQLite dictionary artifact")
    parser.add_argument("--no-hash", action="store_true", help="Store literal keys instead of MD5 prefixes")
    parser.add_argument("--hash-width", type=int, default=defaults.hash_width, help="Hashed key width in bytes")
    args = parser.parse_args(argv)

    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)

    settings = replace(
        defaults,
        wordlist_path=Path(args.wordlist),
        dictionary_path=Path(args.json_path),
        db_path=Path(args.db_path),
        use_hashed_keys=defaults.use_hashed_keys and not args.no_hash,
        hash_width=args.hash_width,
    )

    try:
        report = ensure_compiled(settings)
    except HashCollisionError as exc:
        logger.error("%s", exc)
        return 1
    except DictionaryUnavailableError as exc:
        logger.error("Existing dictionary cannot be reused: %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("Dictionary compilation failed: %s", exc)
        return 1

    print(json.dumps(report.to_dict(), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
