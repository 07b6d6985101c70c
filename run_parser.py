#!/usr/bin/env python3
"""
CLI script to run the box office parser.

Usage:
    python run_parser.py weekend 2024W29
    python run_parser.py year 2024 --cache-dir ./cache
    python run_parser.py source https://pro.imdb.com/title/tt6263850/ -o title.json

Cache location, cast limit and request timeout also come from BOXOFFICE_*
environment variables or a .env file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
load_dotenv()

from boxoffice_parser.config import Settings
from boxoffice_parser.exceptions import BoxOfficeError
from boxoffice_parser.main import BoxOfficeParser
from boxoffice_parser.schemas import SourceRequest, WeekendRequest, YearRequest


def build_request(mode: str, target: str):
    if mode == "weekend":
        return WeekendRequest(weekend_id=target)
    if mode == "year":
        return YearRequest(year=int(target))
    return SourceRequest(source_url=target)


def main():
    parser = argparse.ArgumentParser(description="Extract box office records")
    parser.add_argument("mode", choices=["weekend", "year", "source"], help="What to parse")
    parser.add_argument("target", help="Weekend id (2024W29), year (2024) or detail page URL")
    parser.add_argument("--cache-dir", "-c", help="Page cache directory")
    parser.add_argument("--cast-limit", type=int, help="Cast rows read per title")
    parser.add_argument("--output", "-o", help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    settings = Settings.from_env(cache_dir=args.cache_dir, cast_limit=args.cast_limit)

    try:
        box_office = BoxOfficeParser(
            settings=settings,
            log_level=logging.DEBUG if args.verbose else logging.INFO
        )
        result = box_office.run(build_request(args.mode, args.target))
    except BoxOfficeError as e:
        print(json.dumps(e.to_response(), indent=2), file=sys.stderr)
        sys.exit(1)

    # ensure_ascii=False keeps accented names readable
    output = json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(output)
        print(f"Saved to: {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    main()
