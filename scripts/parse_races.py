#!/usr/bin/env python3
"""
Parse K1 Speed race result emails and print them.

Reads exported .eml files, prints each race as a table and lists the
racers seen.

Usage:
    python scripts/parse_races.py
    python scripts/parse_races.py --mail-dir ./mail --limit 20
    python scripts/parse_races.py --racer "Kevin Ruiz"   # Racer stats
    python scripts/parse_races.py --json                 # Parsed races as JSON
    python scripts/parse_races.py --debug                # Show first raw message
"""

import argparse
import json
import logging
from functools import partial
from pathlib import Path

# Add parent to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from core.config import Settings
from core.formatting import format_results
from core.messages import RawMessage, load_mail_directory
from core.parser import parse_race_email
from core.results import parse_messages
from core.stats import get_racer_stats, list_racers

DEBUG_PREVIEW_CHARS = 2000


def print_debug(message: RawMessage) -> None:
    """Show the raw bodies of a message."""
    print("=== DEBUG: Raw email text body ===")
    print(message.text[:DEBUG_PREVIEW_CHARS] if message.text else "(no text body)")
    print("\n=== DEBUG: Raw email HTML body (first 2000 chars) ===")
    print(message.html[:DEBUG_PREVIEW_CHARS] if message.html else "(no html body)")
    print("=== END DEBUG ===\n")


def print_racer_stats(races, racer_name: str) -> None:
    stats = get_racer_stats(races, racer_name)
    if not stats.found:
        print(f"No races found for {racer_name}")
        return

    print(f"\n{stats.racer}: {stats.races} race(s)")
    print(f"  Best time:     {stats.best_time}")
    print(f"  Avg best time: {stats.avg_best_time}")
    print(f"  Avg position:  {stats.avg_position}")
    print(f"  Wins:          {stats.wins}")
    print(f"  Podiums:       {stats.podiums}")
    for r in stats.results:
        print(f"  {r.date:%Y-%m-%d %H:%M}  {r.location} {r.track}  P{r.position}  {r.best_time}")


def main(argv=None) -> int:
    load_dotenv()
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="Parse K1 Speed race result emails")
    parser.add_argument("--mail-dir", type=str, help=f"Directory of .eml files (default {settings.mail_dir})")
    parser.add_argument("--limit", type=int, default=settings.mail_limit, help="Most recent messages to parse")
    parser.add_argument("--racer", type=str, help="Show stats for this racer")
    parser.add_argument("--json", action="store_true", help="Print parsed races as JSON")
    parser.add_argument("--debug", action="store_true", help="Show the first message's raw bodies")
    args = parser.parse_args(argv)

    mail_dir = Path(args.mail_dir) if args.mail_dir else settings.mail_dir

    try:
        messages = load_mail_directory(mail_dir, limit=args.limit)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    if not messages:
        print("No emails found.")
        return 0

    if args.debug:
        print_debug(messages[0])

    parse = partial(parse_race_email, century_base=settings.century_base)

    if args.json:
        # Keep stdout pure JSON
        logging.disable(logging.INFO)
        try:
            batch = parse_messages(messages, parse=parse)
        finally:
            logging.disable(logging.NOTSET)
        print(json.dumps([r.to_dict() for r in batch.races], indent=2))
        return 0

    batch = parse_messages(messages, parse=parse)
    races = batch.races

    for outcome in batch.outcomes:
        if outcome.parsed:
            print(format_results(outcome.parsed))
        else:
            print(f"Could not parse: {outcome.subject}")

    print(f"\n{'=' * 60}")
    print(f"Total races parsed: {len(races)}")
    print(batch.summary())

    if races:
        racers = list_racers(races)
        print(f"Unique racers: {len(racers)}")
        print(f"Racers: {', '.join(racers)}")

    if args.racer:
        print_racer_stats(races, args.racer)

    return 0


if __name__ == "__main__":
    sys.exit(main())
