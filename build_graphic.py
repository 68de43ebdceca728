#!/usr/bin/env python3
"""
Tournament Graphic Builder CLI

Builds the render-ready graphic description for a tournament, from a saved
snapshot or from a team export merged into a blank record.

Usage:
    python build_graphic.py --snapshot data/tournament.json
    python build_graphic.py --csv teams.csv --format anicor --players 16 --output graphic.json
    python build_graphic.py --xlsx teams.xlsx --players 64 --split
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from tgg import (
    build_graphic,
    create_default_tournament,
    graphic_to_dict,
    load_snapshot,
    merge_import_records,
    parse_teams_csv,
    parse_teams_xlsx,
    save_snapshot,
    split_graphic_data_for_64,
)
from tgg.constants import PLAYER_COUNTS
from tgg.logging_config import setup_logging
from tgg.utils import read_export_text
from tgg.sprites import SpeciesResolver


def load_record(args, resolver: SpeciesResolver):
    """Load the record from a snapshot or build one from a team export."""
    if args.snapshot:
        result = load_snapshot(args.snapshot)
        if not result.success:
            print(f"❌ Could not load snapshot ({result.category.value}): {result.error}", file=sys.stderr)
            sys.exit(1)
        return result.data

    if args.csv:
        imported = parse_teams_csv(read_export_text(args.csv), args.format)
    else:
        imported = parse_teams_xlsx(args.xlsx, args.format)

    for error in imported.errors:
        print(f"⚠️  {error}", file=sys.stderr)
    if not imported.records:
        print("❌ No players imported", file=sys.stderr)
        sys.exit(1)

    record = create_default_tournament(args.players, args.overview)
    for message in merge_import_records(record, imported.records, resolver=resolver if args.resolve else None):
        print(f"⚠️  {message}", file=sys.stderr)
    return record


def main():
    parser = argparse.ArgumentParser(description="Build tournament graphic data")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--snapshot", "-s", help="Path to a tournament snapshot JSON")
    source.add_argument("--csv", help="Path to a CSV team export")
    source.add_argument("--xlsx", help="Path to an Excel team export")
    parser.add_argument(
        "--format", "-f",
        default="anicor",
        help="Import format preset for --csv/--xlsx (default: anicor)",
    )
    parser.add_argument(
        "--players", "-n",
        type=int,
        default=16,
        choices=PLAYER_COUNTS,
        help="Tournament size for --csv/--xlsx (default: 16)",
    )
    parser.add_argument(
        "--overview",
        default="Usage",
        choices=("Usage", "Bracket", "None"),
        help="Overview type for --csv/--xlsx (default: Usage)",
    )
    parser.add_argument(
        "--resolve",
        action="store_true",
        help="Map imported species to ids of the remote species index",
    )
    parser.add_argument(
        "--save-snapshot",
        default=None,
        help="Also save the record used as a snapshot",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Output path for the graphic JSON (default: stdout)",
    )
    parser.add_argument(
        "--split",
        action="store_true",
        help="For 64 players, output the Winners and Losers graphics separately",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output",
    )

    args = parser.parse_args()
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_to_file=False)

    resolver = SpeciesResolver()
    record = load_record(args, resolver)

    if args.save_snapshot:
        save_snapshot(args.save_snapshot, record)

    result = build_graphic(record, resolver)
    if not result.success:
        print(f"❌ {result.category.value}: {result.error}", file=sys.stderr)
        sys.exit(1)

    data = result.data
    if args.split and data.player_count == 64:
        winners, losers = split_graphic_data_for_64(data)
        output = {"winners": graphic_to_dict(winners), "losers": graphic_to_dict(losers)}
    else:
        output = graphic_to_dict(data)

    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Graphic data written: {args.output}")
    else:
        print(text)

    for message in data.diagnostics:
        print(f"⚠️  {message}", file=sys.stderr)


if __name__ == "__main__":
    main()
