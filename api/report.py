"""
Print watch-history statistics for one or more Takeout exports.

Usage:
    python report.py watch-history.json [more.json ...] --top 20
    python report.py watch-history.json --search "lofi" --sort name --asc
    python report.py watch-history.json --json
"""

import argparse
import json
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "engine"))

from aggregator import aggregate_events
from config import build_policy, validate_config
from loader import load_files
from models import CategoryStats
from schema import InputShapeError
from summary import (
    SORT_FIELDS,
    account_age,
    build_summary,
    filter_channels,
    format_date,
    format_duration,
    share_of_total,
    sort_channels,
)


def non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {n}")
    return n


def print_category(title: str, stats: CategoryStats, top: int, search: str, sort: str, descending: bool) -> None:
    print(f"{title}: {stats.event_count:,} watched, ~{format_duration(stats.estimated_hours)}, "
          f"{stats.channel_count:,} channels")
    ranks = {id(ch): i for i, ch in enumerate(stats.channels, start=1)}
    channels = sort_channels(filter_channels(stats.channels, search), sort, descending)
    for ch in channels[:top]:
        print(f"  {ranks[id(ch)]:>4}. {ch.name:<40} {ch.watch_count:>6,}  "
              f"{share_of_total(ch.watch_count, stats.event_count):>6}  {format_duration(ch.estimated_hours)}")
    print()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Summarize a YouTube watch-history export",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("files", nargs="+", help="watch-history JSON files")
    parser.add_argument("--top", type=non_negative_int, default=10, help="channels to list per category (default: 10)")
    parser.add_argument("--search", default="", help="only list channels whose name contains this text")
    parser.add_argument("--sort", default="watch_count", choices=SORT_FIELDS, help="channel sort field")
    parser.add_argument("--asc", action="store_true", help="sort ascending")
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    args = parser.parse_args(argv)

    validate_config()
    policy = build_policy()

    try:
        merged = load_files(args.files)
    except (OSError, InputShapeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    result = aggregate_events(merged.events, policy)
    if result.is_empty:
        print("No valid YouTube watch history found")
        return 1

    if args.json:
        print(json.dumps(build_summary(result, top=args.top), indent=2, ensure_ascii=False))
        return 0

    print("=" * 80)
    print("  WATCH HISTORY")
    print("=" * 80)
    print(f"Total watched:   {result.total_events:,} (~{format_duration(result.total_estimated_hours)})")
    if merged.duplicates or merged.rejected:
        print(f"  Skipped:       {merged.duplicates:,} duplicates, {merged.rejected:,} malformed")
    if result.oldest_watch_date is not None:
        print(f"Watching since:  {format_date(result.oldest_watch_date)} "
              f"({account_age(result.oldest_watch_date)})")
    print()

    descending = not args.asc
    print_category("Videos", result.long_form, args.top, args.search, args.sort, descending)
    print_category("Shorts", result.short_form, args.top, args.search, args.sort, descending)
    return 0


if __name__ == "__main__":
    sys.exit(main())
