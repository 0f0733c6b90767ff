from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from mcp_log_timeline_server.core.errors import LogParseError
from mcp_log_timeline_server.core.log_service import ParseOptions, parse_log_file
from mcp_log_timeline_server.core.models import NormalizedRecord, Severity
from mcp_log_timeline_server.core.timeline import filter_records, merge_records, summarize_records


def _parse_levels(s: str) -> list[Severity]:
    by_name = {level.value.lower(): level for level in Severity}
    out: list[Severity] = []
    for part in s.split(","):
        name = part.strip().lower()
        if not name:
            continue
        try:
            out.append(by_name[name])
        except KeyError as e:
            allowed = ", ".join(level.value for level in Severity)
            raise argparse.ArgumentTypeError(f"Invalid level. Allowed: {allowed}") from e
    if not out:
        raise argparse.ArgumentTypeError("At least one level must be provided")
    return out


def _parse_sources(s: str) -> list[str]:
    return [part.strip() for part in s.split(",") if part.strip()]


async def _load(paths: Sequence[Path], options: ParseOptions) -> list[NormalizedRecord]:
    records: list[NormalizedRecord] = []
    for path in paths:
        try:
            result = await parse_log_file(path, options=options)
        except LogParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            continue
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)
        records = merge_records(records, result.records)
    return records


def main() -> None:
    p = argparse.ArgumentParser(description="Merge log files into one normalized timeline.")
    p.add_argument("log_paths", nargs="+")
    p.add_argument("--levels", type=_parse_levels, default=None, help="Comma-separated (e.g., Error,Warning)")
    p.add_argument("--sources", type=_parse_sources, default=None, help="Comma-separated source names")
    p.add_argument("--contains", default=None, help="Case-insensitive message substring")
    p.add_argument("--strict", action="store_true", help="Reject files in an unrecognized format")
    p.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Fraction of unrecognized lines above which a file is flagged (default: 0.5)",
    )
    p.add_argument("--no-blocks", action="store_true", help="Disable multi-line block extraction")
    p.add_argument("--summary", action="store_true", help="Print counts after the timeline")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = ParseOptions(
        strict=args.strict,
        unrecognized_threshold=args.threshold,
        use_blocks=not args.no_blocks,
    )
    try:
        records = asyncio.run(_load([Path(x) for x in args.log_paths], options))
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    selected = filter_records(
        records,
        levels=args.levels,
        sources=args.sources,
        contains=args.contains,
    )
    for r in selected:
        print(f"{r.sequence_id} {r.timestamp.isoformat()} [{r.level.value}] {r.source}: {r.message}")

    print(f"\nFound {len(selected)} matching entries ({len(records)} total).")
    if args.summary:
        s = summarize_records(selected)
        print(f"Warnings: {s.warnings}  Errors & Critical: {s.errors}")
        for source, n in sorted(s.by_source.items(), key=lambda kv: (-kv[1], kv[0])):
            print(f"  {source}: {n}")
    if not records:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
