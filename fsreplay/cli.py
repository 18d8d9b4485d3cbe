# python
"""
fsreplay/cli.py
Command line entry point: replay a transcript and print the answer for one part.
"""
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from . import __version__
from .config import load_config, parse_size
from .dir_table import CONFLICT_POLICIES, DirectoryTable, format_dir_table
from .errors import FsReplayError
from .parser import parse_transcript
from .query import (
    format_total_sizes,
    smallest_sufficient_deletion,
    sum_of_small_totals,
)
from .runlog import RunLog
from .snapshot import dump_snapshot, load_snapshot

logger = logging.getLogger(__name__)

PART_SMALL_TOTALS = "1"
PART_DELETION = "2"


def _size_arg(raw: str) -> int:
    try:
        return parse_size("size", raw)
    except FsReplayError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsreplay",
        description="Rebuild a directory tree from a cd/ls transcript and report directory sizes.",
    )
    parser.add_argument(
        "part",
        choices=(PART_SMALL_TOTALS, PART_DELETION),
        help="1: sum of directory totals at most --max-size; "
        "2: smallest directory whose deletion frees enough space",
    )
    parser.add_argument(
        "input", nargs="?", default="-", help="transcript file, or - for stdin (default)"
    )
    parser.add_argument("--max-size", type=_size_arg)
    parser.add_argument("--filesystem-size", type=_size_arg)
    parser.add_argument("--required-free", type=_size_arg)
    parser.add_argument("--on-conflict", choices=CONFLICT_POLICIES)
    parser.add_argument("--events", help="append JSONL run events to this file")
    parser.add_argument("--snapshot", help="read a JSON tree snapshot instead of a transcript")
    parser.add_argument("--export", help="write the rebuilt tree as a JSON snapshot")
    parser.add_argument(
        "--dump", action="store_true", help="print the table and all totals before the answer"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    limits = config["limits"]
    if args.max_size is not None:
        limits["max_size"] = args.max_size
    if args.filesystem_size is not None:
        limits["filesystem_size"] = args.filesystem_size
    if args.required_free is not None:
        limits["required_free"] = args.required_free
    if args.on_conflict:
        config["parser"]["on_conflict"] = args.on_conflict
    if args.events:
        config["paths"]["events_file"] = args.events
    if args.verbose:
        config["log_level"] = "DEBUG"
    return config


def read_table(args: argparse.Namespace, on_conflict: str) -> DirectoryTable:
    if args.snapshot:
        return load_snapshot(args.snapshot)
    if args.input == "-":
        return parse_transcript(sys.stdin, on_conflict=on_conflict)
    try:
        with open(args.input, encoding="utf-8") as f:
            return parse_transcript(f, on_conflict=on_conflict)
    except OSError as e:
        raise FsReplayError(f"cannot read transcript {args.input}: {e.strerror}") from e


def run_part(part: str, table: DirectoryTable, limits: Dict[str, int]) -> int:
    if part == PART_SMALL_TOTALS:
        return sum_of_small_totals(table, limits["max_size"])
    return smallest_sufficient_deletion(
        table, limits["filesystem_size"], limits["required_free"]
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    try:
        config = _apply_overrides(load_config(), args)
    except FsReplayError as e:
        logger.error("error: %s", e)
        return 1

    logging.basicConfig(
        level=config["log_level"],
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    events_file = config["paths"]["events_file"]
    runlog = RunLog(events_file, version=config["version"]) if events_file else None
    if runlog:
        runlog.log("run.start", "start", part=args.part, input=args.snapshot or args.input)

    try:
        table = read_table(args, config["parser"]["on_conflict"])
        if runlog:
            runlog.log("parse.done", "parse", directories=len(table), files=table.file_count())
        if args.export:
            dump_snapshot(table, args.export)
        answer = run_part(args.part, table, config["limits"])
    except FsReplayError as e:
        logger.error("error: %s", e)
        if runlog:
            runlog.log(
                "run.error", "close",
                error=type(e).__name__, message=str(e), duration_ms=runlog.duration_ms(),
            )
        return 1

    if args.dump:
        print(format_dir_table(table))
        print()
        print(format_total_sizes(table))
        print()
    print(answer)
    if runlog:
        runlog.log("query.result", "close", answer=answer, duration_ms=runlog.duration_ms())
    return 0
