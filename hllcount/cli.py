"""Command-line driver: python -m hllcount"""

from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from collections.abc import Sequence

from hllcount.logging_config import configure_from_env, enable_console_logging
from hllcount.sketching.hyperloglog import MAX_PRECISION, MIN_PRECISION
from hllcount.sources import DEFAULT_ENCODING, DEFAULT_PRECISION, count_distinct, read_lines

logger = logging.getLogger(__name__)

PRECISION_ENV = "HLL_PRECISION"


def _precision(value: str) -> int:
    try:
        precision = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid precision: {value!r}") from None
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise argparse.ArgumentTypeError(
            f"precision must be in [{MIN_PRECISION}, {MAX_PRECISION}], got {precision}"
        )
    return precision


def _positive(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def format_estimate(estimate: float) -> str:
    """Render an estimate the way the count command prints it (truncated)."""
    if not math.isfinite(estimate):
        return str(estimate)
    return str(int(estimate))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hllcount",
        description="Approximate distinct-line counting with HyperLogLog",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log to stderr at this level (default: from HLL_LOGGING, else silent)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    count = subparsers.add_parser("count", help="Estimate the number of distinct lines in a file")
    count.add_argument("path", nargs="?", help="Text file to read, or '-' for stdin")
    count.add_argument(
        "--precision",
        type=_precision,
        default=None,
        help=f"Register index bits, {MIN_PRECISION}-{MAX_PRECISION} "
        f"(default: ${PRECISION_ENV}, else {DEFAULT_PRECISION})",
    )
    count.add_argument("--encoding", default=DEFAULT_ENCODING, help="File encoding (default: utf-8)")

    accuracy = subparsers.add_parser("accuracy", help="Run randomized accuracy trials")
    accuracy.add_argument("--precision", type=_precision, default=DEFAULT_PRECISION)
    accuracy.add_argument(
        "--cardinality",
        type=_positive,
        nargs="+",
        default=[10_000],
        help="Distinct keys per trial; several values run several configurations",
    )
    accuracy.add_argument("--trials", type=_positive, default=10)
    accuracy.add_argument("--seed", type=int, default=None)
    accuracy.add_argument("--plot", metavar="FILE", help="Write a PNG of per-trial errors")

    return parser


def _resolve_precision(parser: argparse.ArgumentParser, precision: int | None) -> int:
    if precision is not None:
        return precision
    from_env = os.environ.get(PRECISION_ENV)
    if not from_env:
        return DEFAULT_PRECISION
    try:
        return _precision(from_env)
    except argparse.ArgumentTypeError as exc:
        parser.error(f"{PRECISION_ENV}: {exc}")


def _run_count(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    if args.path is None:
        return 0

    precision = _resolve_precision(parser, args.precision)
    try:
        hll = count_distinct(read_lines(args.path, encoding=args.encoding), precision=precision)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to read %s: %s", args.path, exc)
        print(f"hllcount: error: {exc}", file=sys.stderr)
        return 1

    print(f"Unique words = {format_estimate(hll.estimate())}")
    return 0


def _run_accuracy(args: argparse.Namespace) -> int:
    import pandas as pd

    from hllcount.analysis.accuracy import plot_accuracy, run_trials, summarize

    frames = [
        run_trials(args.precision, cardinality, args.trials, seed=args.seed)
        for cardinality in args.cardinality
    ]
    trials = pd.concat(frames, ignore_index=True)
    print(summarize(trials).to_string(index=False))

    if args.plot:
        path = plot_accuracy(trials, args.plot)
        print(f"Saved plot to {path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        enable_console_logging(level=args.log_level)
    else:
        configure_from_env()

    if args.command == "count":
        return _run_count(parser, args)
    return _run_accuracy(args)

