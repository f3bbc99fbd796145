"""Line-oriented key sources.

Keys are read one line at a time so arbitrarily large inputs stream through
the estimator without being held in memory.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from hllcount.sketching.hyperloglog import HyperLogLog

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_PRECISION = 15

STDIN = "-"


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


def read_lines(path: str | Path, encoding: str = DEFAULT_ENCODING) -> Iterator[str]:
    """Yield each line of a text file without its line terminator.

    ``\\n``, ``\\r\\n`` and a lone ``\\r`` all end a line. A last line with no
    terminator is still yielded; an empty file yields nothing.

    Args:
        path: File to read, or ``"-"`` for standard input.
        encoding: Text encoding of the file. Default UTF-8.

    Raises:
        OSError: If the file cannot be opened or read.
        UnicodeDecodeError: If the content is not valid in ``encoding``.
    """
    if str(path) == STDIN:
        # stdin is already decoded; encoding applies to files only
        for line in sys.stdin:
            yield _strip_terminator(line)
        return

    # newline="" keeps "\r\n" intact so it is stripped as one terminator
    with open(path, encoding=encoding, newline="") as handle:
        for line in handle:
            yield _strip_terminator(line)


def count_distinct(lines: Iterable[str], precision: int = DEFAULT_PRECISION) -> HyperLogLog:
    """Feed every key from ``lines`` into a fresh HyperLogLog.

    Args:
        lines: Keys to count.
        precision: Estimator precision (4-16). Default 15.

    Returns:
        The populated estimator.
    """
    hll = HyperLogLog(precision=precision)
    for line in lines:
        hll.update(line)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Counted %d keys, estimate %.1f (%s range)",
            hll.item_count,
            hll.estimate(),
            hll.regime().value,
        )
    return hll
