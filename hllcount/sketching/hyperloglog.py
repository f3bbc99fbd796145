"""HyperLogLog for cardinality (distinct count) estimation.

HyperLogLog estimates the number of distinct keys in a stream using a small,
fixed amount of memory regardless of the stream size.

Key properties:
- Space: 2^precision one-byte registers (16 B to 64 KB)
- Update: O(len(key))
- Query: O(m) where m = 2^precision
- Error: ~1.04/sqrt(m) standard error

Keys are hashed with a 32-bit one-at-a-time hash. The top ``precision`` bits
of the hash select a register; the rank stored there is computed from the
word ``(x << b) | ((1 << (b - 1)) + 1)``. That word differs from the textbook
construction (which ranks only the remaining ``32 - b`` hash bits) and is
kept exactly as is: every existing estimate depends on it.

Reference:
    Flajolet, Fusy, Gandouet, Meunier. "HyperLogLog: the analysis of a
    near-optimal cardinality estimation algorithm" (2007)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from enum import Enum

from hllcount.sketching.base import CardinalitySketch
from hllcount.sketching.hashing import (
    INT32_BITS,
    leading_zeros32,
    one_at_a_time_hash,
    to_uint32,
)
from hllcount.sketching.registers import RegisterArray

logger = logging.getLogger(__name__)

MIN_PRECISION = 4
MAX_PRECISION = 16

POW2_32 = float(1 << 32)
SMALL_RANGE_FACTOR = 2.5
LARGE_RANGE_THRESHOLD = POW2_32 / 30.0


class EstimateRegime(Enum):
    """Which bias correction estimate() applies to the raw estimate."""

    SMALL = "small"  # linear counting over empty registers
    MID = "mid"  # raw estimate, uncorrected
    LARGE = "large"  # hash-collision correction near 2^32


def validate_precision(precision: int) -> int:
    """Check that precision is an integer in [4, 16].

    Raises:
        TypeError: If precision is not an int.
        ValueError: If precision is outside [4, 16].
    """
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise TypeError(f"precision must be an int, got {type(precision).__name__}")
    if not MIN_PRECISION <= precision <= MAX_PRECISION:
        raise ValueError(
            f"precision must be in [{MIN_PRECISION}, {MAX_PRECISION}], got {precision}"
        )
    return precision


def alpha_m(precision: int) -> float:
    """Bias correction factor alpha_m for 2^precision registers."""
    if precision == 4:
        return 0.673
    if precision == 5:
        return 0.697
    if precision == 6:
        return 0.709
    m = 1 << precision
    return 0.7213 / (1 + 1.079 / m)


def bucket_index(hash_value: int, precision: int) -> int:
    """Register index for a hash: its top ``precision`` bits, unsigned."""
    return to_uint32(hash_value) >> (INT32_BITS - precision)


def rank_word(hash_value: int, precision: int) -> int:
    """The 32-bit word whose leading zeros give the rank of a hash.

    The addition binds before the OR, and the low constant always sets bit 0,
    so the word is never zero.
    """
    return to_uint32((hash_value << precision) | ((1 << (precision - 1)) + 1))


def rank(word: int) -> int:
    """1 + the number of leading zeros of a 32-bit word; 0 for a zero word."""
    if word == 0:
        return 0
    return 1 + leading_zeros32(word)


def max_rank(precision: int) -> int:
    """Largest rank a key can reach at this precision.

    The rank word always has bit ``precision - 1`` set, so it has at most
    ``32 - precision`` leading zeros.
    """
    return INT32_BITS + 1 - precision


def standard_error(precision: int) -> float:
    """Theoretical relative standard error 1.04/sqrt(m) for 2^precision registers."""
    return 1.04 / math.sqrt(1 << precision)


def _as_registers(registers: Iterable[int]) -> RegisterArray:
    if isinstance(registers, RegisterArray):
        return registers
    return RegisterArray.from_values(registers)


def raw_estimate(registers: Iterable[int], precision: int) -> float:
    """Uncorrected harmonic-mean estimate alpha_m * m^2 / sum(2^-M[i])."""
    m = 1 << precision
    return alpha_m(precision) * m * m / _as_registers(registers).harmonic_sum()


def select_regime(raw: float, num_registers: int) -> EstimateRegime:
    """Pick the correction regime for a raw estimate.

    Both thresholds are inclusive on the lower regime.
    """
    if raw <= SMALL_RANGE_FACTOR * num_registers:
        return EstimateRegime.SMALL
    if raw <= LARGE_RANGE_THRESHOLD:
        return EstimateRegime.MID
    return EstimateRegime.LARGE


def estimate_cardinality(registers: Iterable[int], precision: int) -> float:
    """Apply the bias-corrected HyperLogLog formula to a register state.

    Args:
        registers: Register values; exactly 2^precision of them.
        precision: Bits of the hash used for the register index (4-16).

    Returns:
        The cardinality estimate. ``math.inf`` if the raw estimate has reached
        2^32, where the large-range correction is undefined.

    Raises:
        ValueError: If the register count does not match the precision, or a
            register holds a rank no key can produce at this precision.
    """
    validate_precision(precision)
    registers = _as_registers(registers)
    m = 1 << precision
    if len(registers) != m:
        raise ValueError(f"expected {m} registers for precision {precision}, got {len(registers)}")
    limit = max_rank(precision)
    peak = max(registers)
    if peak > limit:
        raise ValueError(
            f"register value must be at most {limit} for precision {precision}, got {peak}"
        )

    raw = raw_estimate(registers, precision)
    regime = select_regime(raw, m)

    if regime is EstimateRegime.SMALL:
        zeros = registers.zero_count()
        if zeros == 0:
            return raw
        return m * math.log(m / zeros)

    if regime is EstimateRegime.MID:
        return raw

    remaining = 1.0 - raw / POW2_32
    if remaining <= 0.0:
        logger.warning("Raw estimate %.0f saturated the 32-bit hash space", raw)
        return math.inf
    return -1 * POW2_32 * math.log(remaining)


class HyperLogLog(CardinalitySketch):
    """HyperLogLog for streaming cardinality estimation.

    Estimates the number of distinct string keys in a stream using
    2^precision one-byte registers that track the maximum rank observed in
    each bucket.

    Args:
        precision: Number of hash bits used for the register index (4-16).
            - precision=4: 16 registers, ~26% error
            - precision=10: 1024 registers, ~3.2% error
            - precision=14: 16384 registers, ~0.8% error
            Default is 14.

    Thread safety:
        update() is an unsynchronized read-modify-write on one register.
        Concurrent updates to one instance need an external lock, or some
        updates may be lost. estimate() does not block; run concurrently with
        unsynchronized updates it may see only some of them, which is only
        acceptable if the caller tolerates an approximate snapshot.

    Example:
        hll = HyperLogLog(precision=14)

        for visitor_id in visitor_stream:
            hll.update(visitor_id)

        print(f"~{int(hll.estimate())} unique visitors")
    """

    def __init__(self, precision: int = 14):
        """Initialize HyperLogLog.

        Args:
            precision: Bits for register index (4-16). Default 14.

        Raises:
            TypeError: If precision is not an int.
            ValueError: If precision not in [4, 16].
        """
        self._precision = validate_precision(precision)
        self._num_registers = 1 << precision
        self._alpha = alpha_m(precision)
        self._registers = RegisterArray(self._num_registers)
        self._total_count = 0
        logger.debug(
            "Created HyperLogLog precision=%d registers=%d alpha=%.6f",
            self._precision,
            self._num_registers,
            self._alpha,
        )

    @property
    def precision(self) -> int:
        """Number of bits used for register indexing."""
        return self._precision

    @property
    def num_registers(self) -> int:
        """Number of registers (2^precision)."""
        return self._num_registers

    @property
    def alpha(self) -> float:
        """Bias correction factor alpha_m."""
        return self._alpha

    @property
    def registers(self) -> tuple[int, ...]:
        """Snapshot of the register values."""
        return self._registers.snapshot()

    def hash(self, key: str) -> int:
        """Signed 32-bit hash used to place key."""
        return one_at_a_time_hash(key)

    def update(self, key: str) -> None:
        """Add a key to the sketch.

        Adding a key that was already seen never changes the estimate.

        Raises:
            TypeError: If key is not a str.
        """
        if not isinstance(key, str):
            raise TypeError(f"key must be a str, got {type(key).__name__}")

        self._total_count += 1
        x = one_at_a_time_hash(key)
        self._registers.update(
            bucket_index(x, self._precision),
            rank(rank_word(x, self._precision)),
        )

    def estimate(self) -> float:
        """Estimate the number of distinct keys seen.

        Returns:
            Estimated distinct count as a float. Exactly 0.0 before any update.
        """
        return estimate_cardinality(self._registers, self._precision)

    def regime(self) -> EstimateRegime:
        """The correction regime estimate() currently applies."""
        raw = raw_estimate(self._registers, self._precision)
        return select_regime(raw, self._num_registers)

    def standard_error(self) -> float:
        """Theoretical standard error of the estimate.

        Returns:
            Expected relative error (e.g., 0.01 for 1% error).
        """
        return standard_error(self._precision)

    @property
    def memory_bytes(self) -> int:
        """Estimated memory usage of the register store in bytes."""
        return self._registers.memory_bytes

    @property
    def item_count(self) -> int:
        """Total number of keys added (not distinct count)."""
        return self._total_count

    def __repr__(self) -> str:
        return (
            f"HyperLogLog(precision={self._precision}, "
            f"registers={self._num_registers}, "
            f"estimate≈{self.estimate():.1f})"
        )
