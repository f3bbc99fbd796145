"""Fixed-size register store for HyperLogLog.

Each register holds the largest rank seen for keys routed to its bucket.
Registers only ever grow: the sole mutator is a max-update, so there is no
way to reset or lower a value once it has been observed.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator

# Storage bound only: a rank is 1 + the leading zeros of a nonzero 32-bit word.
# The bound reachable at a given precision is hyperloglog.max_rank().
MAX_REGISTER_VALUE = 32


class RegisterArray:
    """A fixed-length array of one-byte, monotonically non-decreasing registers.

    Args:
        size: Number of registers. Fixed for the lifetime of the array.

    Example:
        registers = RegisterArray(16)
        registers.update(3, 5)
        registers.update(3, 2)  # no effect, 5 is already larger
        assert registers[3] == 5
    """

    __slots__ = ("_values",)

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        self._values = bytearray(size)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> RegisterArray:
        """Build a register array holding the given values.

        Useful for evaluating the estimator on a known register state.

        Raises:
            ValueError: If values is empty or any value is outside
                [0, MAX_REGISTER_VALUE].
        """
        values = list(values)
        registers = cls(len(values))
        for index, value in enumerate(values):
            if not 0 <= value <= MAX_REGISTER_VALUE:
                raise ValueError(
                    f"register value must be in [0, {MAX_REGISTER_VALUE}], got {value}"
                )
            registers._values[index] = value
        return registers

    def update(self, index: int, rank: int) -> None:
        """Raise register ``index`` to ``rank`` if rank is larger.

        Not atomic: concurrent callers must synchronize externally.
        """
        if rank > self._values[index]:
            self._values[index] = rank

    def zero_count(self) -> int:
        """Number of registers still at zero."""
        return self._values.count(0)

    def harmonic_sum(self) -> float:
        """Sum of 2^-value over all registers."""
        return sum(2.0 ** -value for value in self._values)

    def snapshot(self) -> tuple[int, ...]:
        """Immutable copy of the current register values."""
        return tuple(self._values)

    @property
    def memory_bytes(self) -> int:
        return sys.getsizeof(self._values)

    def __getitem__(self, index: int) -> int:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"RegisterArray(size={len(self._values)}, zeros={self.zero_count()})"
