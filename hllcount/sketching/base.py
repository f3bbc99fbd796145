"""Base protocols for streaming cardinality sketches.

A sketch processes a stream of keys one at a time and answers an approximate
query about the stream using bounded memory. Sketches here are accumulators:
keys can be folded in but never removed, and the state is never reset.

This module defines:
- Sketch: Base protocol with the operations every sketch supports
- CardinalitySketch: For distinct-count estimation (HyperLogLog)
"""

from abc import ABC, abstractmethod


class Sketch(ABC):
    """Base protocol for streaming sketches.

    Sketches are not thread-safe. Callers sharing one instance across
    threads must serialize calls to update().
    """

    @abstractmethod
    def update(self, key: str) -> None:
        """Fold a key into the sketch.

        Args:
            key: The key to add.
        """

    @property
    @abstractmethod
    def memory_bytes(self) -> int:
        """Estimated memory usage in bytes."""

    @property
    @abstractmethod
    def item_count(self) -> int:
        """Number of keys passed to update(), duplicates included."""


class CardinalitySketch(Sketch):
    """Protocol for sketches that estimate cardinality (distinct count).

    Implementations: HyperLogLog
    """

    @abstractmethod
    def estimate(self) -> float:
        """Estimate the number of distinct keys seen.

        Returns:
            Estimated distinct count. Pure read; repeated calls without an
            intervening update() return the same value.
        """

    @abstractmethod
    def standard_error(self) -> float:
        """Theoretical relative standard error of estimate()."""
