"""32-bit one-at-a-time hash and fixed-width integer helpers.

The estimator buckets and ranks keys using a variant of Bob Jenkins'
one-at-a-time mixer. The mixer's output depends on 32-bit overflow, so every
intermediate value is explicitly wrapped back into the signed 32-bit range
rather than left to grow as a Python int.

Key properties:
- Deterministic across processes and runs (no per-process salt, unlike hash())
- O(len(key)) per call
- Not cryptographic

Reference:
    Jenkins. "A hash function for hash Table lookup" (1997)
"""

from __future__ import annotations

from collections.abc import Iterator

INT32_BITS = 32
_UINT32_MASK = 0xFFFF_FFFF
_SIGN_BIT = 0x8000_0000


def to_uint32(value: int) -> int:
    """Reinterpret an integer's low 32 bits as unsigned."""
    return value & _UINT32_MASK


def to_int32(value: int) -> int:
    """Reinterpret an integer's low 32 bits as a signed two's-complement value."""
    value &= _UINT32_MASK
    return value - (1 << INT32_BITS) if value & _SIGN_BIT else value


def leading_zeros32(value: int) -> int:
    """Number of leading zero bits in the 32-bit pattern of value.

    Returns 32 for zero. Negative inputs are taken as their two's-complement
    bit pattern and therefore have no leading zeros.
    """
    return INT32_BITS - to_uint32(value).bit_length()


def _code_units(key: str) -> Iterator[int]:
    """Yield the UTF-16 code units of key.

    Characters outside the Basic Multilingual Plane are split into their
    surrogate pair so the hash agrees with tools that iterate UTF-16 text.
    """
    for char in key:
        code = ord(char)
        if code > 0xFFFF:
            code -= 0x10000
            yield 0xD800 | (code >> 10)
            yield 0xDC00 | (code & 0x3FF)
        else:
            yield code


def one_at_a_time_hash(key: str) -> int:
    """Hash a string to a signed 32-bit integer.

    Args:
        key: The string to hash. The empty string hashes to 0.

    Returns:
        The hash as a signed 32-bit value. Treat it as a raw bit pattern;
        the sign carries no meaning.
    """
    h = 0
    for unit in _code_units(key):
        h = to_int32(h + unit)
        h = to_int32(h + (h << 10))
        # >> on a negative int is an arithmetic shift
        h ^= h >> 6

    h = to_int32(h + (h << 3))
    h ^= h >> 6
    h = to_int32(h + (h << 16))
    return h
