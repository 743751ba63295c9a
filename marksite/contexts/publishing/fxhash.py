"""
FxHash

64-bit rolling multiplicative hash used to place words in the Bloom filter.
The client search script implements the same function, so any change here
breaks every published index.
"""

from typing import Iterator

SEED = 0x517CC1B727220A95
MASK64 = (1 << 64) - 1
MASK32 = (1 << 32) - 1


def fxhash64(word: str) -> int:
    """Hash the UTF-8 bytes of word: rotate left 5, xor byte, multiply by SEED (mod 2^64)."""
    value = 0
    for byte in word.encode("utf-8"):
        value = ((value << 5) | (value >> 59)) & MASK64
        value = ((value ^ byte) * SEED) & MASK64
    return value


def fxhash32_multi(word: str) -> Iterator[int]:
    """
    Endless stream of 32-bit hashes derived from one fxhash64 by double hashing.

    The i-th value is (low + i * high) mod 2^32 where low/high are the halves of
    the 64-bit hash.
    """
    value = fxhash64(word)
    low, high = value & MASK32, value >> 32
    i = 0
    while True:
        yield (low + i * high) & MASK32
        i += 1
