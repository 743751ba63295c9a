"""
Bloom Filter

Per-page search index. Sized from the number of distinct words and a target
false-positive probability, populated with fxhash double hashing, and shipped
to the browser as base64 alongside its hash count.
"""

import base64
import math
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, List, Tuple

from marksite.contexts.publishing.fxhash import fxhash32_multi


def optimal_parameters(num_items: int, false_positive_rate: float) -> Tuple[int, int]:
    """
    Bit and hash counts for num_items at the given false-positive probability.

    m = ceil(-n * ln(p) / ln(2)^2), k = ceil(m / n * ln(2)). Zero items give (0, 0).

    Args:
        num_items: Number of distinct items to insert
        false_positive_rate: Target probability, strictly between 0 and 1

    Returns:
        Tuple of (num_bits, num_hashes)
    """
    if not 0.0 < false_positive_rate < 1.0:
        raise ValueError(f"false_positive_rate must be in (0, 1), got: {false_positive_rate}")
    if num_items <= 0:
        return 0, 0

    num_bits = math.ceil(-num_items * math.log(false_positive_rate) / math.log(2) ** 2)
    num_hashes = math.ceil(num_bits / num_items * math.log(2))
    return num_bits, num_hashes


@dataclass
class BloomFilter:
    """
    Bit array plus hash count.

    Bit positions are taken modulo the byte array's bit length (8 * len(filter)),
    matching the client. Bit p lives in byte p // 8 under mask 1 << (p % 8).

    Attributes:
        filter: Packed bit array
        num_hash: Number of hash positions per word
    """

    filter: bytearray
    num_hash: int

    @classmethod
    def empty(cls) -> "BloomFilter":
        """Zero-length filter (used for crypto pages and pages without words)."""
        return cls(filter=bytearray(), num_hash=0)

    @classmethod
    def with_capacity(cls, num_items: int, false_positive_rate: float) -> "BloomFilter":
        num_bits, num_hashes = optimal_parameters(num_items, false_positive_rate)
        return cls(filter=bytearray(math.ceil(num_bits / 8)), num_hash=num_hashes)

    @classmethod
    def from_words(cls, words: Iterable[str], false_positive_rate: float) -> "BloomFilter":
        """Size a filter for the distinct words and insert them all."""
        distinct = set(words)
        bloom = cls.with_capacity(len(distinct), false_positive_rate)
        for word in sorted(distinct):
            bloom.insert(word)
        return bloom

    @property
    def num_bits(self) -> int:
        return len(self.filter) * 8

    def is_empty(self) -> bool:
        return self.num_bits == 0

    def _positions(self, word: str) -> List[int]:
        return [h % self.num_bits for h in islice(fxhash32_multi(word), self.num_hash)]

    def insert(self, word: str) -> None:
        if self.is_empty():
            raise ValueError("Cannot insert into a zero-length Bloom filter")
        for pos in self._positions(word):
            self.filter[pos // 8] |= 1 << (pos % 8)

    def contains(self, word: str) -> bool:
        """Membership test: False is definite, True may be a false positive."""
        if self.is_empty():
            return False
        return all(self.filter[pos // 8] & (1 << (pos % 8)) for pos in self._positions(word))

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def dump_as_base64(self) -> str:
        return base64.b64encode(bytes(self.filter)).decode("ascii")

    def to_manifest_entry(self) -> dict:
        """Entry for bloom_filter.js."""
        return {"filter": self.dump_as_base64(), "num_hash": self.num_hash}
