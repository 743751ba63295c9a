"""
Word tokenizer for the search index.

Segmentation comes from TinySegmenter, the same model the client search
script runs, so words split identically on both sides. Any callable taking a
string and returning a list of strings can stand in for it.
"""

from functools import lru_cache
from typing import Callable, Iterable, List, Set

import tinysegmenter

Tokenizer = Callable[[str], List[str]]


@lru_cache(maxsize=1)
def _segmenter() -> tinysegmenter.TinySegmenter:
    return tinysegmenter.TinySegmenter()


def segment(text: str) -> List[str]:
    """Split text into words with TinySegmenter (whitespace runs come back as tokens)."""
    return _segmenter().tokenize(text)


def normalize_words(tokens: Iterable[str]) -> Set[str]:
    """Drop whitespace-only tokens, lower-case, and deduplicate."""
    return {token.lower() for token in tokens if token.strip()}


def extract_words(text: str, tokenizer: Tokenizer = segment) -> Set[str]:
    """Distinct, lower-cased words of text."""
    return normalize_words(tokenizer(text))
