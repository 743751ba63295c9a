"""
Search Index Construction

Builds a page's Bloom filter from the text of its #main-content region once the
page HTML is fully rendered.
"""

from bs4 import BeautifulSoup

from marksite.contexts.publishing.bloom_filter import BloomFilter
from marksite.contexts.publishing.logger import _log_debug
from marksite.contexts.publishing.tokenizer import Tokenizer, extract_words, segment

MAIN_CONTENT_SELECTOR = "#main-content"


def extract_main_text(page_html: str) -> str:
    """
    Plain text of the page's main-content region, text nodes joined by spaces.

    Raises:
        ValueError: If the page has no #main-content element
    """
    soup = BeautifulSoup(page_html, "html.parser")
    main = soup.select_one(MAIN_CONTENT_SELECTOR)
    if main is None:
        raise ValueError(f"No {MAIN_CONTENT_SELECTOR} element in rendered page")
    return main.get_text(" ")


def build_search_index(
    page_html: str,
    false_positive_rate: float,
    tokenizer: Tokenizer = segment,
) -> BloomFilter:
    """
    Build the Bloom filter for one rendered page.

    Args:
        page_html: Complete page HTML
        false_positive_rate: Target false-positive probability
        tokenizer: Word segmentation function (default: TinySegmenter)

    Returns:
        BloomFilter holding every distinct lower-cased word of the main content
    """
    words = extract_words(extract_main_text(page_html), tokenizer)
    bloom = BloomFilter.from_words(words, false_positive_rate)
    _log_debug(
        f"Indexed {len(words)} words into {len(bloom.filter)} bytes ({bloom.num_hash} hashes)"
    )
    return bloom
