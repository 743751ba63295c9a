"""
Site Manifests

Writes the two site-wide manifests the client scripts load: metadata.js
(page list) and bloom_filter.js (search indexes). Both arrays share the same
order, newest update first, so BLOOM_FILTER[i] belongs to METADATA[i].
"""

import json
from pathlib import Path
from typing import List, Tuple

from marksite.contexts.rendering.context import PageMetadata
from marksite.utils.file_io import write_file

METADATA_FILE = "metadata.js"
BLOOM_FILTER_FILE = "bloom_filter.js"


def sort_pages(pages: List[PageMetadata]) -> List[PageMetadata]:
    """Newest update first; pages updated the same day stay in path order."""
    by_path = sorted(pages, key=lambda page: page.path)
    return sorted(by_path, key=lambda page: page.update, reverse=True)


def _as_js_constant(name: str, entries: list) -> str:
    return f"const {name} = {json.dumps(entries, ensure_ascii=False)};\n"


def render_manifests(pages: List[PageMetadata]) -> Tuple[str, str]:
    """
    JavaScript source of both manifests.

    Returns:
        Tuple of (metadata.js, bloom_filter.js) contents
    """
    pages = sort_pages(pages)
    metadata = _as_js_constant("METADATA", [page.to_manifest_entry() for page in pages])
    bloom = _as_js_constant("BLOOM_FILTER", [page.bloom_filter.to_manifest_entry() for page in pages])
    return metadata, bloom


def write_manifests(output_dir: Path, pages: List[PageMetadata]) -> List[PageMetadata]:
    """
    Write metadata.js and bloom_filter.js to the site root.

    Returns:
        The pages in manifest order
    """
    pages = sort_pages(pages)
    metadata, bloom = render_manifests(pages)
    write_file(Path(output_dir) / METADATA_FILE, metadata)
    write_file(Path(output_dir) / BLOOM_FILTER_FILE, bloom)
    return pages
