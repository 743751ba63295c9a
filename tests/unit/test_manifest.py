"""Unit tests for the site manifests."""

import json

import pytest

from marksite.contexts.building import render_manifests, sort_pages, write_manifests
from marksite.contexts.publishing import BloomFilter
from marksite.contexts.rendering import PageMetadata


def page(path: str, update: str, words=()) -> PageMetadata:
    return PageMetadata(
        create="2024-01-01",
        update=update,
        tags=(),
        flags=(),
        title=path,
        path=path,
        bloom_filter=BloomFilter.from_words(words, 0.01),
    )


def parse_constant(source: str, name: str) -> list:
    prefix = f"const {name} = "
    assert source.startswith(prefix)
    assert source.endswith(";\n")
    return json.loads(source[len(prefix) : -2])


@pytest.mark.unit
def test_sort_newest_first_ties_in_path_order():
    pages = [
        page("b.html", "2024-01-01"),
        page("c.html", "2024-03-01"),
        page("a.html", "2024-01-01"),
    ]

    assert [p.path for p in sort_pages(pages)] == ["c.html", "a.html", "b.html"]


@pytest.mark.unit
def test_manifests_share_order():
    pages = [page("old.html", "2023-05-01", ["old"]), page("new.html", "2024-05-01")]
    metadata_js, bloom_js = render_manifests(pages)

    metadata = parse_constant(metadata_js, "METADATA")
    bloom = parse_constant(bloom_js, "BLOOM_FILTER")

    assert [entry["path"] for entry in metadata] == ["new.html", "old.html"]
    assert bloom[0] == {"filter": "", "num_hash": 0}
    assert bloom[1] == pages[0].bloom_filter.to_manifest_entry()


@pytest.mark.unit
def test_manifest_keeps_non_ascii_titles():
    metadata_js, _ = render_manifests([page("日本語.html", "2024-01-01")])
    assert "日本語.html" in metadata_js


@pytest.mark.unit
def test_write_manifests(tmp_path):
    pages = write_manifests(tmp_path, [page("a.html", "2024-01-01")])

    assert [p.path for p in pages] == ["a.html"]
    assert (tmp_path / "metadata.js").exists()
    assert (tmp_path / "bloom_filter.js").exists()
