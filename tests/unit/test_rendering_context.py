"""Unit tests for RenderingContext and PageMetadata."""

import pytest

from marksite.contexts.publishing import BloomFilter
from marksite.contexts.rendering import Flag, MissingFieldError, PageMetadata, RenderingContext


def complete_context() -> RenderingContext:
    return RenderingContext(
        create_date="2024-01-05",
        last_update_date="2024-02-10",
        tags=["a"],
        flags=[Flag.DRAFT],
        title="Hello",
        highlights=[],
        output_path="notes/hello.html",
        bloom_filter=BloomFilter.empty(),
    )


@pytest.mark.unit
def test_require_unset_field_names_it():
    ctx = RenderingContext()

    with pytest.raises(MissingFieldError) as exc_info:
        ctx.require("title")

    assert exc_info.value.field_name == "title"
    assert str(exc_info.value) == "title has not been set yet."


@pytest.mark.unit
def test_has_flag_before_header_fails():
    with pytest.raises(MissingFieldError):
        RenderingContext().has_flag(Flag.CRYPTO)


@pytest.mark.unit
def test_push_paths_deduplicates():
    ctx = RenderingContext()
    ctx.push_css_path("math.css")
    ctx.push_css_path("math.css")
    ctx.push_js_path("extra.js")

    assert ctx.css_paths == ["math.css"]
    assert ctx.js_paths == ["extra.js"]


@pytest.mark.unit
def test_page_metadata_from_complete_context():
    metadata = PageMetadata.from_context(complete_context())

    assert metadata.to_manifest_entry() == {
        "create": "2024-01-05",
        "update": "2024-02-10",
        "tags": ["a"],
        "flags": ["draft"],
        "title": "Hello",
        "path": "notes/hello.html",
    }


@pytest.mark.unit
def test_page_metadata_requires_bloom_filter():
    ctx = complete_context()
    ctx.bloom_filter = None

    with pytest.raises(MissingFieldError, match="bloom_filter"):
        PageMetadata.from_context(ctx)


@pytest.mark.unit
def test_page_metadata_is_frozen():
    metadata = PageMetadata.from_context(complete_context())

    with pytest.raises(AttributeError):
        metadata.title = "Changed"
