"""
Single Document Build

Drives one Markdown source end-to-end: read, render the body through the pass
pipeline, wrap it in the page template (encrypting crypto pages), index it for
search, write the HTML file and finalize its PageMetadata.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from marksite.contexts.building.logger import _log_debug
from marksite.contexts.publishing.bloom_filter import BloomFilter
from marksite.contexts.publishing.encryption import encrypt_body
from marksite.contexts.publishing.password import PasswordResolver
from marksite.contexts.publishing.search_index import build_search_index
from marksite.contexts.publishing.tokenizer import Tokenizer, segment
from marksite.contexts.rendering.context import Flag, PageMetadata, RenderingContext
from marksite.contexts.rendering.renderer import render_body
from marksite.contexts.templating.pages import PageLayout, crypto_html, page_html
from marksite.utils.config import SiteConfig
from marksite.utils.file_io import write_file


@dataclass
class DocumentResult:
    """
    Outcome of building one source file.

    Attributes:
        source_path: Markdown source
        output_path: HTML file written (None for skipped drafts)
        metadata: Finalized page metadata (None for skipped drafts)
    """

    source_path: Path
    output_path: Optional[Path] = None
    metadata: Optional[PageMetadata] = None

    @property
    def skipped(self) -> bool:
        return self.metadata is None


def build_document(
    source_path: Path,
    config: SiteConfig,
    layout: PageLayout,
    passwords: PasswordResolver,
    tokenizer: Tokenizer = segment,
) -> DocumentResult:
    """
    Build one Markdown page into the output directory.

    Args:
        source_path: Markdown file under config.source_dir
        config: Site configuration
        layout: Shared page layout
        passwords: Password resolver for crypto pages
        tokenizer: Word segmentation used by the search index

    Returns:
        DocumentResult (metadata is None when a draft was skipped)

    Raises:
        HeaderParseError: If the front matter is absent or malformed
        MathRenderError: If math markup fails to render
        MissingPasswordError: If a crypto page has no password
        TemplateRenderError: If the page template fails
        OSError: If the source cannot be read or the page cannot be written
    """
    output_path = config.output_path_of(source_path)
    ctx = RenderingContext(output_path=output_path.relative_to(config.output_path).as_posix())

    markdown = Path(source_path).read_text(encoding="utf-8")
    body = render_body(markdown, ctx, render_draft=config.render_draft)
    if body is None:
        _log_debug(f"Skipping draft {source_path}")
        return DocumentResult(source_path=source_path)

    if ctx.has_flag(Flag.CRYPTO):
        password = passwords.resolve(ctx.password, ctx.title)
        page = crypto_html(layout, ctx, encrypt_body(password, body))
        ctx.bloom_filter = BloomFilter.empty()
    else:
        page = page_html(layout, ctx, body)
        ctx.bloom_filter = build_search_index(page, config.search_fp, tokenizer)

    metadata = PageMetadata.from_context(ctx)
    write_file(output_path, page)
    _log_debug(f"Wrote {output_path}")
    return DocumentResult(source_path=source_path, output_path=output_path, metadata=metadata)
