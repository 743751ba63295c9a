"""
Markdown Rendering

Parses a Markdown page into markdown-it tokens, runs the pass pipeline over
them, and renders the resulting tokens to the page's HTML body.
"""

from typing import Optional

from markdown_it import MarkdownIt
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from marksite.contexts.rendering.context import RenderingContext
from marksite.contexts.rendering.pipeline import PassManager, default_pass_manager, draft_gate


def create_parser() -> MarkdownIt:
    """CommonMark with raw HTML, tables, strikethrough, front matter and $ math."""
    return (
        MarkdownIt("commonmark", {"html": True})
        .enable("table")
        .enable("strikethrough")
        .use(front_matter_plugin)
        .use(dollarmath_plugin)
    )


def render_body(
    markdown: str,
    ctx: RenderingContext,
    render_draft: bool = False,
    passes: Optional[PassManager] = None,
) -> Optional[str]:
    """
    Render one Markdown page to its HTML body.

    Args:
        markdown: Page source
        ctx: Fresh rendering context for this page (filled in by the passes)
        render_draft: Render pages flagged as draft instead of skipping them
        passes: Pipeline to run (default: the full page pipeline)

    Returns:
        HTML body, or None when the page is a draft that should not be published

    Raises:
        HeaderParseError: If the front matter is absent or malformed
        MathRenderError: If math markup fails to render
    """
    parser = create_parser()
    if passes is None:
        passes = default_pass_manager()

    events = parser.parse(markdown)
    events = passes.run(events, ctx, gate=draft_gate(render_draft))
    if events is None:
        return None

    return parser.renderer.render(events, parser.options, {})
