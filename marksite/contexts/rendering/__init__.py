"""
Rendering Context

Responsibilities:
- Parses Markdown pages into token streams
- Runs the ordered pass pipeline (front matter, title, links, images, math,
  code highlighting, heading ids, tables, table of contents)
- Finalizes per-page metadata

Owns: Markdown-to-HTML body conversion, RenderingContext, PageMetadata
Never: Writes files or decides how pages are published
"""

from marksite.contexts.rendering.context import (
    DEFAULT_TITLE,
    Flag,
    HighlightRule,
    PageMetadata,
    RenderingContext,
)
from marksite.contexts.rendering.exceptions import (
    DocumentBuildError,
    HeaderParseError,
    MathRenderError,
    MissingFieldError,
)
from marksite.contexts.rendering.pipeline import PassManager, default_pass_manager
from marksite.contexts.rendering.renderer import render_body

__all__ = [
    "DEFAULT_TITLE",
    "Flag",
    "HighlightRule",
    "PageMetadata",
    "RenderingContext",
    "DocumentBuildError",
    "HeaderParseError",
    "MathRenderError",
    "MissingFieldError",
    "PassManager",
    "default_pass_manager",
    "render_body",
]
