"""
Rendering Context Data Structures

Defines the per-document RenderingContext threaded through every pass, the
frozen PageMetadata finalized from it, and the small value types the front
matter populates (Flag, HighlightRule).
"""

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from marksite.contexts.publishing.bloom_filter import BloomFilter
from marksite.contexts.rendering.exceptions import MissingFieldError
from marksite.contexts.rendering.toc import Toc

DEFAULT_TITLE = "No Title"


class Flag(str, Enum):
    """Front matter flags that change how a page is published."""

    DRAFT = "draft"
    CRYPTO = "crypto"


@dataclass(frozen=True)
class HighlightRule:
    """
    Code highlight rule from the front matter.

    Text between the delimiters (within one line, shortest match) is wrapped in
    a span carrying the style. Delimiters are regular expressions matched
    against the HTML-escaped code, so `[[` is written `\\[\\[` and `<<` is
    written `&lt;&lt;`.

    Attributes:
        delim: Opening and closing delimiter
        style: Inline CSS for the wrapping span
    """

    delim: Tuple[str, str]
    style: str

    @property
    def pattern(self) -> re.Pattern:
        """
        Compiled `<open>(.*?)<close>` pattern.

        Raises:
            re.error: If the delimiters do not form a valid regular expression
        """
        start, end = self.delim
        return re.compile(f"{start}(.*?){end}")

    def replace_all(self, code: str) -> str:
        style = html.escape(self.style)
        return self.pattern.sub(lambda m: f'<span style="{style}">{m.group(1)}</span>', code)


@dataclass
class RenderingContext:
    """
    Mutable per-document state shared by the passes.

    Optional fields stay None until the owning pass sets them; read them with
    require() so an unset field raises MissingFieldError naming it.

    Attributes:
        create_date: Creation date (YYYY-MM-DD), set by ReadHeader
        last_update_date: Last update date (YYYY-MM-DD), set by ReadHeader
        tags: Page tags, set by ReadHeader
        flags: Page flags, set by ReadHeader
        title: Page title, set by GetTitle
        highlights: Code highlight rules, set by ReadHeader
        password: Per-page password override, set by ReadHeader (genuinely optional)
        output_path: Output path relative to the site root, set by the orchestrator
        toc: Table of contents, set by TocBuild
        bloom_filter: Search index, set after the page is rendered
        css_paths: Extra stylesheets requested by passes
        js_paths: Extra scripts requested by passes
    """

    create_date: Optional[str] = None
    last_update_date: Optional[str] = None
    tags: Optional[List[str]] = None
    flags: Optional[List[Flag]] = None
    title: Optional[str] = None
    highlights: Optional[List[HighlightRule]] = None
    password: Optional[str] = None
    output_path: Optional[str] = None
    toc: Optional[Toc] = None
    bloom_filter: Optional[BloomFilter] = None
    css_paths: List[str] = field(default_factory=list)
    js_paths: List[str] = field(default_factory=list)

    def require(self, field_name: str) -> Any:
        """
        Read an optional field that must already be set.

        Raises:
            MissingFieldError: If the field is still unset
        """
        value = getattr(self, field_name)
        if value is None:
            raise MissingFieldError(field_name)
        return value

    def has_flag(self, flag: Flag) -> bool:
        return flag in self.require("flags")

    def push_css_path(self, path: str) -> None:
        if path not in self.css_paths:
            self.css_paths.append(path)

    def push_js_path(self, path: str) -> None:
        if path not in self.js_paths:
            self.js_paths.append(path)


@dataclass(frozen=True)
class PageMetadata:
    """
    Finalized, immutable page metadata owned by the aggregation step.

    Attributes:
        create: Creation date (YYYY-MM-DD)
        update: Last update date (YYYY-MM-DD)
        tags: Page tags
        flags: Page flags
        title: Page title
        path: Output path relative to the site root (posix)
        bloom_filter: Search index (empty for crypto pages)
    """

    create: str
    update: str
    tags: Tuple[str, ...]
    flags: Tuple[Flag, ...]
    title: str
    path: str
    bloom_filter: BloomFilter

    @classmethod
    def from_context(cls, ctx: RenderingContext) -> "PageMetadata":
        """
        Checked conversion from a fully processed rendering context.

        Raises:
            MissingFieldError: If any required field is unset
        """
        return cls(
            create=ctx.require("create_date"),
            update=ctx.require("last_update_date"),
            tags=tuple(ctx.require("tags")),
            flags=tuple(ctx.require("flags")),
            title=ctx.require("title"),
            path=ctx.require("output_path"),
            bloom_filter=ctx.require("bloom_filter"),
        )

    def to_manifest_entry(self) -> dict:
        """Entry for metadata.js (the Bloom filter goes to its own manifest)."""
        return {
            "create": self.create,
            "update": self.update,
            "tags": list(self.tags),
            "flags": [flag.value for flag in self.flags],
            "title": self.title,
            "path": self.path,
        }
