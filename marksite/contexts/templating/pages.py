"""
Page Composition

Wraps rendered bodies in the site's page templates. Asset and navigation links
are made relative to each page's location so the site works from any base URL
(and straight from the filesystem).
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List
from urllib.parse import quote

from marksite.contexts.rendering.context import RenderingContext
from marksite.contexts.templating.template_registry import TemplateRegistry

DEFAULT_CSS = ["style.css"]
DEFAULT_JS = ["metadata.js", "script.js", "theme.js"]


@dataclass
class PageLayout:
    """
    Site-wide layout settings shared by every page.

    Attributes:
        site_name: Name shown in the header and index title
        footer: Footer text
        extra_css: Stylesheets added to every page after the defaults
        extra_js: Scripts added to every page after the defaults
        registry: Template registry used to render pages
    """

    site_name: str
    footer: str = ""
    extra_css: List[str] = field(default_factory=list)
    extra_js: List[str] = field(default_factory=list)
    registry: TemplateRegistry = field(default_factory=TemplateRegistry)


def path_to_root(output_path: str) -> str:
    """Relative path from a page's directory back to the site root ('.' at the root)."""
    depth = len(PurePosixPath(output_path).parent.parts)
    return "/".join([".."] * depth) if depth else "."


def adjust_path_origin(path: str, root: str) -> str:
    """Prefix site-relative asset paths with the page's path to root."""
    if path.startswith(("http://", "https://", "/")):
        return path
    return f"{root}/{path}"


def tag_links(tags: List[str], root: str) -> List[dict]:
    return [{"name": tag, "href": f"{root}/index.html?tag={quote(tag)}"} for tag in tags]


def _head(layout: PageLayout, root: str, title: str, css: List[str], js: List[str]) -> dict:
    return {
        "title": title,
        "site_name": layout.site_name,
        "footer": layout.footer,
        "path_to_root": root,
        "css_list": [adjust_path_origin(p, root) for p in DEFAULT_CSS + layout.extra_css + css],
        "js_list": [adjust_path_origin(p, root) for p in DEFAULT_JS + layout.extra_js + js],
    }


def _page_variables(layout: PageLayout, ctx: RenderingContext) -> dict:
    root = path_to_root(ctx.require("output_path"))
    return {
        **_head(layout, root, ctx.require("title"), ctx.css_paths, ctx.js_paths),
        "create_date": ctx.require("create_date"),
        "last_update_date": ctx.require("last_update_date"),
        "tags": tag_links(ctx.require("tags"), root),
    }


def page_html(layout: PageLayout, ctx: RenderingContext, body: str) -> str:
    """Full HTML of a plain page; the body lands in #main-content."""
    toc = ctx.toc
    return layout.registry.render(
        "page",
        body=body,
        toc_html=toc.to_html() if toc is not None and not toc.is_empty() else "",
        **_page_variables(layout, ctx),
    )


def crypto_html(layout: PageLayout, ctx: RenderingContext, encoded_body: str) -> str:
    """Full HTML of a crypto page carrying the base64 iv + ciphertext; no TOC is emitted."""
    return layout.registry.render(
        "crypto",
        encoded=encoded_body,
        **_page_variables(layout, ctx),
    )


def index_html(layout: PageLayout) -> str:
    """Site index listing every page (filled in client-side from metadata.js)."""
    return layout.registry.render("index", **_head(layout, ".", layout.site_name, [], []))
