"""
Templating Context

Responsibilities:
- Loads and caches the site's Jinja2 page templates
- Composes full pages (plain, crypto, index) around rendered bodies
- Resolves asset links relative to each page's location

Owns: HTML page layout and asset link resolution
Never: Renders Markdown or touches the filesystem outside template loading
"""

from marksite.contexts.templating.exceptions import TemplateRenderError
from marksite.contexts.templating.pages import PageLayout, crypto_html, index_html, page_html
from marksite.contexts.templating.template_registry import TemplateRegistry

__all__ = [
    "TemplateRenderError",
    "TemplateRegistry",
    "PageLayout",
    "page_html",
    "crypto_html",
    "index_html",
]
