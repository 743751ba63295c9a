"""
marksite - Markdown to static site generator

Converts a tree of Markdown documents into a static HTML site with a
client-side search index and optional per-page encryption.

Architecture:
- Rendering Context: Markdown token passes, page metadata, table of contents
- Publishing Context: Bloom-filter search index and page encryption
- Templating Context: HTML page composition with Jinja2
- Building Context: Parallel per-document builds and site-wide manifests
"""

__version__ = "0.1.0"
