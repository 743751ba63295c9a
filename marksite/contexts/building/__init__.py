"""
Building Context

Responsibilities:
- Builds single documents end-to-end (render, compose, encrypt or index, write)
- Runs the per-document phase in parallel and collects failures
- Aggregates page metadata into the site-wide manifests
- Copies static assets and non-Markdown files

Owns: Output directory layout, BuildReport, metadata.js, bloom_filter.js
Never: Transforms Markdown tokens itself
"""

from marksite.contexts.building.builder import BuildReport, SiteBuilder, clean_site
from marksite.contexts.building.document import DocumentResult, build_document
from marksite.contexts.building.manifest import render_manifests, sort_pages, write_manifests

__all__ = [
    "BuildReport",
    "SiteBuilder",
    "clean_site",
    "DocumentResult",
    "build_document",
    "render_manifests",
    "sort_pages",
    "write_manifests",
]
