"""
Site Builder

Builds a whole site: clears the output directory, copies static assets and
non-Markdown files, builds every Markdown page on a thread pool and, once all
pages are done, writes the site-wide manifests.

Per-page failures are collected rather than raised, so one broken page never
stops its siblings. Configuration problems and a missing source directory
abort the build before any page is touched.

Examples:
    >>> config = load_config()
    >>> report = SiteBuilder(config, PasswordResolver(config.password)).build()
    >>> report.success
    True
"""

import shutil
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from marksite.contexts.building.assets import copy_static_assets
from marksite.contexts.building.document import DocumentResult, build_document
from marksite.contexts.building.logger import (
    _log_debug,
    _log_error,
    _log_info,
    log_build_report,
    log_build_start,
)
from marksite.contexts.building.manifest import write_manifests
from marksite.contexts.publishing.password import PasswordResolver
from marksite.contexts.publishing.tokenizer import Tokenizer, segment
from marksite.contexts.rendering.context import PageMetadata
from marksite.contexts.rendering.exceptions import DocumentBuildError
from marksite.contexts.templating.pages import PageLayout, index_html
from marksite.utils.config import ConfigError, SiteConfig
from marksite.utils.file_io import copy_file, write_file

MARKDOWN_SUFFIX = ".md"


@dataclass
class BuildReport:
    """
    Summary of one site build.

    Attributes:
        pages: Metadata of every published page, in manifest order
        skipped: Draft sources that were not published
        copied: Non-Markdown files copied verbatim
        failures: Per-file errors, each naming its source
    """

    pages: List[PageMetadata] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    copied: List[Path] = field(default_factory=list)
    failures: List[DocumentBuildError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


def clean_site(output_dir: Path) -> bool:
    """
    Remove the output directory.

    Returns:
        True if something was removed
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        return False
    shutil.rmtree(output_dir)
    return True


def collect_sources(source_dir: Path) -> Tuple[List[Path], List[Path]]:
    """
    Walk the source directory recursively in sorted order.

    Returns:
        Tuple of (markdown_files, other_files)
    """
    files = sorted(p for p in Path(source_dir).rglob("*") if p.is_file())
    markdown = [p for p in files if p.suffix == MARKDOWN_SUFFIX]
    others = [p for p in files if p.suffix != MARKDOWN_SUFFIX]
    return markdown, others


class SiteBuilder:
    """
    Builds one site from its configuration.

    Args:
        config: Site configuration
        passwords: Password resolver shared by every crypto page of the run
        tokenizer: Word segmentation for the search index (default: TinySegmenter)
        layout: Page layout (default: derived from the configuration)
    """

    def __init__(
        self,
        config: SiteConfig,
        passwords: Optional[PasswordResolver] = None,
        tokenizer: Tokenizer = segment,
        layout: Optional[PageLayout] = None,
    ):
        self.config = config
        self.passwords = passwords or PasswordResolver(config.password)
        self.tokenizer = tokenizer
        self.layout = layout or PageLayout(
            site_name=config.site_name,
            footer=config.footer,
            extra_css=list(config.extra_css),
            extra_js=list(config.extra_js),
        )

    def build(self) -> BuildReport:
        """
        Build the whole site.

        Returns:
            BuildReport listing published pages, skipped drafts and failures

        Raises:
            ConfigError: If the source directory does not exist
        """
        source_dir = self.config.source_path
        output_dir = self.config.output_path
        if not source_dir.is_dir():
            raise ConfigError(f"Source directory not found: {source_dir}")

        start_time = time.time()
        markdown, others = collect_sources(source_dir)
        log_build_start(source_dir, output_dir, len(markdown), len(others))

        if clean_site(output_dir):
            _log_debug(f"Removed previous output in {output_dir}")
        copy_static_assets(output_dir)
        # A root index.md is rendered afterwards and replaces this listing
        write_file(output_dir / "index.html", index_html(self.layout))

        report = BuildReport()
        self._copy_files(others, report)
        self._build_documents(markdown, report)

        report.pages = self._aggregate(report.pages)
        log_build_report(report, time.time() - start_time)
        return report

    def _copy_files(self, files: List[Path], report: BuildReport) -> None:
        for src in files:
            try:
                report.copied.append(copy_file(src, self.config.output_path_of(src)))
            except OSError as e:
                _log_error(f"Failed to copy {src}: {e}")
                report.failures.append(DocumentBuildError(src, e))

    def _build_one(self, source_path: Path) -> DocumentResult:
        try:
            return build_document(
                source_path, self.config, self.layout, self.passwords, self.tokenizer
            )
        except Exception as e:
            raise DocumentBuildError(source_path, e) from e

    def _build_documents(self, sources: List[Path], report: BuildReport) -> None:
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = {executor.submit(self._build_one, src): src for src in sources}
            for future in as_completed(futures):
                try:
                    result = future.result()
                except DocumentBuildError as e:
                    _log_error(f"Failed to build {e}")
                    report.failures.append(e)
                    continue

                if result.skipped:
                    report.skipped.append(result.source_path)
                else:
                    report.pages.append(result.metadata)

        report.failures.sort(key=lambda e: e.source_path)
        report.skipped.sort()

    def _aggregate(self, pages: List[PageMetadata]) -> List[PageMetadata]:
        """Write metadata.js and bloom_filter.js once every page is done."""
        pages = write_manifests(self.config.output_path, pages)
        _log_info(f"Wrote manifests for {len(pages)} pages")
        return pages
