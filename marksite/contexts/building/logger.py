"""
Building context logger.

Provides logging interface for building context with automatic [build] prefix.
All building modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import Optional

from loguru import logger

from marksite.utils.logger import session_log_dir
from marksite.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[build]"


def setup_building_logger(
    site_name: str, verbose: bool = False, logs_root: Optional[Path] = None
) -> Path:
    """
    Start a build_<timestamp> logging session.

    Args:
        site_name: Site being built (logged in the provenance header)
        verbose: Show DEBUG messages on the console
        logs_root: Root of the session directories (default: LOGS_PATH)

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="build",
        log_dir=session_log_dir("build", logs_root),
        extra_provenance={"Site": site_name},
        verbose=verbose,
    )


# Wrapper functions with automatic [build] prefix


def _log_info(message: str) -> None:
    """Log info message with [build] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [build] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [build] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [build] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level building-specific logging helpers


def log_build_start(source_dir: Path, output_dir: Path, num_documents: int, num_assets: int) -> None:
    """Log start of a site build."""
    _log_info(f"Building {num_documents} documents from {source_dir} into {output_dir}")
    _log_debug(f"  Other files to copy: {num_assets}")


def log_build_report(report, elapsed_time: float) -> None:
    """
    Log the outcome of a site build.

    Args:
        report: BuildReport from SiteBuilder.build()
        elapsed_time: Time taken to build
    """
    summary = (
        f"{len(report.pages)} pages, {len(report.skipped)} drafts skipped, "
        f"{len(report.copied)} files copied ({elapsed_time:.2f}s)"
    )
    if report.success:
        _log_success(f"Build succeeded: {summary}")
        return

    _log_error(f"Build failed for {len(report.failures)} documents: {summary}")
    for failure in report.failures:
        _log_error(f"  {failure}")
