"""
Loguru session setup shared by every context.

A build run logs to its own session directory under LOGS_PATH: a DEBUG file
that records the worker thread of every line, plus a colorized console sink.
Each context wraps loguru with its own prefix in contexts/{context}/logger.py.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv
from loguru import logger

from marksite import __version__
from marksite.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", ".marksite/logs"))

CONSOLE_COLORS = {
    "DEBUG": "<dim>",
    "WARNING": "<yellow>",
    "ERROR": "<red>",
    "CRITICAL": "<bold><red>",
}

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {thread.name: <22} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"


def session_log_dir(kind: str, root: Optional[Path] = None) -> Path:
    """Fresh session directory, e.g. .marksite/logs/build_20251114_123456."""
    return Path(root or LOGS_PATH) / f"{kind}_{now()}"


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, str]] = None,
    verbose: bool = False,
) -> Path:
    """
    Route loguru output to a session log file and the console.

    Any previously added sinks are removed, so calling this twice in one
    process starts a new session rather than duplicating output.

    Args:
        context_name: Names the log file (e.g., "build" gives build.log)
        log_dir: Session directory, created if missing
        extra_provenance: Extra lines for the session header (e.g., site name)
        verbose: Show DEBUG lines on the console too

    Returns:
        Path to the session log file
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    for level_name, color in CONSOLE_COLORS.items():
        logger.level(level_name, color=color)

    # Worker threads log concurrently; enqueue serializes the file writes
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", enqueue=True)
    logger.add(
        sys.stdout,
        format=CONSOLE_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )

    log_provenance(extra_provenance)
    return log_file


def log_provenance(extra: Optional[Dict[str, str]] = None) -> None:
    """Write the session header: tool version, command line, cwd and interpreter."""
    header = {
        "marksite": __version__,
        "Command": " ".join(sys.argv),
        "Working directory": str(Path.cwd()),
        "Python": sys.version.split()[0],
        **(extra or {}),
    }

    logger.debug("-" * 60)
    for key, value in header.items():
        logger.debug(f"{key}: {value}")
    logger.debug("-" * 60)
