"""Shared fixtures for marksite tests."""

from pathlib import Path

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop sinks added during a test (CLI runs attach sinks to captured streams)."""
    yield
    logger.remove()


def front_matter(create="2024-01-01", update="2024-01-01", **extra) -> str:
    lines = ["---", f"create: {create}", f"update: {update}"]
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_page():
    """Write a Markdown page with front matter and return its path."""

    def _write(path: Path, body: str, **header) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(front_matter(**header) + body, encoding="utf-8")
        return path

    return _write
