"""File helpers that create missing parent directories before writing."""

import shutil
from pathlib import Path
from typing import Union


def write_file(path: Path, contents: Union[str, bytes]) -> None:
    """
    Write text or bytes to path, creating parent directories as needed.

    Text is always written as UTF-8.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(contents, bytes):
        path.write_bytes(contents)
    else:
        path.write_text(contents, encoding="utf-8")


def copy_file(src: Path, dst: Path) -> Path:
    """Copy src to dst (with metadata), creating parent directories as needed."""
    dst = Path(dst)
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    return dst
