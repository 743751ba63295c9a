"""
Shared utilities for marksite.

Common functionality used across contexts:
- Logger setup
- Site configuration
- File operations
- Timestamps
"""

from marksite.utils.file_io import copy_file, write_file
from marksite.utils.timestamp import now, today

__all__ = ["copy_file", "write_file", "now", "today"]
