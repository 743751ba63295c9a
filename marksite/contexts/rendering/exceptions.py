"""Custom exceptions for the rendering context."""

from pathlib import Path
from typing import Optional


class MissingFieldError(Exception):
    """
    Exception raised when a rendering context field is read before any pass set it.

    Attributes:
        field_name: Name of the unset field (e.g., 'title')
    """

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"{field_name} has not been set yet.")


class HeaderParseError(ValueError):
    """
    Exception raised when the front matter block is absent or malformed.

    Attributes:
        message: Error description
        header_snippet: The front matter text that failed to parse (if any)
        original_error: The underlying YAML error (if any)
    """

    def __init__(
        self,
        message: str,
        header_snippet: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.header_snippet = header_snippet
        self.original_error = original_error

        parts = [message]

        if header_snippet:
            snippet = header_snippet[:200] + "..." if len(header_snippet) > 200 else header_snippet
            parts.append(f"\nFront matter:\n{snippet}")

        if original_error:
            parts.append(f"\nOriginal error: {original_error}")

        super().__init__("\n".join(parts))


class MathRenderError(ValueError):
    """
    Exception raised when LaTeX math markup cannot be rendered.

    Attributes:
        latex: The offending math markup
        display: True for display math, False for inline math
        original_error: The renderer's exception
    """

    def __init__(self, latex: str, display: bool, original_error: Optional[Exception] = None):
        self.latex = latex
        self.display = display
        self.original_error = original_error

        kind = "display" if display else "inline"
        message = f"Failed to render {kind} math: {latex}"
        if original_error:
            message += f"\nOriginal error: {original_error}"
        super().__init__(message)


class DocumentBuildError(Exception):
    """
    Exception raised when building a single document fails.

    Wraps the original error with the source path so batch reports can name
    the failing document.

    Attributes:
        source_path: Markdown source that failed
        original_error: The error raised while building it
    """

    def __init__(self, source_path: Path, original_error: Exception):
        self.source_path = source_path
        self.original_error = original_error
        super().__init__(f"{source_path}: {type(original_error).__name__}: {original_error}")
