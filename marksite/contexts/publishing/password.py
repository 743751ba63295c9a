"""
Password Resolution

Crypto pages take their password from the page's front matter, else the site
configuration, else an interactive prompt. The prompt runs at most once per
build and its answer is shared by every worker thread.
"""

import threading
from typing import Callable, Optional

import typer

from marksite.contexts.publishing.logger import _log_info

Prompt = Callable[[], str]


class MissingPasswordError(Exception):
    """
    Exception raised when a crypto page has no resolvable password.

    Attributes:
        title: Title of the page that needed the password (if known)
    """

    def __init__(self, title: Optional[str] = None):
        self.title = title
        message = "No password found for crypto page"
        if title:
            message += f" '{title}'"
        message += ". Set `password` in the front matter or site.yaml, or MARKSITE_PASSWORD."
        super().__init__(message)


def terminal_prompt() -> str:
    """Ask for the site password on the terminal without echoing it."""
    return typer.prompt("Password for crypto pages", hide_input=True)


class PasswordResolver:
    """
    Resolves crypto page passwords for one build run.

    Args:
        configured: Site-wide password from the configuration (None if unset)
        prompt: Callable asking the user for a password; None disables prompting
    """

    def __init__(self, configured: Optional[str] = None, prompt: Optional[Prompt] = None):
        self.configured = configured
        self.prompt = prompt
        self._prompted: Optional[str] = None
        self._asked = False
        self._lock = threading.Lock()

    def resolve(self, override: Optional[str] = None, title: Optional[str] = None) -> str:
        """
        Password for one page.

        Args:
            override: Page-level password from the front matter
            title: Page title, used in the error message

        Raises:
            MissingPasswordError: If no override, configuration or prompt supplies one
        """
        if override:
            return override
        if self.configured:
            return self.configured
        return self._prompt_once(title)

    def _prompt_once(self, title: Optional[str]) -> str:
        with self._lock:
            if not self._asked and self.prompt is not None:
                self._asked = True
                _log_info("Asking for the crypto page password")
                self._prompted = self.prompt() or None
            if self._prompted is None:
                raise MissingPasswordError(title)
            return self._prompted
