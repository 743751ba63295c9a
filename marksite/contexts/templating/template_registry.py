import threading
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, TemplateNotFound

from marksite.contexts.templating.exceptions import TemplateRenderError

TEMPLATES_PATH = Path(__file__).parent / "templates"


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for HTML pages.

    Templates are stored in marksite/contexts/templating/templates/{name}.html.jinja.
    Autoescaping is on; pre-rendered HTML (page bodies, tables of contents)
    must be passed through the `safe` filter inside the template.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding the templates. Defaults to the
                            templates/ directory shipped with the package
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}
        self._lock = threading.Lock()

        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name (without the .html.jinja suffix), loading and caching it.

        Args:
            name: Template name (e.g., 'page')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        with self._lock:
            if name in self._cache:
                return self._cache[name]

            template_file = f"{name}.html.jinja"
            try:
                template = self.env.get_template(template_file)
            except TemplateNotFound as e:
                raise TemplateNotFound(
                    f"Template not found: '{name}' at {self.templates_path / template_file}"
                ) from e

            self._cache[name] = template
            return template

    def render(self, name: str, **context: Any) -> str:
        """
        Render a template with the given variables.

        Raises:
            TemplateRenderError: If the template is missing or rendering fails
        """
        try:
            return self.get_template(name).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render template '{name}'",
                template_name=name,
                template_path=self.get_template_path(name),
                original_error=e,
            ) from e

    def get_template_path(self, name: str) -> Path:
        """
        Get the file path for a template.

        Args:
            name: Template name (e.g., 'page')

        Returns:
            Path to template file
        """
        return self.templates_path / f"{name}.html.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        with self._lock:
            self._cache.clear()

    def is_cached(self, name: str) -> bool:
        """
        Check if a template is in the cache.

        Args:
            name: Template name

        Returns:
            True if cached, False otherwise
        """
        return name in self._cache
