"""
Site Configuration

Loads the site configuration (site.yaml) into a typed SiteConfig using OmegaConf
structured configs. Values missing from the file fall back to the schema defaults;
the password may also come from the MARKSITE_PASSWORD environment variable
(a .env file is honored via python-dotenv).

Examples:
    >>> config = load_config()                       # site.yaml or $MARKSITE_CONFIG
    >>> config = load_config(Path("blog/site.yaml"))
    >>> config.output_path_of(Path("docs/notes/a.md"))
    PosixPath('site/notes/a.html')
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

load_dotenv()
DEFAULT_CONFIG_PATH = Path(os.getenv("MARKSITE_CONFIG", "site.yaml"))


class ConfigError(ValueError):
    """
    Exception raised when the site configuration is missing or invalid.

    Configuration errors are fatal to the whole run.
    """

    def __init__(self, message: str, config_path: Optional[Path] = None):
        self.message = message
        self.config_path = config_path

        if config_path is not None:
            message = f"{message}\nConfig file: {config_path}"
        super().__init__(message)


@dataclass
class SiteConfig:
    """
    Site-wide build configuration.

    Attributes:
        site_name: Name shown in the header and the index page title
        source_dir: Directory holding Markdown sources and other assets
        output_dir: Directory the site is written to (removed on every build)
        footer: Footer text for every page
        password: Default password for crypto pages (None = ask interactively)
        search_fp: Target false-positive probability of each page's Bloom filter
        render_draft: Render pages flagged as draft
        workers: Worker threads for the per-document phase (None = executor default)
        extra_css: Additional stylesheets linked from every page
        extra_js: Additional scripts loaded by every page
    """

    site_name: str = "marksite"
    source_dir: str = "docs"
    output_dir: str = "site"
    footer: str = ""
    password: Optional[str] = None
    search_fp: float = 0.01
    render_draft: bool = False
    workers: Optional[int] = None
    extra_css: List[str] = field(default_factory=list)
    extra_js: List[str] = field(default_factory=list)

    @property
    def source_path(self) -> Path:
        return Path(self.source_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    def output_path_of(self, src: Path) -> Path:
        """
        Map a source file to its output location.

        Markdown files get the .html extension, everything else keeps its name.
        """
        relative = Path(src).relative_to(self.source_path)
        if relative.suffix == ".md":
            relative = relative.with_suffix(".html")
        return self.output_path / relative


def validate_config(config: SiteConfig, config_path: Optional[Path] = None) -> SiteConfig:
    """
    Check value ranges OmegaConf's type validation does not cover.

    Raises:
        ConfigError: If search_fp is outside (0, 1) or workers is below 1
    """
    if not 0.0 < config.search_fp < 1.0:
        raise ConfigError(
            f"search_fp must be between 0 and 1 (exclusive), got: {config.search_fp}",
            config_path,
        )
    if config.workers is not None and config.workers < 1:
        raise ConfigError(f"workers must be at least 1, got: {config.workers}", config_path)
    if config.source_path.resolve() == config.output_path.resolve():
        raise ConfigError("source_dir and output_dir must differ", config_path)
    return config


def load_config(config_path: Path = None) -> SiteConfig:
    """
    Load site.yaml and merge it over the SiteConfig defaults.

    Args:
        config_path: Optional path to the config file (defaults to MARKSITE_CONFIG
                     env variable, then site.yaml in the working directory)

    Returns:
        Validated SiteConfig

    Raises:
        ConfigError: If the file is missing, unparsable, or holds invalid values
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError("Config file not found. Run `marksite init` first.", config_path)

    schema = OmegaConf.structured(SiteConfig)
    try:
        loaded = OmegaConf.load(config_path)
        merged = OmegaConf.merge(schema, loaded)
        config: SiteConfig = OmegaConf.to_object(merged)
    except OmegaConfBaseException as e:
        raise ConfigError(f"Invalid configuration: {e}", config_path) from e

    if config.password is None:
        config.password = os.getenv("MARKSITE_PASSWORD") or None

    return validate_config(config, config_path)


def write_default_config(config_path: Path, site_name: str = "marksite") -> bool:
    """
    Write the default configuration as YAML unless the file already exists.

    Returns:
        True if the file was written, False if it already existed
    """
    config_path = Path(config_path)
    if config_path.exists():
        return False

    defaults = OmegaConf.structured(SiteConfig(site_name=site_name))
    config_path.parent.mkdir(parents=True, exist_ok=True)
    OmegaConf.save(defaults, config_path)
    return True
