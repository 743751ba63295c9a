#!/usr/bin/env python3
"""
marksite command line

Builds a static site from a directory of Markdown pages.

Commands:
    init  - Write a default site.yaml and a sample page
    build - Build the site into the output directory
    clean - Remove the output directory

Examples:\n

    marksite init                              # site.yaml + docs/welcome.md

    marksite build                             # Build using site.yaml

    marksite build --config blog/site.yaml     # Build another site

    marksite build --drafts --workers 4        # Include drafts, 4 worker threads

    marksite clean                             # Remove the output directory
"""

from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from marksite.contexts.building import SiteBuilder, clean_site
from marksite.contexts.building.logger import setup_building_logger
from marksite.contexts.publishing.password import PasswordResolver, terminal_prompt
from marksite.utils.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    load_config,
    write_default_config,
)
from marksite.utils.file_io import write_file
from marksite.utils.logger import LOGS_PATH
from marksite.utils.timestamp import today

SAMPLE_PAGE = """---
create: {date}
update: {date}
tags: [welcome]
---

# Welcome

This page was created by `marksite init`. Edit it, then run `marksite build`.

## Next steps

- Add Markdown pages under the source directory.
- Link between pages with their `.md` names, for example [this page](welcome.md).
"""

app = typer.Typer(
    help="Build static sites from Markdown pages with search and encrypted pages",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to site.yaml (default: $MARKSITE_CONFIG or ./site.yaml)",
    ),
]


def _load_config_or_exit(config_path: Optional[Path]):
    try:
        return load_config(config_path)
    except ConfigError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("init")
def init_command(
    site_name: Annotated[
        str,
        typer.Option("--name", "-n", help="Site name shown in the header"),
    ] = "marksite",
    config_path: ConfigOption = None,
):
    """
    Create site.yaml and a sample page.

    Existing files are never overwritten.

    Examples:\n

        $ marksite init                       # Default site

        $ marksite init --name "My Notes"     # Custom site name
    """
    config_path = config_path or DEFAULT_CONFIG_PATH

    if write_default_config(config_path, site_name=site_name):
        typer.secho(f"✓ Wrote {config_path}", fg=typer.colors.GREEN)
    else:
        typer.echo(f"  {config_path} already exists, leaving it untouched")

    config = _load_config_or_exit(config_path)
    sample = config.source_path / "welcome.md"
    if sample.exists():
        typer.echo(f"  {sample} already exists, leaving it untouched")
    else:
        write_file(sample, SAMPLE_PAGE.format(date=today()))
        typer.secho(f"✓ Wrote {sample}", fg=typer.colors.GREEN)


@app.command("build")
def build_command(
    config_path: ConfigOption = None,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", "-d", help="Render pages flagged as draft"),
    ] = False,
    workers: Annotated[
        Optional[int],
        typer.Option("--workers", "-w", help="Worker threads for page builds", min=1),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug output on the console"),
    ] = False,
):
    """
    Build the site.

    Pages that fail are reported at the end; the others are still written.
    Exits with code 1 if any page failed.

    Examples:\n

        $ marksite build                          # Build using site.yaml

        $ marksite build --drafts                 # Include draft pages

        $ marksite build -c blog/site.yaml -v     # Other site, debug output
    """
    config = _load_config_or_exit(config_path)
    if drafts:
        config.render_draft = True
    if workers is not None:
        config.workers = workers

    log_file = setup_building_logger(config.site_name, verbose, logs_root=LOGS_PATH)

    typer.secho(f"\nBuilding: {config.site_name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Source: {config.source_path}")
    typer.echo(f"Output: {config.output_path}")
    typer.echo("")

    passwords = PasswordResolver(config.password, prompt=terminal_prompt)
    try:
        report = SiteBuilder(config, passwords).build()
    except ConfigError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    if report.success:
        typer.secho("✓ Build succeeded", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho(
            f"✗ Build failed for {len(report.failures)} files", fg=typer.colors.RED, bold=True
        )
        for failure in report.failures[:10]:
            typer.secho(f"  - {failure}", fg=typer.colors.RED)
        if len(report.failures) > 10:
            typer.echo(f"  ... and {len(report.failures) - 10} more")

    typer.echo(f"  Pages: {len(report.pages)}")
    typer.echo(f"  Drafts skipped: {len(report.skipped)}")
    typer.echo(f"  Files copied: {len(report.copied)}")
    typer.echo(f"  Log: {log_file}")
    typer.echo("")

    raise typer.Exit(code=0 if report.success else 1)


@app.command("clean")
def clean_command(config_path: ConfigOption = None):
    """
    Remove the output directory.

    Examples:\n

        $ marksite clean
    """
    config = _load_config_or_exit(config_path)
    if clean_site(config.output_path):
        typer.secho(f"✓ Removed {config.output_path}", fg=typer.colors.GREEN)
    else:
        typer.echo(f"  {config.output_path} does not exist")


if __name__ == "__main__":
    app()
