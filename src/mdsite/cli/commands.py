"""CLI command implementations"""

from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.pipeline import Site, run_build, run_export
from mdsite.errors import SiteError


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _build(settings: Settings) -> Site:
    """Run the pipeline, reporting the first content error."""
    try:
        return run_build(settings)
    except SiteError as e:
        _fail("Build failed", e)


ContentArg = Annotated[Optional[str], typer.Argument(help="Content root (defaults to content_dir setting)")]


def build_cmd(
    content: ContentArg = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    site_url: Annotated[Optional[str], typer.Option("--site-url", help="Public base URL")] = None,
    blog_dir: Annotated[Optional[str], typer.Option("--blog-dir", help="Blog directory under the content root")] = None,
    workers: Annotated[Optional[int], typer.Option("--workers", help="Parallel document parsers")] = None,
    ):
    """Run the full pipeline: parse -> aggregate -> export."""
    settings = _settings(overrides={
        "content_dir": content, "output_dir": out, "site_url": site_url,
        "blog_dir": blog_dir, "workers": workers,
    })
    site = _build(settings)
    try:
        written = run_export(site, settings)
    except OSError as e:
        _fail("Export failed", e)

    feed = "written" if site.feed else "skipped (no history)"
    typer.echo(
        f"Build complete - "
        f"{len(site.pages)} pages, "
        f"{len(site.registry.entries)} entries, "
        f"{len(site.registry.tags)} tags, "
        f"feed {feed}"
    )
    typer.echo(f"Wrote {len(written)} file(s) to {settings.output_dir}/")


def check_cmd(content: ContentArg = None):
    """Parse everything without writing; report the first error."""
    settings = _settings(overrides={"content_dir": content})
    _build(settings)
    typer.echo("OK")


def entries_cmd(content: ContentArg = None):
    """List blog entries newest first: date, slug, commit count."""
    settings = _settings(overrides={"content_dir": content})
    site = _build(settings)
    if not site.registry.entries:
        typer.echo("No blog entries found.")
        raise typer.Exit(1)
    for entry in site.registry.entries:
        typer.echo(f"{entry.publish_date.isoformat()}  {entry.slug}  ({len(entry.commits)} commits)")


def tags_cmd(content: ContentArg = None):
    """List tags with their entry counts."""
    settings = _settings(overrides={"content_dir": content})
    site = _build(settings)
    if not site.registry.tags:
        typer.echo("No tags found.")
        raise typer.Exit(1)
    for tag, entries in site.registry.tags.items():
        typer.echo(f"{tag}: {len(entries)}")
