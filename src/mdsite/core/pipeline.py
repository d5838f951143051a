"""Pipeline step functions: build the site model, then export it"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mdsite.config import Settings
from mdsite.core.export import write_site
from mdsite.core.feed import build_feed
from mdsite.core.history import HistoryIndex
from mdsite.core.markdown.dialect import Dialect
from mdsite.core.models import Feed, Page
from mdsite.core.parse import discover_pages, load_page
from mdsite.core.registry import BlogRegistry, build_registry
from mdsite.core.utils.workers import map_in_order
from mdsite.errors import ParseError


log = logging.getLogger(__name__)


@dataclass
class Site:
    pages: list[Page]
    registry: BlogRegistry
    feed: Optional[Feed]


def run_build(settings: Settings, history: Optional[HistoryIndex] = None) -> Site:
    """Parse every page and blog entry under settings.content_dir into a Site.

    Fails fast: the first SiteError from any document propagates.
    """
    root = Path(settings.content_dir)
    if not root.is_dir():
        raise ParseError(root, "content directory not found")

    dialect = Dialect()
    history = history or HistoryIndex(root)

    page_paths = discover_pages(root, settings.skip)
    log.info("found %d pages in %s", len(page_paths), root)
    pages = map_in_order(
        lambda p: load_page(root, p, dialect, settings.blog_dir), page_paths, settings.workers,
    )

    registry = build_registry(root, dialect, history, settings.blog_dir, settings.workers)
    feed = build_feed(registry, settings)
    if feed is None and registry.entries:
        log.info("no blog entry has commit history; skipping the feed")
    return Site(pages=pages, registry=registry, feed=feed)


def run_export(site: Site, settings: Settings) -> list[Path]:
    """Write the site model to settings.output_dir. Returns written paths."""
    return write_site(site, Path(settings.output_dir), settings)
