"""Blog aggregation: load entries, join history, sort newest-first, and index by tag"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Optional

from mdsite.core.blog import parse_entry_name
from mdsite.core.history import HistoryIndex
from mdsite.core.markdown.dialect import Dialect
from mdsite.core.models import BlogEntry
from mdsite.core.parse import discover_blog, load_page
from mdsite.core.utils.workers import map_in_order
from mdsite.errors import DuplicateSlug, HistoryLookupError


log = logging.getLogger(__name__)


@dataclass
class BlogRegistry:
    entries: list[BlogEntry] = field(default_factory=list)          # newest first
    tags: dict[str, list[BlogEntry]] = field(default_factory=dict)  # buckets follow entry order

    @property
    def last_updated(self) -> Optional[datetime]:
        """Newest commit time across all entries; None when no entry has history."""
        times = [e.commits[0].time for e in self.entries if e.commits]
        return max(times, default=None)


def load_entry(root: Path, rel_path: str, dialect: Dialect, blog_dir: str = "blog") -> BlogEntry:
    """Parse the filename and the document of one blog entry (history not attached yet)."""
    publish_date, slug = parse_entry_name(PurePosixPath(rel_path).name, rel_path)
    page = load_page(root, rel_path, dialect, blog_dir)
    return BlogEntry(path=rel_path, slug=slug, publish_date=publish_date, page=page)


def attach_history(entry: BlogEntry, history: HistoryIndex) -> BlogEntry:
    """Return entry with its commits; unreadable history degrades to an empty list."""
    try:
        commits = history.commits_for(entry.path)
    except HistoryLookupError as e:
        log.warning("%s; publishing %s without history", e, entry.path)
        commits = []
    return entry.model_copy(update={"commits": commits})


def check_unique_slugs(entries: list[BlogEntry]) -> None:
    """Raise DuplicateSlug when two entries would publish to the same URL."""
    seen: dict[str, str] = {}
    for entry in entries:
        if entry.slug in seen:
            raise DuplicateSlug(entry.path, entry.slug, seen[entry.slug])
        seen[entry.slug] = entry.path


def sort_entries(entries: list[BlogEntry]) -> list[BlogEntry]:
    """Publish date descending; entries sharing a date keep their relative order."""
    return sorted(entries, key=lambda e: e.publish_date, reverse=True)


def build_tag_index(entries: list[BlogEntry]) -> dict[str, list[BlogEntry]]:
    tags: dict[str, list[BlogEntry]] = {}
    for entry in entries:
        for tag in entry.page.tags:
            tags.setdefault(tag, []).append(entry)
    return tags


def build_registry(
    root: Path,
    dialect: Dialect,
    history: HistoryIndex,
    blog_dir: str = "blog",
    workers: int = 1,
    ) -> BlogRegistry:
    """Scan the blog directory and aggregate every entry. Any entry failure aborts the build."""
    paths = discover_blog(root, blog_dir)
    log.info("found %d blog entries under %s/", len(paths), blog_dir)

    loaded = map_in_order(lambda p: load_entry(root, p, dialect, blog_dir), paths, workers)
    entries = [attach_history(e, history) for e in loaded]
    check_unique_slugs(entries)

    entries = sort_entries(entries)
    return BlogRegistry(entries=entries, tags=build_tag_index(entries))
