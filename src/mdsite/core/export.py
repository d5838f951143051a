"""Export: write page/entry JSON records, the tag index, and the RSS feed"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from mdsite.config import Settings
from mdsite.core.feed import to_rss_xml
from mdsite.core.models import BlogEntry, Commit, Page

if TYPE_CHECKING:
    from mdsite.core.pipeline import Site


log = logging.getLogger(__name__)

HOME_PAGE = "home"


def page_url(page: Page) -> str:
    """Public URL of a top-level page: home is the site root, others are served directory-style."""
    name = PurePosixPath(page.path).stem
    return "/" if name == HOME_PAGE else f"/{name}"


def build_page_record(page: Page, url: str) -> dict:
    return {
        "path": page.path,
        "url": url,
        "title": page.title.model_dump(),
        "description": page.description.model_dump() if page.description else None,
        "tags": page.tags,
        "html": page.html,
    }


def build_commit_record(commit: Commit, settings: Settings) -> dict:
    record = {
        "hash": commit.hash,
        "short_hash": commit.short_hash,
        "time": commit.time.isoformat(),
        "summary": commit.summary,
    }
    if settings.commit_base_url:
        record["url"] = f"{settings.commit_base_url.rstrip('/')}/{commit.hash}"
    return record


def build_entry_record(entry: BlogEntry, settings: Settings) -> dict:
    record = build_page_record(entry.page, f"/{settings.blog_dir}/{entry.slug}")
    record.update({
        "slug": entry.slug,
        "publish_date": entry.publish_date.isoformat(),
        "commits": [build_commit_record(c, settings) for c in entry.commits],
    })
    return record


def build_tag_record(tags: dict[str, list[BlogEntry]]) -> dict[str, list[str]]:
    return {tag: [e.slug for e in entries] for tag, entries in tags.items()}


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    log.debug("wrote %s", path)
    return path


def write_site(site: Site, output_dir: Path, settings: Settings) -> list[Path]:
    """Write every artifact of site under output_dir.

    Layout:
      pages/<name>.json, <blog_dir>/<slug>.json, <blog_dir>/tags.json, <blog_dir>/<feed_file>
    The feed file is only written when the site has a feed.
    """
    written = []
    for page in site.pages:
        name = PurePosixPath(page.path).stem
        written.append(_write_json(output_dir / "pages" / f"{name}.json", build_page_record(page, page_url(page))))

    blog_out = output_dir / settings.blog_dir
    for entry in site.registry.entries:
        written.append(_write_json(blog_out / f"{entry.slug}.json", build_entry_record(entry, settings)))
    written.append(_write_json(blog_out / "tags.json", build_tag_record(site.registry.tags)))

    if site.feed is not None:
        feed_path = blog_out / settings.feed_file
        feed_path.write_text(to_rss_xml(site.feed), encoding="utf-8")
        written.append(feed_path)
    return written
