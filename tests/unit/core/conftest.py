"""Shared fixtures for core unit tests"""

from datetime import date, datetime

import pytest

from mdsite.core.markdown.dialect import Dialect
from mdsite.core.markdown.tree import parse
from mdsite.core.models import BlogEntry, Commit, Content, Page


SAMPLE_MD = """\
---
title: Sample *Doc*
tags: [python, notes]
---

# Heading One

A paragraph with **bold** text and a [link](other.md).

## Heading Two

- item one
- item two
"""


class FakeHistory:
    """Stand-in for HistoryIndex backed by a path -> commits mapping."""

    def __init__(self, commits: dict = None, error: Exception = None):
        self.commits = commits or {}
        self.error = error
        self.calls = []

    def commits_for(self, path: str) -> list[Commit]:
        self.calls.append(path)
        if self.error is not None:
            raise self.error
        return list(self.commits.get(path, []))


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(scope="session", name="dialect")
def dialect_fixture():
    return Dialect()


@pytest.fixture(name="make_doc")
def make_doc_fixture(dialect):
    def _make(text: str, path: str = "page.md"):
        return parse(text, path, dialect)
    return _make


@pytest.fixture(name="fake_history")
def fake_history_fixture():
    return FakeHistory


@pytest.fixture(name="make_commit")
def make_commit_fixture():
    def _make(hash_: str, when: datetime, summary: str = "edit") -> Commit:
        return Commit(hash=hash_, time=when, summary=summary)
    return _make


@pytest.fixture(name="make_entry")
def make_entry_fixture():
    """Build a BlogEntry without touching the filesystem."""
    def _make(slug: str, day: date, tags=(), commits=(), description: str = None) -> BlogEntry:
        path = f"blog/{day.isoformat()}-{slug}.md"
        page = Page(
            path=path,
            title=Content(markdown=f"Title {slug}", html=f"Title {slug}"),
            description=Content(markdown=description, html=f"<p>{description}</p>\n") if description else None,
            tags=list(tags),
            html=f"<h1>Title {slug}</h1>\n",
            markdown=f"# Title {slug}\n",
        )
        return BlogEntry(path=path, slug=slug, publish_date=day, page=page, commits=list(commits))
    return _make
