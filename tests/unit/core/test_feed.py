"""Unit tests for core/feed.py"""

import xml.etree.ElementTree as etree
from datetime import date, datetime, timedelta, timezone

import pytest

from mdsite.config import Settings
from mdsite.core.feed import ATOM_NS, CONTENT_NS, build_feed, to_feed_item, to_rss_xml
from mdsite.core.registry import BlogRegistry


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(
        site_name="Example Blog",
        site_url="https://example.com/",
        author="Jane Doe",
        author_email="jane@example.com",
    )


@pytest.fixture(name="registry")
def registry_fixture(make_entry, make_commit):
    newest = datetime(2024, 2, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    older = datetime(2024, 1, 6, 9, 30, tzinfo=timezone.utc)
    return BlogRegistry(entries=[
        make_entry("second", date(2024, 1, 20), tags=["py"], commits=[make_commit("a" * 40, older)]),
        make_entry("first", date(2024, 1, 5), description="Hello *there*",
                   commits=[make_commit("b" * 40, newest)]),
        make_entry("draft", date(2024, 1, 1)),
    ])


def test_build_feed(registry, settings):
    feed = build_feed(registry, settings)
    assert feed.title == "Example Blog"
    assert feed.link == "https://example.com"
    assert feed.self_link == "https://example.com/blog/rss.xml"
    assert feed.last_build_date == datetime(2024, 2, 1, 10, 0, tzinfo=timezone.utc)
    assert feed.pub_date == feed.last_build_date
    assert [i.link for i in feed.items] == [
        "https://example.com/blog/second",
        "https://example.com/blog/first",
        "https://example.com/blog/draft",
    ]


def test_build_feed_skipped_without_history(make_entry, settings):
    """No feed when no entry has commit history."""
    registry = BlogRegistry(entries=[make_entry("x", date(2024, 1, 5))])
    assert build_feed(registry, settings) is None
    assert build_feed(BlogRegistry(), settings) is None


def test_feed_item(registry, settings):
    item = to_feed_item(registry.entries[1], settings)
    assert item.title == "Title first"
    assert item.guid == item.link == "https://example.com/blog/first"
    assert item.pub_date == datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert item.description == "<p>Hello *there*</p>\n"
    assert item.author == "jane@example.com (Jane Doe)"
    assert item.content == "<h1>Title first</h1>\n"


def test_feed_item_without_author_email(make_entry):
    item = to_feed_item(make_entry("x", date(2024, 1, 5)), Settings(author="Jane"))
    assert item.author is None
    assert item.description is None


def test_rss_xml(registry, settings):
    xml = to_rss_xml(build_feed(registry, settings))
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')

    rss = etree.fromstring(xml.encode("utf-8"))
    assert rss.tag == "rss"
    assert rss.get("version") == "2.0"
    channel = rss.find("channel")
    assert channel.findtext("title") == "Example Blog"
    assert channel.findtext("lastBuildDate") == "Thu, 01 Feb 2024 12:00:00 +0200"
    self_link = channel.find(f"{{{ATOM_NS}}}link")
    assert self_link.get("href") == "https://example.com/blog/rss.xml"
    assert self_link.get("rel") == "self"

    items = channel.findall("item")
    assert [i.findtext("title") for i in items] == ["Title second", "Title first", "Title draft"]
    first = items[1]
    assert first.findtext("pubDate") == "Fri, 05 Jan 2024 00:00:00 +0000"
    assert first.find("guid").get("isPermaLink") == "true"
    assert first.findtext(f"{{{CONTENT_NS}}}encoded") == "<h1>Title first</h1>\n"
    assert [c.text for c in items[0].findall("category")] == ["py"]
    assert items[2].find("description") is None
