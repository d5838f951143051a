"""RSS feed construction from the blog registry, and RSS 2.0 serialization"""

import xml.etree.ElementTree as etree
from datetime import datetime, time, timezone
from email.utils import format_datetime
from typing import Optional

from mdsite.config import Settings
from mdsite.core.models import BlogEntry, Feed, FeedItem
from mdsite.core.registry import BlogRegistry


ATOM_NS = "http://www.w3.org/2005/Atom"
CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

etree.register_namespace("atom", ATOM_NS)
etree.register_namespace("content", CONTENT_NS)


def entry_url(entry: BlogEntry, settings: Settings) -> str:
    return f"{settings.site_url}/{settings.blog_dir}/{entry.slug}"


def feed_url(settings: Settings) -> str:
    return f"{settings.site_url}/{settings.blog_dir}/{settings.feed_file}"


def _author(settings: Settings) -> Optional[str]:
    if not settings.author_email:
        return None
    return f"{settings.author_email} ({settings.author})" if settings.author else settings.author_email


def to_feed_item(entry: BlogEntry, settings: Settings) -> FeedItem:
    link = entry_url(entry, settings)
    page = entry.page
    return FeedItem(
        title=page.title.markdown,
        link=link,
        guid=link,
        description=page.description.html if page.description else None,
        author=_author(settings),
        categories=list(page.tags),
        pub_date=datetime.combine(entry.publish_date, time(0, 0), tzinfo=timezone.utc),
        content=page.html,
    )


def build_feed(registry: BlogRegistry, settings: Settings) -> Optional[Feed]:
    """Feed in registry order, dated by the newest commit; None when no entry has history."""
    last_updated = registry.last_updated
    if last_updated is None:
        return None
    return Feed(
        title=settings.site_name,
        link=settings.site_url,
        description=settings.site_name,
        self_link=feed_url(settings),
        pub_date=last_updated,
        last_build_date=last_updated,
        items=[to_feed_item(e, settings) for e in registry.entries],
    )


def _text(parent: etree.Element, tag: str, value: Optional[str], **attrs) -> None:
    if value is None:
        return
    el = etree.SubElement(parent, tag, attrs)
    el.text = value


def to_rss_xml(feed: Feed) -> str:
    """Serialize a Feed as an RSS 2.0 document with atom self-link and content:encoded."""
    rss = etree.Element("rss", version="2.0")
    channel = etree.SubElement(rss, "channel")
    _text(channel, "title", feed.title)
    _text(channel, "link", feed.link)
    _text(channel, "description", feed.description)
    _text(channel, "pubDate", format_datetime(feed.pub_date))
    _text(channel, "lastBuildDate", format_datetime(feed.last_build_date))
    etree.SubElement(
        channel, f"{{{ATOM_NS}}}link",
        href=feed.self_link, rel="self", type="application/rss+xml",
    )

    for item in feed.items:
        el = etree.SubElement(channel, "item")
        _text(el, "title", item.title)
        _text(el, "link", item.link)
        _text(el, "description", item.description)
        _text(el, "author", item.author)
        for category in item.categories:
            _text(el, "category", category)
        _text(el, "guid", item.guid, isPermaLink="true")
        _text(el, "pubDate", format_datetime(item.pub_date))
        _text(el, f"{{{CONTENT_NS}}}encoded", item.content)

    body = etree.tostring(rss, encoding="unicode")
    return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'
