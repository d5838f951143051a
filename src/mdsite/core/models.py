"""Data models for parsed pages, blog entries, commit history, and the feed"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Metadata(BaseModel):
    """Leading YAML metadata block; all keys optional, unknown keys ignored."""
    model_config = ConfigDict(extra="ignore")

    title:       Optional[str] = None
    description: Optional[str] = None
    tags:        list[str] = Field(default_factory=list)   # order, duplicates and case kept as written

    @field_validator("tags", mode="before")
    @classmethod
    def _none_is_empty(cls, v):
        return [] if v is None else v


class Content(BaseModel):
    """A piece of text in both source Markdown and rendered HTML form."""
    markdown: str
    html: str


class Page(BaseModel):
    """Everything a renderer needs from one content document."""
    path:        str                 # root-relative source path, e.g. "blog/2024-01-05-post.md"
    title:       Content
    description: Optional[Content] = None
    tags:        list[str] = Field(default_factory=list)
    html:        str                 # full rendered body
    markdown:    str                 # raw source, metadata block included


class Commit(BaseModel):
    """Read-only view of one commit that touched a file."""
    model_config = ConfigDict(frozen=True)

    hash:    str
    time:    datetime                # committer time, tz-aware with the committer's UTC offset
    summary: Optional[str] = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


class BlogEntry(BaseModel):
    """A dated blog post; rebuilt from scratch every build."""
    model_config = ConfigDict(frozen=True)

    path:         str
    slug:         str
    publish_date: date
    page:         Page
    commits:      list[Commit] = Field(default_factory=list)   # newest first; empty when untracked

    @property
    def last_commit(self) -> Optional[Commit]:
        return self.commits[0] if self.commits else None


class FeedItem(BaseModel):
    title:       str
    link:        str
    guid:        str
    description: Optional[str] = None
    author:      Optional[str] = None
    categories:  list[str] = Field(default_factory=list)
    pub_date:    datetime
    content:     str


class Feed(BaseModel):
    title:           str
    link:            str
    description:     str
    self_link:       str
    pub_date:        datetime
    last_build_date: datetime
    items:           list[FeedItem] = Field(default_factory=list)
