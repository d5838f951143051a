"""Build error taxonomy: every error names the source file, and the link text where relevant"""

from pathlib import PurePosixPath


class SiteError(Exception):
    """Base class for content pipeline failures attributed to a source file."""

    def __init__(self, path: str | PurePosixPath, message: str, link: str | None = None):
        self.path = str(path)
        self.link = link
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        where = f"{self.path}: link '{self.link}'" if self.link is not None else self.path
        return f"{where}: {self.message}"


class ParseError(SiteError):
    """Unreadable source or malformed metadata block."""


class MissingTitle(SiteError):
    """No metadata title and no level-1 heading."""

    def __init__(self, path: str | PurePosixPath):
        super().__init__(path, "title not found (no 'title' metadata and no level-1 heading)")


class InvalidLinkTarget(SiteError):
    """Link resolves outside the content root or cannot be rewritten."""

    def __init__(self, path: str | PurePosixPath, link: str, message: str = "path escapes the content root"):
        super().__init__(path, message, link=link)


class InvalidBlogFilename(SiteError):
    """Filename does not match YYYY-MM-DD-slug or the date is not a calendar date."""

    def __init__(self, path: str | PurePosixPath, reason: str):
        super().__init__(path, f"{reason}; expected the filename to have the format 'YYYY-MM-DD-slug'")


class HistoryLookupError(SiteError):
    """Commit graph access failed."""


class DuplicateSlug(SiteError):
    """Two blog entries resolve to the same public slug."""

    def __init__(self, path: str | PurePosixPath, slug: str, other: str):
        super().__init__(path, f"slug '{slug}' is already used by {other}")
