"""Blog entry filename parsing: `YYYY-MM-DD-slug`"""

import re
from datetime import date
from pathlib import PurePosixPath
from typing import Optional

from mdsite.errors import InvalidBlogFilename


MD_SUFFIX = ".md"
DATE_PARTS_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_entry_name(name: str, path: Optional[str] = None) -> tuple[date, str]:
    """Split a blog filename (extension optional) into (publish date, slug).

    Only the first three hyphens separate fields; the slug keeps any further hyphens.
    Raises InvalidBlogFilename, attributed to path (or the name itself).
    """
    where = path or name
    stem = PurePosixPath(name).name
    if stem.endswith(MD_SUFFIX):
        stem = stem[:-len(MD_SUFFIX)]

    parts = stem.split("-", 3)
    if len(parts) != 4 or not parts[3]:
        raise InvalidBlogFilename(where, f"'{stem}' has no date prefix and slug")

    year, month, day, slug = parts
    if not DATE_PARTS_RE.fullmatch(f"{year}-{month}-{day}"):
        raise InvalidBlogFilename(where, f"'{year}-{month}-{day}' is not a numeric YYYY-MM-DD date")
    try:
        publish_date = date(int(year), int(month), int(day))
    except ValueError as e:
        raise InvalidBlogFilename(where, f"the date isn't valid ({e})") from e
    return publish_date, slug
