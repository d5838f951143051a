"""Content discovery and per-file loading: read -> parse -> rewrite links -> extract"""

from pathlib import Path, PurePosixPath
from typing import Iterable

from mdsite.core.blog import MD_SUFFIX
from mdsite.core.content import extract_page
from mdsite.core.links import rewrite_links
from mdsite.core.markdown.dialect import Dialect
from mdsite.core.markdown.tree import parse
from mdsite.core.models import Page
from mdsite.errors import ParseError


RESERVED_NAMES = {"README", "index"}


def read_source(root: Path, rel_path: str) -> str:
    """Read a content file as UTF-8. Raises ParseError when unreadable."""
    try:
        return (root / rel_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(rel_path, f"cannot read source: {e}") from e


def discover_pages(root: Path, skip: Iterable[str] = ()) -> list[str]:
    """Return sorted root-relative paths of top-level .md pages, minus reserved and skipped names."""
    skipped = set(skip)
    pages = []
    for p in sorted(root.iterdir()):
        if not p.is_file() or p.suffix != MD_SUFFIX or p.name.startswith("."):
            continue
        if p.stem in RESERVED_NAMES or p.stem in skipped or p.name in skipped:
            continue
        pages.append(p.name)
    return pages


def discover_blog(root: Path, blog_dir: str = "blog") -> list[str]:
    """Return sorted root-relative paths of .md files directly under the blog directory."""
    blog = root / blog_dir
    if not blog.is_dir():
        return []
    return [
        str(PurePosixPath(blog_dir) / p.name)
        for p in sorted(blog.iterdir())
        if p.is_file() and p.suffix == MD_SUFFIX and not p.name.startswith(".")
    ]


def load_page(root: Path, rel_path: str, dialect: Dialect, blog_dir: str = "blog") -> Page:
    """Parse one content file into a Page with rewritten links."""
    doc = parse(read_source(root, rel_path), rel_path, dialect)
    rewrite_links(doc, blog_dir)
    return extract_page(doc)
