"""Lexical path algebra for link targets: resolution against the content root"""

from pathlib import PurePosixPath
from urllib.parse import urlsplit

from mdsite.errors import InvalidLinkTarget


def is_external(target: str) -> bool:
    """True for targets with a URI scheme (mailto: included) or a network location."""
    try:
        parts = urlsplit(target)
    except ValueError:
        return False
    return bool(parts.scheme or parts.netloc)


def split_target(target: str) -> tuple[str, str]:
    """Split a link into (path, suffix) where suffix is the '#fragment' / '?query' tail."""
    cuts = [i for i in (target.find("#"), target.find("?")) if i >= 0]
    cut = min(cuts, default=len(target))
    return target[:cut], target[cut:]


def resolve_link(doc_path: str | PurePosixPath, link: str) -> str:
    """Resolve link against the directory of doc_path into a canonical root-relative path.

    Links starting with '/' are resolved from the content root. Normalization is purely
    lexical; an unmatched '..' raises InvalidLinkTarget.
    """
    if link.startswith("/"):
        base = PurePosixPath()
    else:
        base = PurePosixPath(str(doc_path).lstrip("/")).parent

    parts: list[str] = []
    for seg in (base / link.lstrip("/")).parts:
        if seg == ".":
            continue
        if seg == "..":
            if not parts:
                raise InvalidLinkTarget(doc_path, link)
            parts.pop()
            continue
        parts.append(seg)
    return "/" + "/".join(parts)
