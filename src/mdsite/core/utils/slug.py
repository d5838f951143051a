"""Slug generation for heading anchors"""

import re
import unicodedata


def slugify(text: str) -> str:
    """Convert heading text to a lowercase, hyphen-separated anchor slug.

    Word characters from any script are kept, so CJK headings still get readable anchors.
    """
    text = unicodedata.normalize("NFKC", text).lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')
