"""Title, description, and tag extraction: explicit metadata first, then document structure"""

from typing import Optional

from mdsite.core.markdown.tree import (
    Document,
    first_heading_level_1,
    first_paragraph,
    render_html,
    render_markdown,
)
from mdsite.core.models import Content, Page
from mdsite.errors import MissingTitle


def extract_title(doc: Document) -> Content:
    """Metadata title verbatim, else the first level-1 heading. Raises MissingTitle."""
    markdown = doc.metadata.title
    if markdown is None:
        idx = first_heading_level_1(doc)
        if idx is None:
            raise MissingTitle(doc.path)
        markdown = render_markdown(doc, idx).rstrip()
    return Content(markdown=markdown, html=doc.dialect.render_inline(markdown))


def extract_description(doc: Document) -> Optional[Content]:
    """Metadata description, else the first paragraph, else None."""
    markdown = doc.metadata.description
    if markdown is None:
        idx = first_paragraph(doc)
        if idx is None:
            return None
        markdown = render_markdown(doc, idx)
    return Content(markdown=markdown, html=doc.dialect.render_block(markdown))


def extract_page(doc: Document) -> Page:
    return Page(
        path=doc.path,
        title=extract_title(doc),
        description=extract_description(doc),
        tags=list(doc.metadata.tags),
        html=render_html(doc),
        markdown=doc.source,
    )
