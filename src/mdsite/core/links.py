"""Link and image target rewriting into root-relative, extension-free site URLs"""

from pathlib import PurePosixPath

from mdsite.core.blog import MD_SUFFIX, parse_entry_name
from mdsite.core.markdown.tree import Document, visit_images, visit_links
from mdsite.core.paths import is_external, resolve_link, split_target
from mdsite.errors import InvalidBlogFilename, InvalidLinkTarget


def rewrite_target(doc_path: str, target: str, blog_dir: str = "blog", image: bool = False) -> str:
    """Return the public URL for one link/image target of the document at doc_path.

    External targets and same-document targets (empty, '#frag', '?query') come back unchanged.
    Links into the blog directory are retargeted to the entry slug.
    """
    if not target or is_external(target):
        return target
    path, suffix = split_target(target)
    if not path:
        return target

    try:
        resolved = PurePosixPath(resolve_link(doc_path, path))
    except InvalidLinkTarget as e:
        raise InvalidLinkTarget(doc_path, target, e.message) from e

    parts = resolved.parts
    blog_parts = PurePosixPath("/", blog_dir).parts
    in_blog = len(parts) > len(blog_parts) and parts[:len(blog_parts)] == blog_parts
    if not image and resolved.suffix == MD_SUFFIX and in_blog:
        try:
            _, slug = parse_entry_name(resolved.name)
        except InvalidBlogFilename as e:
            raise InvalidLinkTarget(doc_path, target, f"not a blog entry name: {e.message}") from e
        resolved = resolved.with_name(slug)

    if resolved.suffix == MD_SUFFIX:
        resolved = resolved.with_suffix("")

    return f"{resolved}{suffix}"


def rewrite_links(doc: Document, blog_dir: str = "blog") -> Document:
    """Rewrite every internal link and image target of doc in place."""
    visit_links(doc, lambda t: rewrite_target(doc.path, t, blog_dir))
    visit_images(doc, lambda t: rewrite_target(doc.path, t, blog_dir, image=True))
    return doc
