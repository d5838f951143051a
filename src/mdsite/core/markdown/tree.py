"""Index-addressed document tree built over the markdown-it token stream

Nodes live in one flat list owned by the Document; parent and children are integer
indices into that list. Each node keeps a reference to its opening (or leaf) token,
so rewriting a link target on the node rewrites what render_html() emits.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Optional

import yaml
from markdown_it.token import Token
from pydantic import ValidationError

from mdsite.core.markdown.dialect import Dialect
from mdsite.core.models import Metadata
from mdsite.errors import ParseError


class NodeKind(str, Enum):
    """Closed set of node kinds produced by the dialect."""
    document = "document"
    front_matter = "front_matter"
    heading = "heading"
    paragraph = "paragraph"
    blockquote = "blockquote"
    alert = "alert"
    alert_title = "alert_title"
    bullet_list = "bullet_list"
    ordered_list = "ordered_list"
    list_item = "list_item"
    table = "table"
    table_part = "table_part"
    table_cell = "table_cell"
    code_block = "code_block"
    html_block = "html_block"
    hr = "hr"
    math_block = "math_block"
    footnote = "footnote"
    description_list = "description_list"
    description_term = "description_term"
    description_details = "description_details"
    text = "text"
    softbreak = "softbreak"
    hardbreak = "hardbreak"
    code_inline = "code_inline"
    emphasis = "emphasis"
    strong = "strong"
    strikethrough = "strikethrough"
    superscript = "superscript"
    subscript = "subscript"
    link = "link"
    image = "image"
    html_inline = "html_inline"
    math_inline = "math_inline"
    footnote_ref = "footnote_ref"
    emoji = "emoji"
    other = "other"             # plugin bookkeeping tokens (footnote anchors, labels)


# token type with any _open/_close suffix removed -> node kind
TOKEN_KIND_MAP: dict[str, NodeKind] = {
    'front_matter':       NodeKind.front_matter,
    'heading':            NodeKind.heading,
    'paragraph':          NodeKind.paragraph,
    'blockquote':         NodeKind.blockquote,
    'alert':              NodeKind.alert,
    'alert_title':        NodeKind.alert_title,
    'bullet_list':        NodeKind.bullet_list,
    'ordered_list':       NodeKind.ordered_list,
    'list_item':          NodeKind.list_item,
    'table':              NodeKind.table,
    'thead':              NodeKind.table_part,
    'tbody':              NodeKind.table_part,
    'tr':                 NodeKind.table_part,
    'th':                 NodeKind.table_cell,
    'td':                 NodeKind.table_cell,
    'fence':              NodeKind.code_block,
    'code_block':         NodeKind.code_block,
    'html_block':         NodeKind.html_block,
    'hr':                 NodeKind.hr,
    'math_block':         NodeKind.math_block,
    'math_block_label':   NodeKind.math_block,
    'footnote_block':     NodeKind.footnote,
    'footnote':           NodeKind.footnote,
    'dl':                 NodeKind.description_list,
    'dt':                 NodeKind.description_term,
    'dd':                 NodeKind.description_details,
    'text':               NodeKind.text,
    'softbreak':          NodeKind.softbreak,
    'hardbreak':          NodeKind.hardbreak,
    'code_inline':        NodeKind.code_inline,
    'em':                 NodeKind.emphasis,
    'strong':             NodeKind.strong,
    's':                  NodeKind.strikethrough,
    'sup':                NodeKind.superscript,
    'sub':                NodeKind.subscript,
    'link':               NodeKind.link,
    'image':              NodeKind.image,
    'html_inline':        NodeKind.html_inline,
    'math_inline':        NodeKind.math_inline,
    'math_inline_double': NodeKind.math_inline,
    'footnote_ref':       NodeKind.footnote_ref,
    'emoji':              NodeKind.emoji,
}

# default delimiters when a token carries no markup of its own
WRAP_MARKERS: dict[NodeKind, str] = {
    NodeKind.emphasis:      "*",
    NodeKind.strong:        "**",
    NodeKind.strikethrough: "~~",
    NodeKind.superscript:   "^",
    NodeKind.subscript:     "~",
}

# characters that would start inline syntax when text is parsed again
MD_ESCAPE_RE = re.compile(r"([\\`*_\[\]<>~^$]|!(?=\[))")


@dataclass
class Node:
    kind: NodeKind
    token: Optional[Token]          # None only for the document root
    parent: Optional[int]
    children: list[int] = field(default_factory=list)


@dataclass
class Document:
    """A parsed content document; the only post-parse mutation is link/image target rewriting."""
    path:     str
    source:   str
    tokens:   list[Token]
    nodes:    list[Node]
    metadata: Metadata
    dialect:  Dialect
    env:      dict[str, Any] = field(default_factory=dict)

    ROOT = 0

    def iter_kind(self, kind: NodeKind) -> Iterator[int]:
        """Yield indices of nodes of the given kind in document order."""
        return (i for i, n in enumerate(self.nodes) if n.kind == kind)


def _kind(token: Token) -> NodeKind:
    base = token.type.removesuffix("_open").removesuffix("_close")
    return TOKEN_KIND_MAP.get(base, NodeKind.other)


def _build_nodes(tokens: list[Token]) -> list[Node]:
    """Lay tokens out as a pre-order arena; inline tokens are flattened into their block."""
    nodes = [Node(NodeKind.document, None, None)]
    stack = [Document.ROOT]

    def walk(seq: list[Token]) -> None:
        for tok in seq:
            if tok.nesting == -1:
                if len(stack) > 1:
                    stack.pop()
                continue
            if tok.type == "inline":
                walk(tok.children or [])
                continue
            idx = len(nodes)
            nodes.append(Node(_kind(tok), tok, stack[-1]))
            nodes[stack[-1]].children.append(idx)
            if tok.nesting == 1:
                stack.append(idx)

    walk(tokens)
    return nodes


def _read_metadata(tokens: list[Token], path: str) -> Metadata:
    block = next((t for t in tokens if t.type == "front_matter"), None)
    if block is None:
        return Metadata()
    try:
        data = yaml.safe_load(block.content) or {}
    except yaml.YAMLError as e:
        raise ParseError(path, f"invalid YAML metadata: {e}") from e
    if not isinstance(data, dict):
        raise ParseError(path, f"invalid YAML metadata: expected a mapping, got {type(data).__name__}")
    try:
        return Metadata.model_validate(data)
    except ValidationError as e:
        raise ParseError(path, f"invalid metadata: {e}") from e


def parse(text: str, path: str, dialect: Dialect) -> Document:
    """Parse Markdown source into a Document. Raises ParseError on a malformed metadata block."""
    env: dict[str, Any] = {}
    tokens = dialect.parse(text, env)
    return Document(
        path=path,
        source=text,
        tokens=tokens,
        nodes=_build_nodes(tokens),
        metadata=_read_metadata(tokens, path),
        dialect=dialect,
        env=env,
    )


def _visit_targets(doc: Document, kind: NodeKind, attr: str, fn: Callable[[str], str]) -> None:
    for idx in doc.iter_kind(kind):
        token = doc.nodes[idx].token
        target = token.attrGet(attr)
        if target is None:
            continue
        new = fn(str(target))
        if new != target:
            token.attrSet(attr, new)


def visit_links(doc: Document, fn: Callable[[str], str]) -> None:
    """Replace every link href with fn(href), in place."""
    _visit_targets(doc, NodeKind.link, "href", fn)


def visit_images(doc: Document, fn: Callable[[str], str]) -> None:
    """Replace every image src with fn(src), in place."""
    _visit_targets(doc, NodeKind.image, "src", fn)


def first_heading_level_1(doc: Document) -> Optional[int]:
    return next((i for i in doc.iter_kind(NodeKind.heading) if doc.nodes[i].token.tag == "h1"), None)


def first_paragraph(doc: Document) -> Optional[int]:
    return next(doc.iter_kind(NodeKind.paragraph), None)


def render_html(doc: Document) -> str:
    return doc.dialect.render(doc.tokens, doc.env)


def _children_markdown(doc: Document, idx: int) -> str:
    return "".join(_node_markdown(doc, c) for c in doc.nodes[idx].children)


def _node_markdown(doc: Document, idx: int) -> str:
    node = doc.nodes[idx]
    tok = node.token
    kind = node.kind

    if kind == NodeKind.text:
        return MD_ESCAPE_RE.sub(r"\\\1", tok.content)
    if kind == NodeKind.html_inline:
        return tok.content
    if kind == NodeKind.softbreak:
        return "\n"
    if kind == NodeKind.hardbreak:
        return "\\\n"
    if kind == NodeKind.code_inline:
        fence = tok.markup or "`"
        return f"{fence}{tok.content}{fence}"
    if kind == NodeKind.math_inline:
        if tok.markup == "$`":
            return f"$`{tok.content}`$"
        fence = "$$" if tok.type == "math_inline_double" else "$"
        return f"{fence}{tok.content}{fence}"
    if kind == NodeKind.emoji:
        return f":{tok.markup}:"
    if kind == NodeKind.footnote_ref:
        label = tok.meta.get("label")
        if label is None:
            # inline footnote: the body only lives in env
            note = doc.env.get("footnotes", {}).get("list", {}).get(tok.meta["id"], {})
            return f"^[{note.get('content', '')}]"
        return f"[^{label}]"
    if kind == NodeKind.image:
        title = tok.attrGet("title")
        suffix = f' "{title}"' if title else ""
        return f"![{tok.content}]({tok.attrGet('src')}{suffix})"
    if kind == NodeKind.link:
        href = tok.attrGet("href")
        if tok.markup == "linkify":
            # bare URL text stays unescaped so it is linked again
            return "".join(doc.nodes[c].token.content for c in node.children)
        if tok.markup == "autolink":
            return f"<{href}>"
        title = tok.attrGet("title")
        suffix = f' "{title}"' if title else ""
        return f"[{_children_markdown(doc, idx)}]({href}{suffix})"
    if kind in WRAP_MARKERS:
        marker = tok.markup or WRAP_MARKERS[kind]
        return f"{marker}{_children_markdown(doc, idx)}{marker}"
    return _children_markdown(doc, idx)


def render_markdown(doc: Document, idx: int) -> str:
    """Re-serialize the inline content under node idx as source-like Markdown.

    For a heading this is its text without the `#` marker; for a paragraph, its body.
    """
    text = _children_markdown(doc, idx)
    return "\\" + text if text.startswith("#") else text
