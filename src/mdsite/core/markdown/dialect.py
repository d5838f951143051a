"""The recognized document dialect: a single fixed MarkdownIt configuration

Built once per build and passed explicitly to every parse/render call. Beyond the
gfm-like preset and mdit-py-plugins it adds a few small rules of its own:
GitHub-style alerts, ^superscript^ / ~subscript~, :shortcode: emoji, and
code-delimited math ($`x`$ and ```math fences).
"""

import re
from typing import Any

import emoji
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin
from mdit_py_plugins.tasklists import tasklists_plugin

from mdsite.core.utils.slug import slugify


ANCHOR_PREFIX = "heading-"
ALERT_KINDS = ("note", "tip", "important", "warning", "caution")

ALERT_RE = re.compile(r"\[!(" + "|".join(ALERT_KINDS) + r")\][ \t]*(?:\n|$)", re.IGNORECASE)
SHORTCODE_RE = re.compile(r":([a-z0-9_+\-]+):", re.IGNORECASE)
UNESCAPE_RE = re.compile(r"\\([ \\!\"#$%&'()*+,./:;<=>?@\[\]^_`{|}~-])")
WHITESPACE_RE = re.compile(r"(^|[^\\])(\\\\)*\s")


def _anchor_slug(title: str) -> str:
    return ANCHOR_PREFIX + slugify(title)


def _matching_close(tokens: list[Token], start: int) -> Token:
    """Return the blockquote_close paired with tokens[start]."""
    level = tokens[start].level
    for tok in tokens[start + 1:]:
        if tok.type == "blockquote_close" and tok.level == level:
            return tok
    raise ValueError("unbalanced blockquote tokens")


def _alert_title(kind: str, level: int) -> list[Token]:
    open_ = Token("alert_title_open", "p", 1)
    open_.attrSet("class", "markdown-alert-title")
    inline = Token("inline", "", 0)
    inline.content = kind.capitalize()
    inline.children = []
    close = Token("alert_title_close", "p", -1)
    for tok, lvl in ((open_, level), (inline, level + 1), (close, level)):
        tok.block = True
        tok.level = lvl
    return [open_, inline, close]


def _alert_rule(state: StateCore) -> None:
    """Turn `> [!NOTE]` style blockquotes into alert containers."""
    tokens = state.tokens
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if (
            tok.type == "blockquote_open"
            and i + 2 < len(tokens)
            and tokens[i + 1].type == "paragraph_open"
            and tokens[i + 2].type == "inline"
        ):
            m = ALERT_RE.match(tokens[i + 2].content)
            if m:
                kind = m.group(1).lower()
                close = _matching_close(tokens, i)
                tok.type, tok.tag = "alert_open", "div"
                tok.attrSet("class", f"markdown-alert markdown-alert-{kind}")
                close.type, close.tag = "alert_close", "div"

                rest = tokens[i + 2].content[m.end():]
                if rest.strip():
                    tokens[i + 2].content = rest
                else:
                    del tokens[i + 1:i + 4]
                tokens[i + 1:i + 1] = _alert_title(kind, tok.level + 1)
        i += 1


def _script_rule(marker: str, name: str):
    """Inline rule for a single-character wrapped script, e.g. ^sup^ or ~sub~."""

    def rule(state: StateInline, silent: bool) -> bool:
        start = state.pos
        max_ = state.posMax
        if state.src[start] != marker or silent or start + 2 >= max_:
            return False

        state.pos = start + 1
        found = False
        while state.pos < max_:
            if state.src[state.pos] == marker:
                found = True
                break
            state.md.inline.skipToken(state)

        if not found or start + 1 == state.pos:
            state.pos = start
            return False

        content = state.src[start + 1:state.pos]
        # no unescaped whitespace inside
        if WHITESPACE_RE.search(content):
            state.pos = start
            return False

        state.posMax = state.pos
        state.pos = start + 1

        token = state.push(f"{name}_open", name, 1)
        token.markup = marker
        token = state.push("text", "", 0)
        token.content = UNESCAPE_RE.sub(r"\1", content)
        token = state.push(f"{name}_close", name, -1)
        token.markup = marker

        state.pos = state.posMax + 1
        state.posMax = max_
        return True

    return rule


def _shortcode_rule(state: StateInline, silent: bool) -> bool:
    if state.src[state.pos] != ":":
        return False
    m = SHORTCODE_RE.match(state.src, state.pos)
    if not m:
        return False
    glyph = emoji.emojize(m.group(0), language="alias")
    if glyph == m.group(0):
        return False
    if not silent:
        token = state.push("emoji", "", 0)
        token.content = glyph
        token.markup = m.group(1)
    state.pos = m.end()
    return True


def _render_emoji(self, tokens: list[Token], idx: int, options, env) -> str:
    return escapeHtml(tokens[idx].content)


def _math_code_rule(state: StateCore) -> None:
    """Fold code-delimited math into the dollarmath token types."""
    for tok in state.tokens:
        if tok.type == "fence" and tok.info.strip() == "math":
            tok.type = "math_block"
            tok.info = ""
        elif tok.type == "inline":
            for child in tok.children or []:
                if (
                    child.type == "math_inline"
                    and len(child.content) > 2
                    and child.content.startswith("`")
                    and child.content.endswith("`")
                ):
                    child.content = child.content[1:-1]
                    child.markup = "$`"


class Dialect:
    """Fixed parser + renderer configuration shared by every document in a build."""

    anchor_prefix = ANCHOR_PREFIX

    def __init__(self) -> None:
        md = (
            MarkdownIt("gfm-like")
            .use(front_matter_plugin)
            .use(footnote_plugin)
            .use(deflist_plugin)
            .use(tasklists_plugin)
            .use(dollarmath_plugin, double_inline=True)
            .use(anchors_plugin, min_level=1, max_level=6, slug_func=_anchor_slug)
        )
        md.core.ruler.after("block", "alerts", _alert_rule)
        md.core.ruler.push("math_code", _math_code_rule)
        md.inline.ruler.after("emphasis", "sup", _script_rule("^", "sup"))
        md.inline.ruler.after("emphasis", "sub", _script_rule("~", "sub"))
        md.inline.ruler.push("shortcode", _shortcode_rule)
        md.add_render_rule("emoji", _render_emoji)
        # only scheme and www. URLs are linked, not bare names like README.md
        md.linkify.set({"fuzzy_link": False})
        self.md = md

    def parse(self, text: str, env: dict[str, Any]) -> list[Token]:
        return self.md.parse(text, env)

    def render(self, tokens: list[Token], env: dict[str, Any]) -> str:
        return self.md.renderer.render(tokens, self.md.options, env)

    def render_block(self, text: str) -> str:
        """Render a Markdown fragment as block HTML (paragraph-wrapped)."""
        return self.md.render(text)

    def render_inline(self, text: str) -> str:
        """Render a Markdown fragment as inline HTML (no paragraph wrapper)."""
        return self.md.renderInline(text)
