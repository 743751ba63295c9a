"""
Token Passes

Each pass takes the block-level markdown-it token list and the page's
RenderingContext and returns the (possibly rewritten) token list. Inline
content lives in the children of `inline` tokens; rewrites that produce
markup swap tokens for `html_inline` / `html_block` tokens, which the renderer
emits verbatim.

Passes in pipeline order:
    read_header_pass      front matter -> context (must run first)
    get_title_pass        first h1 text -> context.title
    link_adjust_pass      local *.md links -> *.html
    image_convert_pass    images -> <figure>
    convert_math_pass     $...$ / $$...$$ -> MathML
    highlight_code_pass   fenced code -> escaped + highlight rules
    assign_header_id      hierarchical heading ids
    table_wrapper_pass    tables -> scrollable wrapper
    toc_pass              level >= 2 headings -> context.toc
"""

import html
import re
from typing import Iterator, List, Optional

from latex2mathml.converter import convert as latex_to_mathml
from markdown_it.token import Token

from marksite.contexts.rendering.context import DEFAULT_TITLE, RenderingContext
from marksite.contexts.rendering.exceptions import HeaderParseError, MathRenderError
from marksite.contexts.rendering.front_matter import parse_front_matter
from marksite.contexts.rendering.logger import _log_debug, _log_warning
from marksite.contexts.rendering.toc import Toc

MATH_STYLESHEET = "math.css"
MAX_HEADING_LEVEL = 6

INLINE_MATH_TYPES = {"math_inline"}
DISPLAY_MATH_TYPES = {"math_inline_double", "math_block", "math_block_label"}
MATH_TYPES = INLINE_MATH_TYPES | DISPLAY_MATH_TYPES
TEXT_TYPES = {"text", "code_inline"}

TAG_PATTERN = re.compile(r"<[^>]+>")
# latex2mathml passes unknown commands through as identifiers or operators
UNKNOWN_COMMAND_PATTERN = re.compile(r"<m[io](?:\s[^>]*)?>\\[A-Za-z]")


# Token helpers


def walk(tokens: List[Token]) -> Iterator[Token]:
    """Yield every token in document order, descending into inline children."""
    for token in tokens:
        yield token
        if token.children:
            yield from walk(token.children)


def inline_text(token: Token) -> str:
    """
    Plain text of an inline token.

    Keeps text, code spans and math source. Markup already produced by a pass
    contributes the text it stands for; raw inline HTML contributes its text
    with the tags removed.
    """
    if not token.children:
        return token.content

    parts = []
    for child in token.children:
        if child.type in TEXT_TYPES or child.type in MATH_TYPES:
            parts.append(child.content)
        elif child.type == "html_inline":
            parts.append(child.meta.get("text", html.unescape(TAG_PATTERN.sub("", child.content))))
    return "".join(parts)


def html_inline(content: str, text: Optional[str] = None) -> Token:
    """Inline markup token; text is what inline_text reads back from it."""
    token = Token("html_inline", "", 0, content=content)
    if text is not None:
        token.meta["text"] = text
    return token


def html_block(content: str) -> Token:
    return Token("html_block", "", 0, content=content, block=True)


def heading_level(token: Token) -> int:
    return int(token.tag[1:])


def _rewrite_inline(tokens: List[Token], rewrite) -> None:
    """Replace each inline child with rewrite(child) (same token = unchanged)."""
    for token in tokens:
        if token.type == "inline" and token.children:
            token.children = [rewrite(child) for child in token.children]


# Passes


def read_header_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """
    Merge the front matter into the context and drop it from the stream.

    Raises:
        HeaderParseError: If the page has no front matter or it is malformed
    """
    header = next((t for t in events if t.type == "front_matter"), None)
    if header is None:
        raise HeaderParseError("Front matter block is missing")

    parse_front_matter(header.content).merge_into(ctx)
    return [t for t in events if t is not header]


def get_title_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """
    Title is the text of the first non-empty h1.

    Empty h1 headings are skipped; pages with no usable h1 get DEFAULT_TITLE.
    """
    title = None
    for i, token in enumerate(events[:-1]):
        if token.type == "heading_open" and token.tag == "h1":
            title = inline_text(events[i + 1]).strip() or None
            if title is not None:
                break

    if title is None:
        _log_debug(f"No h1 heading, using default title '{DEFAULT_TITLE}'")
    ctx.title = title or DEFAULT_TITLE
    return events


def is_local_markdown_link(url: str) -> bool:
    is_local = not url.startswith("http://") and not url.startswith("https://")
    return is_local and url.endswith(".md")


def link_adjust_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Point links at sibling pages to their rendered .html files."""
    for token in walk(events):
        if token.type == "link_open":
            href = token.attrGet("href")
            if isinstance(href, str) and is_local_markdown_link(href):
                token.attrSet("href", href[: -len(".md")] + ".html")
    return events


def make_image_tag(url: str, alt: str, title: str) -> str:
    url = html.escape(url)
    if url.endswith(".svg"):
        return f'<object type="image/svg+xml" data="{url}"></object>'

    alt_attr = f' alt="{html.escape(alt)}"' if alt else ""
    title_attr = f' title="{html.escape(title)}"' if title else ""
    return f'<img loading="lazy" src="{url}"{alt_attr}{title_attr}/>'


def make_figure(url: str, alt: str, title: str) -> str:
    caption = f"<figcaption>{html.escape(alt)}</figcaption>" if alt else ""
    img = make_image_tag(url, alt, title)
    return f'<figure><div class="marksite-scroll">{img}</div>{caption}</figure>'


def image_convert_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Replace images with a figure whose caption is the alt text."""

    def convert(token: Token) -> Token:
        if token.type != "image":
            return token
        alt = inline_text(token) if token.children else token.content
        return html_inline(
            make_figure(
                url=token.attrGet("src") or "",
                alt=alt,
                title=token.attrGet("title") or "",
            ),
            text=alt,
        )

    _rewrite_inline(events, convert)
    return events


def has_unbalanced_braces(latex: str) -> bool:
    """True if the groups of latex do not close properly (escaped braces ignored)."""
    depth = 0
    escaped = False
    for char in latex:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                return True
    return depth != 0


def render_math(latex: str, display: bool) -> str:
    """
    LaTeX to MathML.

    latex2mathml tolerates some broken markup, so unbalanced groups and
    unknown commands it passed through are rejected here as well.

    Raises:
        MathRenderError: If the markup is malformed or the renderer rejects it
    """
    if has_unbalanced_braces(latex):
        raise MathRenderError(latex, display, original_error=ValueError("Unbalanced braces"))

    try:
        mathml = latex_to_mathml(latex, display="block" if display else "inline")
    except Exception as e:
        raise MathRenderError(latex, display, original_error=e) from e

    unknown = UNKNOWN_COMMAND_PATTERN.search(mathml)
    if unknown:
        command = mathml[unknown.end() - 2 :].split("<", 1)[0]
        raise MathRenderError(
            latex, display, original_error=ValueError(f"Unknown command {command}")
        )
    return mathml


def convert_math_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """
    Render math tokens to MathML and request the math stylesheet if any was found.

    Raises:
        MathRenderError: If any math markup fails to render
    """
    math_used = False

    def convert_inline(token: Token) -> Token:
        nonlocal math_used
        if token.type in INLINE_MATH_TYPES or token.type in DISPLAY_MATH_TYPES:
            math_used = True
            mathml = render_math(token.content, token.type in DISPLAY_MATH_TYPES)
            return html_inline(mathml, text=token.content)
        return token

    out = []
    for token in events:
        if token.type in DISPLAY_MATH_TYPES:
            math_used = True
            mathml = render_math(token.content.strip(), display=True)
            out.append(html_block(f'<div class="math-display">{mathml}</div>\n'))
        else:
            out.append(token)

    _rewrite_inline(out, convert_inline)

    if math_used:
        ctx.push_css_path(MATH_STYLESHEET)
    return out


def highlight_code(code: str, rules) -> str:
    """HTML-escape code, then apply each highlight rule to the previous rule's output."""
    code = html.escape(code, quote=False)
    for rule in rules:
        code = rule.replace_all(code)
    return code


def highlight_code_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Escape fenced code blocks and apply the page's highlight rules."""
    rules = ctx.require("highlights")

    out = []
    for token in events:
        if token.type != "fence":
            out.append(token)
            continue

        lang = token.info.strip().split()[0] if token.info.strip() else ""
        class_attr = f' class="language-{html.escape(lang)}"' if lang else ""
        code = highlight_code(token.content, rules)
        out.append(html_block(f"<pre><code{class_attr}>{code}</code></pre>\n"))
    return out


def header_id(counters: List[int]) -> str:
    """Dot-joined counters for levels 2-6, stopping at the first zero."""
    parts = []
    for count in counters[1:]:
        if count <= 0:
            break
        parts.append(str(count))
    return ".".join(parts)


def heading_ids(levels: List[int]) -> List[str]:
    """
    Ids for a sequence of heading levels.

    A heading at level L zeroes the counters deeper than L and increments
    counter L. Skipped levels truncate the id (h2 then h4 gives "1" for the h4).
    """
    counters = [0] * MAX_HEADING_LEVEL
    ids = []
    for level in levels:
        for deeper in range(level, MAX_HEADING_LEVEL):
            counters[deeper] = 0
        counters[level - 1] += 1
        ids.append(header_id(counters))
    return ids


def assign_header_id(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Give every heading its hierarchical id (h1 gets none)."""
    headings = [t for t in events if t.type == "heading_open"]
    levels = [heading_level(t) for t in headings]

    prev_level = 1
    for token, level, id in zip(headings, levels, heading_ids(levels)):
        if level > prev_level + 1:
            _log_warning(f"h{level} follows h{prev_level}, id truncated to '{id}'")
        prev_level = level

        token.meta["id"] = id
        if id:
            token.attrSet("id", id)
    return events


def table_wrapper_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Wrap each table in a horizontally scrollable container."""
    out = []
    for token in events:
        if token.type == "table_open":
            out.append(html_block('<div class="table-wrapper">\n'))
            out.append(token)
        elif token.type == "table_close":
            out.append(token)
            out.append(html_block("</div>\n"))
        else:
            out.append(token)
    return out


def toc_pass(events: List[Token], ctx: RenderingContext) -> List[Token]:
    """Collect level >= 2 headings into the context's table of contents (h1 is the title)."""
    toc = Toc()
    for i, token in enumerate(events[:-1]):
        if token.type == "heading_open" and heading_level(token) >= 2:
            toc.add_item(
                title=inline_text(events[i + 1]),
                id=token.meta.get("id", ""),
                level=heading_level(token) - 1,
            )

    ctx.toc = toc
    return events
