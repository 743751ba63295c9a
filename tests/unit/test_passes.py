"""Unit tests for the token passes and the page pipeline."""

import pytest

import marksite.contexts.rendering.passes as passes
from marksite.contexts.rendering import (
    HeaderParseError,
    HighlightRule,
    MathRenderError,
    RenderingContext,
    render_body,
)
from marksite.contexts.rendering.passes import (
    heading_ids,
    highlight_code,
    is_local_markdown_link,
    make_figure,
)
from marksite.contexts.rendering.toc import Toc

HEADER = "---\ncreate: 2024-01-05\nupdate: 2024-02-10\n---\n"


def render(markdown: str, **kwargs):
    ctx = RenderingContext(output_path="page.html")
    return render_body(HEADER + markdown, ctx, **kwargs), ctx


# Heading ids


@pytest.mark.unit
def test_heading_ids_hierarchy():
    """H1 T, H2 A, H3 B, H2 C get '', '1', '1.1', '2'."""
    assert heading_ids([1, 2, 3, 2]) == ["", "1", "1.1", "2"]


@pytest.mark.unit
def test_heading_ids_skipped_level_truncates():
    """An h4 right after an h2 stops at the zero h3 counter."""
    assert heading_ids([2, 4]) == ["1", "1"]


@pytest.mark.unit
def test_heading_ids_reset_deeper_counters():
    assert heading_ids([2, 3, 3, 2, 3]) == ["1", "1.1", "1.2", "2", "2.1"]


@pytest.mark.unit
def test_heading_id_attributes_in_html():
    html, _ = render("# T\n\n## A\n\n### B\n\n## C\n")

    assert "<h1>T</h1>" in html
    assert '<h2 id="1">A</h2>' in html
    assert '<h3 id="1.1">B</h3>' in html
    assert '<h2 id="2">C</h2>' in html


# Title


@pytest.mark.unit
def test_title_from_first_h1():
    _, ctx = render("intro\n\n# First `code`\n\n# Second\n")
    assert ctx.title == "First code"


@pytest.mark.unit
def test_missing_h1_uses_default_title():
    _, ctx = render("## Only a subsection\n")
    assert ctx.title == "No Title"


@pytest.mark.unit
def test_empty_h1_is_skipped_for_title():
    _, ctx = render("#\n\n# Real\n")
    assert ctx.title == "Real"


@pytest.mark.unit
def test_only_empty_h1_uses_default_title():
    _, ctx = render("#\n\ntext\n")
    assert ctx.title == "No Title"


# Table of contents


@pytest.mark.unit
def test_toc_nests_levels():
    """Levels [2, 3, 3, 2] nest two siblings under the first item."""
    _, ctx = render("## A\n\n### B\n\n### C\n\n## D\n")

    assert ctx.toc.to_html() == (
        '<ul><li><a href="#1">A</a>'
        '<ul><li><a href="#1.1">B</a></li><li><a href="#1.2">C</a></li></ul>'
        '</li><li><a href="#2">D</a></li></ul>'
    )


@pytest.mark.unit
def test_toc_skips_h1_and_escapes_titles():
    _, ctx = render("# Title\n\n## a < b\n")

    assert [item.level for item in ctx.toc.items] == [1]
    assert "a &lt; b" in ctx.toc.to_html()


@pytest.mark.unit
def test_toc_title_keeps_math_source():
    _, ctx = render("### $x$ y\n")
    assert ctx.toc.items[0].title == "x y"


@pytest.mark.unit
def test_toc_title_strips_inline_html_tags():
    _, ctx = render("## <em>a</em> b\n")
    assert ctx.toc.items[0].title == "a b"


@pytest.mark.unit
def test_empty_toc():
    toc = Toc()
    assert toc.is_empty()
    assert toc.to_html() == ""


# Links and images


@pytest.mark.unit
@pytest.mark.parametrize(
    "url, expected",
    [
        ("notes.md", True),
        ("sub/notes.md", True),
        ("https://x.com/y.md", False),
        ("http://x.com/y.md", False),
        ("notes.html", False),
    ],
)
def test_is_local_markdown_link(url, expected):
    assert is_local_markdown_link(url) is expected


@pytest.mark.unit
def test_link_adjust_rewrites_local_markdown_links():
    html, _ = render("[notes](notes.md) and [remote](https://x.com/y.md)\n")

    assert 'href="notes.html"' in html
    assert 'href="https://x.com/y.md"' in html


@pytest.mark.unit
def test_image_becomes_figure_with_caption():
    html, _ = render('![A cat](cat.png "Kitty")\n')

    assert (
        '<figure><div class="marksite-scroll">'
        '<img loading="lazy" src="cat.png" alt="A cat" title="Kitty"/>'
        "</div><figcaption>A cat</figcaption></figure>"
    ) in html


@pytest.mark.unit
def test_svg_image_uses_object_tag():
    figure = make_figure("diagram.svg", "", "")

    assert '<object type="image/svg+xml" data="diagram.svg"></object>' in figure
    assert "<figcaption>" not in figure


# Math


@pytest.mark.unit
def test_inline_math_renders_mathml_and_requests_stylesheet():
    html, ctx = render("Energy $x^2$ here\n")

    assert "<math" in html
    assert "$x^2$" not in html
    assert ctx.css_paths == ["math.css"]


@pytest.mark.unit
def test_block_math_is_wrapped():
    html, _ = render("$$\na + b\n$$\n")

    assert '<div class="math-display"><math' in html


@pytest.mark.unit
def test_no_math_no_stylesheet():
    _, ctx = render("plain text\n")
    assert ctx.css_paths == []


@pytest.mark.unit
def test_math_failure_raises_math_render_error(monkeypatch):
    def broken(latex, display):
        raise RuntimeError("bad markup")

    monkeypatch.setattr(passes, "latex_to_mathml", broken)

    with pytest.raises(MathRenderError) as exc_info:
        render("Broken $x$ here\n")
    assert isinstance(exc_info.value.original_error, RuntimeError)


@pytest.mark.unit
@pytest.mark.parametrize(
    "latex, expected",
    [
        ("\\frac{a}{b}", False),
        ("\\{x", False),
        ("\\frac{a", True),
        ("a}", True),
    ],
)
def test_has_unbalanced_braces(latex, expected):
    assert passes.has_unbalanced_braces(latex) is expected


@pytest.mark.unit
def test_unbalanced_math_raises_math_render_error():
    with pytest.raises(MathRenderError):
        render("Math $\\frac{a$ here\n")


@pytest.mark.unit
def test_unknown_math_command_raises_math_render_error():
    with pytest.raises(MathRenderError):
        render("$\\undefinedmacro{x}$\n")


# Code highlighting


@pytest.mark.unit
def test_highlight_code_escapes_html():
    assert highlight_code("a < b && c", []) == "a &lt; b &amp;&amp; c"


@pytest.mark.unit
def test_highlight_rules_apply_in_order():
    rules = [
        HighlightRule(delim=("\\[", "\\]"), style="a"),
        HighlightRule(delim=("\\{", "\\}"), style="b"),
    ]

    assert highlight_code("[{x}]", rules) == (
        '<span style="a"><span style="b">x</span></span>'
    )


@pytest.mark.unit
def test_highlight_delimiters_match_escaped_code():
    rules = [HighlightRule(delim=("&lt;&lt;", "&gt;&gt;"), style="color: red")]

    assert highlight_code("x <<y>> z", rules) == 'x <span style="color: red">y</span> z'


@pytest.mark.unit
def test_highlight_delimiters_are_regexes():
    rules = [HighlightRule(delim=(r"\[\[", r"\]\]"), style="color: red")]

    assert highlight_code("foo [[bar]] baz", rules) == (
        'foo <span style="color: red">bar</span> baz'
    )


@pytest.mark.unit
def test_highlight_delimiters_with_regex_syntax():
    rules = [HighlightRule(delim=(r"#\d+#", "##"), style="b")]

    assert highlight_code("#12#x## #a#y##", rules) == '<span style="b">x</span> #a#y##'


@pytest.mark.unit
def test_fenced_code_block_with_front_matter_highlights():
    header = (
        "---\ncreate: 2024-01-05\nupdate: 2024-02-10\n"
        "highlights:\n  - delim: ['\\[\\[', '\\]\\]']\n    style: 'color: red'\n---\n"
    )
    ctx = RenderingContext(output_path="page.html")
    html = render_body(header + "```python\nfoo [[bar]] baz\n```\n", ctx)

    assert (
        '<pre><code class="language-python">foo <span style="color: red">bar</span> baz\n</code></pre>'
        in html
    )


# Tables


@pytest.mark.unit
def test_tables_are_wrapped():
    html, _ = render("| a | b |\n|---|---|\n| 1 | 2 |\n")

    assert '<div class="table-wrapper">\n<table>' in html
    assert "</table>\n</div>" in html


# Pipeline


@pytest.mark.unit
def test_missing_front_matter_fails():
    with pytest.raises(HeaderParseError):
        render_body("# No header\n", RenderingContext())


@pytest.mark.unit
def test_draft_is_skipped_unless_enabled():
    header = "---\ncreate: 2024-01-05\nupdate: 2024-02-10\nflags: [draft]\n---\n"

    skipped_ctx = RenderingContext()
    assert render_body(header + "# Draft\n", skipped_ctx) is None
    assert skipped_ctx.title is None

    rendered = render_body(header + "# Draft\n", RenderingContext(), render_draft=True)
    assert "<h1>Draft</h1>" in rendered


@pytest.mark.unit
def test_pass_manager_runs_in_registration_order():
    from marksite.contexts.rendering import PassManager

    order = []
    manager = PassManager()
    manager.register(lambda events, ctx: order.append("a") or events)
    manager.register(lambda events, ctx: order.append("b") or events)

    assert manager.run([], RenderingContext()) == []
    assert order == ["a", "b"]


@pytest.mark.unit
def test_pass_manager_gate_stops_run():
    from marksite.contexts.rendering import PassManager

    calls = []
    manager = PassManager()
    manager.register(lambda events, ctx: calls.append(1) or events)
    manager.register(lambda events, ctx: calls.append(2) or events)

    assert manager.run([], RenderingContext(), gate=lambda p, ctx: True) is None
    assert calls == [1]
