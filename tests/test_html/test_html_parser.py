"""Tests for the HTML lexer and tree parser."""

from flowbridge.html import (
    ElementNode,
    TokenKind,
    analyze_markup,
    collect_classes,
    parse_attributes,
    parse_fragment,
    parse_html,
    tokenize_html,
)


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_start_text_end(self):
        tokens = tokenize_html("<p>Hi</p>")
        assert [t.kind for t in tokens] == [TokenKind.START, TokenKind.TEXT, TokenKind.END]
        assert tokens[0].value == "p"
        assert tokens[1].value == "Hi"

    def test_tag_names_lowercased(self):
        tokens = tokenize_html("<DIV></DIV>")
        assert tokens[0].value == "div"
        assert tokens[1].value == "div"

    def test_comment_token(self):
        tokens = tokenize_html("<!-- note --><br>")
        assert tokens[0].kind is TokenKind.COMMENT
        assert tokens[0].value == " note "

    def test_doctype_skipped(self):
        tokens = tokenize_html("<!DOCTYPE html><p>x</p>")
        assert tokens[0].kind is TokenKind.START
        assert tokens[0].value == "p"

    def test_self_closing(self):
        tokens = tokenize_html('<img src="a.png" />')
        assert tokens[0].self_closing
        assert tokens[0].attrs == 'src="a.png"'

    def test_quoted_gt_in_attribute(self):
        tokens = tokenize_html('<a title="a > b">x</a>')
        assert tokens[0].attrs == 'title="a > b"'
        assert tokens[1].value == "x"

    def test_script_body_is_raw(self):
        tokens = tokenize_html("<script>if (a < b) { x(); }</script>")
        assert [t.kind for t in tokens] == [TokenKind.START, TokenKind.TEXT, TokenKind.END]
        assert tokens[1].value == "if (a < b) { x(); }"

    def test_bare_lt_is_text(self):
        tokens = tokenize_html("a < b")
        assert len(tokens) == 1
        assert tokens[0].kind is TokenKind.TEXT


class TestParseAttributes:
    def test_quoted_and_bare(self):
        attrs = parse_attributes('class="a b" id=main data-x=\'1\'')
        assert attrs == {"class": "a b", "id": "main", "data-x": "1"}

    def test_valueless(self):
        assert parse_attributes("hidden") == {"hidden": ""}

    def test_names_lowercased(self):
        assert parse_attributes('HREF="/x"') == {"href": "/x"}


# ---------------------------------------------------------------------------
# Tree parser
# ---------------------------------------------------------------------------


class TestParseHtml:
    def test_nested_structure(self):
        root = parse_html('<section class="hero"><h1 class="title">Hello</h1></section>')
        assert root is not None
        assert root.tag == "section"
        assert not root.synthetic
        assert root.classes == ("hero",)
        heading = root.elements()[0]
        assert heading.tag == "h1"
        assert heading.children == ("Hello",)

    def test_duplicate_classes_removed(self):
        root = parse_html('<div class="a b a"></div>')
        assert root.classes == ("a", "b")

    def test_id_attribute(self):
        root = parse_html('<div id="main"></div>')
        assert root.id == "main"

    def test_empty_id_is_none(self):
        root = parse_html('<div id=""></div>')
        assert root.id is None

    def test_void_elements(self):
        root = parse_html('<div><img src="a.png"><p>x</p></div>')
        tags = [c.tag for c in root.elements()]
        assert tags == ["img", "p"]
        assert root.elements()[0].children == ()

    def test_whitespace_collapsed(self):
        root = parse_html("<p>  Hello \n   world  </p>")
        assert root.children == ("Hello world",)

    def test_whitespace_only_text_dropped(self):
        root = parse_html("<div>\n  <span>a</span>\n</div>")
        assert len(root.children) == 1

    def test_unmatched_start_tag_dropped(self):
        root = parse_html("<div><span>text</div>")
        assert root.tag == "div"
        assert root.children == ("text",)

    def test_stray_end_tag_skipped(self):
        root = parse_html("<div>a</span>b</div>")
        assert root.children == ("a", "b")

    def test_nested_same_tag(self):
        root = parse_html('<div class="outer"><div class="inner">x</div></div>')
        assert root.classes == ("outer",)
        assert root.elements()[0].classes == ("inner",)

    def test_leading_text_ignored(self):
        root = parse_html("text <main></main>")
        assert root.tag == "main"

    def test_no_element(self):
        assert parse_html("just text") is None


class TestParseFragment:
    def test_single_element_returned(self):
        root = parse_fragment('<section class="s"></section>')
        assert root.tag == "section"
        assert not root.synthetic

    def test_multiple_top_level_wrapped(self):
        root = parse_fragment("<p>a</p><p>b</p>")
        assert root.tag == "div"
        assert root.classes == ()
        assert [c.tag for c in root.elements()] == ["p", "p"]
        assert root.synthetic

    def test_text_wrapped(self):
        root = parse_fragment("hello")
        assert root == ElementNode(tag="div", children=("hello",), synthetic=True)

    def test_empty_source(self):
        assert parse_fragment("") is None
        assert parse_fragment("   \n") is None

    def test_only_comment(self):
        assert parse_fragment("<!-- x -->") is None


class TestElementNode:
    def test_walk_depth_first(self):
        root = parse_html('<div class="a"><div class="b"><i class="c"></i></div><p class="d"></p></div>')
        assert [e.classes[0] for e in root.walk()] == ["a", "b", "c", "d"]

    def test_text_content(self):
        root = parse_html("<div>Hello <b>bold</b> world</div>")
        assert root.text() == "Hello bold world"

    def test_is_void(self):
        assert ElementNode(tag="br").is_void
        assert not ElementNode(tag="div").is_void


# ---------------------------------------------------------------------------
# Analysis helpers
# ---------------------------------------------------------------------------


class TestCollectClasses:
    def test_first_seen_order(self):
        root = parse_html('<div class="b a"><span class="a c"></span></div>')
        assert collect_classes(root) == ["b", "a", "c"]

    def test_none(self):
        assert collect_classes(None) == []


class TestAnalyzeMarkup:
    def test_counts(self):
        analysis = analyze_markup('<div class="card"><p class="card">x</p><p>y</p></div>')
        assert analysis.tags == {"div": 1, "p": 2}
        assert analysis.classes == {"card": 2}
        assert len(analysis.elements) == 3

    def test_skips_head_tags(self):
        analysis = analyze_markup('<link rel="x"><style>.a{}</style><div></div>')
        assert analysis.tags == {"div": 1}

    def test_counts_unbalanced_markup(self):
        analysis = analyze_markup('<div class="a"><span class="b">')
        assert analysis.classes == {"a": 1, "b": 1}
