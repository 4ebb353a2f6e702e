"""Tests for the embed CSS minifier."""

from flowbridge.routing import minify_css, wrap_embed
from flowbridge.routing.minifier import EMBED_BANNER


class TestMinifyCss:
    def test_whitespace_and_comments(self):
        assert minify_css("/* c */ .a  {  color : red ;  }") == ".a{color:red}"

    def test_multiple_rules(self):
        assert minify_css(".a { color: red; }\n\n.b { margin: 0; }") == ".a{color:red}.b{margin:0}"

    def test_strings_preserved(self):
        assert minify_css('.a::after { content: "  a : b  "; }') == '.a::after{content:"  a : b  "}'

    def test_comment_inside_string_preserved(self):
        assert minify_css('.a { content: "/* x */"; }') == '.a{content:"/* x */"}'

    def test_descendant_space_kept(self):
        assert minify_css(".a   .b { color: red; }") == ".a .b{color:red}"

    def test_empty(self):
        assert minify_css("") == ""
        assert minify_css("   ") == ""


class TestWrapEmbed:
    def test_wraps_with_banner(self):
        assert wrap_embed(".a{color:red}") == f"<style>\n{EMBED_BANNER}\n\n.a{{color:red}}\n</style>"

    def test_empty(self):
        assert wrap_embed("") == ""
