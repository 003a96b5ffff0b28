"""Tests for the pretty-printer."""

import pytest

from streaming_html_builder.formatting.pretty import PrettyPrinter, pretty_html
from streaming_html_builder.shared.config import PrettyConfig


class TestBlockLayout:
    """Test suite for block tag indentation."""

    def test_block_content(self):
        """Test the canonical nested block example."""
        result = pretty_html("<div><h1>Title</h1><p>Paragraph</p></div>")
        assert result == "<div>\n  <h1>Title</h1>\n  <p>Paragraph</p>\n</div>\n"

    def test_idempotent(self):
        """Test that formatting formatted output changes nothing."""
        once = pretty_html("<div><h1>Title</h1><p>Paragraph</p></div>")
        assert pretty_html(once) == once

    def test_deep_nesting(self):
        """Test indentation grows with depth."""
        result = pretty_html("<section><div><ul><li>a</li></ul></div></section>")
        assert result == (
            "<section>\n"
            "  <div>\n"
            "    <ul>\n"
            "      <li>a</li>\n"
            "    </ul>\n"
            "  </div>\n"
            "</section>\n"
        )

    def test_custom_indent(self):
        """Test the indent width setting."""
        result = pretty_html("<div><p>x</p></div>", indent_width=4)
        assert result == "<div>\n    <p>x</p>\n</div>\n"

    def test_empty_element(self):
        """Test that an empty block closes on its own line."""
        assert pretty_html("<div><section></section></div>") == (
            "<div>\n  <section>\n  </section>\n</div>\n"
        )


class TestInlineFlow:
    """Test suite for inline tags and text."""

    def test_inline_tags_stay_on_one_line(self):
        """Test that inline tags never force a line break."""
        markup = "<p>This is <strong>bold</strong> and <em>italic</em> text.</p>"
        assert pretty_html(markup) == markup + "\n"

    def test_text_preserved_verbatim(self):
        """Test that internal whitespace of text is kept."""
        markup = "<pre>a  b\tc</pre>"
        assert pretty_html(markup) == markup + "\n"

    def test_inline_element_in_block(self):
        """Test an inline element directly inside a block."""
        assert pretty_html("<div><span>x</span></div>") == "<div><span>x</span>\n</div>\n"


class TestVoidAndSpecialTokens:
    """Test suite for void tags, declarations, comments and raw text."""

    def test_void_tag_keeps_depth(self):
        """Test that void tags never increase depth."""
        assert pretty_html("<div><hr><p>x</p></div>") == "<div>\n  <hr>\n  <p>x</p>\n</div>\n"

    def test_self_closing_syntax_keeps_depth(self):
        """Test that <tag/> never increases depth."""
        assert pretty_html("<div><x-icon/><p>a</p></div>") == (
            "<div>\n  <x-icon/>\n  <p>a</p>\n</div>\n"
        )

    def test_doctype(self):
        """Test declarations followed by a full page."""
        markup = (
            "<!DOCTYPE html><html><head><title>T</title></head>"
            "<body><p>x</p></body></html>"
        )
        assert pretty_html(markup) == (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "  <head>\n"
            "    <title>T</title>\n"
            "  </head>\n"
            "  <body>\n"
            "    <p>x</p>\n"
            "  </body>\n"
            "</html>\n"
        )

    def test_comment_on_own_line(self):
        """Test that comments sit on their own line at the current depth."""
        assert pretty_html("<div><!-- note --><p>x</p></div>") == (
            "<div>\n  <!-- note -->\n  <p>x</p>\n</div>\n"
        )

    def test_script_contents_raw(self):
        """Test that script bodies are not tokenized."""
        markup = "<script>if (a < b && c > d) { go(); }</script>"
        assert pretty_html(markup) == markup + "\n"

    def test_quoted_angle_bracket_in_attribute(self):
        """Test that > inside quoted attribute values does not end the tag."""
        markup = '<div title="a > b"><p>x</p></div>'
        assert pretty_html(markup) == '<div title="a > b">\n  <p>x</p>\n</div>\n'

    def test_uppercase_tags(self):
        """Test case-insensitive registry lookups."""
        assert pretty_html("<P>a <B>b</B> c</P>") == "<P>a <B>b</B> c</P>\n"


class TestPrinterEdges:
    """Test suite for degenerate input and configuration."""

    @pytest.mark.parametrize("markup", ["", "   ", "\n\n"])
    def test_blank_input(self, markup):
        """Test that blank input gives empty output."""
        assert pretty_html(markup) == ""

    def test_text_only(self):
        """Test input without tags."""
        assert pretty_html("hello") == "hello\n"

    def test_without_trailing_newline(self):
        """Test the trailing newline switch."""
        printer = PrettyPrinter(PrettyConfig(trailing_newline=False))
        assert printer.format("<div><p>x</p></div>") == "<div>\n  <p>x</p>\n</div>"

    def test_single_trailing_newline(self):
        """Test that exactly one newline ends the output."""
        assert pretty_html("<p>x</p>\n\n\n") == "<p>x</p>\n"
