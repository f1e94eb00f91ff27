"""
Lexer tests - Pygments highlighting of directive markup
"""

import pytest
from pygments.token import Token

from bangtags.lib.directives import DirectiveRegistry
from bangtags.lib.lexer import BangtagLexer, get_lexer, source_highlight
from bangtags.models.directives import DirectiveCategory


def tokens_of(text):
    return list(get_lexer().get_tokens(text))


class TestDirectiveTokens:
    """Test token types for directive names and fields"""

    def test_scope_directive(self):
        """Scope names are declarations and fields are strings"""
        tokens = tokens_of("#!var:x")
        assert (Token.Punctuation, "#!") in tokens
        assert (Token.Keyword.Declaration, "var") in tokens
        assert (Token.Operator, ":") in tokens
        assert (Token.Literal.String, "x") in tokens

    def test_message_directive(self):
        """Message directives are decorators"""
        assert (Token.Name.Decorator, "draft") in tokens_of("#!draft")

    def test_other_directive(self):
        """Any other name is a tag"""
        assert (Token.Name.Tag, "shrug") in tokens_of("#!shrug")

    def test_bracket_form(self):
        """Bracket form keeps spaces in one field"""
        tokens = tokens_of("#!{tag:a b}")
        assert (Token.Punctuation, "#!{") in tokens
        assert (Token.Literal.String, "a b") in tokens
        assert (Token.Punctuation, "}") in tokens

    def test_terminated_form(self):
        """Terminated form ends at :!#"""
        tokens = tokens_of("#!join: + :a:!# end")
        assert (Token.Literal.String, " + ") in tokens
        assert (Token.Punctuation, ":!#") in tokens

    def test_escaped_delimiter(self):
        """An escaped colon is an escape, not an operator"""
        assert (Token.Literal.String.Escape, "\\:") in tokens_of("#!tag:self\\:notes")

    @pytest.mark.parametrize("category,ttype", [
        (DirectiveCategory.SCOPE, Token.Keyword.Declaration),
        (DirectiveCategory.MESSAGE, Token.Name.Decorator),
    ])
    def test_names_follow_registry_categories(self, category, ttype):
        """Every registered name and alias is highlighted by its category"""
        for spec in DirectiveRegistry().directives_listByCategory(category):
            for name in [spec.name, *spec.aliases]:
                assert (ttype, name) in tokens_of(f"#!{name}:x")


class TestTextTokens:
    """Test literal text, escapes and comments"""

    def test_marker_escape(self):
        """#!! is an escape and starts no directive"""
        tokens = tokens_of("#!!shrug")
        assert tokens[0] == (Token.Literal.String.Escape, "#!!")
        assert (Token.Name.Tag, "shrug") not in tokens

    def test_comment_body_inert(self):
        """Directives inside a comment are comment text"""
        tokens = tokens_of("#!comment #!shrug #!comment:end x")
        assert (Token.Comment.Preproc, "comment") in tokens
        assert (Token.Comment.Preproc, "comment:end") in tokens
        assert (Token.Name.Tag, "shrug") not in tokens

    @pytest.mark.parametrize("text", [
        "hello #!var:x:- world #!var:end",
        "a # b #! c",
        "#!{join:, :a:b} and #!tf:s:a:b:!# rest",
    ])
    def test_no_error_tokens(self, text):
        """Ordinary markup lexes without error tokens"""
        assert all(ttype is not Token.Error for ttype, _ in tokens_of(text))

    def test_text_round_trips(self):
        """Token values reproduce the input"""
        text = "hi #!{tag:a b} #!shrug #!!x\n"
        assert "".join(value for _, value in tokens_of(text)) == text


class TestHighlight:
    """Test the HTML helper"""

    def test_source_highlight(self):
        """source_highlight returns an HTML block"""
        html = source_highlight("hello #!shrug")
        assert "<pre" in html
        assert "shrug" in html

    def test_lexer_metadata(self):
        """The lexer is registered under its alias"""
        assert "bangtags" in BangtagLexer.aliases
        assert isinstance(get_lexer(), BangtagLexer)
