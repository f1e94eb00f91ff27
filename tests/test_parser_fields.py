r"""
Command parser tests - field splitting, escaping and rewriting

Tests the three delimiter tiers, "\:" escapes, trailing empty fields,
prefix namespaces and the alias table.
"""

import pytest

from bangtags.lib.parser import Parser
from bangtags.models.parser import Command


class TestFieldSplitting:
    """Test the three-tier delimiter split"""

    def test_single_colons(self):
        """Single colons separate fields"""
        parser = Parser()
        assert parser.command_parse("var:greeting:-").fields == ["var", "greeting", "-"]

    def test_name_only(self):
        """A bare name is one field"""
        parser = Parser()
        assert parser.command_parse("shrug").fields == ["shrug"]

    def test_three_tiers(self):
        """Later groups of each tier are kept whole"""
        parser = Parser()
        assert parser.command_parse("a:b::c:::d:e").fields == ["a", "b", "c", "d:e"]

    def test_double_colon_keeps_value_colons(self):
        """After ::, single colons stay inside the value"""
        parser = Parser()
        command = parser.command_parse("var:time::12:30")
        assert command.fields == ["var", "time", "12:30"]

    def test_trailing_empty_fields_dropped(self):
        """A trailing delimiter adds no empty field"""
        parser = Parser()
        assert parser.command_parse("var:x:").fields == ["var", "x"]

    def test_trailing_double_delimiter_dropped(self):
        """A trailing :: adds no empty field"""
        parser = Parser()
        assert parser.command_parse("tag:a::").fields == ["tag", "a"]

    def test_blank_body(self):
        """Empty body parses to a nameless command"""
        parser = Parser()
        command = parser.command_parse("")
        assert command.fields == []
        assert command.name is None

    def test_whitespace_body(self):
        """Whitespace-only body has no fields"""
        parser = Parser()
        assert parser.command_parse("   ").fields == []

    def test_raw_kept(self):
        """The unsplit body is kept on the command"""
        parser = Parser()
        assert parser.command_parse("tag:a:b").raw == "tag:a:b"


class TestEscaping:
    """Test backslash-escaped delimiters"""

    def test_escaped_colon_does_not_split(self):
        """Escaped colon stays inside its field"""
        parser = Parser()
        command = parser.command_parse(r"tag:self\:notes")
        assert command.fields == ["tag", "self:notes"]

    def test_escaped_colon_as_whole_field(self):
        """A field may be just an escaped colon"""
        parser = Parser()
        command = parser.command_parse(r"join:\::a:b")
        assert command.fields == ["join", ":", "a", "b"]

    def test_unescape_only_touches_escaped_delimiters(self):
        """A backslash not followed by a colon is kept"""
        assert Parser.field_unescape(r"a\b\:c") == r"a\b:c"


class TestRewriting:
    """Test prefix namespaces and aliases"""

    def test_permalink_prefix(self):
        """permalink expands into the link namespace"""
        parser = Parser()
        assert parser.command_parse("permalink").fields == ["link", "permalink"]

    @pytest.mark.parametrize("body,expected", [
        ("media:end", ["var", "end"]),
        ("media:stop", ["var", "end"]),
        ("media:endall", ["var", "endall"]),
        ("media:stopall", ["var", "endall"]),
    ])
    def test_media_close_aliases(self, body, expected):
        """media closers rewrite to var closers"""
        parser = Parser()
        assert parser.command_parse(body).fields == expected

    def test_media_desc_not_aliased(self):
        """Other media commands are left alone"""
        parser = Parser()
        assert parser.command_parse("media:1:desc").fields == ["media", "1", "desc"]

    def test_only_first_alias_applies(self):
        """Aliases are not chained"""
        parser = Parser(aliases=(
            (("a",), ("b",)),
            (("b",), ("c",)),
        ))
        assert parser.command_parse("a:x").fields == ["b", "x"]

    def test_custom_tables(self):
        """Empty tables disable rewriting"""
        parser = Parser(prefixes={}, aliases=())
        assert parser.command_parse("permalink").fields == ["permalink"]
        assert parser.command_parse("media:end").fields == ["media", "end"]


class TestCommand:
    """Test the Command accessors"""

    def test_name_lowercased(self):
        """Command names are case-insensitive"""
        assert Command(fields=["SHRUG"]).name == "shrug"

    def test_empty_first_field_has_no_name(self):
        """An empty first field is no command"""
        assert Command(fields=["", "x"]).name is None

    def test_arg_out_of_range(self):
        """Missing arguments read as None"""
        command = Command(fields=["var", "x"])
        assert command.arg(1) == "x"
        assert command.arg(2) is None

    def test_args_from(self):
        """args() slices from the given field"""
        command = Command(fields=["tag", "a", "b"])
        assert command.args() == ["a", "b"]
        assert command.args(2) == ["b"]
