r"""
Command parser for #!directive bodies

Turns the body of one directive span into an ordered list of fields.

The parser operates in three steps:
1. Splitting: three-tier delimiter split (":::", then "::", then ":")
2. Unescaping: "\:" becomes ":" once the split is done
3. Rewriting: prefix-namespace expansion, then at most one alias

Key features:
- A delimiter preceded by a backslash never splits
- Later ":::" groups are kept whole, so values may contain single colons
- Trailing empty fields are dropped ("var:x:" is ["var", "x"])

Example:
    >>> parser = Parser()
    >>> parser.command_parse("var:greeting:-").fields
    ['var', 'greeting', '-']
    >>> parser.command_parse("permalink").fields
    ['link', 'permalink']
    >>> parser.command_parse(r"join:\::a:b").fields
    ['join', ':', 'a', 'b']
"""

import re
from typing import List, Mapping, Optional, Sequence, Tuple

from ..models.parser import Command
from ..models.tables import COMMAND_ALIASES, PREFIX_NAMESPACE


DELIMITER = ':'
ESCAPE = '\\'

SPLIT_TRIPLE = re.compile(r'(?<!\\):::')
SPLIT_DOUBLE = re.compile(r'(?<!\\)::')
SPLIT_SINGLE = re.compile(r'(?<!\\):')


class Parser:
    """
    Parser for directive bodies

    Stateless apart from its lookup tables, so one instance can serve any
    number of passes.
    """

    def __init__(
        self,
        prefixes: Optional[Mapping[str, Sequence[str]]] = None,
        aliases: Optional[Sequence[Tuple[Sequence[str], Sequence[str]]]] = None,
    ) -> None:
        """
        Initialize parser with its rewrite tables

        Args:
            prefixes: First-field shorthands and their expansions
            aliases: Ordered (leading fields, replacement) rewrites
        """
        self.prefixes = PREFIX_NAMESPACE if prefixes is None else prefixes
        self.aliases = COMMAND_ALIASES if aliases is None else aliases

    def command_parse(self, body: str) -> Command:
        """
        Parse a directive body into a Command

        Args:
            body: Directive text with marker, terminator and brackets stripped

        Returns:
            Command with its fields; empty fields for a blank body
        """
        if not body or not body.strip():
            return Command(fields=[], raw=body)

        fields = self.fields_split(body)
        fields = [self.field_unescape(f) for f in fields]
        fields = self.prefix_expand(fields)
        fields = self.alias_apply(fields)

        return Command(fields=fields, raw=body)

    def fields_split(self, body: str) -> List[str]:
        """
        Split on the three delimiter tiers

        Only the first ":::" group is split further, and only the first
        "::" piece of that is split on ":".

        Args:
            body: Directive body

        Returns:
            Raw (still escaped) fields

        Example:
            "a:b::c:::d:e" -> ["a", "b", "c", "d:e"]
        """
        groups = self.trailing_trim(SPLIT_TRIPLE.split(body))
        if not groups:
            return []

        pieces = self.trailing_trim(SPLIT_DOUBLE.split(groups[0]))
        if not pieces:
            return groups[1:]

        fields = self.trailing_trim(SPLIT_SINGLE.split(pieces[0]))
        return fields + pieces[1:] + groups[1:]

    @staticmethod
    def trailing_trim(parts: List[str]) -> List[str]:
        """Drop empty strings from the end of a split result"""
        while parts and not parts[-1]:
            parts.pop()
        return parts

    @staticmethod
    def field_unescape(value: str) -> str:
        r"""Turn every escaped delimiter "\:" back into ":" """
        return value.replace(ESCAPE + DELIMITER, DELIMITER)

    def prefix_expand(self, fields: List[str]) -> List[str]:
        """
        Prepend the namespace of a shorthand first field

        Example:
            ["permalink"] -> ["link", "permalink"]
        """
        if not fields:
            return fields
        prefix = self.prefixes.get(fields[0])
        if prefix is None:
            return fields
        return list(prefix) + fields

    def alias_apply(self, fields: List[str]) -> List[str]:
        """
        Rewrite the leading fields with the first matching alias

        Example:
            ["media", "end"] -> ["var", "end"]
        """
        for old, new in self.aliases:
            if tuple(fields[:len(old)]) == tuple(old):
                return list(new) + fields[len(old):]
        return fields
