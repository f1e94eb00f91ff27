"""
Parser-specific data models

Type-safe structures for tokenizer and command parser return values.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Span:
    """
    One fragment of message text as produced by the Tokenizer

    Spans are returned in left-to-right source order and, concatenated,
    reproduce the (escape-rewritten) source exactly.

    Attributes:
        text: The fragment exactly as it appears in the source
        is_directive: True when the fragment is a #!directive, False for literal text

    Example:
        For source "hi #!shrug":
        [Span(text="hi ", is_directive=False), Span(text="#!shrug", is_directive=True)]
    """
    text: str
    is_directive: bool = False


@dataclass
class Command:
    """
    Result of parsing one directive span

    Returned by Parser.command_parse() after splitting, unescaping, prefix
    expansion and alias rewriting.

    Attributes:
        fields: Ordered command fields (e.g., ["var", "greeting", "-"])
        raw: Directive body with the #! marker, terminator and brackets
             stripped but before splitting (e.g., "var:greeting:-")

    Example:
        Directive "#!{tag:foo:bar}" parses to:
        Command(fields=["tag", "foo", "bar"], raw="tag:foo:bar")
    """
    fields: List[str] = field(default_factory=list)
    raw: str = ""

    @property
    def name(self) -> Optional[str]:
        """Lowercased command name, or None for an empty command"""
        if not self.fields or not self.fields[0]:
            return None
        return self.fields[0].lower()

    def arg(self, index: int) -> Optional[str]:
        """Field at index, or None when the command is shorter"""
        if index < len(self.fields):
            return self.fields[index]
        return None

    def args(self, start: int = 1) -> List[str]:
        """All fields from start onward"""
        return self.fields[start:]
