r"""
Tokenizer for #!directive syntax

Splits message text into literal spans and directive spans.

A directive starts with the marker "#!" and takes one of three forms,
tried in this order:

    #!cmd:arg:arg:!#      terminated form (may contain whitespace, one line)
    #!{cmd:arg arg}       bracket form
    #!cmd:arg             bare form (no whitespace, no '#')

"#!!" is the escape for a literal "#!": it is rewritten with a zero-width
non-joiner between '#' and '!' before scanning, so it can never start a
directive.

Example:
    >>> Tokenizer("hi #!shrug there").spans_split()
    [Span(text='hi ', is_directive=False), Span(text='#!shrug', is_directive=True),
     Span(text=' there', is_directive=False)]
"""

import re
from typing import List

from ..models.parser import Span


MARKER = '#!'
MARKER_ESCAPE = '#!!'
MARKER_ESCAPED = '#\u200c!'

DIRECTIVE_PATTERN = re.compile(r'(#!(?:.*:!#|\{.*?\}|[^\s#]+))')

# Trailing ":!#" terminator; an escaped colon right before it survives
TERMINATOR_PATTERN = re.compile(r'(\\:)?:+!#\Z')
BRACKET_PATTERN = re.compile(r'\{(.*)\}\Z')


class Tokenizer:
    """
    Splits raw text into an ordered list of Spans

    Every character of the (escape-rewritten) input appears in exactly one
    span; no directive matching happens inside a literal span.
    """

    def __init__(self, text: str) -> None:
        """
        Initialize tokenizer with message text

        Args:
            text: Raw message text as authored
        """
        self.text = text

    @staticmethod
    def marker_has(text: str) -> bool:
        """True when text contains a directive marker at all"""
        return bool(text) and MARKER in text

    @staticmethod
    def escapes_protect(text: str) -> str:
        """
        Rewrite every "#!!" so it can no longer start a directive

        Args:
            text: Raw message text

        Returns:
            Text with "#!!" replaced by "#", ZWNJ, "!"
        """
        return text.replace(MARKER_ESCAPE, MARKER_ESCAPED)

    def spans_split(self) -> List[Span]:
        """
        Split the text into literal and directive spans

        Returns:
            Spans in source order. Empty literal fragments are omitted.
        """
        source = self.escapes_protect(self.text)
        spans: List[Span] = []

        # re.split with one capturing group alternates literal, directive, literal...
        for index, fragment in enumerate(DIRECTIVE_PATTERN.split(source)):
            if not fragment:
                continue
            spans.append(Span(text=fragment, is_directive=bool(index % 2)))

        return spans

    @staticmethod
    def body_extract(directive: str) -> str:
        r"""
        Strip the marker, terminator and brackets from a directive span

        Args:
            directive: Directive span text (starts with "#!")

        Returns:
            The command body, whitespace-trimmed

        Example:
            "#!tag:a:b:!#"   -> "tag:a:b"
            "#!{join:, :a}"  -> "join:, :a"
            "#!x\::!#"       -> "x\:"
        """
        body = TERMINATOR_PATTERN.sub(r'\1', directive)
        if body.startswith(MARKER + '{'):
            body = MARKER + BRACKET_PATTERN.sub(r'\1', body[len(MARKER):])
        return body[len(MARKER):].strip()
