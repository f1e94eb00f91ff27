"""
Directive specification and metadata models

Defines the structure and categories of bang directives for the
registry, dispatch and the markup lexer.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Callable, List, Set


class DirectiveCategory(Enum):
    """
    Categories of bang directives

    Used for organization, highlighting and documentation.
    """
    SCOPE = "scope"          # #!var, #!tf, #!hide, #!comment, #!end
    TEXT = "text"            # #!char, #!join, #!shrug, #!keysmash, #!bangtag
    EMOJI = "emoji"          # #!emoji, #!emojify
    LINK = "link"            # #!link, #!ping, #!thread, #!parent
    TAGGING = "tagging"      # #!tag
    MESSAGE = "message"      # #!visibility, #!format, #!draft, #!media


@dataclass
class DirectiveSpec:
    """
    Specification for a bang directive

    Attributes:
        name: Command name (first field, lowercase)
        category: Category for organization
        description: Human-readable description
        handler: Dispatch function (command, interpreter) -> chunk(s) or None
        examples: Example usage strings
        aliases: Alternative names for the directive
    """
    name: str
    category: DirectiveCategory
    description: str
    handler: Callable
    examples: List[str] = field(default_factory=list)
    aliases: List[str] = field(default_factory=list)


# Variable names starting with an underscore belong to the interpreter
RESERVED_PREFIX = "_"

# Spellings that close a comment scope; nothing else is interpreted inside one
COMMENT_CLOSERS: Set[str] = {
    'comment:end',
    'comment:stop',
    'comment:endall',
    'comment:stopall',
}

# Sub-commands that close scopes
END_WORDS: Set[str] = {'end', 'stop'}
ENDALL_WORDS: Set[str] = {'endall', 'stopall'}


def reserved_is(variable_name: str) -> bool:
    """Check if a variable name is reserved"""
    return variable_name.startswith(RESERVED_PREFIX)
