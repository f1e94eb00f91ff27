"""
Static lookup tables for the directive language

Built once at import time and read-only afterwards.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

from .message import ContentType, Visibility


# Leading-field namespaces: #!permalink is shorthand for #!link:permalink
PREFIX_NAMESPACE: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'permalink': ('link',),
})

# Leading-field rewrites, tried in order; the first matching key wins
COMMAND_ALIASES: Tuple[Tuple[Tuple[str, ...], Tuple[str, ...]], ...] = (
    (('media', 'end'), ('var', 'end')),
    (('media', 'stop'), ('var', 'end')),
    (('media', 'endall'), ('var', 'endall')),
    (('media', 'stopall'), ('var', 'endall')),
)

# Named characters for #!char and named separators for #!join.
# The escape spellings are the literal two-character sequences a user types.
CHARACTER_NAMES: Mapping[str, str] = MappingProxyType({
    'zws': '\u200b',
    'zwnj': '\u200c',
    'zwj': '\u200d',
    '\\n': '\n',
    '\\r': '\r',
    '\\t': '\t',
    '\\T': '    ',
})

CONTENT_TYPES: Mapping[str, ContentType] = MappingProxyType({
    't': ContentType.PLAIN,
    'txt': ContentType.PLAIN,
    'text': ContentType.PLAIN,
    'plain': ContentType.PLAIN,
    'plaintext': ContentType.PLAIN,

    'm': ContentType.MARKDOWN,
    'md': ContentType.MARKDOWN,
    'markdown': ContentType.MARKDOWN,

    'h': ContentType.HTML,
    'htm': ContentType.HTML,
    'html': ContentType.HTML,
})

VISIBILITIES: Mapping[str, Visibility] = MappingProxyType({
    'direct': Visibility.DIRECT,
    'dm': Visibility.DIRECT,
    'whisper': Visibility.DIRECT,

    'private': Visibility.PRIVATE,
    'packmate': Visibility.PRIVATE,
    'group': Visibility.PRIVATE,

    'unlisted': Visibility.UNLISTED,
    'local': Visibility.UNLISTED,
    'glaceon': Visibility.UNLISTED,

    'public': Visibility.PUBLIC,
    'world': Visibility.PUBLIC,
})

# Key groups ordered roughly by how often a flailing hand lands on them
KEYSMASH_KEYS: Tuple[str, ...] = (
    'asdf', 'jkl;',
    'gh', "'",
    'we', 'io',
    'r', 'u',
    'cv', 'nm',
    't', 'x', ',',
    'q', 'z',
    'y', 'b',
    'p', '[',
    '.', '/',
    ']', '\\',
)

SHRUG = '¯\\_(ツ)_/¯'

TRANSFORM_REPLACE_FIRST = frozenset({'replace', 'sub', 's'})
TRANSFORM_REPLACE_ALL = frozenset({'replaceall', 'gsub', 'gs'})
