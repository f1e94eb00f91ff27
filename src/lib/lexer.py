"""
Custom Pygments lexer for bang-directive syntax highlighting

Provides syntax highlighting for #!directive markup, for compose previews
and documentation of messages that use directives.

Token types:
- Punctuation: The #! marker, {} brackets and the :!# terminator
- Keyword.Declaration: Scope directives (var, tf, hide, end, ...)
- Name.Decorator: Directives that change the message (draft, visibility, ...)
- Name.Tag: Every other directive name
- Operator: Field delimiters (:, ::, :::)
- String: Field values
- String.Escape: #!! and escaped delimiters
- Comment: Text inside #!comment ... #!comment:end
"""

import re

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import RegexLexer, bygroups, default, include
from pygments.token import (
    Text,
    Punctuation,
    Name,
    String,
    Keyword,
    Operator,
    Comment,
)

from ..models.directives import DirectiveCategory
from .directives import DirectiveRegistry


def names_alternate(registry: DirectiveRegistry, category: DirectiveCategory) -> str:
    """
    Regex alternation of every name and alias registered in a category

    Longer names come first so "endall" is tried before "end".
    """
    names = []
    for spec in registry.directives_listByCategory(category):
        names += [spec.name, *spec.aliases]
    return '|'.join(re.escape(name) for name in sorted(names, key=len, reverse=True))


_registry = DirectiveRegistry()
SCOPE_NAMES = names_alternate(_registry, DirectiveCategory.SCOPE)
MESSAGE_NAMES = names_alternate(_registry, DirectiveCategory.MESSAGE)


class BangtagLexer(RegexLexer):
    """
    Lexer for bang-directive markup

    Highlights all three directive forms: bare (#!cmd:arg), bracketed
    (#!{cmd:arg with spaces}) and terminated (#!cmd:arg with spaces:!#).

    Example:
        hello #!var:who:- world#!var:end

    Tokens:
        #! → Punctuation
        var → Keyword.Declaration
        : → Operator
        who → String
    """

    name = 'Bangtags'
    aliases = ['bangtags', 'bang']
    filenames = []

    tokens = {
        'root': [
            # #!! escape for a literal marker
            (r'#!!', String.Escape),

            # #!comment - everything up to a closing spelling is inert
            (r'(#!\{?)(comment)(\}|:!#)?(?=\s|$)',
             bygroups(Punctuation, Comment.Preproc, Punctuation), 'comment'),

            # Bracket form
            (r'#!\{', Punctuation, ('bracket', 'name')),

            # Terminated form (wins over bare form, like the tokenizer)
            (r'#!(?=[^\n]*:!#)', Punctuation, ('terminated', 'name')),

            # Bare form
            (r'#!(?=[^\s#])', Punctuation, ('bare', 'name')),

            # Everything else is text
            (r'[^#]+', Text),
            (r'#', Text),
        ],

        'name': [
            # Scope directives (registry SCOPE category) - Keyword.Declaration
            (r'(?:%s)\b' % SCOPE_NAMES, Keyword.Declaration, '#pop'),

            # Message directives (registry MESSAGE category) - Name.Decorator
            (r'(?:%s)\b' % MESSAGE_NAMES, Name.Decorator, '#pop'),

            # Other directives (fallback)
            (r'\w+', Name.Tag, '#pop'),
            default('#pop'),
        ],

        'fields': [
            (r'\\:', String.Escape),
            (r':{1,3}', Operator),
            (r'\\', String),
        ],

        'bare': [
            include('fields'),
            (r'[^\s#:\\]+', String),
            default('#pop'),
        ],

        'terminated': [
            (r':+!#', Punctuation, '#pop'),
            include('fields'),
            (r'[^\n:\\]+', String),
            (r'\n', Text, '#pop'),
        ],

        'bracket': [
            (r'\}', Punctuation, '#pop'),
            include('fields'),
            (r'[^}:\\]+', String),
        ],

        'comment': [
            (r'(#!\{?)(comment:(?:endall|stopall|end|stop))(\}|:!#)?',
             bygroups(Punctuation, Comment.Preproc, Punctuation), '#pop'),
            (r'[^#]+', Comment),
            (r'#', Comment),
        ],
    }


def get_lexer() -> BangtagLexer:
    """
    Get the BangtagLexer instance

    Returns:
        BangtagLexer instance ready for use with Pygments
    """
    return BangtagLexer()


def source_highlight(text: str, style: str = 'default') -> str:
    """
    Render directive markup as highlighted HTML

    Args:
        text: Message text containing #!directives
        style: Pygments style name

    Returns:
        HTML fragment with inline styles
    """
    formatter = HtmlFormatter(style=style, noclasses=True)
    return highlight(text, get_lexer(), formatter)
