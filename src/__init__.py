"""
bangtags - Inline #!directive interpreter for message text

A small macro language embedded in posts: variables, text transforms,
hidden tags, emoji import, media descriptions and drafts.
"""

__version__ = "1.0.0"

from .lib import Interpreter, message_process, Parser, Tokenizer, DirectiveRegistry, LOG, state_connectToLogger
from .lib.lexer import BangtagLexer, source_highlight

__all__ = [
    "Interpreter",
    "message_process",
    "Parser",
    "Tokenizer",
    "DirectiveRegistry",
    "BangtagLexer",
    "source_highlight",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
