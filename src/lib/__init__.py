"""
bangtags - Inline #!directive interpreter for message text

Scans user-authored messages for #!directives, rewrites the text by running
them, and applies their side effects around saving the message.
"""

__version__ = "1.0.0"

from .tokenizer import Tokenizer
from .parser import Parser
from .interpreter import Interpreter, message_process
from .directives import DirectiveRegistry
from .log import LOG, state_connectToLogger

__all__ = [
    "Tokenizer",
    "Parser",
    "Interpreter",
    "message_process",
    "DirectiveRegistry",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
