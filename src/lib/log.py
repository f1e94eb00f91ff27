"""
Logging for processing passes

LOG() lines are gated on the verbosity of the running pass, which is looked
up through a context variable. WARN() reports a contained failure and is
never gated.

Usage:
    from bangtags.lib.log import LOG, WARN, state_connectToLogger

    # At start of a processing pass:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    WARN("Always shown: a directive failed and was dropped")
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current PassState
_pass_state: ContextVar[Optional[Any]] = ContextVar('pass_state', default=None)

# Configure loguru with bangtags-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a PassState to the logging context.

    Call this at the start of each processing pass to make the state's
    verbosity setting available to LOG() calls throughout that context.

    Args:
        state: PassState instance with verbosity attribute
    """
    _pass_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=trace)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Processed message 42", level=1)
        LOG("Dispatching #!var:greeting:-", level=2)
        LOG("Span 3: '#!shrug'", level=3)
    """
    state = _pass_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str, **kwargs: Any) -> None:
    """
    Log a warning regardless of verbosity.

    Used where a failure is contained (a directive or effect is dropped)
    so the pass can continue.
    """
    logger.opt(depth=1).warning(message, **kwargs)
