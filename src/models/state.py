"""
Pass state model and pipeline helper

Defines PassState dataclass for the functional pipeline pattern and
the pipeline() helper for composing processing stages.
"""

from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field

from .message import Collaborators, Effect, Message


@dataclass
class PassState:
    """
    Central state container for one message-processing pass (state bus pattern).

    Created fresh for every message and discarded when the pass ends; no
    interpreter state survives from one message to the next.

    Pipeline stages and their state additions:
        - Initial: message, collaborators, verbosity
        - text_scan: chunks, variables, effects, drafted
        - effects_presave: (attachments updated)
        - message_persist: persisted
        - effects_postsave: (mentions materialized, terminal stage)

    Attributes:
        message: The message record being processed
        collaborators: Registries and directories the directives consult
        verbosity: Logging verbosity level (1-3)
        chunks: Output chunks in order; joined to form the final text
        variables: Variable table (name -> accumulated value)
        effects: Deferred effects in the order they were queued
        drafted: Draft banner already placed in this pass
        persisted: message.save() has run
    """

    message: Optional[Message] = field(default=None)
    collaborators: Optional[Collaborators] = field(default=None)
    verbosity: int = field(default=1)

    # Scan results
    chunks: List[str] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    effects: List[Effect] = field(default_factory=list)
    drafted: bool = field(default=False)

    # Persistence
    persisted: bool = field(default=False)

    @property
    def text(self) -> str:
        """The output chunks joined into the final message text"""
        return "".join(self.chunks)


def pipeline(
    initial_state: PassState, *stages: Callable[[PassState], PassState]
) -> PassState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (PassState) -> PassState that receives
    the output of the previous stage and returns the state to pass on.

    Args:
        initial_state: Starting PassState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final PassState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            text_scan,
            effects_presave,
            message_persist,
            effects_postsave
        )
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)


def state_summary(state: PassState) -> Dict[str, Any]:
    """Counts describing a finished pass, for logging"""
    return {
        'chunks': len(state.chunks),
        'variables': len(state.variables),
        'effects': len(state.effects),
        'drafted': state.drafted,
        'persisted': state.persisted,
    }
