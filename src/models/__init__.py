"""
Models package for bangtags

Contains data structures and type definitions for the processing pipeline.
"""

from .state import PassState, pipeline
from .directives import DirectiveSpec, DirectiveCategory, COMMENT_CLOSERS
from .parser import Span, Command
from .scope import Scope, ScopeKind, TransformSpec
from .message import (
    Collaborators,
    ContentType,
    Effect,
    EffectKind,
    Visibility,
)

__all__ = [
    "PassState",
    "pipeline",
    "DirectiveSpec",
    "DirectiveCategory",
    "COMMENT_CLOSERS",
    "Span",
    "Command",
    "Scope",
    "ScopeKind",
    "TransformSpec",
    "Collaborators",
    "ContentType",
    "Effect",
    "EffectKind",
    "Visibility",
]
