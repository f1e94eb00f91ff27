"""
Scope models for the interpreter's nesting stack

A single stack of tagged scopes replaces separate capture, transform and
bookkeeping stacks: each entry knows its own kind, so one pop always unwinds
the right thing.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import List, Optional


class ScopeKind(Enum):
    """
    Kinds of scope a directive can open

    CAPTURE, HIDE, COMMENT and DRAFT are capture targets: while one of them
    is the innermost capture target, produced chunks go to it instead of
    the output. TRANSFORM scopes rewrite chunks but never receive them.
    """
    CAPTURE = "capture"        # #!var:name:-
    TRANSFORM = "transform"    # #!tf:verb:args
    HIDE = "hide"              # #!hide
    COMMENT = "comment"        # #!comment
    DRAFT = "draft"            # #!draft (never closed)


CAPTURE_KINDS = (ScopeKind.CAPTURE, ScopeKind.HIDE, ScopeKind.COMMENT, ScopeKind.DRAFT)


@dataclass
class TransformSpec:
    """
    A text substitution rule

    Attributes:
        verb: Transform verb (e.g., "s", "replace", "gsub")
        args: Flat (pattern, replacement, pattern, replacement, ...) list
    """
    verb: str
    args: List[str] = field(default_factory=list)


@dataclass
class Scope:
    """
    One entry of the scope stack

    Attributes:
        kind: Which kind of scope this is
        name: Variable receiving chunks (CAPTURE only)
        transform: Substitution rule (TRANSFORM only)

    Example:
        Scope(kind=ScopeKind.CAPTURE, name="greeting")
        Scope(kind=ScopeKind.TRANSFORM, transform=TransformSpec("s", ["a", "b"]))
    """
    kind: ScopeKind
    name: str = ""
    transform: Optional[TransformSpec] = None

    @classmethod
    def capture(cls, name: str) -> "Scope":
        return cls(kind=ScopeKind.CAPTURE, name=name)

    @classmethod
    def transforming(cls, verb: str, args: List[str]) -> "Scope":
        return cls(kind=ScopeKind.TRANSFORM, transform=TransformSpec(verb=verb, args=list(args)))

    @classmethod
    def hide(cls) -> "Scope":
        return cls(kind=ScopeKind.HIDE)

    @classmethod
    def comment(cls) -> "Scope":
        return cls(kind=ScopeKind.COMMENT)

    @classmethod
    def draft(cls) -> "Scope":
        return cls(kind=ScopeKind.DRAFT)

    @property
    def is_capture(self) -> bool:
        return self.kind in CAPTURE_KINDS
