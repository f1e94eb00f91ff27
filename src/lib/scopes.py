"""
Scope stack machine

One LIFO stack of tagged Scope entries. Because every entry carries its
kind, "close the innermost transform", "close whatever was opened last"
and "close every capture" all operate on the same list and can never
drift out of step with each other.

Closing something that is not open is always a silent no-op.
"""

from typing import List, Optional

from ..models.scope import Scope, ScopeKind, TransformSpec
from .log import LOG


class ScopeStack:
    """
    The interpreter's nesting state for one pass

    Example:
        >>> stack = ScopeStack()
        >>> stack.scope_push(Scope.capture("x"))
        >>> stack.scope_push(Scope.transforming("s", ["a", "b"]))
        >>> stack.scope_pop().kind
        <ScopeKind.TRANSFORM: 'transform'>
        >>> stack.capture_top().name
        'x'
    """

    def __init__(self) -> None:
        self.scopes: List[Scope] = []

    def __len__(self) -> int:
        return len(self.scopes)

    def scope_push(self, scope: Scope) -> None:
        """Open a scope"""
        self.scopes.append(scope)
        LOG(f"Opened {scope.kind.value} scope (depth {len(self.scopes)})", level=3)

    def scope_pop(self) -> Optional[Scope]:
        """
        Close the most recently opened scope, whatever its kind

        A draft scope is never closed.

        Returns:
            The closed scope, or None if nothing could be closed
        """
        if not self.scopes or self.scopes[-1].kind is ScopeKind.DRAFT:
            return None
        scope = self.scopes.pop()
        LOG(f"Closed {scope.kind.value} scope", level=3)
        return scope

    def kind_popInnermost(self, *kinds: ScopeKind) -> Optional[Scope]:
        """
        Close the innermost scope of the given kind(s)

        Scopes of other kinds opened after it stay open.

        Args:
            *kinds: Kinds eligible for closing

        Returns:
            The closed scope, or None if none of that kind is open
        """
        for index in range(len(self.scopes) - 1, -1, -1):
            if self.scopes[index].kind in kinds:
                scope = self.scopes.pop(index)
                LOG(f"Closed {scope.kind.value} scope", level=3)
                return scope
        return None

    def kind_clear(self, *kinds: ScopeKind) -> int:
        """
        Close every scope of the given kind(s)

        Returns:
            Number of scopes closed
        """
        before = len(self.scopes)
        self.scopes = [s for s in self.scopes if s.kind not in kinds]
        return before - len(self.scopes)

    def scopes_clear(self) -> int:
        """Close every scope except a draft"""
        return self.kind_clear(
            ScopeKind.CAPTURE, ScopeKind.TRANSFORM, ScopeKind.HIDE, ScopeKind.COMMENT
        )

    def kind_contains(self, kind: ScopeKind) -> bool:
        return any(s.kind is kind for s in self.scopes)

    def capture_top(self) -> Optional[Scope]:
        """The innermost scope that receives chunks, if any"""
        for scope in reversed(self.scopes):
            if scope.is_capture:
                return scope
        return None

    def transforms_active(self) -> List[TransformSpec]:
        """Active transforms, outermost first"""
        return [
            s.transform for s in self.scopes
            if s.kind is ScopeKind.TRANSFORM and s.transform is not None
        ]

    def comment_active(self) -> bool:
        top = self.capture_top()
        return top is not None and top.kind is ScopeKind.COMMENT

    def draft_active(self) -> bool:
        return self.kind_contains(ScopeKind.DRAFT)
