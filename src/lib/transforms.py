"""
Transform pipeline

Applies the active #!tf rules to a chunk before it is placed.
"""

from typing import Iterator, List, Sequence, Tuple

from ..models.scope import TransformSpec
from ..models.tables import TRANSFORM_REPLACE_ALL, TRANSFORM_REPLACE_FIRST


def pairs_iterate(args: Sequence[str]) -> Iterator[Tuple[str, str]]:
    """Yield (pattern, replacement) pairs; an incomplete trailing pair is dropped"""
    for index in range(0, len(args) - 1, 2):
        yield args[index], args[index + 1]


def transform_apply(chunk: str, spec: TransformSpec) -> str:
    """
    Apply one transform to a chunk

    Substitution is literal, not regular-expression based.

    Args:
        chunk: Text to rewrite
        spec: Transform verb and its flat argument list

    Returns:
        Rewritten chunk (unchanged for an unknown verb)

    Example:
        transform_apply("aaa", TransformSpec("s", ["a", "b"]))   -> "baa"
        transform_apply("aaa", TransformSpec("gs", ["a", "b"]))  -> "bbb"
    """
    verb = spec.verb.lower()
    if verb in TRANSFORM_REPLACE_FIRST:
        for pattern, replacement in pairs_iterate(spec.args):
            chunk = chunk.replace(pattern, replacement, 1)
    elif verb in TRANSFORM_REPLACE_ALL:
        for pattern, replacement in pairs_iterate(spec.args):
            chunk = chunk.replace(pattern, replacement)
    return chunk


def transforms_apply(chunk: str, specs: List[TransformSpec]) -> str:
    """Apply every active transform in stack order, outermost first"""
    if not chunk:
        return chunk
    for spec in specs:
        chunk = transform_apply(chunk, spec)
    return chunk
