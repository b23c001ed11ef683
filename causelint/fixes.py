"""
Fix synthesis and application.

A fix always rebuilds the whole options literal as `{ cause: <param> }`.
Other properties in that literal are dropped, not merged: the result is
guaranteed to validate, whatever the literal held before.
"""
from typing import Iterable, List, Optional

from .data_structures import ReplacementEdit, ThrowCandidate


def cause_literal(parameter_name: str) -> str:
    return f"{{ cause: {parameter_name} }}"


def synthesize_fix(candidate: ThrowCandidate, parameter_name: Optional[str]) -> Optional[ReplacementEdit]:
    """
    Build the edit that makes `candidate` chain to `parameter_name`.

    Returns None when no safe rewrite exists: no bound parameter, or a
    second argument that is not an object literal.
    """
    if parameter_name is None:
        return None

    if candidate.options_arg is None:
        point = candidate.message_arg.end_byte
        return ReplacementEdit(range=(point, point), replacement_text=f", {cause_literal(parameter_name)}")

    if not candidate.options_is_literal:
        return None

    options = candidate.options_arg
    return ReplacementEdit(
        range=(options.start_byte, options.end_byte),
        replacement_text=cause_literal(parameter_name),
    )


def select_disjoint(edits: Iterable[ReplacementEdit]) -> List[ReplacementEdit]:
    """
    Drop edits that overlap an earlier, wider one.

    Only a throw inside a function expression that itself sits in another
    throw's options literal can overlap; rewriting the outer literal
    removes the inner throw anyway.
    """
    kept: List[ReplacementEdit] = []
    for edit in sorted(edits, key=lambda e: (e.start, -e.end)):
        if not any(edit.overlaps(k) or k.start <= edit.start < k.end for k in kept):
            kept.append(edit)
    return kept


def apply_edits(source: str, edits: Iterable[ReplacementEdit]) -> str:
    """
    Apply non-overlapping byte-range edits to `source`.

    Raises ValueError if two edits overlap or a range falls outside the
    source.
    """
    ordered: List[ReplacementEdit] = sorted(edits, key=lambda e: (e.start, e.end))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            raise ValueError(f"Overlapping edits at bytes {previous.range} and {current.range}")

    data = source.encode("utf-8")
    for edit in reversed(ordered):
        if not 0 <= edit.start <= edit.end <= len(data):
            raise ValueError(f"Edit range {edit.range} outside source of {len(data)} bytes")
        data = data[:edit.start] + edit.replacement_text.encode("utf-8") + data[edit.end:]

    return data.decode("utf-8")
