"""
Catch Handler Detectors

Detectors are pure functions over one parsed unit.

Design principles:
- Stateless (nothing survives between calls or units)
- Syntactic only (no alias, def-use, or reachability analysis)
- Malformed nodes are skipped, never raised on

Collection decides which throws belong to which handler.
Validation answers: "Is the cause link already correct?"
"""
from dataclasses import dataclass
from typing import Tuple

from ..parsing import ParsedUnit

DEFAULT_ERROR_CONSTRUCTORS: Tuple[str, ...] = ("Error",)


@dataclass(frozen=True)
class DetectorContext:
    """
    Context shared by the detectors for one analysis run.

    `error_constructors` are matched against the exact source text of
    the constructor expression, so dotted names like `errors.HttpError`
    are allowed.
    """
    unit: ParsedUnit
    error_constructors: Tuple[str, ...] = DEFAULT_ERROR_CONSTRUCTORS

    def text(self, node) -> str:
        return self.unit.text(node)

    def is_error_constructor(self, name: str) -> bool:
        return name in self.error_constructors


from .error import find_cause_property, has_cause_link
from .scope import binding_for_clause, collect_candidates, iter_catch_bindings

__all__ = [
    'DEFAULT_ERROR_CONSTRUCTORS',
    'DetectorContext',
    'binding_for_clause',
    'collect_candidates',
    'find_cause_property',
    'has_cause_link',
    'iter_catch_bindings',
]
