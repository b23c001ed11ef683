"""
Data structures for catch handler analysis.

All structures are immutable and scoped to one source unit.
Nodes are tree-sitter nodes; ranges are byte offsets into UTF-8 source.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from tree_sitter import Node

MISSING_CAUSE = "missing-cause"


@dataclass(frozen=True)
class SourceSpan:
    """1-based line/column location plus the byte range it covers."""

    start_byte: int
    end_byte: int
    line: int
    column: int
    end_line: int
    end_column: int

    @classmethod
    def of(cls, node: Node) -> "SourceSpan":
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return cls(
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            line=start_row + 1,
            column=start_col + 1,
            end_line=end_row + 1,
            end_column=end_col + 1,
        )


@dataclass(frozen=True)
class CatchBinding:
    """A catch handler and the name it binds (None when nothing to chain)."""

    parameter_name: Optional[str]
    body_node: Node
    clause_node: Node

    @property
    def has_parameter(self) -> bool:
        return self.parameter_name is not None


@dataclass(frozen=True)
class ThrowCandidate:
    """A throw statement whose expression constructs a recognized error."""

    throw_node: Node
    constructor_call_node: Node
    message_arg: Node
    options_arg: Optional[Node] = None

    @property
    def has_options(self) -> bool:
        return self.options_arg is not None

    @property
    def options_is_literal(self) -> bool:
        return self.options_arg is not None and self.options_arg.type == "object"


@dataclass(frozen=True)
class CauseProperty:
    key_name: str
    value_node: Node


@dataclass(frozen=True)
class ReplacementEdit:
    range: Tuple[int, int]
    replacement_text: str

    @property
    def start(self) -> int:
        return self.range[0]

    @property
    def end(self) -> int:
        return self.range[1]

    def overlaps(self, other: "ReplacementEdit") -> bool:
        # Two insertions at the same point also conflict.
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Finding:
    anchor_node: Node
    location: SourceSpan
    parameter_name: str
    kind: str = MISSING_CAUSE
    fix: Optional[ReplacementEdit] = None

    @property
    def fixable(self) -> bool:
        return self.fix is not None
