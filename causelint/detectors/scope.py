"""
Catch scope collection.

Finds catch handlers in a unit and, for each one, the throw statements
that belong to it.

A throw belongs to the nearest enclosing catch handler. Descent into a
handler's body stops at:
- nested function bodies (they may run later, under different scoping)
- nested catch handlers (their throws are collected for that handler)

Every branch is treated as reachable.
"""
from typing import Iterator, List, Optional

from tree_sitter import Node

from . import DetectorContext
from ..data_structures import CatchBinding, ThrowCandidate
from .utils import (
    CATCH_CLAUSE,
    argument_nodes,
    constructor_of,
    is_scope_boundary,
    significant_children,
    unwrap_parentheses,
    walk_preorder,
)


def binding_for_clause(clause: Node, context: DetectorContext) -> Optional[CatchBinding]:
    """
    Build the binding for a `catch_clause` node.

    Only a plain identifier parameter names the caught value. No parameter
    and destructuring patterns both leave `parameter_name` as None.
    Returns None for a clause without a body.
    """
    body = clause.child_by_field_name("body")
    if body is None:
        return None

    parameter = clause.child_by_field_name("parameter")
    name = None
    if parameter is not None and parameter.type == "identifier":
        name = context.text(parameter)

    return CatchBinding(parameter_name=name, body_node=body, clause_node=clause)


def iter_catch_bindings(context: DetectorContext) -> Iterator[CatchBinding]:
    """All catch handlers in the unit, outer before inner, in source order."""
    for node in walk_preorder(context.unit.root):
        if node.type != CATCH_CLAUSE:
            continue
        binding = binding_for_clause(node, context)
        if binding is not None:
            yield binding


def candidate_from_throw(throw_node: Node, context: DetectorContext) -> Optional[ThrowCandidate]:
    """
    Turn a `throw_statement` into a candidate, or None.

    None covers both "not an error construction" (including `throw e;`)
    and malformed input such as a throw without an expression or a
    construction without arguments.
    """
    children = significant_children(throw_node)
    if not children:
        return None

    expression = unwrap_parentheses(children[0])
    if expression is None:
        return None

    constructor = constructor_of(expression)
    if constructor is None or not context.is_error_constructor(context.text(constructor)):
        return None

    args = argument_nodes(expression)
    if not args:
        return None

    message = args[0]
    if message.type == "spread_element":
        # Options may be hidden inside the spread.
        options = message
    else:
        options = args[1] if len(args) > 1 else None

    return ThrowCandidate(
        throw_node=throw_node,
        constructor_call_node=expression,
        message_arg=message,
        options_arg=options,
    )


def collect_candidates(binding: CatchBinding, context: DetectorContext) -> List[ThrowCandidate]:
    """Throw candidates owned by `binding`, in source order."""
    candidates: List[ThrowCandidate] = []

    stack = list(reversed(binding.body_node.named_children))
    while stack:
        node = stack.pop()

        if is_scope_boundary(node):
            continue

        if node.type == "throw_statement":
            candidate = candidate_from_throw(node, context)
            if candidate is not None:
                candidates.append(candidate)
            continue

        stack.extend(reversed(node.named_children))

    return candidates
