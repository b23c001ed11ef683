"""
Stateless helpers for tree-sitter node inspection.

These are pure helper functions, not class methods.
Detectors use these as needed but remain standalone.
"""
from typing import Iterator, List, Optional

from tree_sitter import Node

# Bodies of these nodes run later, under a different scope.
FUNCTION_BOUNDARY_TYPES = frozenset({
    "function",
    "function_declaration",
    "function_expression",
    "generator_function",
    "generator_function_declaration",
    "arrow_function",
    "method_definition",
})

CATCH_CLAUSE = "catch_clause"


def significant_children(node: Node) -> List[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def unwrap_parentheses(node: Node) -> Optional[Node]:
    """
    Strip any number of enclosing parentheses.

    Examples:
        (new Error("x")) -> new Error("x")
        ((e))            -> e
    """
    current: Optional[Node] = node
    while current is not None and current.type == "parenthesized_expression":
        inner = significant_children(current)
        current = inner[0] if inner else None
    return current


def is_function_boundary(node: Node) -> bool:
    return node.type in FUNCTION_BOUNDARY_TYPES


def is_scope_boundary(node: Node) -> bool:
    """Nested functions and nested catch handlers stop descent."""
    return is_function_boundary(node) or node.type == CATCH_CLAUSE


def walk_preorder(root: Node) -> Iterator[Node]:
    """
    Yield named nodes in source order without recursion.

    Deeply nested sources would otherwise hit the interpreter's
    recursion limit.
    """
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.named_children))


def argument_nodes(call_node: Node) -> Optional[List[Node]]:
    """
    Arguments of a `new_expression` or `call_expression`.

    Returns None when there is no parenthesized argument list,
    e.g. `new Error` or a tagged template.
    """
    arguments = call_node.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None
    return significant_children(arguments)


def constructor_of(expression: Node) -> Optional[Node]:
    """
    The callee of an error construction.

    Matches:
    - new C(...)
    - C(...)
    """
    if expression.type == "new_expression":
        return expression.child_by_field_name("constructor")
    if expression.type == "call_expression":
        return expression.child_by_field_name("function")
    return None
