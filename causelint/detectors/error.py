"""
Cause link validation.

Answers one question per candidate: does the new error already carry
the caught value as its `cause`?

The check is syntactic only. `const e = err; ... { cause: e }` is NOT
accepted for a handler bound to `err`: no alias resolution is done.
"""
from typing import Optional

from tree_sitter import Node

from . import DetectorContext
from ..data_structures import CauseProperty, ThrowCandidate

CAUSE_KEY = "cause"


def _property_key_name(key: Node, context: DetectorContext) -> Optional[str]:
    """Static key name; None for computed, numeric and private keys."""
    if key.type == "property_identifier":
        return context.text(key)
    if key.type == "string":
        return context.text(key)[1:-1]
    return None


def find_cause_property(options: Node, context: DetectorContext) -> Optional[CauseProperty]:
    """
    Find the `cause` member of an object literal.

    Matches (exact key name only, no fuzzy matching):
    - { cause: value }
    - { "cause": value }
    - { cause }  (shorthand)

    When the key appears more than once the last one wins, like at runtime.
    """
    found = None

    for member in options.named_children:
        if member.type == "pair":
            key = member.child_by_field_name("key")
            value = member.child_by_field_name("value")
            if key is None or value is None:
                continue
            if _property_key_name(key, context) == CAUSE_KEY:
                found = CauseProperty(key_name=CAUSE_KEY, value_node=value)

        elif member.type == "shorthand_property_identifier":
            if context.text(member) == CAUSE_KEY:
                found = CauseProperty(key_name=CAUSE_KEY, value_node=member)

    return found


def has_cause_link(
    candidate: ThrowCandidate,
    parameter_name: Optional[str],
    context: DetectorContext,
) -> bool:
    """
    Check if the candidate already preserves the caught value.

    - No bound parameter: vacuously True, there is nothing to attach.
    - No options argument: False.
    - Non-literal options argument: False (reported without a fix).
    - Object literal: True only if `cause` is an identifier spelled
      exactly like the bound parameter.
    """
    if parameter_name is None:
        return True

    if not candidate.options_is_literal:
        return False

    cause = find_cause_property(candidate.options_arg, context)
    if cause is None:
        return False

    value = cause.value_node
    if value.type not in ("identifier", "shorthand_property_identifier"):
        return False

    return context.text(value) == parameter_name
