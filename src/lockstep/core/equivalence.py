"""Signature equivalence checking.

A message body of N arguments is marshalled as the flat concatenation of the
argument type codes; it has no enclosing struct. A record type that models
the same body as one aggregate reports a struct signature instead. ``"ii"``
and ``"(ii)"`` therefore describe the same wire shape.

The comparison tolerates exactly one top-level struct wrapper on either
operand. Nested containers are compared by their string form, and order,
arity and type codes must all match.
"""

from __future__ import annotations

import difflib

from lockstep.core.errors import SignatureMismatchError
from lockstep.core.signature import Signature, is_struct_token, split_top_level


def _unwrap(tokens: list[str]) -> list[str] | None:
    """Return the field tokens of a sole top-level struct, else None."""
    if len(tokens) == 1 and is_struct_token(tokens[0]):
        return split_top_level(tokens[0][1:-1])
    return None


def signatures_are_eq(lhs: str | Signature, rhs: str | Signature) -> bool:
    """Check whether two signatures denote the same type shape.

    Args:
        lhs: First signature (raw string or parsed Signature).
        rhs: Second signature.

    Returns:
        True if the signatures are identical, or identical once a single
        top-level struct wrapper is removed from one side.

    Raises:
        InvalidSignatureError: If either operand is malformed (identical
            operands are equivalent without being scanned).
    """
    lhs, rhs = str(lhs), str(rhs)
    if lhs == rhs:
        return True

    lhs_tokens = split_top_level(lhs)
    rhs_tokens = split_top_level(rhs)

    if _unwrap(lhs_tokens) == rhs_tokens or _unwrap(rhs_tokens) == lhs_tokens:
        return True

    return lhs_tokens == rhs_tokens


def explain_mismatch(lhs: str, rhs: str) -> str:
    """Build a unified diff of the top-level types of two signatures."""
    diff = difflib.unified_diff(
        split_top_level(lhs),
        split_top_level(rhs),
        fromfile="left",
        tofile="right",
        lineterm="",
    )
    return "\n".join(diff)


def assert_eq_signatures(
    lhs: str | Signature, rhs: str | Signature, msg: str | None = None
) -> None:
    """Assert two signatures are equivalent.

    Raises:
        SignatureMismatchError: With both raw strings and a diff of their
            top-level types when they are not equivalent.
    """
    lhs, rhs = str(lhs), str(rhs)
    if signatures_are_eq(lhs, rhs):
        return
    explanation = explain_mismatch(lhs, rhs)
    if msg:
        explanation = f"{msg}\n{explanation}"
    raise SignatureMismatchError(lhs, rhs, explanation)
