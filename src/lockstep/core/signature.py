"""D-Bus type signature grammar.

A signature is a sequence of complete types. Each complete type is a
primitive code, a variant, an array of one complete type, a struct of one or
more complete types, or (directly inside an array only) a dict-entry of a
basic key type and a complete value type.

This module provides two views of a signature string:

* ``parse_signature`` builds the full ``Signature`` term tree and enforces
  every grammar rule and limit.
* ``split_top_level`` performs a single depth-tracking scan and returns the
  top-level complete types as opaque substrings, which is all the
  equivalence checker needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from lockstep.core.errors import InvalidSignatureError

# Basic (fixed or string-like) type codes; all valid as dict-entry keys.
BASIC_CODES = frozenset("ybnqiuxtdhsog")
VARIANT_CODE = "v"
ARRAY_CODE = "a"
STRUCT_OPEN, STRUCT_CLOSE = "(", ")"
DICT_OPEN, DICT_CLOSE = "{", "}"

MAX_SIGNATURE_LENGTH = 255
MAX_ARRAY_DEPTH = 32
MAX_STRUCT_DEPTH = 32

_CLOSERS = {STRUCT_OPEN: STRUCT_CLOSE, DICT_OPEN: DICT_CLOSE}
_KNOWN_CODES = BASIC_CODES | {VARIANT_CODE, ARRAY_CODE} | set(_CLOSERS) | set(_CLOSERS.values())


@dataclass(frozen=True)
class Primitive:
    """A basic type code such as ``i`` or ``s``."""

    code: str

    def __str__(self) -> str:
        return self.code


@dataclass(frozen=True)
class Variant:
    """The variant type ``v``."""

    def __str__(self) -> str:
        return VARIANT_CODE


@dataclass(frozen=True)
class Array:
    """An array of a single element type."""

    element: Term

    def __str__(self) -> str:
        return f"{ARRAY_CODE}{self.element}"


@dataclass(frozen=True)
class Struct:
    """A struct of one or more field types."""

    fields: tuple[Term, ...]

    def __str__(self) -> str:
        return STRUCT_OPEN + "".join(str(f) for f in self.fields) + STRUCT_CLOSE


@dataclass(frozen=True)
class DictEntry:
    """A key/value pair; only valid as an array element."""

    key: Primitive
    value: Term

    def __str__(self) -> str:
        return f"{DICT_OPEN}{self.key}{self.value}{DICT_CLOSE}"


Term = Union[Primitive, Variant, Array, Struct, DictEntry]


@dataclass(frozen=True)
class Signature:
    """A parsed signature: an ordered sequence of complete types."""

    terms: tuple[Term, ...]

    def __str__(self) -> str:
        return "".join(str(t) for t in self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    @property
    def is_single(self) -> bool:
        """True when the signature is exactly one complete type."""
        return len(self.terms) == 1

    def top_level_tokens(self) -> list[str]:
        return [str(t) for t in self.terms]


class _Parser:
    """Recursive descent parser over a signature string."""

    def __init__(self, signature: str) -> None:
        self.signature = signature
        self.pos = 0

    def error(self, reason: str, position: int | None = None) -> InvalidSignatureError:
        return InvalidSignatureError(
            self.signature, self.pos if position is None else position, reason
        )

    def parse(self) -> Signature:
        if len(self.signature) > MAX_SIGNATURE_LENGTH:
            raise self.error(
                f"signature longer than {MAX_SIGNATURE_LENGTH} characters",
                MAX_SIGNATURE_LENGTH,
            )
        terms: list[Term] = []
        while self.pos < len(self.signature):
            terms.append(self._complete_type(0, 0))
        return Signature(tuple(terms))

    def _peek(self) -> str | None:
        if self.pos < len(self.signature):
            return self.signature[self.pos]
        return None

    def _complete_type(self, array_depth: int, struct_depth: int) -> Term:
        code = self._peek()
        if code is None:
            raise self.error("unexpected end of signature")

        if code in BASIC_CODES:
            self.pos += 1
            return Primitive(code)

        if code == VARIANT_CODE:
            self.pos += 1
            return Variant()

        if code == ARRAY_CODE:
            if array_depth >= MAX_ARRAY_DEPTH:
                raise self.error(f"arrays nested deeper than {MAX_ARRAY_DEPTH}")
            self.pos += 1
            if self._peek() == DICT_OPEN:
                return Array(self._dict_entry(array_depth + 1, struct_depth))
            return Array(self._complete_type(array_depth + 1, struct_depth))

        if code == STRUCT_OPEN:
            return self._struct(array_depth, struct_depth)

        if code == DICT_OPEN:
            raise self.error("dict-entry outside of an array")

        if code in (STRUCT_CLOSE, DICT_CLOSE):
            raise self.error(f"unbalanced '{code}'")

        raise self.error(f"unknown type code '{code}'")

    def _struct(self, array_depth: int, struct_depth: int) -> Struct:
        if struct_depth >= MAX_STRUCT_DEPTH:
            raise self.error(f"structs nested deeper than {MAX_STRUCT_DEPTH}")
        start = self.pos
        self.pos += 1
        fields: list[Term] = []
        while True:
            code = self._peek()
            if code is None:
                raise self.error("unterminated struct", start)
            if code == STRUCT_CLOSE:
                self.pos += 1
                break
            fields.append(self._complete_type(array_depth, struct_depth + 1))
        if not fields:
            raise self.error("empty struct", start)
        return Struct(tuple(fields))

    def _dict_entry(self, array_depth: int, struct_depth: int) -> DictEntry:
        if struct_depth >= MAX_STRUCT_DEPTH:
            raise self.error(f"structs nested deeper than {MAX_STRUCT_DEPTH}")
        start = self.pos
        self.pos += 1

        key_pos = self.pos
        key = self._complete_type(array_depth, struct_depth + 1)
        if not isinstance(key, Primitive):
            raise self.error("dict-entry key must be a basic type", key_pos)

        if self._peek() == DICT_CLOSE:
            raise self.error("dict-entry must contain exactly two types", start)
        value = self._complete_type(array_depth, struct_depth + 1)

        if self._peek() != DICT_CLOSE:
            raise self.error("dict-entry must contain exactly two types", start)
        self.pos += 1
        return DictEntry(key, value)


def parse_signature(signature: str) -> Signature:
    """Parse and fully validate a signature string.

    Args:
        signature: Raw signature, e.g. ``"a{sv}(so)"``.

    Returns:
        The parsed Signature.

    Raises:
        InvalidSignatureError: If the string violates the grammar or its limits.
    """
    return _Parser(signature).parse()


def is_single_complete_type(signature: str) -> bool:
    """Check whether ``signature`` is exactly one valid complete type."""
    try:
        return parse_signature(signature).is_single
    except InvalidSignatureError:
        return False


def split_top_level(signature: str) -> list[str]:
    """Split a signature into its top-level complete types.

    A single left-to-right scan tracks nesting through the bracket pairs;
    container contents stay opaque, so ``"(ii)a{sv}"`` yields
    ``["(ii)", "a{sv}"]``.

    Raises:
        InvalidSignatureError: On unknown codes, unbalanced brackets, empty
            containers, or an array prefix with no element type.
    """
    tokens: list[str] = []
    closers: list[str] = []
    start = 0
    for pos, code in enumerate(signature):
        if code not in _KNOWN_CODES:
            raise InvalidSignatureError(signature, pos, f"unknown type code '{code}'")
        if code == DICT_OPEN and (pos == 0 or signature[pos - 1] != ARRAY_CODE):
            raise InvalidSignatureError(signature, pos, "dict-entry outside of an array")
        if code in _CLOSERS:
            closers.append(_CLOSERS[code])
        elif code in (STRUCT_CLOSE, DICT_CLOSE):
            if not closers or closers.pop() != code:
                raise InvalidSignatureError(signature, pos, f"unbalanced '{code}'")
            previous = signature[pos - 1]
            if previous == ARRAY_CODE:
                raise InvalidSignatureError(signature, pos, "array prefix without element type")
            if previous == STRUCT_OPEN:
                raise InvalidSignatureError(signature, pos - 1, "empty struct")
            if previous == DICT_OPEN:
                raise InvalidSignatureError(
                    signature, pos - 1, "dict-entry must contain exactly two types"
                )
        elif code == ARRAY_CODE:
            # The prefix binds to the element type that follows.
            continue

        if not closers:
            tokens.append(signature[start : pos + 1])
            start = pos + 1

    if closers:
        raise InvalidSignatureError(signature, len(signature), "unterminated container")
    if start != len(signature):
        raise InvalidSignatureError(signature, start, "array prefix without element type")
    return tokens


def is_struct_token(token: str) -> bool:
    """True for a top-level token produced by ``split_top_level`` that is a struct."""
    return token.startswith(STRUCT_OPEN)
