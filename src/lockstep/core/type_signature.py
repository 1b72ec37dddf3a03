"""Derive D-Bus signatures from Python record types.

Record types report their own signature so it can be compared with the one
declared in XML. A type may define a ``dbus_signature()`` classmethod; if it
does not, the signature is derived from its type hints:

* ``bool`` -> ``b``, ``int`` -> ``i``, ``float`` -> ``d``, ``str`` -> ``s``,
  ``bytes`` -> ``ay``, ``Any`` -> ``v``
* ``list[T]`` / ``Sequence[T]`` / ``tuple[T, ...]`` -> ``aT``
* ``dict[K, V]`` / ``Mapping[K, V]`` -> ``a{KV}``
* ``tuple[A, B]``, dataclasses, pydantic models and NamedTuples -> ``(AB)``
* ``IntEnum`` -> ``u``, ``str`` enums -> ``s``
* ``Annotated[T, "code"]`` overrides the code, see the aliases below.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import enum
import types
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from lockstep.core.errors import TypeSignatureError
from lockstep.core.signature import BASIC_CODES, is_single_complete_type

Byte = Annotated[int, "y"]
Int16 = Annotated[int, "n"]
UInt16 = Annotated[int, "q"]
Int32 = Annotated[int, "i"]
UInt32 = Annotated[int, "u"]
Int64 = Annotated[int, "x"]
UInt64 = Annotated[int, "t"]
Double = Annotated[float, "d"]
ObjectPath = Annotated[str, "o"]
SignatureStr = Annotated[str, "g"]
UnixFd = Annotated[int, "h"]
Variant = Annotated[Any, "v"]

_SCALARS: dict[object, str] = {
    bool: "b",
    int: "i",
    float: "d",
    str: "s",
    bytes: "ay",
}

_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.Iterable,
)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def signature_of(tp: Any) -> str:
    """Derive the D-Bus signature of a Python type.

    Raises:
        TypeSignatureError: If the type (or a nested type) has no D-Bus mapping.
    """
    if tp is Any:
        return "v"

    origin = get_origin(tp)

    if origin is Annotated:
        return _annotated_signature(tp)

    if origin is Union or origin is types.UnionType:
        raise TypeSignatureError(tp, "D-Bus has no optional or union types")

    if origin is tuple:
        return _tuple_signature(tp, get_args(tp))

    if origin in _SEQUENCE_ORIGINS:
        (element,) = get_args(tp) or (None,)
        if element is None:
            raise TypeSignatureError(tp, "sequence element type is required")
        return "a" + signature_of(element)

    if origin in _MAPPING_ORIGINS:
        args = get_args(tp)
        if len(args) != 2:
            raise TypeSignatureError(tp, "mapping key and value types are required")
        key = signature_of(args[0])
        if key not in BASIC_CODES:
            raise TypeSignatureError(tp, f"dict key '{key}' is not a basic type")
        return "a{" + key + signature_of(args[1]) + "}"

    if tp in _SCALARS:
        return _SCALARS[tp]

    if isinstance(tp, type):
        return _class_signature(tp)

    raise TypeSignatureError(tp, "unsupported type")


def _annotated_signature(tp: Any) -> str:
    base, *metadata = get_args(tp)
    for meta in metadata:
        if isinstance(meta, str):
            if not is_single_complete_type(meta):
                raise TypeSignatureError(tp, f"'{meta}' is not a single complete type")
            return meta
    return signature_of(base)


def _tuple_signature(tp: Any, args: tuple[Any, ...]) -> str:
    if len(args) == 2 and args[1] is Ellipsis:
        return "a" + signature_of(args[0])
    if not args or args == ((),):
        raise TypeSignatureError(tp, "empty tuples have no D-Bus struct form")
    return _struct(tp, args)


def _struct(tp: Any, fields: collections.abc.Iterable[Any]) -> str:
    codes = [signature_of(f) for f in fields]
    if not codes:
        raise TypeSignatureError(tp, "structs need at least one field")
    return "(" + "".join(codes) + ")"


def _class_signature(cls: type) -> str:
    explicit = getattr(cls, "dbus_signature", None)
    if callable(explicit):
        return str(explicit())

    if issubclass(cls, enum.Enum):
        if issubclass(cls, int):
            return "u"
        if issubclass(cls, str):
            return "s"
        raise TypeSignatureError(cls, "only int and str enums are supported")

    if dataclasses.is_dataclass(cls):
        hints = get_type_hints(cls, include_extras=True)
        return _struct(cls, (hints[f.name] for f in dataclasses.fields(cls)))

    if issubclass(cls, BaseModel):
        return _struct(cls, (_model_field_type(f) for f in cls.model_fields.values()))

    if issubclass(cls, tuple) and hasattr(cls, "_fields"):
        hints = get_type_hints(cls, include_extras=True)
        return _struct(cls, (hints[name] for name in cls._fields))

    raise TypeSignatureError(cls, "not a dataclass, pydantic model or NamedTuple")


def _model_field_type(field: Any) -> Any:
    # pydantic moves top-level Annotated metadata onto the FieldInfo.
    if field.metadata:
        return Annotated[(field.annotation, *field.metadata)]
    return field.annotation
