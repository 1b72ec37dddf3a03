"""Data models for D-Bus introspection documents.

These mirror the introspection XML format: a document holds interfaces, and
each interface declares signals, methods and properties whose arguments carry
type signature strings. All models are frozen once parsed.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Direction of a method argument."""

    IN = "in"
    OUT = "out"


class Access(str, Enum):
    """Access mode of a property."""

    READ = "read"
    WRITE = "write"
    READWRITE = "readwrite"


class DeclarationKind(str, Enum):
    """Kind of interface member a record type can correspond to."""

    SIGNAL = "signal"
    METHOD = "method"
    PROPERTY = "property"


class SignatureKind(str, Enum):
    """Which signature to extract from a member."""

    SIGNAL = "signal"
    METHOD_IN = "method-in"
    METHOD_OUT = "method-out"
    PROPERTY = "property"

    @property
    def declaration_kind(self) -> DeclarationKind:
        """The member kind this signature is read from."""
        if self in (SignatureKind.METHOD_IN, SignatureKind.METHOD_OUT):
            return DeclarationKind.METHOD
        return DeclarationKind(self.value)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Arg(_Frozen):
    """A single signal or method argument."""

    name: str | None = Field(None, description="Argument name (optional in XML)")
    type: str = Field(..., description="Type signature of one complete type")
    direction: Direction | None = Field(
        None, description="Method argument direction; None for signal args"
    )


class Signal(_Frozen):
    """A signal declaration. All args form the signal body."""

    name: str
    args: tuple[Arg, ...] = ()
    annotations: dict[str, str] = Field(default_factory=dict)

    @property
    def body_signature(self) -> str:
        return "".join(arg.type for arg in self.args)


class Method(_Frozen):
    """A method declaration with directed args."""

    name: str
    args: tuple[Arg, ...] = ()
    annotations: dict[str, str] = Field(default_factory=dict)

    def signature_for(self, direction: Direction) -> str:
        """Concatenate, in declared order, the types of args with ``direction``."""
        return "".join(arg.type for arg in self.args if arg.direction == direction)

    @property
    def in_signature(self) -> str:
        return self.signature_for(Direction.IN)

    @property
    def out_signature(self) -> str:
        return self.signature_for(Direction.OUT)


class Property(_Frozen):
    """A property declaration."""

    name: str
    type: str
    access: Access = Access.READ
    annotations: dict[str, str] = Field(default_factory=dict)


class Interface(_Frozen):
    """A named interface and its members, in declaration order."""

    name: str = Field(..., description="Dot-separated interface name")
    signals: tuple[Signal, ...] = ()
    methods: tuple[Method, ...] = ()
    properties: tuple[Property, ...] = ()
    annotations: dict[str, str] = Field(default_factory=dict)

    def members(self, kind: DeclarationKind) -> tuple[Signal | Method | Property, ...]:
        """Return the declarations of one kind."""
        if kind == DeclarationKind.SIGNAL:
            return self.signals
        if kind == DeclarationKind.METHOD:
            return self.methods
        return self.properties

    def get_signal(self, name: str) -> Signal | None:
        return next((s for s in self.signals if s.name == name), None)

    def get_method(self, name: str) -> Method | None:
        return next((m for m in self.methods if m.name == name), None)

    def get_property(self, name: str) -> Property | None:
        return next((p for p in self.properties if p.name == name), None)


class InterfaceDocument(_Frozen):
    """All interfaces parsed from one introspection source."""

    source: str = Field(..., description="Identity of the source, usually a file path")
    interfaces: tuple[Interface, ...] = ()

    def get_interface(self, name: str) -> Interface | None:
        return next((i for i in self.interfaces if i.name == name), None)
