"""Signature extraction service for Lockstep.

Reads the raw signature string of a signal body, a method's in or out
arguments, a single named argument, or a property from a parsed interface.
Signatures are returned exactly as declared, without struct wrapping.
"""

from __future__ import annotations

from typing import IO

from lockstep.core.errors import (
    ArgNotFoundError,
    InterfaceNotFoundError,
    MemberNotFoundError,
)
from lockstep.core.models import (
    Arg,
    DeclarationKind,
    Direction,
    Interface,
    SignatureKind,
)
from lockstep.introspection.parser import parse_document


def _named_arg(interface: Interface, member_name: str, args: tuple[Arg, ...], arg_name: str) -> Arg:
    arg = next((a for a in args if a.name == arg_name), None)
    if arg is None:
        raise ArgNotFoundError(interface.name, member_name, arg_name)
    return arg


def extract(
    interface: Interface,
    kind: SignatureKind,
    member_name: str,
    arg_name: str | None = None,
) -> str:
    """Extract a declared signature from an interface.

    Args:
        interface: The interface declaring the member.
        kind: Which signature to read.
        member_name: Signal, method or property name.
        arg_name: Return only this argument's type. For methods this bypasses
            the direction filter. Ignored for properties.

    Returns:
        The raw signature string.

    Raises:
        MemberNotFoundError: If the interface has no such member.
        ArgNotFoundError: If ``arg_name`` is given and the member has no such arg.
    """
    if kind == SignatureKind.PROPERTY:
        prop = interface.get_property(member_name)
        if prop is None:
            raise MemberNotFoundError(interface.name, member_name, DeclarationKind.PROPERTY.value)
        return prop.type

    if kind == SignatureKind.SIGNAL:
        signal = interface.get_signal(member_name)
        if signal is None:
            raise MemberNotFoundError(interface.name, member_name, DeclarationKind.SIGNAL.value)
        if arg_name is not None:
            return _named_arg(interface, member_name, signal.args, arg_name).type
        return signal.body_signature

    method = interface.get_method(member_name)
    if method is None:
        raise MemberNotFoundError(interface.name, member_name, DeclarationKind.METHOD.value)
    if arg_name is not None:
        return _named_arg(interface, member_name, method.args, arg_name).type
    direction = Direction.IN if kind == SignatureKind.METHOD_IN else Direction.OUT
    return method.signature_for(direction)


def _interface_from_xml(xml: str | bytes | IO, interface_name: str) -> Interface:
    text = xml.read() if hasattr(xml, "read") else xml
    document = parse_document(text, source=str(getattr(xml, "name", "<string>")))
    interface = document.get_interface(interface_name)
    if interface is None:
        raise InterfaceNotFoundError(interface_name, document.source)
    return interface


def get_signal_body_type(
    xml: str | bytes | IO,
    interface_name: str,
    member_name: str,
    arg_name: str | None = None,
) -> str:
    """Read a signal's body signature (or one argument's) from XML.

    Example:
        >>> get_signal_body_type(xml, "org.freedesktop.bolt1.Manager", "DeviceAdded")
        'o'
    """
    interface = _interface_from_xml(xml, interface_name)
    return extract(interface, SignatureKind.SIGNAL, member_name, arg_name)


def get_method_args_type(
    xml: str | bytes | IO,
    interface_name: str,
    member_name: str,
    arg_name: str | None = None,
) -> str:
    """Read the signature of a method's "in" arguments (or one argument's) from XML."""
    interface = _interface_from_xml(xml, interface_name)
    return extract(interface, SignatureKind.METHOD_IN, member_name, arg_name)


def get_method_return_type(
    xml: str | bytes | IO,
    interface_name: str,
    member_name: str,
    arg_name: str | None = None,
) -> str:
    """Read the signature of a method's "out" arguments (or one argument's) from XML."""
    interface = _interface_from_xml(xml, interface_name)
    return extract(interface, SignatureKind.METHOD_OUT, member_name, arg_name)


def get_property_type(xml: str | bytes | IO, interface_name: str, property_name: str) -> str:
    """Read a property's type signature from XML."""
    interface = _interface_from_xml(xml, interface_name)
    return extract(interface, SignatureKind.PROPERTY, property_name)
