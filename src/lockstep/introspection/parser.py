"""Parse D-Bus introspection XML into InterfaceDocument models.

Only the top-level ``<interface>`` elements of the root ``<node>`` are read.
Documentation elements and child ``<node>`` elements are ignored.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from pydantic import ValidationError

from lockstep.core.errors import DocumentParseError
from lockstep.core.models import (
    Access,
    Arg,
    Direction,
    Interface,
    InterfaceDocument,
    Method,
    Property,
    Signal,
)
from lockstep.core.signature import is_single_complete_type


def parse_document(text: str | bytes, source: str = "<string>") -> InterfaceDocument:
    """Parse one introspection document.

    Args:
        text: XML content.
        source: Identity of the document, used in errors and resolution results.

    Returns:
        The parsed document.

    Raises:
        DocumentParseError: If the XML is malformed, an element is missing a
            required attribute, or a type is not a single complete type.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise DocumentParseError(source, str(e)) from e

    if root.tag != "node":
        raise DocumentParseError(source, f"root element is <{root.tag}>, expected <node>")

    try:
        interfaces = tuple(_parse_interface(el, source) for el in root.findall("interface"))
        return InterfaceDocument(source=source, interfaces=interfaces)
    except ValidationError as e:
        errors = []
        for err in e.errors():
            loc = ".".join(str(x) for x in err["loc"])
            errors.append(f"{loc}: {err['msg']}")
        raise DocumentParseError(source, "; ".join(errors)) from e


def _required(el: ET.Element, attr: str, source: str) -> str:
    value = el.get(attr)
    if not value:
        raise DocumentParseError(source, f"<{el.tag}> is missing the '{attr}' attribute")
    return value


def _annotations(el: ET.Element, source: str) -> dict[str, str]:
    return {
        _required(a, "name", source): a.get("value", "")
        for a in el.findall("annotation")
    }


def _type_attr(el: ET.Element, owner: str, source: str) -> str:
    ty = _required(el, "type", source)
    if not is_single_complete_type(ty):
        raise DocumentParseError(
            source, f"type '{ty}' of {owner} is not a single complete type"
        )
    return ty


def _parse_arg(el: ET.Element, owner: str, source: str, *, directed: bool) -> Arg:
    name = el.get("name")
    ty = _type_attr(el, f"argument '{name or '?'}' of {owner}", source)
    direction = None
    if directed:
        raw = el.get("direction", Direction.IN.value)
        try:
            direction = Direction(raw)
        except ValueError as e:
            raise DocumentParseError(
                source, f"invalid direction '{raw}' on argument of {owner}"
            ) from e
    return Arg(name=name, type=ty, direction=direction)


def _parse_interface(el: ET.Element, source: str) -> Interface:
    iface_name = _required(el, "name", source)

    signals = []
    for sig in el.findall("signal"):
        name = _required(sig, "name", source)
        owner = f"signal '{iface_name}.{name}'"
        signals.append(
            Signal(
                name=name,
                args=tuple(
                    _parse_arg(a, owner, source, directed=False)
                    for a in sig.findall("arg")
                ),
                annotations=_annotations(sig, source),
            )
        )

    methods = []
    for meth in el.findall("method"):
        name = _required(meth, "name", source)
        owner = f"method '{iface_name}.{name}'"
        methods.append(
            Method(
                name=name,
                args=tuple(
                    _parse_arg(a, owner, source, directed=True)
                    for a in meth.findall("arg")
                ),
                annotations=_annotations(meth, source),
            )
        )

    properties = []
    for prop in el.findall("property"):
        name = _required(prop, "name", source)
        raw_access = prop.get("access", Access.READ.value)
        try:
            access = Access(raw_access)
        except ValueError as e:
            raise DocumentParseError(
                source, f"invalid access '{raw_access}' on property '{iface_name}.{name}'"
            ) from e
        properties.append(
            Property(
                name=name,
                type=_type_attr(prop, f"property '{iface_name}.{name}'", source),
                access=access,
                annotations=_annotations(prop, source),
            )
        )

    return Interface(
        name=iface_name,
        signals=tuple(signals),
        methods=tuple(methods),
        properties=tuple(properties),
        annotations=_annotations(el, source),
    )
