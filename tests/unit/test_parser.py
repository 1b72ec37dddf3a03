"""Unit tests for introspection XML parsing."""

import pytest

from lockstep.core.errors import DocumentParseError
from lockstep.core.models import Access, Direction
from lockstep.introspection.parser import parse_document


CACHE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<node xmlns:doc="http://www.freedesktop.org/dbus/1.0/doc.dtd">
  <interface name="org.a11y.atspi.Cache">
    <signal name="AddAccessible">
      <arg name="nodeAdded" type="((so)(so)(so)iiassusau)"/>
      <annotation name="org.qtproject.QtDBus.QtTypeName.In0" value="QSpiAccessibleCacheItem"/>
    </signal>
    <method name="GetItems">
      <arg name="nodes" type="a((so)(so)(so)iiassusau)" direction="out"/>
    </method>
    <method name="Ping">
      <arg name="token" type="s"/>
    </method>
    <property name="Version" type="u" access="readwrite"/>
  </interface>
  <node name="child"/>
</node>
"""


class TestParseDocument:
    """Tests for parse_document."""

    def test_parses_interfaces_and_members(self) -> None:
        doc = parse_document(CACHE_XML, "cache.xml")
        assert doc.source == "cache.xml"
        assert [i.name for i in doc.interfaces] == ["org.a11y.atspi.Cache"]

        iface = doc.interfaces[0]
        assert [s.name for s in iface.signals] == ["AddAccessible"]
        assert [m.name for m in iface.methods] == ["GetItems", "Ping"]
        assert [p.name for p in iface.properties] == ["Version"]

    def test_signal_args(self) -> None:
        signal = parse_document(CACHE_XML).interfaces[0].signals[0]
        assert signal.args[0].name == "nodeAdded"
        assert signal.args[0].type == "((so)(so)(so)iiassusau)"
        assert signal.args[0].direction is None

    def test_annotations(self) -> None:
        signal = parse_document(CACHE_XML).interfaces[0].signals[0]
        assert signal.annotations == {
            "org.qtproject.QtDBus.QtTypeName.In0": "QSpiAccessibleCacheItem"
        }

    def test_method_direction_defaults_to_in(self) -> None:
        ping = parse_document(CACHE_XML).interfaces[0].get_method("Ping")
        assert ping is not None
        assert ping.args[0].direction == Direction.IN

    def test_property_access(self) -> None:
        prop = parse_document(CACHE_XML).interfaces[0].properties[0]
        assert prop.type == "u"
        assert prop.access == Access.READWRITE

    def test_unnamed_arg(self) -> None:
        doc = parse_document(
            '<node><interface name="a.B"><signal name="S"><arg type="i"/></signal></interface></node>'
        )
        assert doc.interfaces[0].signals[0].args[0].name is None

    def test_accepts_bytes(self) -> None:
        doc = parse_document(CACHE_XML.encode("utf-8"), "cache.xml")
        assert doc.interfaces[0].name == "org.a11y.atspi.Cache"

    def test_empty_node(self) -> None:
        assert parse_document("<node/>").interfaces == ()


class TestParseErrors:
    """Tests for malformed documents."""

    def test_malformed_xml(self) -> None:
        with pytest.raises(DocumentParseError) as exc_info:
            parse_document("<node><interface>", "broken.xml")
        assert exc_info.value.source == "broken.xml"
        assert "broken.xml" in str(exc_info.value)

    def test_wrong_root(self) -> None:
        with pytest.raises(DocumentParseError, match="expected <node>"):
            parse_document("<interface name='a.B'/>")

    def test_interface_without_name(self) -> None:
        with pytest.raises(DocumentParseError, match="missing the 'name' attribute"):
            parse_document("<node><interface/></node>")

    def test_arg_without_type(self) -> None:
        with pytest.raises(DocumentParseError, match="missing the 'type' attribute"):
            parse_document(
                '<node><interface name="a.B"><signal name="S"><arg name="x"/></signal>'
                "</interface></node>"
            )

    @pytest.mark.parametrize("ty", ["ii", "(i", "a{vs}", "z"])
    def test_arg_type_must_be_single_complete_type(self, ty: str) -> None:
        with pytest.raises(DocumentParseError, match="not a single complete type"):
            parse_document(
                f'<node><interface name="a.B"><signal name="S"><arg name="x" type="{ty}"/>'
                "</signal></interface></node>"
            )

    def test_invalid_direction(self) -> None:
        with pytest.raises(DocumentParseError, match="invalid direction 'sideways'"):
            parse_document(
                '<node><interface name="a.B"><method name="M">'
                '<arg type="i" direction="sideways"/></method></interface></node>'
            )

    def test_invalid_access(self) -> None:
        with pytest.raises(DocumentParseError, match="invalid access 'never'"):
            parse_document(
                '<node><interface name="a.B">'
                '<property name="P" type="i" access="never"/></interface></node>'
            )
