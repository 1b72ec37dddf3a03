"""Unit tests for declaration resolution."""

import pytest

from lockstep.core.errors import AmbiguousDeclarationError, DeclarationNotFoundError
from lockstep.core.models import DeclarationKind, InterfaceDocument
from lockstep.introspection.parser import parse_document
from lockstep.services.resolver_service import (
    Candidate,
    DeclarationResolver,
    ExactNameStrategy,
    HintStrategy,
    ResolutionKey,
    SubstringStrategy,
    resolve,
    strategy_from_name,
)


class TestStrategies:
    """Tests for the name matching strategies."""

    def test_substring(self) -> None:
        key = ResolutionKey(type_name="RemoveNodeSignal")
        strategy = SubstringStrategy()
        assert strategy.matches("RemoveNode", key)
        assert not strategy.matches("AddNode", key)
        assert not strategy.matches("", key)

    def test_exact(self) -> None:
        key = ResolutionKey(type_name="RemoveNode")
        strategy = ExactNameStrategy()
        assert strategy.matches("RemoveNode", key)
        assert not strategy.matches("Remove", key)

    def test_hint(self) -> None:
        key = ResolutionKey(type_name="Whatever", member_hint="RemoveNode")
        strategy = HintStrategy()
        assert strategy.matches("RemoveNode", key)
        assert not strategy.matches("Whatever", key)
        assert strategy.search_key(key) == "RemoveNode"

    def test_strategy_from_name(self) -> None:
        assert isinstance(strategy_from_name("substring"), SubstringStrategy)
        assert isinstance(strategy_from_name("exact"), ExactNameStrategy)
        with pytest.raises(ValueError, match="Unknown match strategy"):
            strategy_from_name("fuzzy")


class TestResolve:
    """Tests for resolve()."""

    def test_substring_match(self, node_document: InterfaceDocument) -> None:
        result = resolve([node_document], "RemoveNodeSignal")
        assert result == Candidate(
            interface_name="org.example.Node",
            member_name="RemoveNode",
            kind=DeclarationKind.SIGNAL,
            source="node.xml",
        )

    def test_ambiguous_across_documents(
        self, node_document: InterfaceDocument, other_node_document: InterfaceDocument
    ) -> None:
        with pytest.raises(AmbiguousDeclarationError) as exc_info:
            resolve([node_document, other_node_document], "RemoveNodeSignal")

        err = exc_info.value
        assert err.search_key == "RemoveNodeSignal"
        assert [c.interface_name for c in err.candidates] == [
            "org.example.Node",
            "org.example.OtherNode",
        ]
        assert "disambiguate" in str(err)
        assert "org.example.OtherNode.RemoveNode (other_node.xml)" in str(err)

    def test_interface_hint_disambiguates(
        self, node_document: InterfaceDocument, other_node_document: InterfaceDocument
    ) -> None:
        result = resolve(
            [node_document, other_node_document],
            "RemoveNodeSignal",
            interface_hint="org.example.OtherNode",
        )
        assert result.interface_name == "org.example.OtherNode"
        assert result.source == "other_node.xml"

    def test_member_hint_replaces_substring_match(self, node_document: InterfaceDocument) -> None:
        result = resolve([node_document], "NodeGone", member_hint="RemoveNode")
        assert result.member_name == "RemoveNode"

    def test_member_hint_still_ambiguous_across_documents(
        self, node_document: InterfaceDocument, other_node_document: InterfaceDocument
    ) -> None:
        with pytest.raises(AmbiguousDeclarationError) as exc_info:
            resolve([node_document, other_node_document], "X", member_hint="RemoveNode")
        assert exc_info.value.search_key == "RemoveNode"

    def test_not_found_names_type_name(self, node_document: InterfaceDocument) -> None:
        with pytest.raises(DeclarationNotFoundError) as exc_info:
            resolve([node_document], "AddNodeSignal")
        assert exc_info.value.search_key == "AddNodeSignal"
        assert "AddNodeSignal" in str(exc_info.value)

    def test_not_found_names_member_hint(self, node_document: InterfaceDocument) -> None:
        with pytest.raises(DeclarationNotFoundError) as exc_info:
            resolve([node_document], "RemoveNodeSignal", member_hint="Removed")
        assert exc_info.value.search_key == "Removed"

    def test_interface_hint_excludes_everything(self, node_document: InterfaceDocument) -> None:
        with pytest.raises(DeclarationNotFoundError):
            resolve([node_document], "RemoveNodeSignal", interface_hint="org.example.None")

    def test_no_documents(self) -> None:
        with pytest.raises(DeclarationNotFoundError):
            resolve([], "RemoveNodeSignal")

    def test_kind_scopes_search(self, node_document: InterfaceDocument) -> None:
        with pytest.raises(DeclarationNotFoundError) as exc_info:
            resolve([node_document], "RemoveNodeSignal", kind=DeclarationKind.METHOD)
        assert exc_info.value.kind == DeclarationKind.METHOD

    def test_method_resolution(self, notify_document: InterfaceDocument) -> None:
        result = resolve([notify_document], "NotifyArgs", kind=DeclarationKind.METHOD)
        assert result.member_name == "Notify"
        assert result.kind == DeclarationKind.METHOD

    def test_property_resolution(self, property_document: InterfaceDocument) -> None:
        result = resolve([property_document], "InUse", kind=DeclarationKind.PROPERTY)
        assert result.member_name == "InUse"

    def test_exact_strategy(self, node_document: InterfaceDocument) -> None:
        with pytest.raises(DeclarationNotFoundError):
            resolve([node_document], "RemoveNodeSignal", strategy=ExactNameStrategy())
        result = resolve([node_document], "RemoveNode", strategy=ExactNameStrategy())
        assert result.member_name == "RemoveNode"

    def test_same_interface_in_two_documents_is_ambiguous(
        self, node_document: InterfaceDocument
    ) -> None:
        copy = node_document.model_copy(update={"source": "copy.xml"})
        with pytest.raises(AmbiguousDeclarationError) as exc_info:
            resolve([node_document, copy], "RemoveNodeSignal", interface_hint="org.example.Node")
        assert [c.source for c in exc_info.value.candidates] == ["node.xml", "copy.xml"]


class TestDeclarationResolver:
    """Tests for the resolver class."""

    def test_find_candidates_in_document_order(
        self, node_document: InterfaceDocument, other_node_document: InterfaceDocument
    ) -> None:
        resolver = DeclarationResolver([other_node_document, node_document])
        candidates = resolver.find_candidates(ResolutionKey(type_name="RemoveNodeSignal"))
        assert [c.source for c in candidates] == ["other_node.xml", "node.xml"]

    def test_overlapping_substrings_are_ambiguous(self) -> None:
        doc = parse_document(
            '<node><interface name="a.B">'
            '<signal name="Node"/><signal name="RemoveNode"/>'
            "</interface></node>",
            "overlap.xml",
        )
        with pytest.raises(AmbiguousDeclarationError) as exc_info:
            DeclarationResolver([doc]).resolve(ResolutionKey(type_name="RemoveNodeSignal"))
        assert len(exc_info.value.candidates) == 2

    def test_ambiguity_message_is_capped(self) -> None:
        interfaces = "".join(
            f'<interface name="a.I{i}"><signal name="Ping"/></interface>' for i in range(5)
        )
        doc = parse_document(f"<node>{interfaces}</node>", "many.xml")
        resolver = DeclarationResolver([doc], max_candidates_reported=2)
        with pytest.raises(AmbiguousDeclarationError) as exc_info:
            resolver.resolve(ResolutionKey(type_name="PingSignal"))
        assert len(exc_info.value.candidates) == 5
        assert "(3 more)" in str(exc_info.value)
        assert "a.I4" not in str(exc_info.value)

    def test_strategy_for_prefers_hint(self) -> None:
        resolver = DeclarationResolver([], strategy=ExactNameStrategy())
        assert isinstance(resolver.strategy_for(ResolutionKey(type_name="A")), ExactNameStrategy)
        assert isinstance(
            resolver.strategy_for(ResolutionKey(type_name="A", member_hint="B")), HintStrategy
        )
