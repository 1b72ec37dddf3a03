"""Introspection document parsing and discovery."""

from lockstep.introspection.loader import (
    DocumentSource,
    load_documents,
    parse_sources,
    read_sources,
    resolve_xml_path,
)
from lockstep.introspection.parser import parse_document

__all__ = [
    "DocumentSource",
    "load_documents",
    "parse_document",
    "parse_sources",
    "read_sources",
    "resolve_xml_path",
]
