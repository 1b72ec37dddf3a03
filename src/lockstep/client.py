"""Public client interface for Lockstep.

Lockstep already exposes lower-level building blocks (core/, introspection/
and services/). This module provides a stable, ergonomic entrypoint for
external callers: load a directory of introspection documents once, then
resolve, extract and verify against it.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from lockstep.core.config import LockstepConfig, get_config
from lockstep.core.errors import AmbiguousDeclarationError, InterfaceNotFoundError
from lockstep.core.models import DeclarationKind, Interface, InterfaceDocument, SignatureKind
from lockstep.introspection.loader import load_documents
from lockstep.services.extractor_service import extract
from lockstep.services.resolver_service import Candidate, ResolutionKey, strategy_from_name
from lockstep.services.verification_service import VerificationResult, VerificationService


class LockstepClient:
    """High-level client that owns a loaded document set and exposes services."""

    def __init__(
        self,
        documents: Sequence[InterfaceDocument] | None = None,
        *,
        xml_path: Path | str | None = None,
        config: LockstepConfig | None = None,
        base_dir: Path | None = None,
    ) -> None:
        """Create a Lockstep client.

        Args:
            documents: Already parsed documents. When omitted, documents are
                loaded from ``xml_path`` (or the configured/conventional directory).
            xml_path: Directory of introspection XML files.
            config: Configuration; defaults to the cached global config.
            base_dir: Base for the conventional ``xml/`` and ``XML/`` directories.
        """
        self._config = config or get_config()
        if documents is None:
            documents = load_documents(xml_path, config=self._config, base_dir=base_dir)
        self._documents = list(documents)
        self._verifier: VerificationService | None = None

    @property
    def config(self) -> LockstepConfig:
        return self._config

    @property
    def documents(self) -> list[InterfaceDocument]:
        """Documents in search order."""
        return self._documents

    @property
    def verifier(self) -> VerificationService:
        """Resolve/extract/compare service."""
        if self._verifier is None:
            self._verifier = VerificationService(
                self._documents,
                strategy=strategy_from_name(self._config.match_strategy),
                max_candidates_reported=self._config.max_candidates_reported,
            )
        return self._verifier

    def interfaces(self, name: str) -> list[tuple[InterfaceDocument, Interface]]:
        """Every interface named ``name`` with its document, in document order."""
        found = []
        for document in self._documents:
            interface = document.get_interface(name)
            if interface is not None:
                found.append((document, interface))
        if not found:
            raise InterfaceNotFoundError(name)
        return found

    def resolve(
        self,
        type_name: str,
        *,
        interface: str | None = None,
        member: str | None = None,
        kind: DeclarationKind = DeclarationKind.SIGNAL,
    ) -> Candidate:
        """Resolve a record type name to its unique declaration."""
        key = ResolutionKey(
            type_name=type_name,
            interface_hint=interface,
            member_hint=member,
            kind=kind,
        )
        return self.verifier.resolver.resolve(key)

    def extract(
        self,
        interface_name: str,
        member_name: str,
        kind: SignatureKind = SignatureKind.SIGNAL,
        arg_name: str | None = None,
        source: str | None = None,
    ) -> str:
        """Extract a declared signature by explicit interface and member name.

        Every document declaring ``interface_name`` is searched for the
        member; ``source`` restricts the search to one document.

        Raises:
            InterfaceNotFoundError: If no searched document declares the interface.
            MemberNotFoundError: If none of those interfaces declares the member.
            AmbiguousDeclarationError: If more than one document declares it.
        """
        found = self.interfaces(interface_name)
        if source is not None:
            found = [(d, i) for d, i in found if d.source == source]
            if not found:
                raise InterfaceNotFoundError(interface_name, source)

        declaration_kind = kind.declaration_kind
        declaring = [
            (document, interface)
            for document, interface in found
            if any(m.name == member_name for m in interface.members(declaration_kind))
        ]
        if len(declaring) > 1:
            candidates = [
                Candidate(
                    interface_name=interface.name,
                    member_name=member_name,
                    kind=declaration_kind,
                    source=document.source,
                )
                for document, interface in declaring
            ]
            raise AmbiguousDeclarationError(
                f"{interface_name}.{member_name}",
                declaration_kind,
                candidates,
                self._config.max_candidates_reported,
            )

        _, interface = declaring[0] if declaring else found[0]
        return extract(interface, kind, member_name, arg_name)

    def verify(
        self,
        record_type: type,
        *,
        kind: SignatureKind = SignatureKind.SIGNAL,
        interface: str | None = None,
        member: str | None = None,
        arg_name: str | None = None,
    ) -> VerificationResult:
        """Check a record type's own signature against its declaration."""
        return self.verifier.verify_type(
            record_type,
            kind=kind,
            interface=interface,
            member=member,
            arg_name=arg_name,
        )

    def assert_matches(self, record_type: type, **kwargs) -> None:
        """Like ``verify`` but raises SignatureMismatchError on a mismatch."""
        self.verify(record_type, **kwargs).raise_for_mismatch()
