"""Verification service: resolve, extract, then compare.

Ties the resolver, the extractor and the equivalence checker together so a
test can certify a record type against its declaration in one call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from lockstep.core.equivalence import assert_eq_signatures, signatures_are_eq
from lockstep.core.errors import InterfaceNotFoundError
from lockstep.core.models import Interface, InterfaceDocument, SignatureKind
from lockstep.core.type_signature import signature_of
from lockstep.services.extractor_service import extract
from lockstep.services.resolver_service import (
    Candidate,
    DeclarationResolver,
    MatchStrategy,
    ResolutionKey,
)


@dataclass
class VerificationResult:
    """Outcome of checking one record type against its declaration."""

    type_name: str
    candidate: Candidate
    declared: str
    reported: str
    equivalent: bool

    def raise_for_mismatch(self) -> None:
        """Raise SignatureMismatchError if the signatures differ in shape."""
        assert_eq_signatures(
            self.declared,
            self.reported,
            msg=f"{self.type_name} does not match {self.candidate}",
        )


class VerificationService:
    """Verify record type signatures against a set of documents."""

    def __init__(
        self,
        documents: Sequence[InterfaceDocument],
        *,
        strategy: MatchStrategy | None = None,
        max_candidates_reported: int = 10,
    ) -> None:
        self._documents = list(documents)
        self._resolver = DeclarationResolver(
            self._documents,
            strategy=strategy,
            max_candidates_reported=max_candidates_reported,
        )

    @property
    def resolver(self) -> DeclarationResolver:
        return self._resolver

    def locate(self, candidate: Candidate) -> Interface:
        """Return the interface a candidate was found in."""
        for document in self._documents:
            if document.source != candidate.source:
                continue
            interface = document.get_interface(candidate.interface_name)
            if interface is not None:
                return interface
        raise InterfaceNotFoundError(candidate.interface_name, candidate.source)

    def declared_signature(
        self,
        candidate: Candidate,
        kind: SignatureKind,
        arg_name: str | None = None,
    ) -> str:
        return extract(self.locate(candidate), kind, candidate.member_name, arg_name)

    def verify(
        self,
        type_name: str,
        signature: str,
        *,
        kind: SignatureKind = SignatureKind.SIGNAL,
        interface: str | None = None,
        member: str | None = None,
        arg_name: str | None = None,
    ) -> VerificationResult:
        """Check a reported signature against the declaration ``type_name`` resolves to.

        Args:
            type_name: Declared name of the record type.
            signature: Signature the record type reports for itself.
            kind: Which declared signature to compare against.
            interface: Optional interface hint.
            member: Optional member hint.
            arg_name: Compare against a single argument instead of the whole list.

        Raises:
            DeclarationNotFoundError, AmbiguousDeclarationError: From resolution.
            MemberNotFoundError, ArgNotFoundError: From extraction.
            InvalidSignatureError: If either signature is malformed.
        """
        key = ResolutionKey(
            type_name=type_name,
            interface_hint=interface,
            member_hint=member,
            kind=kind.declaration_kind,
        )
        candidate = self._resolver.resolve(key)
        declared = self.declared_signature(candidate, kind, arg_name)
        return VerificationResult(
            type_name=type_name,
            candidate=candidate,
            declared=declared,
            reported=signature,
            equivalent=signatures_are_eq(declared, signature),
        )

    def verify_type(
        self,
        record_type: type,
        *,
        kind: SignatureKind = SignatureKind.SIGNAL,
        interface: str | None = None,
        member: str | None = None,
        arg_name: str | None = None,
    ) -> VerificationResult:
        """Like ``verify``, using the record type's name and own signature."""
        return self.verify(
            record_type.__name__,
            signature_of(record_type),
            kind=kind,
            interface=interface,
            member=member,
            arg_name=arg_name,
        )
