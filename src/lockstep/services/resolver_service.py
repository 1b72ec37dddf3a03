"""Declaration resolution service for Lockstep.

This module finds the single interface member a record type corresponds to,
searching a collection of parsed introspection documents. Matching of member
names is delegated to a MatchStrategy so alternative heuristics can be swapped
in and tested on their own.

Resolution never guesses: more than one candidate is always an
AmbiguousDeclarationError, and no candidate is a DeclarationNotFoundError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, ConfigDict, Field

from lockstep.core.errors import AmbiguousDeclarationError, DeclarationNotFoundError
from lockstep.core.models import DeclarationKind, InterfaceDocument

logger = logging.getLogger(__name__)


class ResolutionKey(BaseModel):
    """What the caller knows about the record type being resolved."""

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(..., description="Declared name of the record type")
    interface_hint: str | None = Field(None, description="Exact interface name")
    member_hint: str | None = Field(None, description="Exact member name")
    kind: DeclarationKind = DeclarationKind.SIGNAL


class Candidate(BaseModel):
    """A declaration matching a ResolutionKey."""

    model_config = ConfigDict(frozen=True)

    interface_name: str = Field(..., description="Interface declaring the member")
    member_name: str = Field(..., description="Signal, method or property name")
    kind: DeclarationKind
    source: str = Field(..., description="Identity of the declaring document")

    def __str__(self) -> str:
        return f"{self.interface_name}.{self.member_name} ({self.source})"


class MatchStrategy(ABC):
    """Decides whether a declared member name matches a resolution key."""

    name: str = "abstract"

    @abstractmethod
    def matches(self, member_name: str, key: ResolutionKey) -> bool:
        """Return True if ``member_name`` corresponds to ``key``."""

    def search_key(self, key: ResolutionKey) -> str:
        """The string reported in errors for this strategy."""
        return key.type_name


class SubstringStrategy(MatchStrategy):
    """Member name contained in the type name (``RemoveNodeSignal`` ~ ``RemoveNode``)."""

    name = "substring"

    def matches(self, member_name: str, key: ResolutionKey) -> bool:
        return bool(member_name) and member_name in key.type_name


class ExactNameStrategy(MatchStrategy):
    """Member name equal to the type name."""

    name = "exact"

    def matches(self, member_name: str, key: ResolutionKey) -> bool:
        return member_name == key.type_name


class HintStrategy(MatchStrategy):
    """Member name equal to the caller's explicit member hint."""

    name = "hint"

    def matches(self, member_name: str, key: ResolutionKey) -> bool:
        return member_name == key.member_hint

    def search_key(self, key: ResolutionKey) -> str:
        return key.member_hint or key.type_name


STRATEGIES: dict[str, type[MatchStrategy]] = {
    SubstringStrategy.name: SubstringStrategy,
    ExactNameStrategy.name: ExactNameStrategy,
}


def strategy_from_name(name: str) -> MatchStrategy:
    """Build a name-matching strategy from its configured name."""
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"Unknown match strategy '{name}'. Valid options: {', '.join(STRATEGIES)}"
        ) from None


class DeclarationResolver:
    """Resolve record types to declarations across a set of documents."""

    def __init__(
        self,
        documents: Sequence[InterfaceDocument],
        *,
        strategy: MatchStrategy | None = None,
        max_candidates_reported: int = 10,
    ) -> None:
        """Create a resolver.

        Args:
            documents: Parsed documents, searched in the given order.
            strategy: Name matching used when a key has no member hint;
                defaults to SubstringStrategy.
            max_candidates_reported: Cap on candidates listed in ambiguity errors.
        """
        self._documents = list(documents)
        self._strategy = strategy or SubstringStrategy()
        self._max_candidates_reported = max_candidates_reported

    @property
    def documents(self) -> list[InterfaceDocument]:
        return self._documents

    def strategy_for(self, key: ResolutionKey) -> MatchStrategy:
        """An explicit member hint always overrides the default strategy."""
        if key.member_hint is not None:
            return HintStrategy()
        return self._strategy

    def find_candidates(self, key: ResolutionKey) -> list[Candidate]:
        """Return every declaration matching ``key``, in document order."""
        strategy = self.strategy_for(key)
        return list(self._iter_candidates(key, strategy))

    def _iter_candidates(
        self, key: ResolutionKey, strategy: MatchStrategy
    ) -> Iterable[Candidate]:
        for document in self._documents:
            for interface in document.interfaces:
                if key.interface_hint is not None and interface.name != key.interface_hint:
                    continue
                for member in interface.members(key.kind):
                    if strategy.matches(member.name, key):
                        logger.debug(
                            f"{strategy.name} match for '{key.type_name}': "
                            f"{interface.name}.{member.name} in {document.source}"
                        )
                        yield Candidate(
                            interface_name=interface.name,
                            member_name=member.name,
                            kind=key.kind,
                            source=document.source,
                        )

    def resolve(self, key: ResolutionKey) -> Candidate:
        """Resolve ``key`` to exactly one declaration.

        Raises:
            DeclarationNotFoundError: If nothing matches.
            AmbiguousDeclarationError: If more than one declaration matches.
        """
        strategy = self.strategy_for(key)
        candidates = list(self._iter_candidates(key, strategy))
        search_key = strategy.search_key(key)

        if not candidates:
            raise DeclarationNotFoundError(search_key, key.kind)
        if len(candidates) > 1:
            raise AmbiguousDeclarationError(
                search_key,
                key.kind,
                candidates,
                max_reported=self._max_candidates_reported,
            )
        return candidates[0]


def resolve(
    documents: Sequence[InterfaceDocument],
    type_name: str,
    interface_hint: str | None = None,
    member_hint: str | None = None,
    *,
    kind: DeclarationKind = DeclarationKind.SIGNAL,
    strategy: MatchStrategy | None = None,
) -> Candidate:
    """Resolve a record type name to its unique declaration.

    Example:
        >>> resolve(documents, "RemoveNodeSignal").member_name
        'RemoveNode'
    """
    key = ResolutionKey(
        type_name=type_name,
        interface_hint=interface_hint,
        member_hint=member_hint,
        kind=kind,
    )
    return DeclarationResolver(documents, strategy=strategy).resolve(key)
