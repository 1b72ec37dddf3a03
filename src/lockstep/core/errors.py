"""Error types raised by Lockstep.

Every failure is deterministic and data-driven, so none of these are retried.
Each error carries enough context (search key, document identity, candidates)
for a human to fix the input documents or supply a disambiguating hint.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from lockstep.core.models import DeclarationKind
    from lockstep.services.resolver_service import Candidate


class LockstepError(Exception):
    """Base class for all Lockstep errors."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message if details is None else f"{message}: {details}")
        self.message = message
        self.details = details


class InvalidSignatureError(LockstepError):
    """A type signature string does not follow the D-Bus grammar."""

    def __init__(self, signature: str, position: int, reason: str) -> None:
        super().__init__(
            f"Invalid signature '{signature}'",
            details=f"{reason} at position {position}",
        )
        self.signature = signature
        self.position = position
        self.reason = reason


class TypeSignatureError(LockstepError):
    """A Python type cannot be mapped to a D-Bus signature."""

    def __init__(self, tp: object, reason: str) -> None:
        super().__init__(f"Cannot derive signature for {tp!r}", details=reason)
        self.tp = tp


class DocumentParseError(LockstepError):
    """An introspection document is malformed."""

    def __init__(self, source: str, details: str) -> None:
        super().__init__(f"Failed to parse introspection document '{source}'", details)
        self.source = source


class DirectoryUnreadableError(LockstepError):
    """The XML directory could not be located or enumerated."""

    def __init__(self, path: Path | None, details: str) -> None:
        super().__init__(f"Failed to read XML directory '{path}'", details)
        self.path = path


class InterfaceNotFoundError(LockstepError):
    """No interface with the requested name exists in a document."""

    def __init__(self, interface_name: str, source: str | None = None) -> None:
        where = f" in '{source}'" if source else ""
        super().__init__(f"Interface '{interface_name}' not found{where}")
        self.interface_name = interface_name
        self.source = source


class MemberNotFoundError(LockstepError):
    """An interface has no member with the requested name."""

    def __init__(self, interface_name: str, member_name: str, kind: str) -> None:
        super().__init__(
            f"No {kind} '{member_name}' on interface '{interface_name}'"
        )
        self.interface_name = interface_name
        self.member_name = member_name
        self.kind = kind


class ArgNotFoundError(LockstepError):
    """A member has no argument with the requested name."""

    def __init__(self, interface_name: str, member_name: str, arg_name: str) -> None:
        super().__init__(
            f"No argument '{arg_name}' on '{interface_name}.{member_name}'"
        )
        self.interface_name = interface_name
        self.member_name = member_name
        self.arg_name = arg_name


class DeclarationNotFoundError(LockstepError):
    """No declaration matches the resolution key."""

    def __init__(self, search_key: str, kind: DeclarationKind) -> None:
        super().__init__(
            f"No interface matching {kind.value} name '{search_key}' found"
        )
        self.search_key = search_key
        self.kind = kind


class AmbiguousDeclarationError(LockstepError):
    """More than one declaration matches and no hint disambiguates."""

    def __init__(
        self,
        search_key: str,
        kind: DeclarationKind,
        candidates: list[Candidate],
        max_reported: int = 10,
    ) -> None:
        listed = "; ".join(str(c) for c in candidates[:max_reported])
        if len(candidates) > max_reported:
            listed += f"; ... ({len(candidates) - max_reported} more)"
        super().__init__(
            f"Ambiguous: {len(candidates)} {kind.value}s match '{search_key}'. "
            "Please disambiguate with an interface and/or member hint",
            details=listed,
        )
        self.search_key = search_key
        self.kind = kind
        self.candidates = candidates


class SignatureMismatchError(LockstepError, AssertionError):
    """Two signatures do not denote the same type shape.

    Subclasses AssertionError so pytest reports it as a test failure rather
    than an error.
    """

    def __init__(self, left: str, right: str, explanation: str) -> None:
        super().__init__(
            "Signatures are not equivalent",
            details=f"left: '{left}', right: '{right}'\n{explanation}",
        )
        self.left = left
        self.right = right
        self.explanation = explanation
