"""Declaration-site validation of record types.

``@validate`` resolves a record type against the introspection documents when
the class is defined, so a missing or ambiguous declaration fails at import
time with a message naming the class. It then attaches a test function named
``test_<TypeName>_type_signature`` to the declaring module, which pytest
collects like any other test::

    @validate(xml="tests/xml", interface="org.example.Node")
    @dataclass
    class RemoveNodeSignal:
        name: str
        path: ObjectPath
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar, overload

from lockstep.client import LockstepClient
from lockstep.core.config import LockstepConfig
from lockstep.core.errors import LockstepError
from lockstep.core.models import SignatureKind

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


def generated_test_name(record_type: type) -> str:
    """Name of the generated test for ``record_type``."""
    return f"test_{record_type.__name__}_type_signature"


def _attach(
    record_type: T,
    *,
    xml: Path | str | None,
    interface: str | None,
    member: str | None,
    kind: SignatureKind,
    arg: str | None,
    config: LockstepConfig | None,
) -> T:
    try:
        client = LockstepClient(xml_path=xml, config=config)
        candidate = client.resolve(
            record_type.__name__,
            interface=interface,
            member=member,
            kind=kind.declaration_kind,
        )
    except LockstepError as e:
        logger.error(f"Cannot validate {record_type.__qualname__}: {e}")
        raise

    def signature_test() -> None:
        client.assert_matches(
            record_type,
            kind=kind,
            interface=candidate.interface_name,
            member=candidate.member_name,
            arg_name=arg,
        )

    name = generated_test_name(record_type)
    signature_test.__name__ = name
    signature_test.__qualname__ = name
    signature_test.__module__ = record_type.__module__
    signature_test.__doc__ = (
        f"{record_type.__qualname__} matches {candidate.interface_name}."
        f"{candidate.member_name} ({kind.value})."
    )

    module = sys.modules.get(record_type.__module__)
    if module is not None:
        setattr(module, name, signature_test)
    record_type.__lockstep_test__ = signature_test  # type: ignore[attr-defined]
    logger.debug(f"Generated {name} for {candidate}")
    return record_type


@overload
def validate(xml: T) -> T: ...


@overload
def validate(
    xml: Path | str | None = None,
    *,
    interface: str | None = None,
    member: str | None = None,
    kind: SignatureKind = SignatureKind.SIGNAL,
    arg: str | None = None,
    config: LockstepConfig | None = None,
) -> Callable[[T], T]: ...


def validate(
    xml=None,
    *,
    interface=None,
    member=None,
    kind=SignatureKind.SIGNAL,
    arg=None,
    config=None,
):
    """Validate a record type's signature against its XML declaration.

    Usable bare (``@validate``) or with arguments.

    Args:
        xml: Directory of introspection XML. ``LOCKSTEP_XML_PATH`` overrides
            it; without either, ``xml/`` or ``XML/`` under the working
            directory is used.
        interface: Interface name, to disambiguate members declared twice.
        member: Member name, when it is not contained in the type's name.
        kind: Which declared signature the record type models.
        arg: Compare against this single argument only.
        config: Configuration; defaults to the cached global config.

    Raises:
        LockstepError: At class definition time, if the XML cannot be loaded
            or the declaration cannot be resolved uniquely.
    """
    if isinstance(xml, type):
        return _attach(
            xml,
            xml=None,
            interface=None,
            member=None,
            kind=SignatureKind.SIGNAL,
            arg=None,
            config=None,
        )

    def decorator(record_type: T) -> T:
        return _attach(
            record_type,
            xml=xml,
            interface=interface,
            member=member,
            kind=kind,
            arg=arg,
            config=config,
        )

    return decorator
