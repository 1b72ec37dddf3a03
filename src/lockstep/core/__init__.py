"""Core module containing models, the signature grammar and equivalence checks."""

from lockstep.core.equivalence import (
    assert_eq_signatures,
    explain_mismatch,
    signatures_are_eq,
)
from lockstep.core.errors import (
    AmbiguousDeclarationError,
    ArgNotFoundError,
    DeclarationNotFoundError,
    DirectoryUnreadableError,
    DocumentParseError,
    InterfaceNotFoundError,
    InvalidSignatureError,
    LockstepError,
    MemberNotFoundError,
    SignatureMismatchError,
    TypeSignatureError,
)
from lockstep.core.models import (
    Access,
    Arg,
    DeclarationKind,
    Direction,
    Interface,
    InterfaceDocument,
    Method,
    Property,
    Signal,
    SignatureKind,
)
from lockstep.core.signature import (
    Array,
    DictEntry,
    Primitive,
    Signature,
    Struct,
    Term,
    Variant,
    is_single_complete_type,
    parse_signature,
    split_top_level,
)
from lockstep.core.type_signature import signature_of

__all__ = [
    "Access",
    "AmbiguousDeclarationError",
    "Arg",
    "ArgNotFoundError",
    "Array",
    "DeclarationKind",
    "DeclarationNotFoundError",
    "DictEntry",
    "Direction",
    "DirectoryUnreadableError",
    "DocumentParseError",
    "Interface",
    "InterfaceDocument",
    "InterfaceNotFoundError",
    "InvalidSignatureError",
    "LockstepError",
    "MemberNotFoundError",
    "Method",
    "Primitive",
    "Property",
    "Signal",
    "Signature",
    "SignatureKind",
    "SignatureMismatchError",
    "Struct",
    "Term",
    "TypeSignatureError",
    "Variant",
    "assert_eq_signatures",
    "explain_mismatch",
    "is_single_complete_type",
    "parse_signature",
    "signature_of",
    "signatures_are_eq",
    "split_top_level",
]
