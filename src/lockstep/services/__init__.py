"""Resolution, extraction and verification services for Lockstep."""

from lockstep.services.extractor_service import (
    extract,
    get_method_args_type,
    get_method_return_type,
    get_property_type,
    get_signal_body_type,
)
from lockstep.services.resolver_service import (
    Candidate,
    DeclarationResolver,
    ExactNameStrategy,
    HintStrategy,
    MatchStrategy,
    ResolutionKey,
    SubstringStrategy,
    resolve,
    strategy_from_name,
)
from lockstep.services.verification_service import (
    VerificationResult,
    VerificationService,
)

__all__ = [
    "Candidate",
    "DeclarationResolver",
    "ExactNameStrategy",
    "HintStrategy",
    "MatchStrategy",
    "ResolutionKey",
    "SubstringStrategy",
    "VerificationResult",
    "VerificationService",
    "extract",
    "get_method_args_type",
    "get_method_return_type",
    "get_property_type",
    "get_signal_body_type",
    "resolve",
    "strategy_from_name",
]
