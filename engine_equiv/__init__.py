"""engine-equiv - differential encoding-equivalence checker for engine API objects."""

__version__ = "0.1.0"

from .errors import (
    EngineEquivError,
    DecodeError,
    EncodeError,
    SchemaError,
    DivergenceError,
    FieldMismatchError,
)
from .models import Finding, Invariant, Outcome, TrialResult, TxHashVerdict
from .comparator import (
    BlockComparator,
    ForkchoiceComparator,
    HeaderComparator,
    normalize_validation_error,
)
from .structural import (
    classify_transaction_hashes,
    is_bogus_transaction_hash,
    json_fields_are_valid,
    validate_block_consistency,
)
from .seed_generator import SeedGenerator

__all__ = [
    "EngineEquivError",
    "DecodeError",
    "EncodeError",
    "SchemaError",
    "DivergenceError",
    "FieldMismatchError",
    "Finding",
    "Invariant",
    "Outcome",
    "TrialResult",
    "TxHashVerdict",
    "BlockComparator",
    "ForkchoiceComparator",
    "HeaderComparator",
    "normalize_validation_error",
    "classify_transaction_hashes",
    "is_bogus_transaction_hash",
    "json_fields_are_valid",
    "validate_block_consistency",
    "SeedGenerator",
]
