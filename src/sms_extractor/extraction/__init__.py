"""Field extraction, validation, building and scoring stages."""

from .builder import TransactionBuilder, infer_kind, parse_date
from .fields import FieldExtractor, extract_fields
from .normalize import clean_account, clean_amount, clean_merchant, parse_amount
from .prefilter import is_potentially_financial
from .scoring import ConfidenceFactors, ConfidenceScorer, score
from .validation import FieldValidationResult, validate_fields

__all__ = [
    "ConfidenceFactors",
    "ConfidenceScorer",
    "FieldExtractor",
    "FieldValidationResult",
    "TransactionBuilder",
    "clean_account",
    "clean_amount",
    "clean_merchant",
    "extract_fields",
    "infer_kind",
    "is_potentially_financial",
    "parse_amount",
    "parse_date",
    "score",
    "validate_fields",
]
