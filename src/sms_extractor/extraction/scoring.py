"""Confidence scoring for extractions.

The score is a pure function of the extraction diagnostics: a weighted sum of
seven presence factors plus small additive bonuses, clamped to ``[0, 1]``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from sms_extractor.models import (
    FIELD_ACCOUNT,
    FIELD_AMOUNT,
    FIELD_DATE,
    FIELD_MERCHANT,
    FIELD_TYPE,
    ExtractionDiagnostics,
)
from sms_extractor.registry.builtin import KNOWN_INSTITUTIONS

WEIGHT_AMOUNT = 0.30
WEIGHT_TYPE = 0.20
WEIGHT_MERCHANT = 0.15
WEIGHT_DATE = 0.10
WEIGHT_ACCOUNT = 0.10
WEIGHT_PATTERN = 0.10
WEIGHT_SENDER = 0.05

BONUS_FAST = 0.05
BONUS_MERCHANT_QUALITY = 0.05
BONUS_PRECISE_AMOUNT = 0.02

FAST_PROCESSING_MS = 100.0
MERCHANT_QUALITY_MIN_LENGTH = 5

_LETTER_RE = re.compile(r"[A-Za-z]")


@dataclass(frozen=True)
class ConfidenceFactors:
    """Independent presence factors feeding the base score."""

    amount_extracted: bool = False
    type_extracted: bool = False
    merchant_extracted: bool = False
    date_extracted: bool = False
    account_extracted: bool = False
    pattern_matched: bool = False
    sender_trusted: bool = False

    def base_score(self) -> float:
        weighted = (
            (self.amount_extracted, WEIGHT_AMOUNT),
            (self.type_extracted, WEIGHT_TYPE),
            (self.merchant_extracted, WEIGHT_MERCHANT),
            (self.date_extracted, WEIGHT_DATE),
            (self.account_extracted, WEIGHT_ACCOUNT),
            (self.pattern_matched, WEIGHT_PATTERN),
            (self.sender_trusted, WEIGHT_SENDER),
        )
        return sum(weight for present, weight in weighted if present)


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def factors_from_diagnostics(
    diagnostics: ExtractionDiagnostics,
    known_institutions: Iterable[str] = KNOWN_INSTITUTIONS,
) -> ConfidenceFactors:
    fields = diagnostics.fields
    pattern = diagnostics.pattern
    known = {name.lower() for name in known_institutions}

    def present(name: str) -> bool:
        return bool((fields.get(name) or "").strip())

    return ConfidenceFactors(
        amount_extracted=present(FIELD_AMOUNT),
        type_extracted=present(FIELD_TYPE),
        merchant_extracted=present(FIELD_MERCHANT),
        date_extracted=present(FIELD_DATE),
        account_extracted=present(FIELD_ACCOUNT),
        pattern_matched=pattern is not None,
        sender_trusted=pattern is not None and pattern.institution.lower() in known,
    )


def quality_bonus(diagnostics: ExtractionDiagnostics, fast_processing_ms: float) -> float:
    bonus = 0.0
    if diagnostics.processing_time_ms < fast_processing_ms:
        bonus += BONUS_FAST

    merchant = diagnostics.fields.get(FIELD_MERCHANT)
    if merchant and len(merchant) > MERCHANT_QUALITY_MIN_LENGTH and _LETTER_RE.search(merchant):
        bonus += BONUS_MERCHANT_QUALITY

    amount = diagnostics.fields.get(FIELD_AMOUNT)
    if amount and "." in amount:
        bonus += BONUS_PRECISE_AMOUNT
    return bonus


def score(
    diagnostics: ExtractionDiagnostics,
    *,
    fast_processing_ms: float = FAST_PROCESSING_MS,
    known_institutions: Iterable[str] = KNOWN_INSTITUTIONS,
) -> float:
    """Return the confidence score for an extraction, in ``[0, 1]``."""
    factors = factors_from_diagnostics(diagnostics, known_institutions)
    return _clamp(factors.base_score() + quality_bonus(diagnostics, fast_processing_ms))


class ConfidenceScorer:
    """Configured wrapper around :func:`score`."""

    def __init__(
        self,
        fast_processing_ms: float = FAST_PROCESSING_MS,
        known_institutions: Iterable[str] = KNOWN_INSTITUTIONS,
    ) -> None:
        self.fast_processing_ms = fast_processing_ms
        self.known_institutions = frozenset(name.lower() for name in known_institutions)

    def score(self, diagnostics: ExtractionDiagnostics) -> float:
        return score(
            diagnostics,
            fast_processing_ms=self.fast_processing_ms,
            known_institutions=self.known_institutions,
        )
