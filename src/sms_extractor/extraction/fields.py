"""Best-effort field extraction from a message body."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from sms_extractor.extraction.normalize import clean_account, clean_amount, clean_merchant
from sms_extractor.extraction.strategies import FALLBACKS, Strategy, run_chain, search_first
from sms_extractor.models import (
    EXTRACTED_FIELDS,
    FIELD_ACCOUNT,
    FIELD_AMOUNT,
    FIELD_MERCHANT,
    ExtractedFields,
    PatternBundle,
)

logger = structlog.get_logger()

NORMALIZERS: dict[str, Callable[[str], str]] = {
    FIELD_AMOUNT: clean_amount,
    FIELD_MERCHANT: clean_merchant,
    FIELD_ACCOUNT: clean_account,
}


class FieldExtractor:
    """Extracts each field independently, falling back to generic strategies.

    Extraction never raises: a bundle pattern that does not compile behaves as
    if it found nothing.
    """

    def __init__(self, fallbacks: dict[str, tuple[Strategy, ...]] | None = None) -> None:
        self.fallbacks = FALLBACKS if fallbacks is None else fallbacks

    def extract(self, body: str, bundle: PatternBundle) -> ExtractedFields:
        fields: ExtractedFields = {}
        for field in EXTRACTED_FIELDS:
            value = search_first(bundle.compiled(field), body)
            if value is None:
                value = run_chain(self.fallbacks.get(field, ()), body)
                if value is not None:
                    logger.debug("field_fallback_used", field=field, pattern_id=bundle.id)
            if value is None:
                continue

            normalize = NORMALIZERS.get(field)
            if normalize is not None:
                value = normalize(value)
            if value:
                fields[field] = value
        return fields


_default_extractor = FieldExtractor()


def extract_fields(body: str, bundle: PatternBundle) -> ExtractedFields:
    """Extract amount, type, merchant, date and account text from ``body``."""
    return _default_extractor.extract(body, bundle)
