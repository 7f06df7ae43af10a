"""Sanity checks on extracted fields before a transaction is built."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from sms_extractor.extraction.normalize import parse_amount
from sms_extractor.models import FIELD_AMOUNT, FIELD_MERCHANT, ExtractedFields

ERROR_AMOUNT_MISSING = "Amount not found"
ERROR_AMOUNT_INVALID = "Invalid amount format or negative value"
ERROR_MERCHANT_INVALID = "Invalid merchant name"

_LETTER_RE = re.compile(r"[A-Za-z]")


@dataclass(frozen=True)
class FieldValidationResult:
    """Outcome of validating one set of extracted fields."""

    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def validate_fields(fields: ExtractedFields) -> FieldValidationResult:
    """Check amount and merchant plausibility.

    A missing merchant is not an error; the transaction builder has its own
    fallback for it.
    """
    errors: list[str] = []

    amount_text = fields.get(FIELD_AMOUNT)
    if not amount_text:
        errors.append(ERROR_AMOUNT_MISSING)
    else:
        amount = parse_amount(amount_text)
        if amount is None or amount <= 0:
            errors.append(ERROR_AMOUNT_INVALID)

    merchant = fields.get(FIELD_MERCHANT)
    if merchant is not None and (len(merchant) < 2 or not _LETTER_RE.search(merchant)):
        errors.append(ERROR_MERCHANT_INVALID)

    return FieldValidationResult(errors=errors)
