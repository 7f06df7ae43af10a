"""Assemble validated fields into a provisional transaction."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import structlog

from sms_extractor.extraction.normalize import clean_merchant, clean_text, parse_amount
from sms_extractor.extraction.strategies import MERCHANT_DESCRIPTION_FALLBACKS, run_chain
from sms_extractor.models import (
    FIELD_ACCOUNT,
    FIELD_AMOUNT,
    FIELD_DATE,
    FIELD_MERCHANT,
    FIELD_TYPE,
    ExtractedFields,
    ProvisionalTransaction,
    RawMessage,
    TransactionKind,
    TransactionSource,
)

logger = structlog.get_logger()

UNKNOWN_MERCHANT = "Unknown Merchant"

CREDIT_KEYWORDS = ("credit", "credited", "received", "deposited")
DEBIT_KEYWORDS = ("debit", "debited", "withdrawn", "paid")
TRANSFER_KEYWORD = "transfer"

# Four-digit years before two-digit ones; with time before date-only.
DATE_FORMATS = (
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
    "%d/%m/%Y %H:%M",
    "%d-%m-%y %H:%M:%S",
    "%d/%m/%y %H:%M:%S",
    "%d-%m-%y %H:%M",
    "%d/%m/%y %H:%M",
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d-%m-%y",
    "%d/%m/%y",
)


def infer_kind(type_text: str | None, body: str) -> TransactionKind:
    """Classify a transaction from the whole body, then the extracted type text.

    Patterns often capture only a fragment of the message, so credit and debit
    wording anywhere in the body takes precedence over the captured type.
    """
    body_lower = body.lower()
    type_lower = (type_text or "").lower()

    if any(word in body_lower for word in CREDIT_KEYWORDS):
        kind = TransactionKind.INCOME
    elif any(word in body_lower for word in DEBIT_KEYWORDS):
        kind = TransactionKind.EXPENSE
    elif "credit" in type_lower or "received" in type_lower:
        kind = TransactionKind.INCOME
    else:
        kind = TransactionKind.EXPENSE

    if TRANSFER_KEYWORD in body_lower:
        if kind is TransactionKind.INCOME:
            return TransactionKind.TRANSFER_IN
        return TransactionKind.TRANSFER_OUT
    return kind


def parse_date(value: str | None) -> datetime | None:
    """Parse a day-first date (optionally with time); None if no format fits."""
    if not value:
        return None
    text = clean_text(value)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


class TransactionBuilder:
    """Builds :class:`ProvisionalTransaction` values from extracted fields."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    def build(
        self,
        fields: ExtractedFields,
        message: RawMessage,
        account_id: int | None = None,
    ) -> ProvisionalTransaction | None:
        """Return a transaction, or None if the amount cannot be parsed."""
        amount = parse_amount(fields.get(FIELD_AMOUNT))
        if amount is None or amount <= 0:
            return None

        timestamp = parse_date(fields.get(FIELD_DATE))
        if timestamp is None:
            if fields.get(FIELD_DATE):
                logger.debug("unparsed_date_defaulted", raw_date=fields[FIELD_DATE])
            timestamp = self._clock()

        return ProvisionalTransaction(
            amount=amount,
            kind=infer_kind(fields.get(FIELD_TYPE), message.body),
            merchant=fields.get(FIELD_MERCHANT) or self._merchant_from_body(message.body),
            timestamp=timestamp,
            account_id=account_id,
            account_identifier=fields.get(FIELD_ACCOUNT),
            description=message.body,
            source=TransactionSource.SMS_AUTO,
        )

    @staticmethod
    def _merchant_from_body(body: str) -> str:
        found = run_chain(MERCHANT_DESCRIPTION_FALLBACKS, body)
        if found:
            merchant = clean_merchant(found)
            if merchant:
                return merchant
        return UNKNOWN_MERCHANT
