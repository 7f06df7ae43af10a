"""Per-institution pattern bundles."""

from __future__ import annotations

import re
from functools import lru_cache

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()

FIELD_AMOUNT = "amount"
FIELD_TYPE = "type"
FIELD_MERCHANT = "merchant"
FIELD_DATE = "date"
FIELD_ACCOUNT = "account"

EXTRACTED_FIELDS = (FIELD_AMOUNT, FIELD_TYPE, FIELD_MERCHANT, FIELD_DATE, FIELD_ACCOUNT)


@lru_cache(maxsize=1024)
def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a case-insensitive regex, returning None if it is invalid.

    Results are cached by pattern text, so every bundle sharing a pattern
    compiles it once.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as exc:
        logger.warning("invalid_pattern", pattern=pattern, error=str(exc))
        return None


class PatternBundle(BaseModel):
    """The set of field-extraction regexes for one institution."""

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, description="Registry-assigned identifier")
    institution: str = Field(description="Owning institution name, e.g. HDFC Bank")
    sender_pattern: str = Field(description="Regex matched against the sender identity")
    amount_pattern: str = Field(description="Regex capturing the transaction amount")
    merchant_pattern: str = Field(description="Regex capturing the merchant or counterparty")
    date_pattern: str = Field(description="Regex capturing the transaction date")
    type_pattern: str = Field(description="Regex capturing the debit/credit wording")
    account_pattern: str | None = Field(
        default=None,
        description="Optional regex capturing the masked account identifier",
    )
    is_active: bool = Field(default=True, description="Whether lookups consider this bundle")

    def pattern_for(self, field: str) -> str | None:
        """Return the raw pattern text for an extracted field name."""
        return {
            FIELD_AMOUNT: self.amount_pattern,
            FIELD_TYPE: self.type_pattern,
            FIELD_MERCHANT: self.merchant_pattern,
            FIELD_DATE: self.date_pattern,
            FIELD_ACCOUNT: self.account_pattern,
        }.get(field)

    def compiled(self, field: str) -> re.Pattern[str] | None:
        """Return the compiled regex for a field, or None if absent or invalid."""
        pattern = self.pattern_for(field)
        if pattern is None:
            return None
        return compile_pattern(pattern)

    def compiled_sender(self) -> re.Pattern[str] | None:
        return compile_pattern(self.sender_pattern)

    def matches_sender(self, sender: str) -> bool:
        """Case-insensitive search of the sender pattern; invalid regexes never match."""
        regex = self.compiled_sender()
        if regex is None:
            return False
        return regex.search(sender) is not None

    def invalid_patterns(self) -> list[str]:
        """Names of the patterns in this bundle that fail to compile."""
        invalid = []
        if self.compiled_sender() is None:
            invalid.append("sender")
        for field in EXTRACTED_FIELDS:
            if self.pattern_for(field) is not None and self.compiled(field) is None:
                invalid.append(field)
        return invalid
