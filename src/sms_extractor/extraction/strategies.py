"""Fallback extraction strategies.

Each strategy is a pure ``(text) -> str | None`` callable. Chains are tried in
order and the first non-empty result wins. Amount and account fields have no
fallbacks: a guessed amount or account is worse than none.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from sms_extractor.models import FIELD_DATE, FIELD_MERCHANT, FIELD_TYPE

Strategy = Callable[[str], str | None]

CREDIT_WORDS = ("credited", "received")


def search_first(regex: re.Pattern[str] | None, text: str) -> str | None:
    """Return the first capturing group of the first match (or the whole match)."""
    if regex is None:
        return None
    match = regex.search(text)
    if match is None:
        return None
    value = match.group(1) if regex.groups else match.group(0)
    if value is None:
        return None
    return value.strip() or None


def regex_strategy(pattern: str) -> Strategy:
    regex = re.compile(pattern, re.IGNORECASE)

    def strategy(text: str) -> str | None:
        return search_first(regex, text)

    strategy.__name__ = f"regex<{pattern}>"
    return strategy


def keyword_type(text: str) -> str:
    """Guess debit/credit wording from the body; defaults to debit."""
    lowered = text.lower()
    if any(word in lowered for word in CREDIT_WORDS):
        return "credit"
    return "debit"


def run_chain(strategies: Iterable[Strategy], text: str) -> str | None:
    for strategy in strategies:
        value = strategy(text)
        if value:
            return value
    return None


MERCHANT_FALLBACKS: tuple[Strategy, ...] = (
    regex_strategy(r"\b(?:at|to|from)\s+([A-Za-z0-9\s&.-]+?)(?:\s+on|\s+dt|\s+via|\.\s|\.$|,|$)"),
    regex_strategy(r"\b(?:paid to|received from)\s+([A-Za-z0-9\s&.-]+?)(?:\s+on|\.\s|\.$|,|$)"),
    regex_strategy(r"\btransaction at\s+([A-Za-z0-9\s&.-]+?)(?:\s+on|\.\s|\.$|,|$)"),
)

DATE_FALLBACKS: tuple[Strategy, ...] = (
    regex_strategy(r"(\d{2}-\d{2}-\d{4}\s+\d{2}:\d{2}:\d{2})"),
    regex_strategy(r"(\d{2}/\d{2}/\d{4}\s+\d{2}:\d{2}(?::\d{2})?)"),
    regex_strategy(r"(\d{2}-\d{2}-\d{4})"),
    regex_strategy(r"(\d{2}/\d{2}/\d{4})"),
    regex_strategy(r"(\d{2}-\d{2}-\d{2})\b"),
    regex_strategy(r"(\d{2}/\d{2}/\d{2})\b"),
)

TYPE_FALLBACKS: tuple[Strategy, ...] = (keyword_type,)

FALLBACKS: dict[str, tuple[Strategy, ...]] = {
    FIELD_MERCHANT: MERCHANT_FALLBACKS,
    FIELD_DATE: DATE_FALLBACKS,
    FIELD_TYPE: TYPE_FALLBACKS,
}

# Used by the transaction builder when no merchant field was extracted at all.
MERCHANT_DESCRIPTION_FALLBACKS: tuple[Strategy, ...] = (
    regex_strategy(r"\b(?:at|to)\s+([A-Za-z0-9\s]+?)(?:\s+on|\.|$)"),
    regex_strategy(r"\bpaid to\s+([A-Za-z0-9\s]+?)(?:\s+on|\.|$)"),
    regex_strategy(r"\bfrom\s+([A-Za-z0-9\s]+?)(?:\s+on|\.|$)"),
)
