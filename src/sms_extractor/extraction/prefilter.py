"""Cheap keyword guard that rejects obviously non-financial messages."""

from __future__ import annotations

FINANCIAL_KEYWORDS = (
    "debited",
    "credited",
    "paid",
    "received",
    "transfer",
    "transaction",
    "amount",
    "balance",
    "account",
    "card",
    "upi",
    "payment",
)


def is_potentially_financial(body: str) -> bool:
    """True if a non-blank body mentions at least one financial keyword."""
    if not body or not body.strip():
        return False
    lowered = body.lower()
    return any(keyword in lowered for keyword in FINANCIAL_KEYWORDS)
