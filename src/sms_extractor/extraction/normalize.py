"""Normalization helpers for raw extracted field text."""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

_CURRENCY_MARKERS_RE = re.compile(r"rs\.?|inr|[₹$]", re.IGNORECASE)
_AMOUNT_NOISE_RE = re.compile(r"[,\s]")
_AMOUNT_RE = re.compile(r"\d+(?:\.\d{1,2})?")

_MERCHANT_DISALLOWED_RE = re.compile(r"[^A-Za-z0-9\s&.-]")
_WHITESPACE_RE = re.compile(r"\s+")
MERCHANT_MAX_LENGTH = 50

_ACCOUNT_DISALLOWED_RE = re.compile(r"[^X\d]")


def clean_amount(value: str) -> str:
    """Strip currency symbols, grouping commas and whitespace.

    ``"Rs. 1,500.00"`` becomes ``"1500.00"``; a sign or stray text is left in
    place so the validator can reject it.
    """
    value = _CURRENCY_MARKERS_RE.sub("", value)
    return _AMOUNT_NOISE_RE.sub("", value)


def parse_amount(value: str | None) -> Decimal | None:
    """Parse an amount string into a Decimal.

    Returns None for anything that is not plain digits with at most two
    decimal places once currency markers are removed (negative values
    included).
    """
    if not value:
        return None
    cleaned = clean_amount(value)
    if not _AMOUNT_RE.fullmatch(cleaned):
        return None
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def clean_merchant(value: str) -> str:
    value = _MERCHANT_DISALLOWED_RE.sub("", value)
    value = _WHITESPACE_RE.sub(" ", value).strip()
    return value[:MERCHANT_MAX_LENGTH].rstrip()


def clean_account(value: str) -> str:
    """Keep only digits and the mask character ``X``."""
    return _ACCOUNT_DISALLOWED_RE.sub("", value.upper())


def clean_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value).strip()
