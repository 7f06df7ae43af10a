"""Built-in institution pattern bundles seeded at start-up."""

from __future__ import annotations

from sms_extractor.models import PatternBundle

# Shared field patterns. Most Indian bank and wallet alerts use the same
# amount/merchant/date wording; only sender ids and account phrasing differ.
AMOUNT_PATTERN = r"(?:Rs\.?|INR|₹)\s*([\d,]+(?:\.\d{1,2})?)"
MERCHANT_PATTERN = r"\b(?:at|to|from)\s+([A-Za-z0-9\s&.-]+?)(?:\s+on|\s+dt|\s+via|\.\s|\.$|,|$)"
DATE_PATTERN = (
    r"(\d{2}[-/]\d{2}[-/]\d{2}(?:\d{2})?\s+\d{2}:\d{2}(?::\d{2})?"
    r"|\d{2}[-/]\d{2}[-/]\d{2,4})"
)
BANK_TYPE_PATTERN = r"(debited|credited|debit|credit)"
WALLET_TYPE_PATTERN = r"(debited|credited|debit|credit|paid|received)"
ACCOUNT_NO_PATTERN = r"(?:A/c|account)\s+(?:no\.?)?\s*([X\d]+)"
CARD_ENDING_PATTERN = r"(?:card|account)\s+(?:ending\s+)?([X\d]+)"
WALLET_ENDING_PATTERN = r"(?:wallet|account)\s+(?:ending\s+)?([X\d]+)"


def _bundle(
    institution: str,
    sender_pattern: str,
    account_pattern: str,
    type_pattern: str = BANK_TYPE_PATTERN,
) -> PatternBundle:
    return PatternBundle(
        institution=institution,
        sender_pattern=sender_pattern,
        amount_pattern=AMOUNT_PATTERN,
        merchant_pattern=MERCHANT_PATTERN,
        date_pattern=DATE_PATTERN,
        type_pattern=type_pattern,
        account_pattern=account_pattern,
    )


def default_bundles() -> list[PatternBundle]:
    """Return the built-in bundles in registration order."""
    return [
        _bundle("HDFC Bank", r"HDFC", ACCOUNT_NO_PATTERN),
        _bundle("ICICI Bank", r"ICICI", CARD_ENDING_PATTERN),
        _bundle("State Bank of India", r"SBI", ACCOUNT_NO_PATTERN),
        _bundle("Axis Bank", r"AXIS|AXIBNK", CARD_ENDING_PATTERN),
        _bundle("Kotak Mahindra Bank", r"KOTAK|KMBL?", ACCOUNT_NO_PATTERN),
        _bundle("Paytm Payments Bank", r"PAYTM|PYTM", WALLET_ENDING_PATTERN, WALLET_TYPE_PATTERN),
        _bundle("PhonePe", r"PHONEPE|PHONPE", WALLET_ENDING_PATTERN, WALLET_TYPE_PATTERN),
        _bundle("Google Pay", r"GPAY|GOOGLEPAY", WALLET_ENDING_PATTERN, WALLET_TYPE_PATTERN),
    ]


# Institutions whose senders count as trusted when scoring.
KNOWN_INSTITUTIONS = frozenset(
    name.lower()
    for name in (
        "HDFC Bank",
        "ICICI Bank",
        "State Bank of India",
        "Axis Bank",
        "Kotak Mahindra Bank",
        "Paytm Payments Bank",
        "PhonePe",
        "Google Pay",
    )
)
