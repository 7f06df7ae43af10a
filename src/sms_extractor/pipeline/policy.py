"""Call-site review policy.

The orchestrator reports every successful extraction regardless of its score;
callers decide what is confident enough to accept automatically.
"""

from __future__ import annotations

from enum import Enum

from sms_extractor.models import ExtractionResult

DEFAULT_MIN_CONFIDENCE = 0.6


class Disposition(str, Enum):
    """What a caller should do with an extraction result."""

    AUTO_ACCEPT = "auto_accept"
    NEEDS_REVIEW = "needs_review"
    REJECTED = "rejected"


def triage(result: ExtractionResult, threshold: float = DEFAULT_MIN_CONFIDENCE) -> Disposition:
    if not result.is_success:
        return Disposition.REJECTED
    if result.confidence >= threshold:
        return Disposition.AUTO_ACCEPT
    return Disposition.NEEDS_REVIEW
