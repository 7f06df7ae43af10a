"""SMS Extractor - turns bank and wallet SMS alerts into transactions.

This package classifies incoming text messages as financial or not, matches
them against per-institution patterns, extracts amount, type, merchant, date
and account fields, and scores how far each extraction can be trusted.
"""

__version__ = "0.1.0"

from sms_extractor.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
