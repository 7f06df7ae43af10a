"""Custom exceptions for SMS Extractor."""


class SmsExtractorError(Exception):
    """Base exception for all SMS Extractor errors."""


class ConfigurationError(SmsExtractorError):
    """Exception raised for configuration related errors."""


class PatternError(SmsExtractorError):
    """Exception raised when a pattern bundle cannot be used as requested."""


class ValidationError(SmsExtractorError):
    """Exception raised for data validation errors."""
