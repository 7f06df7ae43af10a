"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest


@pytest.fixture
def mock_settings():
    """Provide settings with small, test-friendly limits."""
    from sms_extractor.config import Settings

    return Settings(
        batch_chunk_size=2,
        max_concurrency=4,
        processing_timeout_ms=2000,
        cache_enabled=True,
        cache_size_limit=10,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
def registry():
    """Registry seeded with the built-in institutions."""
    from sms_extractor.registry import PatternRegistry

    return PatternRegistry.with_defaults()


@pytest.fixture
def accounts():
    from sms_extractor.registry import AccountMappingService

    return AccountMappingService()


@pytest.fixture
def orchestrator(registry, accounts, mock_settings, fixed_now):
    from sms_extractor.extraction import TransactionBuilder
    from sms_extractor.pipeline import ExtractionOrchestrator

    return ExtractionOrchestrator(
        registry,
        accounts,
        builder=TransactionBuilder(clock=lambda: fixed_now),
        settings=mock_settings,
    )


@pytest.fixture
def make_message():
    """Factory for RawMessage instances with a fixed arrival time."""
    from sms_extractor.models import RawMessage

    def _make(sender: str, body: str, timestamp: datetime | None = None) -> RawMessage:
        return RawMessage(
            sender=sender,
            body=body,
            timestamp=timestamp or datetime(2024, 1, 15, 14, 31, 0),
        )

    return _make


@pytest.fixture
def hdfc_debit_body() -> str:
    return "Rs.1500.00 debited from A/c no XXXX1234 at AMAZON on 15-01-2024 14:30:25"


@pytest.fixture
def hdfc_credit_body() -> str:
    return "Rs.2000.00 credited to A/c XXXX5678 from SALARY on 01-02-2024"
