"""Extraction orchestration and high-volume processing."""

from .orchestrator import ExtractionOrchestrator
from .policy import Disposition, triage
from .processor import BatchProcessor, ProcessingStats, ResultCache

__all__ = [
    "BatchProcessor",
    "Disposition",
    "ExtractionOrchestrator",
    "ProcessingStats",
    "ResultCache",
    "triage",
]
