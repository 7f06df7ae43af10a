"""Top-level extraction pipeline for a single message.

Stages run in order: keyword pre-filter, sender lookup, field extraction,
validation, account resolution, transaction building and scoring. Each stage
that can fail returns an :class:`ExtractionFailure` with its own residual
confidence; nothing raises to the caller.
"""

from __future__ import annotations

import time

import structlog

from sms_extractor.config import Settings, get_settings
from sms_extractor.extraction.builder import TransactionBuilder
from sms_extractor.extraction.fields import FieldExtractor
from sms_extractor.extraction.prefilter import is_potentially_financial
from sms_extractor.extraction.scoring import ConfidenceScorer
from sms_extractor.extraction.validation import validate_fields
from sms_extractor.models import (
    FIELD_ACCOUNT,
    ExtractionDiagnostics,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    FailureKind,
    PatternBundle,
    RawMessage,
)
from sms_extractor.registry import AccountMappingService, PatternRegistry

logger = structlog.get_logger()

SCORE_NON_FINANCIAL = 0.0
SCORE_UNRECOGNIZED_SENDER = 0.1
SCORE_VALIDATION_FAILED = 0.2
SCORE_UNPARSABLE_AMOUNT = 0.1
SCORE_INTERNAL_ERROR = 0.1
SCORE_TIMEOUT = 0.0

PROCESSING_TIMEOUT_REASON = "processing timeout"


def timeout_failure() -> ExtractionFailure:
    return ExtractionFailure(
        kind=FailureKind.TIMEOUT,
        reason=PROCESSING_TIMEOUT_REASON,
        confidence=SCORE_TIMEOUT,
    )


def _expired(deadline: float | None) -> bool:
    return deadline is not None and time.monotonic() >= deadline


class ExtractionOrchestrator:
    """Turns one :class:`RawMessage` into an extraction result.

    The orchestrator is stateless between calls apart from the registries it
    reads, so running the same message twice yields the same result.
    """

    def __init__(
        self,
        registry: PatternRegistry | None = None,
        accounts: AccountMappingService | None = None,
        *,
        extractor: FieldExtractor | None = None,
        builder: TransactionBuilder | None = None,
        scorer: ConfidenceScorer | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            registry: Pattern registry. If None, uses the built-in institutions
                plus any bundles from ``settings.custom_patterns_path``.
            accounts: Account mapping service. If None, starts empty.
            extractor: Field extractor. If None, uses the default fallbacks.
            builder: Transaction builder. If None, uses the wall clock for
                undated messages.
            scorer: Confidence scorer. If None, built from settings.
            settings: Application settings. If None, uses default settings.
        """
        self.settings = settings or get_settings()
        if registry is None:
            registry = PatternRegistry.with_defaults()
            if self.settings.custom_patterns_path is not None:
                registry.load_bundles(self.settings.custom_patterns_path)
        self.registry = registry
        self.accounts = accounts or AccountMappingService()
        self.extractor = extractor or FieldExtractor()
        self.builder = builder or TransactionBuilder()
        self.scorer = scorer or ConfidenceScorer(fast_processing_ms=self.settings.fast_processing_ms)

    def register_pattern(self, bundle: PatternBundle) -> PatternBundle:
        return self.registry.register(bundle)

    def patterns(self) -> list[PatternBundle]:
        return self.registry.all()

    def extract(self, message: RawMessage, deadline: float | None = None) -> ExtractionResult:
        """Run the full pipeline for one message.

        Args:
            message: Message to process.
            deadline: Optional ``time.monotonic()`` value; checked between
                stages, and once passed the result is a timeout failure.

        Returns:
            ExtractionSuccess or ExtractionFailure. Never raises.
        """
        started = time.perf_counter()
        try:
            result = self._run(message, started, deadline)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "extraction_failed",
                sender=getattr(message, "sender", None),
                error=str(exc),
            )
            return ExtractionFailure(
                kind=FailureKind.INTERNAL_ERROR,
                reason=f"Extraction failed: {exc}",
                confidence=SCORE_INTERNAL_ERROR,
            )

        if isinstance(result, ExtractionFailure):
            logger.debug(
                "extraction_rejected",
                sender=message.sender,
                kind=result.kind.value,
                reason=result.reason,
            )
        else:
            logger.debug(
                "extraction_succeeded",
                sender=message.sender,
                kind=result.transaction.kind.value,
                confidence=result.confidence,
            )
        return result

    def _run(self, message: RawMessage, started: float, deadline: float | None) -> ExtractionResult:
        if not is_potentially_financial(message.body):
            return ExtractionFailure(
                kind=FailureKind.NON_FINANCIAL,
                reason="Message does not contain financial keywords",
                confidence=SCORE_NON_FINANCIAL,
            )

        bundle = self.registry.find_by_sender(message.sender)
        if bundle is None:
            return ExtractionFailure(
                kind=FailureKind.UNRECOGNIZED_SENDER,
                reason=f"No matching pattern found for sender: {message.sender}",
                confidence=SCORE_UNRECOGNIZED_SENDER,
            )
        if _expired(deadline):
            return timeout_failure()

        fields = self.extractor.extract(message.body, bundle)
        if _expired(deadline):
            return timeout_failure()

        validation = validate_fields(fields)
        if not validation.is_valid:
            return ExtractionFailure(
                kind=FailureKind.VALIDATION_FAILED,
                reason=f"Field validation failed: {', '.join(validation.errors)}",
                confidence=SCORE_VALIDATION_FAILED,
                diagnostics=ExtractionDiagnostics(
                    fields=fields,
                    pattern=bundle,
                    processing_time_ms=_elapsed_ms(started),
                    errors=list(validation.errors),
                ),
            )

        account_id = None
        identifier = fields.get(FIELD_ACCOUNT)
        if identifier:
            account_id = self.accounts.find_account(bundle.institution, identifier)

        transaction = self.builder.build(fields, message, account_id)
        diagnostics = ExtractionDiagnostics(
            fields=fields,
            pattern=bundle,
            processing_time_ms=_elapsed_ms(started),
        )
        if transaction is None:
            return ExtractionFailure(
                kind=FailureKind.UNPARSABLE_AMOUNT,
                reason="Failed to build transaction from extracted fields",
                confidence=SCORE_UNPARSABLE_AMOUNT,
                diagnostics=diagnostics,
            )
        if _expired(deadline):
            return timeout_failure()

        return ExtractionSuccess(
            transaction=transaction,
            confidence=self.scorer.score(diagnostics),
            diagnostics=diagnostics,
        )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000.0
