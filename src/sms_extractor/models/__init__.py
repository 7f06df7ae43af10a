"""Data models for SMS Extractor.

This module contains Pydantic models for data validation and serialization.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from sms_extractor.models.account import AccountMapping
from sms_extractor.models.message import MessageDirection, RawMessage
from sms_extractor.models.pattern import (
    EXTRACTED_FIELDS,
    FIELD_ACCOUNT,
    FIELD_AMOUNT,
    FIELD_DATE,
    FIELD_MERCHANT,
    FIELD_TYPE,
    PatternBundle,
)

# Field name -> raw extracted text, produced and consumed within one extraction.
ExtractedFields = dict[str, str]


class TransactionKind(str, Enum):
    """Transaction kind enumeration."""

    EXPENSE = "expense"
    INCOME = "income"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"

    @property
    def is_transfer(self) -> bool:
        return self in (TransactionKind.TRANSFER_IN, TransactionKind.TRANSFER_OUT)


class TransactionSource(str, Enum):
    """Where a transaction came from."""

    SMS_AUTO = "sms_auto"
    MANUAL = "manual"


class FailureKind(str, Enum):
    """Why an extraction did not produce a transaction."""

    NON_FINANCIAL = "non_financial"
    UNRECOGNIZED_SENDER = "unrecognized_sender"
    VALIDATION_FAILED = "validation_failed"
    UNPARSABLE_AMOUNT = "unparsable_amount"
    TIMEOUT = "timeout"
    INTERNAL_ERROR = "internal_error"


class ProvisionalTransaction(BaseModel):
    """An extracted, not-yet-persisted transaction candidate."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(gt=0, description="Transaction amount")
    kind: TransactionKind = Field(description="Expense, income or transfer direction")
    merchant: str = Field(description="Merchant or counterparty name")
    timestamp: datetime = Field(description="When the transaction happened")
    account_id: Optional[int] = Field(
        default=None,
        description="Internal account id resolved through account mappings",
    )
    account_identifier: Optional[str] = Field(
        default=None,
        description="Masked account identifier found in the message",
    )
    description: str = Field(description="Original message body")
    source: TransactionSource = Field(
        default=TransactionSource.SMS_AUTO,
        description="Machine-extracted or manually entered",
    )


class ExtractionDiagnostics(BaseModel):
    """Details of an extraction attempt, used for scoring and debugging."""

    fields: ExtractedFields = Field(default_factory=dict, description="Extracted raw fields")
    pattern: Optional[PatternBundle] = Field(default=None, description="Matched pattern bundle")
    processing_time_ms: float = Field(default=0.0, ge=0.0, description="Measured latency")
    errors: list[str] = Field(default_factory=list, description="Validation errors, if any")


class ExtractionSuccess(BaseModel):
    """A transaction was built from the message."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    transaction: ProvisionalTransaction = Field(description="Extracted transaction")
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence score")
    diagnostics: ExtractionDiagnostics = Field(description="Extraction details")

    @property
    def is_success(self) -> bool:
        return True


class ExtractionFailure(BaseModel):
    """No transaction could be built from the message."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    kind: FailureKind = Field(description="Failure classification")
    reason: str = Field(description="Human-readable reason")
    confidence: float = Field(ge=0.0, le=1.0, description="Residual confidence score")
    diagnostics: Optional[ExtractionDiagnostics] = Field(
        default=None,
        description="Extraction details when the pipeline got far enough to have any",
    )

    @property
    def is_success(self) -> bool:
        return False


ExtractionResult = Annotated[
    Union[ExtractionSuccess, ExtractionFailure],
    Field(discriminator="status"),
]

__all__ = [
    "EXTRACTED_FIELDS",
    "FIELD_ACCOUNT",
    "FIELD_AMOUNT",
    "FIELD_DATE",
    "FIELD_MERCHANT",
    "FIELD_TYPE",
    "AccountMapping",
    "ExtractedFields",
    "ExtractionDiagnostics",
    "ExtractionFailure",
    "ExtractionResult",
    "ExtractionSuccess",
    "FailureKind",
    "MessageDirection",
    "PatternBundle",
    "ProvisionalTransaction",
    "RawMessage",
    "TransactionKind",
    "TransactionSource",
]
