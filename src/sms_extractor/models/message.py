"""Incoming SMS message model.

Messages arrive from the platform ingestion layer already permission-checked;
this model only describes them. It is immutable and consumed once by the
extraction pipeline.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MessageDirection(str, Enum):
    """Whether a message was received by or sent from the device."""

    RECEIVED = "received"
    SENT = "sent"


class RawMessage(BaseModel):
    """A single SMS as delivered by the ingestion layer."""

    model_config = ConfigDict(frozen=True)

    sender: str = Field(description="Sender identity, e.g. VK-HDFCBK")
    body: str = Field(description="Message body text")
    timestamp: datetime = Field(description="Arrival timestamp")
    direction: MessageDirection = Field(
        default=MessageDirection.RECEIVED,
        description="Received or sent",
    )

    def body_digest(self) -> str:
        """Return a stable hex digest of the body."""
        return hashlib.sha256(self.body.encode("utf-8")).hexdigest()

    def cache_key(self) -> tuple[str, str, str]:
        """Key used to deduplicate repeated deliveries of the same message."""
        return (self.sender, self.body_digest(), self.timestamp.isoformat())
