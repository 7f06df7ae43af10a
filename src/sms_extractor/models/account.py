"""Account mapping model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AccountMapping(BaseModel):
    """Links an institution's masked account identifier to an internal account."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Mapping identifier")
    account_id: int = Field(description="Internal account id")
    institution: str = Field(description="Institution name as used by pattern bundles")
    account_identifier: str = Field(description="Identifier as it appears in SMS, e.g. XXXX1234")
    is_active: bool = Field(default=True, description="Inactive mappings are kept for audit")
