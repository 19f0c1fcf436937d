"""
Non-table data models for Vault Kit.

"""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class FeaturePayload(BaseModel):
    """Decoded configuration carried by a feature item."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    allow_email_recovery: Optional[StrictBool] = Field(
        default=None,
        alias="allowEmailRecovery",
        description="Whether MFA may be removed through email recovery",
    )
    subtype: Optional[str] = Field(
        default=None,
        description="Extension subtype, e.g. 'backup.email_archive'",
    )


class ItemSize(BaseModel):
    uuid: str
    content_type: Optional[str] = None
    content: str
    size: int = Field(..., description="Content length in bytes")


class BackupItem(BaseModel):
    uuid: str
    content_type: Optional[str] = None
    content: str = ""
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class BackupArchive(BaseModel):
    """The document written by a backup export."""

    items: List[BackupItem] = Field(default_factory=list)
    auth_params: Dict[str, Any] = Field(
        default_factory=dict,
        description="Key parameters needed to decrypt the items after import",
    )
