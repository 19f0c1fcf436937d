"""
SQLModel table definitions for Vault Kit.

Users carry the credential scheme fields clients need to derive their keys.
Items are opaque encrypted blobs owned by exactly one user.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Any, Dict, Optional

from sqlmodel import Field, SQLModel


def _new_uuid() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class User(SQLModel, table=True):
    """SQLModel for the users table."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    uuid: str = Field(default_factory=_new_uuid, unique=True, index=True)
    email: str = Field(unique=True, index=True)

    # Credential scheme
    version: str = Field(default="004")
    pw_nonce: Optional[str] = None
    encrypted_password: Optional[str] = None

    # Legacy derivation fields, only meaningful for versions 001-003
    pw_salt: Optional[str] = None
    pw_cost: Optional[int] = None
    pw_alg: Optional[str] = None
    pw_func: Optional[str] = None
    pw_key_size: Optional[int] = None

    # Provenance of the current key parameters
    kp_origination: Optional[str] = None
    kp_created: Optional[int] = None

    created_at: datetime.datetime = Field(default_factory=utc_now)
    updated_at: datetime.datetime = Field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the user to its shareable representation."""
        return {"uuid": self.uuid, "email": self.email}


class Item(SQLModel, table=True):
    """SQLModel for the items table."""

    __tablename__ = "items"

    # The integer id only exists to give items a stable insertion order
    id: Optional[int] = Field(default=None, primary_key=True)
    uuid: str = Field(default_factory=_new_uuid, unique=True, index=True)
    user_uuid: str = Field(foreign_key="users.uuid", index=True)
    content: str = Field(default="")
    content_type: Optional[str] = Field(default=None, index=True)
    deleted: bool = Field(default=False)
    created_at: datetime.datetime = Field(default_factory=utc_now)
    updated_at: datetime.datetime = Field(default_factory=utc_now)

    @property
    def size(self) -> int:
        """Byte length of the content as stored."""
        return len((self.content or "").encode("utf-8"))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the item to the representation written to backups."""
        return {
            "uuid": self.uuid,
            "content_type": self.content_type,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
