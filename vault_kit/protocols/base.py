"""
Protocol definitions for Vault Kit.

This module contains the storage backend protocol the services are written
against. Everything a service reads or writes goes through it.
"""

from __future__ import annotations

import datetime
from typing import List, Optional, Protocol, runtime_checkable

from vault_kit.models import Item, User


@runtime_checkable
class ItemStoreProtocol(Protocol):
    def create_user(self, user: User) -> User:
        ...

    def get_user(self, user_uuid: str) -> Optional[User]:
        ...

    def get_user_by_email(self, email: str) -> Optional[User]:
        ...

    def require_user(self, uuid_or_email: str) -> User:
        ...

    def create_item(
        self,
        user_uuid: str,
        content: str,
        content_type: Optional[str] = None,
        uuid: Optional[str] = None,
        created_at: Optional[datetime.datetime] = None,
        updated_at: Optional[datetime.datetime] = None,
    ) -> Item:
        ...

    def get_item(self, item_uuid: str) -> Optional[Item]:
        ...

    def item_exists(self, item_uuid: str) -> bool:
        ...

    def find_active(
        self, user_uuid: str, content_type: Optional[str] = None
    ) -> List[Item]:
        ...

    def find_items(self, user_uuid: str, include_deleted: bool = False) -> List[Item]:
        ...

    def soft_delete(self, item_uuid: str) -> bool:
        ...

    def sum_content_length(self, user_uuid: str) -> int:
        ...

    def close(self) -> None:
        ...
