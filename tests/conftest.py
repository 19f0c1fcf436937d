import datetime
import time
import uuid as uuid_lib
from typing import Any, Dict, Generator, List, Optional

import pytest

from vault_kit.core import VaultKit
from vault_kit.errors import NotFound
from vault_kit.models import Item, User, utc_now
from vault_kit.storage.sqlite import SQLiteBackend

LOREM_256 = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Quisque euismod"
    " nulla iaculis lacus consectetur, nec feugiat libero pellentesque. Vestibulum tincidunt"
    " tempor accumsan. Phasellus sed imperdiet libero. Proin ultrices vehicula nulla, vitae cras amet."
)


def make_user(**overrides) -> User:
    """Build a user with every credential field populated."""
    fields: Dict[str, Any] = dict(
        pw_nonce="somenonce",
        version="004",
        email="sn@testing.com",
        encrypted_password="encrypted",
        kp_origination="registration",
        kp_created=int(time.time()),
        pw_salt="salt",
        pw_cost=1,
        pw_alg="alg",
        pw_func="func",
        pw_key_size=1,
    )
    fields.update(overrides)
    return User(**fields)


@pytest.fixture(scope="function")
def storage() -> Generator[SQLiteBackend, Any, None]:
    """Create an in-memory SQLite database for testing."""
    db = SQLiteBackend(":memory:")

    yield db

    # Cleanup
    db.close()


@pytest.fixture(scope="function")
def user(storage: SQLiteBackend) -> User:
    return storage.create_user(make_user())


@pytest.fixture(scope="function")
def vault(storage: SQLiteBackend, user: User, tmp_path):
    yield VaultKit(user, storage=storage, backup_dir=str(tmp_path / "backups"))


class MockStorageBackend:
    """Mock storage backend for testing."""

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._items: Dict[str, Item] = {}
        self._next_id = 1

    def create_user(self, user: User) -> User:
        self._users[user.uuid] = user
        return user

    def get_user(self, user_uuid: str) -> Optional[User]:
        return self._users.get(user_uuid)

    def get_user_by_email(self, email: str) -> Optional[User]:
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    def require_user(self, uuid_or_email: str) -> User:
        user = self.get_user(uuid_or_email) or self.get_user_by_email(uuid_or_email)
        if user is None:
            raise NotFound(uuid_or_email)
        return user

    def create_item(
        self,
        user_uuid: str,
        content: str,
        content_type: Optional[str] = None,
        uuid: Optional[str] = None,
        created_at: Optional[datetime.datetime] = None,
        updated_at: Optional[datetime.datetime] = None,
    ) -> Item:
        item = Item(
            id=self._next_id,
            uuid=uuid or str(uuid_lib.uuid4()),
            user_uuid=user_uuid,
            content=content,
            content_type=content_type,
        )
        if created_at is not None:
            item.created_at = created_at
        if updated_at is not None:
            item.updated_at = updated_at
        self._next_id += 1
        self._items[item.uuid] = item
        return item

    def get_item(self, item_uuid: str) -> Optional[Item]:
        return self._items.get(item_uuid)

    def item_exists(self, item_uuid: str) -> bool:
        return item_uuid in self._items

    def find_active(
        self, user_uuid: str, content_type: Optional[str] = None
    ) -> List[Item]:
        return [
            item
            for item in self._items.values()
            if item.user_uuid == user_uuid
            and not item.deleted
            and (content_type is None or item.content_type == content_type)
        ]

    def find_items(self, user_uuid: str, include_deleted: bool = False) -> List[Item]:
        return [
            item
            for item in self._items.values()
            if item.user_uuid == user_uuid and (include_deleted or not item.deleted)
        ]

    def soft_delete(self, item_uuid: str) -> bool:
        item = self._items.get(item_uuid)
        if item is None or item.deleted:
            return False
        item.deleted = True
        item.updated_at = utc_now()
        return True

    def sum_content_length(self, user_uuid: str) -> int:
        return sum(item.size for item in self.find_active(user_uuid))

    def close(self) -> None:
        pass


@pytest.fixture(scope="function")
def mock_storage() -> MockStorageBackend:
    return MockStorageBackend()
