"""
SQLite storage backend for Vault Kit.
"""

from __future__ import annotations

import datetime
import logging
from typing import List, Optional

from sqlalchemy import func, or_, update
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from vault_kit.errors import NotFound
from vault_kit.models import Item, User, utc_now
from vault_kit.protocols import ItemStoreProtocol

from .base import content_byte_length, default_database_path

# Set up logging
logger = logging.getLogger(__name__)


class SQLiteBackend:
    """SQLite storage backend"""

    __protocol_class__ = ItemStoreProtocol

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize the SQLite backend.

        Args:
            connection_string: Path to the SQLite database file, or ":memory:".
                If None, uses a default path in the user's home directory.
        """
        if connection_string is None:
            connection_string = default_database_path()

        self.connection_string = connection_string

        if connection_string == ":memory:":
            # Every session has to see the same in-memory database
            self.engine = create_engine(
                "sqlite://",
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{connection_string}",
                connect_args={"check_same_thread": False},
            )
        self._initialize_db()

    def _initialize_db(self) -> None:
        """Initialize the database schema."""
        SQLModel.metadata.create_all(self.engine)

    def create_user(self, user: User) -> User:
        """
        Store a new user.

        Args:
            user: The User object to store

        Returns:
            The stored User, refreshed from the database
        """
        with Session(self.engine) as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            logger.debug(f"Created user {user.uuid}")
            return user

    def get_user(self, user_uuid: str) -> Optional[User]:
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.uuid == user_uuid)).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.email == email)).first()

    def require_user(self, uuid_or_email: str) -> User:
        """
        Look up a user by uuid or email.

        Raises:
            NotFound: If no user matches
        """
        with Session(self.engine) as session:
            user = session.exec(
                select(User).where(
                    or_(User.uuid == uuid_or_email, User.email == uuid_or_email)
                )
            ).first()

        if user is None:
            raise NotFound(f"No user matching {uuid_or_email!r}")
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
        """
        Store a new item for a user.

        Args:
            user_uuid: UUID of the owning user
            content: The opaque item content
            content_type: Optional content type tag
            uuid: Keep an existing item uuid (used when restoring backups)
            created_at: Keep an existing creation time
            updated_at: Keep an existing modification time

        Returns:
            The created Item
        """
        item = Item(user_uuid=user_uuid, content=content, content_type=content_type)
        if uuid is not None:
            item.uuid = uuid
        if created_at is not None:
            item.created_at = created_at
        if updated_at is not None:
            item.updated_at = updated_at

        with Session(self.engine) as session:
            session.add(item)
            session.commit()
            session.refresh(item)
            return item

    def get_item(self, item_uuid: str) -> Optional[Item]:
        with Session(self.engine) as session:
            return session.exec(select(Item).where(Item.uuid == item_uuid)).first()

    def item_exists(self, item_uuid: str) -> bool:
        return self.get_item(item_uuid) is not None

    def find_active(
        self, user_uuid: str, content_type: Optional[str] = None
    ) -> List[Item]:
        """
        Retrieve a user's non-deleted items in insertion order.

        Args:
            user_uuid: UUID of the owning user
            content_type: Only return items with this content type

        Returns:
            List of Item objects
        """
        statement = select(Item).where(
            Item.user_uuid == user_uuid, Item.deleted == False
        )
        if content_type is not None:
            statement = statement.where(Item.content_type == content_type)

        with Session(self.engine) as session:
            return list(session.exec(statement.order_by(Item.id)).all())

    def find_items(self, user_uuid: str, include_deleted: bool = False) -> List[Item]:
        if not include_deleted:
            return self.find_active(user_uuid)

        with Session(self.engine) as session:
            return list(
                session.exec(
                    select(Item).where(Item.user_uuid == user_uuid).order_by(Item.id)
                ).all()
            )

    def soft_delete(self, item_uuid: str) -> bool:
        """
        Mark an item as deleted.

        The update only matches rows that are still active, so when two
        callers race on the same item exactly one of them sees the transition.

        Args:
            item_uuid: UUID of the item to delete

        Returns:
            True if this call deleted the item, False if it was already
            deleted or does not exist
        """
        statement = (
            update(Item)
            .where(Item.uuid == item_uuid, Item.deleted == False)
            .values(deleted=True, updated_at=utc_now())
        )

        with Session(self.engine) as session:
            result = session.connection().execute(statement)
            session.commit()

        transitioned = result.rowcount == 1
        if transitioned:
            logger.debug(f"Soft-deleted item {item_uuid}")
        return transitioned

    def sum_content_length(self, user_uuid: str) -> int:
        """
        Sum the byte length of a user's active item contents.

        Returns:
            Total bytes, 0 when the user has no items
        """
        statement = select(func.coalesce(func.sum(content_byte_length()), 0)).where(
            Item.user_uuid == user_uuid, Item.deleted == False
        )
        with Session(self.engine) as session:
            return int(session.exec(statement).one())

    def close(self) -> None:
        """
        Release pooled connections.
        """
        self.engine.dispose()
