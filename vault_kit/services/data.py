import logging
from typing import List

from toolz import pipe
from toolz.curried import map

from vault_kit.models import Item, ItemSize, User

from ..protocols.base import ItemStoreProtocol

logger = logging.getLogger(__name__)


def bytes_to_megabytes(num_bytes: int) -> str:
    """
    Format a byte count as binary megabytes, e.g. 1_000_000 -> "0.95MB".
    """
    return f"{num_bytes / 1024 / 1024:.2f}MB"


def to_item_size(item: Item) -> ItemSize:
    return ItemSize(
        uuid=item.uuid,
        content_type=item.content_type,
        content=item.content,
        size=item.size,
    )


class DataAggregator:
    def __init__(self, storage: ItemStoreProtocol):
        """
        Initialize a new DataAggregator instance.

        Args:
            storage: The storage backend holding the user's items
        """
        self.storage = storage

    def total_data_size(self, user: User) -> str:
        """
        Total size of the user's active items as a megabyte label.

        Args:
            user: The owning user

        Returns:
            Label such as "0.06MB"; "0.00MB" when the user has no items
        """
        return bytes_to_megabytes(self.storage.sum_content_length(user.uuid))

    def items_by_size(self, user: User) -> List[ItemSize]:
        """
        The user's active items, largest first.

        Items of equal size keep their insertion order, since sorted() is
        stable and find_active returns items in insertion order.

        Args:
            user: The owning user

        Returns:
            List of ItemSize rows
        """
        return pipe(
            self.storage.find_active(user.uuid),
            map(to_item_size),
            lambda rows: sorted(rows, key=lambda row: row.size, reverse=True),
        )  # type: ignore
