import hashlib
import json
import logging

from vault_kit.models import User

from ..protocols.base import ItemStoreProtocol

logger = logging.getLogger(__name__)


class IntegrityService:
    def __init__(self, storage: ItemStoreProtocol):
        self.storage = storage

    def compute_data_signature(self, user: User) -> str:
        """
        Compute a SHA-256 signature over the user's active items.

        Items are read once and sorted by uuid, so the signature does not
        depend on query order. Any change to an item's content, content type
        or deleted state changes the signature. A user without items gets the
        signature of the empty set.

        Args:
            user: The owning user

        Returns:
            Hex digest
        """
        items = sorted(self.storage.find_active(user.uuid), key=lambda item: item.uuid)
        canonical = json.dumps(
            [[item.uuid, item.content_type, item.content] for item in items],
            separators=(",", ":"),
            ensure_ascii=False,
        )
        signature = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
        logger.debug(f"Computed signature over {len(items)} items for {user.uuid}")
        return signature
