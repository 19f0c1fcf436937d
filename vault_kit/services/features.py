"""
Lifecycle of feature-configuration items.

Feature items (MFA, extensions) carry a configuration payload of the form
"<3-char version><base64 JSON>". Disabling a feature soft-deletes its item
through the store, which guarantees at most one transition per item.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import List, Optional

from pydantic import ValidationError

from vault_kit.constants import (
    EMAIL_ARCHIVE_SUBTYPE,
    EXTENSION_CONTENT_TYPE,
    MFA_CONTENT_TYPE,
    PAYLOAD_VERSION_LENGTH,
)
from vault_kit.errors import MalformedFeaturePayload
from vault_kit.models import FeaturePayload, Item, User

from ..protocols.base import ItemStoreProtocol

logger = logging.getLogger(__name__)


def decode_feature_payload(content: Optional[str]) -> FeaturePayload:
    """
    Decode a feature item's content.

    Args:
        content: Item content, "<version><base64 of a JSON object>"

    Returns:
        The decoded FeaturePayload

    Raises:
        MalformedFeaturePayload: If any decoding step fails
    """
    if not content or len(content) <= PAYLOAD_VERSION_LENGTH:
        raise MalformedFeaturePayload("Feature payload is empty")

    encoded = content[PAYLOAD_VERSION_LENGTH:]
    try:
        # Non-alphabet characters (line breaks from MIME-style encoders) are discarded
        decoded = base64.b64decode(encoded)
        data = json.loads(decoded)
    except (binascii.Error, ValueError) as e:
        raise MalformedFeaturePayload(f"Could not decode feature payload: {e}") from e

    if not isinstance(data, dict):
        raise MalformedFeaturePayload("Feature payload is not a JSON object")

    try:
        return FeaturePayload.model_validate(data)
    except ValidationError as e:
        raise MalformedFeaturePayload(f"Invalid feature payload: {e}") from e


def encode_feature_payload(data: dict, version: str = "002") -> str:
    """Inverse of decode_feature_payload, used to build feature items."""
    encoded = base64.b64encode(json.dumps(data).encode("utf-8")).decode("ascii")
    return f"{version}{encoded}"


def most_recent(items: List[Item]) -> Optional[Item]:
    if not items:
        return None
    return max(items, key=lambda item: (item.updated_at, item.id or 0))


class FeatureLifecycleManager:
    def __init__(self, storage: ItemStoreProtocol):
        """
        Initialize a new FeatureLifecycleManager instance.

        Args:
            storage: The storage backend holding the feature items
        """
        self.storage = storage

    def _decode_or_none(self, item: Item) -> Optional[FeaturePayload]:
        try:
            return decode_feature_payload(item.content)
        except MalformedFeaturePayload as e:
            logger.warning(f"Ignoring feature item {item.uuid}: {e}")
            return None

    def mfa_item(self, user: User) -> Optional[Item]:
        """The user's most recent active MFA item, if any."""
        return most_recent(self.storage.find_active(user.uuid, MFA_CONTENT_TYPE))

    def email_backup_item(self, user: User) -> Optional[Item]:
        """The user's most recent active email-archive extension item, if any."""
        # Extensions are told apart by subtype, so corrupt ones are skipped
        candidates = []
        for item in self.storage.find_active(user.uuid, EXTENSION_CONTENT_TYPE):
            payload = self._decode_or_none(item)
            if payload is not None and payload.subtype == EMAIL_ARCHIVE_SUBTYPE:
                candidates.append(item)
        return most_recent(candidates)

    def disable_mfa(self, user: User, force: bool = False) -> bool:
        """
        Remove the user's MFA if it allows email recovery.

        Only the most recent MFA item is considered. If its payload cannot be
        decoded nothing is deleted, even with force.

        Args:
            user: The owning user
            force: Remove MFA regardless of the allowEmailRecovery flag

        Returns:
            True if an MFA item was soft-deleted by this call
        """
        item = self.mfa_item(user)
        if item is None:
            logger.debug(f"No active MFA item for {user.uuid}")
            return False

        payload = self._decode_or_none(item)
        if payload is None:
            return False

        if not (payload.allow_email_recovery is True or force):
            logger.info(f"MFA for {user.uuid} does not allow email recovery")
            return False

        deleted = self.storage.soft_delete(item.uuid)
        if deleted:
            logger.info(f"Disabled MFA item {item.uuid} for {user.uuid}")
        return deleted

    def disable_email_backups(self, user: User) -> bool:
        """
        Remove the user's email-archive extension.

        Returns:
            True if an extension item was soft-deleted by this call
        """
        item = self.email_backup_item(user)
        if item is None:
            logger.debug(f"No active email backup extension for {user.uuid}")
            return False

        deleted = self.storage.soft_delete(item.uuid)
        if deleted:
            logger.info(f"Disabled email backups item {item.uuid} for {user.uuid}")
        return deleted
