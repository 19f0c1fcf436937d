"""
Backup export and restore for a user's items.

A backup is a JSON document holding every active item together with the
key parameters needed to decrypt them, written to a file named after the
user's email.
"""

import datetime
import logging
import os
from typing import Optional

from pydantic import ValidationError

from vault_kit.constants import BACKUP_FILE_SUFFIX, DEFAULT_BACKUP_DIR
from vault_kit.errors import InvalidBackupName, MalformedBackup
from vault_kit.models import BackupArchive, BackupItem, User

from ..protocols.base import ItemStoreProtocol
from .key_params import KeyParameterResolver

logger = logging.getLogger(__name__)


def backup_filename(user: User) -> str:
    """
    File name of a user's backup, derived from their email.

    Raises:
        InvalidBackupName: If the email would name a path outside the backup directory
    """
    email = user.email or ""
    separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
    if (
        not email
        or ".." in email
        or any(sep in email for sep in separators)
        or os.path.basename(email) != email
    ):
        raise InvalidBackupName(f"Cannot name a backup file after {email!r}")
    return f"{email}{BACKUP_FILE_SUFFIX}"


def as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    # Archives written from naive timestamps are taken to be UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


class BackupExporter:
    def __init__(
        self,
        storage: ItemStoreProtocol,
        backup_dir: Optional[str] = None,
        key_param_resolver: Optional[KeyParameterResolver] = None,
    ):
        """
        Initialize a new BackupExporter instance.

        Args:
            storage: The storage backend holding the user's items
            backup_dir: Directory backups are written to (defaults to ~/.vault-kit/backups)
            key_param_resolver: Resolver for the auth params embedded in the archive
        """
        self.storage = storage
        self.backup_dir = backup_dir or DEFAULT_BACKUP_DIR
        self.key_param_resolver = key_param_resolver or KeyParameterResolver()

    def backup_path(self, user: User) -> str:
        return os.path.join(self.backup_dir, backup_filename(user))

    def build_archive(self, user: User) -> BackupArchive:
        """
        Build the archive for a user from a single read of their items.
        """
        items = self.storage.find_active(user.uuid)
        return BackupArchive(
            items=[BackupItem.model_validate(item.to_dict()) for item in items],
            auth_params=self.key_param_resolver.resolve(user),
        )

    def download_backup(self, user: User) -> str:
        """
        Write the user's backup file.

        Args:
            user: The owning user

        Returns:
            Path of the written file

        Raises:
            InvalidBackupName: If the email cannot be used as a file name
            OSError: If the file cannot be written
        """
        path = self.backup_path(user)
        archive = self.build_archive(user)

        os.makedirs(self.backup_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(archive.model_dump_json(indent=2))

        logger.info(f"Wrote backup of {len(archive.items)} items for {user.uuid}")
        return path

    def read_backup(self, path: str) -> BackupArchive:
        """
        Parse a backup file.

        Raises:
            MalformedBackup: If the file is not a valid archive
            OSError: If the file cannot be read
        """
        with open(path, encoding="utf-8") as f:
            raw = f.read()

        try:
            return BackupArchive.model_validate_json(raw)
        except ValidationError as e:
            raise MalformedBackup(f"Could not read backup {path}: {e}") from e

    def restore_backup(self, user: User, path: str) -> int:
        """
        Import the items of a backup file for a user.

        Items whose uuid is already stored are skipped.

        Args:
            user: The user who will own the restored items
            path: Path of the backup file

        Returns:
            Number of items created
        """
        archive = self.read_backup(path)

        created = 0
        for backup_item in archive.items:
            if self.storage.item_exists(backup_item.uuid):
                logger.debug(f"Skipping existing item {backup_item.uuid}")
                continue
            self.storage.create_item(
                user.uuid,
                backup_item.content,
                content_type=backup_item.content_type,
                uuid=backup_item.uuid,
                created_at=as_utc(backup_item.created_at),
                updated_at=as_utc(backup_item.updated_at),
            )
            created += 1

        logger.info(f"Restored {created} of {len(archive.items)} items for {user.uuid}")
        return created
