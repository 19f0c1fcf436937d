"""
Core entry point for Vault Kit.

This module contains the VaultKit class, which binds one user to a storage
backend and exposes the account-security and item-lifecycle operations.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from .models import ItemSize, User
from .protocols.base import ItemStoreProtocol
from .services.backup import BackupExporter
from .services.data import DataAggregator
from .services.features import FeatureLifecycleManager
from .services.integrity import IntegrityService
from .services.key_params import KeyParameterResolver
from .storage import SQLiteBackend

logger = logging.getLogger(__name__)


class VaultKit:
    """
    Operations on one user's credential scheme and items.
    """

    def __init__(
        self,
        user: Union[User, str],
        storage: Optional[ItemStoreProtocol] = None,
        backup_dir: Optional[str] = None,
    ):
        """
        Initialize a new VaultKit instance.

        Args:
            user: A User, or the uuid or email of a stored user
            storage: Storage backend instance (defaults to the SQLite database in ~/.vault-kit)
            backup_dir: Directory backups are written to

        Raises:
            NotFound: If user is a uuid or email that matches no stored user
        """
        self.storage = storage or SQLiteBackend()

        if isinstance(user, User):
            self.user = user
        else:
            self.user = self.storage.require_user(user)

        self.key_param_resolver = KeyParameterResolver()
        self.data_aggregator = DataAggregator(self.storage)
        self.integrity_service = IntegrityService(self.storage)
        self.backup_exporter = BackupExporter(
            self.storage,
            backup_dir=backup_dir,
            key_param_resolver=self.key_param_resolver,
        )
        self.feature_manager = FeatureLifecycleManager(self.storage)

    def key_params(self, extended: bool = False) -> Dict[str, Any]:
        return self.key_param_resolver.resolve(self.user, extended)

    def total_data_size(self) -> str:
        return self.data_aggregator.total_data_size(self.user)

    def items_by_size(self) -> List[ItemSize]:
        return self.data_aggregator.items_by_size(self.user)

    def compute_data_signature(self) -> str:
        return self.integrity_service.compute_data_signature(self.user)

    def download_backup(self) -> str:
        return self.backup_exporter.download_backup(self.user)

    def restore_backup(self, path: str) -> int:
        return self.backup_exporter.restore_backup(self.user, path)

    def disable_mfa(self, force: bool = False) -> bool:
        return self.feature_manager.disable_mfa(self.user, force=force)

    def disable_email_backups(self) -> bool:
        return self.feature_manager.disable_email_backups(self.user)
