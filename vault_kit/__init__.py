"""
Vault Kit: account security and encrypted item management for note sync.

This package resolves password key-derivation parameters across credential
scheme versions and manages the integrity, size, backup and feature
lifecycle of a user's encrypted items.
"""

from vault_kit.core import VaultKit
from vault_kit.errors import (
    InvalidBackupName,
    MalformedBackup,
    MalformedFeaturePayload,
    NotFound,
    UnsupportedSchemeVersion,
    VaultKitError,
)
from vault_kit.version import __version__

__all__ = [
    "VaultKit",
    "VaultKitError",
    "UnsupportedSchemeVersion",
    "MalformedFeaturePayload",
    "InvalidBackupName",
    "MalformedBackup",
    "NotFound",
    "__version__",
]
