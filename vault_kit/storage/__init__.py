"""
Storage package for Vault Kit.

This package provides storage backends for users and their items.
"""

from vault_kit.storage.base import content_byte_length, default_database_path
from vault_kit.storage.sqlite import SQLiteBackend

__all__ = [
    # Shared utilities
    "content_byte_length",
    "default_database_path",
    # SQLite backend
    "SQLiteBackend",
]
