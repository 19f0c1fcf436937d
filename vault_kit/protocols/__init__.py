"""
Protocols package for Vault Kit.

This package exports the storage protocol used by the services.
"""

from vault_kit.protocols.base import ItemStoreProtocol

__all__ = [
    "ItemStoreProtocol",
]
