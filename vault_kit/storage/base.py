"""
Shared storage utilities for Vault Kit.

This module provides helpers used by storage backends: default database
location and the SQL expressions shared by item queries.
"""

from __future__ import annotations

import os

from sqlalchemy import LargeBinary, cast, func

from vault_kit.constants import DEFAULT_DB_FILENAME, DEFAULT_HOME_DIR
from vault_kit.models import Item


def default_database_path() -> str:
    """Return the default SQLite path, creating its directory if needed."""
    os.makedirs(DEFAULT_HOME_DIR, exist_ok=True)
    return os.path.join(DEFAULT_HOME_DIR, DEFAULT_DB_FILENAME)


def content_byte_length():
    """SQL expression for the UTF-8 byte length of an item's content.

    length() on TEXT counts characters in SQLite, so the content is cast to a
    blob first.
    """
    return func.length(cast(Item.content, LargeBinary))
