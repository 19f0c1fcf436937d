from .pydantic_models import BackupArchive, BackupItem, FeaturePayload, ItemSize
from .sql_models import Item, User, utc_now

__all__ = [
    "Item",
    "User",
    "FeaturePayload",
    "ItemSize",
    "BackupArchive",
    "BackupItem",
    "utc_now",
]
