"""
Shared constants for Vault Kit.
"""

import os

MFA_CONTENT_TYPE = "SF|MFA"
EXTENSION_CONTENT_TYPE = "SF|Extension"
EMAIL_ARCHIVE_SUBTYPE = "backup.email_archive"

# Feature payloads are "<3-char version><base64 json>"
PAYLOAD_VERSION_LENGTH = 3

ALLOW_EMAIL_RECOVERY = "allowEmailRecovery"
SUBTYPE = "subtype"

BACKUP_FILE_SUFFIX = "-restore.txt"

DEFAULT_HOME_DIR = os.path.join(os.path.expanduser("~"), ".vault-kit")
DEFAULT_DB_FILENAME = "vault.db"
DEFAULT_BACKUP_DIR = os.path.join(DEFAULT_HOME_DIR, "backups")
