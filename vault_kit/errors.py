"""
Exceptions raised by Vault Kit.
"""


class VaultKitError(Exception):
    """Base class for all Vault Kit errors."""


class UnsupportedSchemeVersion(VaultKitError, ValueError):
    """The user's credential scheme version is not one we can resolve."""

    def __init__(self, version):
        self.version = version
        super().__init__(f"Unsupported credential scheme version: {version!r}")


class MalformedFeaturePayload(VaultKitError):
    """A feature item's content could not be decoded."""


class MalformedBackup(VaultKitError):
    """A backup archive could not be read."""


class NotFound(VaultKitError, LookupError):
    """A user or item lookup matched nothing."""


class InvalidBackupName(VaultKitError, ValueError):
    """A user's email cannot be used as a backup file name."""
