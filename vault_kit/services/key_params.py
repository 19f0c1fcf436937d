"""
Key derivation parameters for each credential scheme version.

Clients call this before signing in to learn how to derive their
authentication key from the password. Each scheme version exposes exactly
the fields it needs, so accounts on newer schemes never surface legacy
parameters.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict, Tuple

from vault_kit.errors import UnsupportedSchemeVersion
from vault_kit.models import User

logger = logging.getLogger(__name__)


class SchemeVersion(str, enum.Enum):
    V001 = "001"
    V002 = "002"
    V003 = "003"
    V004 = "004"


BASE_FIELDS: Tuple[str, ...] = ("identifier", "pw_nonce", "version")
EXTENDED_FIELDS: Tuple[str, ...] = ("created", "origination")

VERSION_FIELDS: Dict[SchemeVersion, Tuple[str, ...]] = {
    SchemeVersion.V004: BASE_FIELDS,
    SchemeVersion.V003: BASE_FIELDS + ("pw_cost",),
    SchemeVersion.V002: BASE_FIELDS + ("pw_cost", "pw_salt", "email"),
    SchemeVersion.V001: BASE_FIELDS
    + ("pw_cost", "pw_salt", "email", "pw_alg", "pw_func", "pw_key_size"),
}

# Parameter name -> User attribute
FIELD_SOURCES: Dict[str, str] = {
    "identifier": "email",
    "email": "email",
    "pw_nonce": "pw_nonce",
    "version": "version",
    "pw_cost": "pw_cost",
    "pw_salt": "pw_salt",
    "pw_alg": "pw_alg",
    "pw_func": "pw_func",
    "pw_key_size": "pw_key_size",
    "created": "kp_created",
    "origination": "kp_origination",
}


def scheme_version(user: User) -> SchemeVersion:
    try:
        return SchemeVersion(user.version)
    except ValueError:
        raise UnsupportedSchemeVersion(user.version) from None


class KeyParameterResolver:
    """Resolves the key parameters a user's clients need."""

    def fields_for(self, version: SchemeVersion, extended: bool = False) -> Tuple[str, ...]:
        fields = VERSION_FIELDS[version]
        if extended:
            fields = fields + EXTENDED_FIELDS
        return fields

    def resolve(self, user: User, extended: bool = False) -> Dict[str, Any]:
        """
        Build the key parameters for a user.

        Args:
            user: The user whose credential scheme is resolved
            extended: Also include when and how the parameters were created

        Returns:
            Mapping of parameter name to value. Every field the scheme
            requires is present, even if the stored value is None.

        Raises:
            UnsupportedSchemeVersion: If the user's version is unknown
        """
        version = scheme_version(user)
        fields = self.fields_for(version, extended)
        logger.debug(f"Resolving {len(fields)} key params for version {version.value}")
        return {field: getattr(user, FIELD_SOURCES[field]) for field in fields}


def key_params(user: User, extended: bool = False) -> Dict[str, Any]:
    """Resolve key parameters with a default resolver."""
    return KeyParameterResolver().resolve(user, extended)
