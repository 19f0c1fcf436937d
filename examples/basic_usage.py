#!/usr/bin/env python
"""
Basic usage example for vault-kit
"""
import time

from vault_kit import VaultKit
from vault_kit.models import User
from vault_kit.services import encode_feature_payload
from vault_kit.storage import SQLiteBackend

storage = SQLiteBackend(":memory:")
user = storage.create_user(
    User(
        email="sn@testing.com",
        version="004",
        pw_nonce="somenonce",
        kp_origination="registration",
        kp_created=int(time.time()),
    )
)
storage.create_item(user.uuid, "002c2VjcmV0", content_type="Note")
storage.create_item(
    user.uuid,
    encode_feature_payload({"allowEmailRecovery": True}),
    content_type="SF|MFA",
)

vault = VaultKit(user, storage=storage, backup_dir="tmp")

print(vault.key_params(extended=True))
print(vault.total_data_size())
print(vault.compute_data_signature())
print(vault.disable_mfa())
print(vault.download_backup())
