"""
Tests for feature item lifecycle: MFA and email backup extensions.
"""

import base64
import json
import logging

import pytest

from tests.conftest import make_user
from vault_kit.errors import MalformedFeaturePayload
from vault_kit.services import features
from vault_kit.services.features import (
    FeatureLifecycleManager,
    decode_feature_payload,
    encode_feature_payload,
)


def ruby_style_payload(data, version="002"):
    """Payload encoded with MIME line breaks, as older clients produce."""
    encoded = base64.encodebytes(json.dumps(data).encode("utf-8")).decode("ascii")
    return f"{version}{encoded}"


@pytest.fixture
def manager(storage):
    return FeatureLifecycleManager(storage)


def test_decode_feature_payload():
    payload = decode_feature_payload(encode_feature_payload({"allowEmailRecovery": True}))

    assert payload.allow_email_recovery is True
    assert payload.subtype is None


def test_decode_tolerates_line_breaks():
    data = {"subtype": "backup.email_archive", "url": "https://example.com/" + "x" * 80}

    payload = decode_feature_payload(ruby_style_payload(data))

    assert payload.subtype == "backup.email_archive"
    assert payload.model_extra["url"] == data["url"]


@pytest.mark.parametrize(
    "content",
    [
        None,
        "",
        "002",
        "002!!!not base64!!!",
        "002" + base64.b64encode(b"not json").decode("ascii"),
        "002" + base64.b64encode(b"[1, 2]").decode("ascii"),
        "002" + base64.b64encode(b'{"allowEmailRecovery": "maybe"}').decode("ascii"),
    ],
)
def test_decode_malformed_payload(content):
    with pytest.raises(MalformedFeaturePayload):
        decode_feature_payload(content)


def test_disable_mfa_without_email_recovery(vault, storage, user):
    """MFA item is kept when allowEmailRecovery is false."""
    item = storage.create_item(
        user.uuid, ruby_style_payload({"allowEmailRecovery": False}), content_type="SF|MFA"
    )

    assert vault.disable_mfa() is False

    assert storage.get_item(item.uuid).deleted is False


def test_disable_mfa_with_email_recovery(vault, storage, user):
    """MFA item is soft-deleted when allowEmailRecovery is true."""
    item = storage.create_item(
        user.uuid, ruby_style_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert vault.disable_mfa() is True

    assert storage.get_item(item.uuid).deleted is True


def test_disable_mfa_flag_absent(manager, storage, user):
    item = storage.create_item(user.uuid, encode_feature_payload({}), content_type="SF|MFA")

    assert manager.disable_mfa(user) is False
    assert storage.get_item(item.uuid).deleted is False


def test_disable_mfa_force(manager, storage, user):
    item = storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": False}), content_type="SF|MFA"
    )

    assert manager.disable_mfa(user, force=True) is True
    assert storage.get_item(item.uuid).deleted is True


def test_disable_mfa_without_item(manager, user):
    assert manager.disable_mfa(user) is False


def test_disable_mfa_is_idempotent(manager, storage, user):
    storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert manager.disable_mfa(user) is True
    assert manager.disable_mfa(user) is False


def test_disable_mfa_malformed_payload(manager, storage, user, caplog):
    """A corrupt MFA payload is a no-op, not an error."""
    item = storage.create_item(user.uuid, "002@@@", content_type="SF|MFA")

    with caplog.at_level(logging.WARNING):
        assert manager.disable_mfa(user) is False

    assert storage.get_item(item.uuid).deleted is False
    assert item.uuid in caplog.text


def test_disable_mfa_targets_most_recent_item(manager, storage, user):
    older = storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )
    newer = storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert manager.mfa_item(user).uuid == newer.uuid
    assert manager.disable_mfa(user) is True

    assert storage.get_item(newer.uuid).deleted is True
    assert storage.get_item(older.uuid).deleted is False


def test_disable_mfa_ignores_other_users(manager, storage, user):
    other = storage.create_user(make_user(email="other@testing.com"))
    item = storage.create_item(
        other.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert manager.disable_mfa(user) is False
    assert storage.get_item(item.uuid).deleted is False


def test_disable_email_backups(vault, storage, user):
    """The email archive extension is soft-deleted unconditionally."""
    storage.create_item(
        user.uuid, ruby_style_payload({"subtype": "backup.email_archive"}), content_type="SF|Extension"
    )
    extension_item = storage.find_active(user.uuid, "SF|Extension")[0]

    assert vault.disable_email_backups() is True

    assert storage.get_item(extension_item.uuid).deleted is True


def test_disable_email_backups_skips_other_extensions(manager, storage, user):
    other = storage.create_item(
        user.uuid, encode_feature_payload({"subtype": "backup.dropbox"}), content_type="SF|Extension"
    )
    broken = storage.create_item(user.uuid, "002%%%", content_type="SF|Extension")
    archive = storage.create_item(
        user.uuid,
        encode_feature_payload({"subtype": "backup.email_archive"}),
        content_type="SF|Extension",
    )

    assert manager.disable_email_backups(user) is True

    assert storage.get_item(archive.uuid).deleted is True
    assert storage.get_item(other.uuid).deleted is False
    assert storage.get_item(broken.uuid).deleted is False


def test_disable_email_backups_without_item(manager, storage, user):
    storage.create_item(
        user.uuid, encode_feature_payload({"subtype": "backup.dropbox"}), content_type="SF|Extension"
    )

    assert manager.disable_email_backups(user) is False
    assert manager.email_backup_item(user) is None


def test_disable_email_backups_is_idempotent(manager, storage, user):
    storage.create_item(
        user.uuid,
        encode_feature_payload({"subtype": "backup.email_archive"}),
        content_type="SF|Extension",
    )

    assert manager.disable_email_backups(user) is True
    assert manager.disable_email_backups(user) is False


def test_features_with_mock_storage(mock_storage, user):
    manager = FeatureLifecycleManager(mock_storage)
    item = mock_storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert manager.disable_mfa(user) is True
    assert mock_storage.get_item(item.uuid).deleted is True


def test_disable_mfa_corrupt_latest_item_is_a_no_op(manager, storage, user):
    """A corrupt newest MFA item does not fall back to an older one."""
    older = storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )
    newer = storage.create_item(user.uuid, "002@@@corrupt", content_type="SF|MFA")

    assert manager.mfa_item(user).uuid == newer.uuid
    assert manager.disable_mfa(user) is False
    assert manager.disable_mfa(user, force=True) is False

    assert storage.get_item(older.uuid).deleted is False
    assert storage.get_item(newer.uuid).deleted is False


@pytest.mark.parametrize("flag", [1, "true", "yes", 1.0])
def test_allow_email_recovery_must_be_json_true(manager, storage, user, flag):
    """Only a JSON boolean true allows email recovery."""
    content = encode_feature_payload({"allowEmailRecovery": flag})
    item = storage.create_item(user.uuid, content, content_type="SF|MFA")

    with pytest.raises(MalformedFeaturePayload):
        decode_feature_payload(content)

    assert manager.disable_mfa(user) is False
    assert storage.get_item(item.uuid).deleted is False


def test_disable_mfa_decodes_payload_once(manager, storage, user, monkeypatch):
    calls = []
    original = features.decode_feature_payload

    def counting_decode(content):
        calls.append(content)
        return original(content)

    monkeypatch.setattr(features, "decode_feature_payload", counting_decode)
    storage.create_item(
        user.uuid, encode_feature_payload({"allowEmailRecovery": True}), content_type="SF|MFA"
    )

    assert manager.disable_mfa(user) is True
    assert len(calls) == 1


def test_disable_email_backups_decodes_each_item_once(manager, storage, user, monkeypatch):
    calls = []
    original = features.decode_feature_payload

    def counting_decode(content):
        calls.append(content)
        return original(content)

    monkeypatch.setattr(features, "decode_feature_payload", counting_decode)
    storage.create_item(
        user.uuid, encode_feature_payload({"subtype": "backup.dropbox"}), content_type="SF|Extension"
    )
    storage.create_item(
        user.uuid,
        encode_feature_payload({"subtype": "backup.email_archive"}),
        content_type="SF|Extension",
    )

    assert manager.disable_email_backups(user) is True
    assert len(calls) == 2
