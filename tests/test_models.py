"""Tests for the stored secret data model."""

import json
import pytest

from burnread.models import EncryptedPayload, StoredSecret


@pytest.fixture
def secret():
    return StoredSecret(
        content=EncryptedPayload(ciphertext=b"\x01\x02\x03", iv=b"\x00" * 12),
        expiration_time=1_700_000_005_000,
    )


class TestStoredSecret:
    """Test expiry and serialization."""

    def test_is_expired_boundary(self, secret):
        assert not secret.is_expired(secret.expiration_time - 1)
        assert secret.is_expired(secret.expiration_time)
        assert secret.is_expired(secret.expiration_time + 1)

    def test_json_layout(self, secret):
        data = json.loads(secret.to_json())
        assert data == {
            "content": {"encryptedContent": "AQID", "iv": "AAAAAAAAAAAAAAAA"},
            "expirationTime": 1_700_000_005_000,
        }

    def test_from_json(self, secret):
        assert StoredSecret.from_json(secret.to_json()) == secret

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[]",
            '{"content": {"encryptedContent": "AQID", "iv": "AAAA"}}',
            '{"content": {"encryptedContent": "AQID", "iv": "AAAA"}, "expirationTime": "1"}',
            '{"content": {"encryptedContent": "***", "iv": "AAAA"}, "expirationTime": 1}',
        ],
    )
    def test_invalid_json(self, raw):
        with pytest.raises(ValueError):
            StoredSecret.from_json(raw)
