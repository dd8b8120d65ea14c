"""Per-message encryption envelope.

Provides:
- AES-256-GCM encryption/decryption with a fresh 96-bit IV per call
- Process-held key, generated at startup unless one is configured
"""

import base64
import binascii
import logging
import secrets
import string
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..models import EncryptedPayload

logger = logging.getLogger(__name__)

KEY_LENGTH = 32  # AES-256
IV_LENGTH = 12  # 96-bit GCM nonce
TAG_LENGTH = 16  # 128-bit GCM tag


class EncryptionError(Exception):
    """Raised when encryption fails or the key is unusable."""

    pass


class DecryptionError(EncryptionError):
    """Raised when a payload cannot be decrypted or fails authentication."""

    pass


def generate_key() -> bytes:
    """Generate a new 256-bit encryption key.

    Returns:
        32-byte key
    """
    return secrets.token_bytes(KEY_LENGTH)


def load_key(key_b64: str) -> bytes:
    """Decode a configured key.

    Accepts base64 or hex encodings of a 32-byte key.

    Raises:
        EncryptionError: If the key cannot be decoded or has the wrong length
    """
    key_b64 = key_b64.strip()
    # 64 hex digits are also valid base64, so hex is tried first
    if len(key_b64) == 2 * KEY_LENGTH and all(c in string.hexdigits for c in key_b64):
        key = bytes.fromhex(key_b64)
    else:
        try:
            key = base64.b64decode(key_b64, validate=True)
        except (binascii.Error, ValueError):
            raise EncryptionError("Invalid encryption key format") from None

    if len(key) != KEY_LENGTH:
        raise EncryptionError("Key must be 32 bytes (256 bits)")
    return key


class CryptoEnvelope:
    """Encrypts and decrypts single payloads under one process key.

    The key lives only in memory. Without a configured key every restart
    produces a new one, which makes previously stored secrets unreadable.

    Usage:
        envelope = CryptoEnvelope()
        payload = envelope.encrypt("secret")
        plaintext = envelope.decrypt(payload)
    """

    def __init__(self, key: Optional[bytes] = None):
        """Initialize envelope.

        Args:
            key: Optional 256-bit key (generated if not provided)
        """
        if key is None:
            key = generate_key()
        if len(key) != KEY_LENGTH:
            raise EncryptionError("Key must be 32 bytes (256 bits)")
        self._aesgcm = AESGCM(key)

    @classmethod
    def from_config(cls, key_b64: Optional[str] = None) -> "CryptoEnvelope":
        """Create an envelope from the configured key, or a fresh one."""
        if key_b64:
            logger.info("Encryption key loaded from configuration")
            return cls(load_key(key_b64))
        logger.warning(
            "No encryption key configured, generating a process key; "
            "stored secrets will not survive a restart"
        )
        return cls()

    def encrypt(self, plaintext: Union[str, bytes]) -> EncryptedPayload:
        """Encrypt a payload.

        Args:
            plaintext: Data to encrypt (string is UTF-8 encoded)

        Returns:
            EncryptedPayload with ciphertext (including tag) and IV
        """
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")

        iv = secrets.token_bytes(IV_LENGTH)
        try:
            ciphertext = self._aesgcm.encrypt(iv, plaintext, None)
        except (OverflowError, TypeError) as e:
            raise EncryptionError(f"Encryption failed: {e}") from e
        return EncryptedPayload(ciphertext=ciphertext, iv=iv)

    def decrypt(self, payload: EncryptedPayload) -> bytes:
        """Decrypt and authenticate a payload.

        Raises:
            DecryptionError: If the payload is malformed, the IV length is
                wrong, or authentication fails
        """
        if not isinstance(payload.iv, bytes) or len(payload.iv) != IV_LENGTH:
            raise DecryptionError(f"IV must be {IV_LENGTH} bytes")
        if not isinstance(payload.ciphertext, bytes) or len(payload.ciphertext) < TAG_LENGTH:
            raise DecryptionError("Ciphertext too short")

        try:
            return self._aesgcm.decrypt(payload.iv, payload.ciphertext, None)
        except InvalidTag:
            raise DecryptionError("Authentication failed") from None

    def decrypt_text(self, payload: EncryptedPayload) -> str:
        """Decrypt a payload and decode it as UTF-8."""
        plaintext = self.decrypt(payload)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecryptionError(f"Plaintext is not valid UTF-8: {e}") from e
