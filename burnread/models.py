"""Data model for stored secrets."""

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class EncryptedPayload:
    """Ciphertext plus the IV it was produced with."""

    ciphertext: bytes
    iv: bytes

    def to_dict(self) -> dict[str, str]:
        """Convert to a JSON-friendly dictionary (base64 fields)."""
        return {
            "encryptedContent": base64.b64encode(self.ciphertext).decode("ascii"),
            "iv": base64.b64encode(self.iv).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EncryptedPayload":
        """Build from the dictionary produced by ``to_dict``.

        Raises:
            ValueError: If fields are missing or not valid base64
        """
        try:
            return cls(
                ciphertext=base64.b64decode(data["encryptedContent"], validate=True),
                iv=base64.b64decode(data["iv"], validate=True),
            )
        except (KeyError, TypeError, binascii.Error) as e:
            raise ValueError(f"Invalid encrypted payload: {e}") from e


@dataclass(frozen=True)
class StoredSecret:
    """An encrypted payload and its absolute expiration (epoch ms)."""

    content: EncryptedPayload
    expiration_time: int

    def is_expired(self, now_ms: int) -> bool:
        """Check whether the secret is unreadable at ``now_ms``."""
        return now_ms >= self.expiration_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content.to_dict(),
            "expirationTime": self.expiration_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StoredSecret":
        try:
            expiration = data["expirationTime"]
            content = data["content"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid stored secret: {e}") from e
        if isinstance(expiration, bool) or not isinstance(expiration, int):
            raise ValueError("Invalid stored secret: expirationTime must be an integer")
        return cls(content=EncryptedPayload.from_dict(content), expiration_time=expiration)

    def to_json(self) -> str:
        """Serialize for the external store."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "StoredSecret":
        """Deserialize a value written by ``to_json``.

        Raises:
            ValueError: If the value is not a valid serialized secret
        """
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValueError(f"Invalid stored secret JSON: {e}") from e
        return cls.from_dict(data)
