"""BurnRead: self-destructing secret sharing."""

__version__ = "0.1.0"

from .lifecycle import CleanupScheduler, SecretLifecycle
from .security.encryption import CryptoEnvelope
from .service import SecretNotFoundError, SecretService

__all__ = [
    "CleanupScheduler",
    "CryptoEnvelope",
    "SecretLifecycle",
    "SecretNotFoundError",
    "SecretService",
]
