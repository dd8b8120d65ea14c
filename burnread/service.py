"""Secret service: the create and read paths end to end.

Create: admission (optional) → validation → encryption → lifecycle.create
Read:   admission → lifecycle.consume → decryption
"""

import logging
from typing import Any, Optional

from .audit import AuditLogger
from .lifecycle import ReadOutcome, SecretLifecycle
from .monitoring.metrics import MetricsCollector
from .safety.validation import MessageValidator
from .security.encryption import CryptoEnvelope
from .security.rate_limiter import (
    FixedWindowRateLimiter,
    RateLimitConfig,
    RateLimitExceeded,
)
from .storage import create_storage

logger = logging.getLogger(__name__)


class SecretNotFoundError(Exception):
    """Raised when a secret is absent, already read, or expired."""

    def __init__(self, secret_id: str):
        super().__init__("Message not found or expired")
        self.secret_id = secret_id


class SecretService:
    """Coordinates validation, encryption, storage and admission control."""

    def __init__(
        self,
        lifecycle: SecretLifecycle,
        envelope: CryptoEnvelope,
        rate_limiter: FixedWindowRateLimiter,
        validator: Optional[MessageValidator] = None,
        metrics: Optional[MetricsCollector] = None,
        audit: Optional[AuditLogger] = None,
        rate_limit_create: bool = False,
    ):
        """Initialize service.

        Args:
            lifecycle: Secret lifecycle engine
            envelope: Encryption envelope
            rate_limiter: Admission controller for the read path
            validator: Message validator
            metrics: Metrics collector
            audit: Audit logger
            rate_limit_create: Also apply admission control to creates
        """
        self.lifecycle = lifecycle
        self.envelope = envelope
        self.rate_limiter = rate_limiter
        self.validator = validator or MessageValidator()
        self.metrics = metrics or MetricsCollector()
        self.audit = audit or AuditLogger()
        self.rate_limit_create = rate_limit_create

    @classmethod
    def from_settings(cls, settings: Any) -> "SecretService":
        """Build a service and all of its collaborators from settings."""
        lifecycle = SecretLifecycle(
            create_storage(settings),
            default_ttl=settings.default_ttl,
            max_ttl=settings.max_ttl,
        )
        rate_limiter = FixedWindowRateLimiter(
            RateLimitConfig(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window,
            )
        )
        return cls(
            lifecycle=lifecycle,
            envelope=CryptoEnvelope.from_config(settings.encryption_key),
            rate_limiter=rate_limiter,
            rate_limit_create=settings.rate_limit_create,
        )

    @property
    def storage(self):
        return self.lifecycle.storage

    def _admit(self, client_ip: str) -> None:
        """Apply admission control.

        Raises:
            RateLimitExceeded: If the client is over its allowance
        """
        if self.rate_limiter.try_acquire(client_ip):
            return
        retry_after = self.rate_limiter.retry_after(client_ip)
        self.metrics.record_message_denied()
        self.audit.log_rate_limit_exceeded(client_ip, retry_after)
        raise RateLimitExceeded(client_ip, retry_after)

    async def create_message(
        self,
        message: Any,
        ttl: Optional[int] = None,
        client_ip: str = "unknown",
    ) -> str:
        """Validate, encrypt and store a message.

        Args:
            message: Message text
            ttl: Time-to-live in milliseconds (default TTL if None)
            client_ip: Client identity for admission control and audit

        Returns:
            Secret id

        Raises:
            RateLimitExceeded: If create admission is enabled and denies
            ValidationError: If the message or TTL is rejected
        """
        if self.rate_limit_create:
            self._admit(client_ip)

        if ttl is None:
            ttl = self.lifecycle.default_ttl
        self.validator.check(message, ttl, self.lifecycle.max_ttl)

        payload = self.envelope.encrypt(message)
        secret_id = await self.lifecycle.create(payload, ttl)

        self.metrics.record_message_created()
        self.audit.log_message_created(secret_id, ttl, client_ip)
        return secret_id

    async def read_message(self, secret_id: str, client_ip: str = "unknown") -> str:
        """Read a message once, destroying it.

        Raises:
            RateLimitExceeded: If admission control denies the request
            SecretNotFoundError: If the message is absent, read, or expired
            DecryptionError: If the stored payload cannot be decrypted
            StorageError: If the backend fails
        """
        self._admit(client_ip)

        result = await self.lifecycle.consume(secret_id)

        if result.outcome == ReadOutcome.EXPIRED:
            self.metrics.record_message_expired()
            self.audit.log_message_expired(secret_id)
            raise SecretNotFoundError(secret_id)

        if result.outcome == ReadOutcome.NOT_FOUND or result.secret is None:
            self.metrics.record_message_not_found()
            self.audit.log_message_not_found(secret_id)
            raise SecretNotFoundError(secret_id)

        message = self.envelope.decrypt_text(result.secret.content)
        self.metrics.record_message_read()
        self.audit.log_message_read(secret_id, client_ip)
        return message

    async def cleanup(self) -> int:
        """Sweep expired secrets and idle rate limit windows.

        Returns:
            Number of secrets removed
        """
        removed = await self.lifecycle.cleanup()
        self.metrics.record_message_expired(removed)
        self.rate_limiter.purge_expired()
        return removed

    async def close(self) -> None:
        await self.storage.close()
