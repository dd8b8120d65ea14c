"""Audit trail for message lifecycle and access events."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger("burnread.audit")


class AuditEvent(str, Enum):
    """Audit event types."""

    MESSAGE_CREATED = "MESSAGE_CREATED"
    MESSAGE_READ = "MESSAGE_READ"
    MESSAGE_EXPIRED = "MESSAGE_EXPIRED"
    MESSAGE_NOT_FOUND = "MESSAGE_NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"


@dataclass
class AuditRecord:
    """A single audit entry."""

    event: AuditEvent
    timestamp: datetime
    details: dict[str, Any] = field(default_factory=dict)

    def format(self) -> str:
        parts = [
            f'timestamp="{self.timestamp.isoformat(timespec="milliseconds")}"',
            f'event="{self.event.value}"',
        ]
        parts.extend(f'{key}="{value}"' for key, value in self.details.items())
        return "AUDIT: " + " ".join(parts)


class AuditLogger:
    """Writes one INFO record per event to the ``burnread.audit`` logger.

    Message contents are never recorded, only ids, TTLs and client addresses.
    """

    def __init__(self, history_size: int = 1000):
        """Initialize audit logger.

        Args:
            history_size: Number of recent records kept in memory
        """
        self._history: deque[AuditRecord] = deque(maxlen=history_size)

    def _record(self, event: AuditEvent, **details: Any) -> AuditRecord:
        record = AuditRecord(
            event=event,
            timestamp=datetime.now(timezone.utc),
            details=details,
        )
        self._history.append(record)
        logger.info(record.format())
        return record

    def log_message_created(self, message_id: str, ttl: int, ip: str) -> AuditRecord:
        return self._record(AuditEvent.MESSAGE_CREATED, messageId=message_id, ttl=ttl, ip=ip)

    def log_message_read(self, message_id: str, ip: str) -> AuditRecord:
        return self._record(AuditEvent.MESSAGE_READ, messageId=message_id, ip=ip)

    def log_message_expired(self, message_id: str) -> AuditRecord:
        return self._record(AuditEvent.MESSAGE_EXPIRED, messageId=message_id)

    def log_message_not_found(self, message_id: str) -> AuditRecord:
        return self._record(AuditEvent.MESSAGE_NOT_FOUND, messageId=message_id)

    def log_access_denied(self, ip: str, reason: str) -> AuditRecord:
        return self._record(AuditEvent.ACCESS_DENIED, ip=ip, reason=reason)

    def log_rate_limit_exceeded(self, ip: str, retry_after: int) -> AuditRecord:
        return self._record(AuditEvent.RATE_LIMIT_EXCEEDED, ip=ip, retry_after=retry_after)

    def get_history(
        self,
        event: Optional[AuditEvent] = None,
        limit: Optional[int] = None,
    ) -> list[AuditRecord]:
        """Get recent audit records, newest last.

        Args:
            event: Only return records of this type
            limit: Maximum number of records
        """
        records = [r for r in self._history if event is None or r.event == event]
        if limit is not None:
            records = records[-limit:] if limit > 0 else []
        return records
