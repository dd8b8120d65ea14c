"""Input validation for submitted messages.

Provides:
- Message size checks
- TTL bounds checks
- Rejection of dangerous markup (script tags, javascript: URIs, inline handlers)
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when a submitted message fails validation."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class ValidationResult:
    """Result of validation."""

    valid: bool
    error: Optional[str] = None


class MessageValidator:
    """Validates message content and TTL before a secret is created.

    Checks run in a fixed order and the first failure determines the
    reported reason.
    """

    MAX_MESSAGE_LENGTH = 1024 * 1024  # 1 MiB of characters

    # A script element is an opening tag followed anywhere later by a closing
    # tag. Both are matched separately so the scan stays linear in the input.
    SCRIPT_OPEN_TAG = r"<script\b[^>]{0,256}>"
    SCRIPT_CLOSE_TAG = r"</script\s*>"

    FORBIDDEN_PATTERNS = [
        r"javascript\s*:",
        r"\bon(?:load|unload|error|abort|click|dblclick|mouse[a-z]*|key[a-z]*"
        r"|focus|blur|submit|change|input|toggle|animation[a-z]*)\s*=",
    ]

    EMPTY_MESSAGE = "Message cannot be empty"
    MESSAGE_TOO_LONG = "Message exceeds maximum length"
    TTL_NOT_POSITIVE = "TTL must be positive"
    TTL_TOO_LONG = "TTL exceeds maximum allowed value"
    FORBIDDEN_CONTENT = "Message contains forbidden content"
    MESSAGE_NOT_STRING = "Message must be a string"
    TTL_NOT_INTEGER = "TTL must be an integer"

    def __init__(self, max_message_length: Optional[int] = None):
        """Initialize validator.

        Args:
            max_message_length: Override for the maximum message length
        """
        self.max_message_length = max_message_length or self.MAX_MESSAGE_LENGTH
        self._compiled_patterns = [
            re.compile(p, re.IGNORECASE | re.DOTALL) for p in self.FORBIDDEN_PATTERNS
        ]
        self._script_open = re.compile(self.SCRIPT_OPEN_TAG, re.IGNORECASE)
        self._script_close = re.compile(self.SCRIPT_CLOSE_TAG, re.IGNORECASE)

    def validate(self, message: Any, ttl: Any, max_ttl: int) -> ValidationResult:
        """Validate a message and its TTL.

        Args:
            message: Message text
            ttl: Requested time-to-live in milliseconds
            max_ttl: Largest accepted time-to-live in milliseconds

        Returns:
            ValidationResult with validation status and the first error
        """
        if not isinstance(message, str):
            return ValidationResult(False, self.MESSAGE_NOT_STRING)

        if not message:
            return ValidationResult(False, self.EMPTY_MESSAGE)

        if len(message) > self.max_message_length:
            return ValidationResult(False, self.MESSAGE_TOO_LONG)

        if isinstance(ttl, bool) or not isinstance(ttl, int):
            return ValidationResult(False, self.TTL_NOT_INTEGER)

        if ttl <= 0:
            return ValidationResult(False, self.TTL_NOT_POSITIVE)

        if ttl > max_ttl:
            return ValidationResult(False, self.TTL_TOO_LONG)

        if self.contains_forbidden_content(message):
            return ValidationResult(False, self.FORBIDDEN_CONTENT)

        return ValidationResult(True)

    def check(self, message: Any, ttl: Any, max_ttl: int) -> None:
        """Validate or raise.

        Raises:
            ValidationError: With the reason of the first failing check
        """
        result = self.validate(message, ttl, max_ttl)
        if not result.valid:
            raise ValidationError(result.error or "Invalid message")

    def contains_forbidden_content(self, message: str) -> bool:
        """Check a message against the markup deny-list.

        Args:
            message: Message text

        Returns:
            True if any forbidden pattern matches
        """
        if self._contains_script_element(message):
            logger.warning("Forbidden content detected: script element")
            return True
        for pattern in self._compiled_patterns:
            if pattern.search(message):
                logger.warning(f"Forbidden content detected: {pattern.pattern}")
                return True
        return False

    def _contains_script_element(self, message: str) -> bool:
        opening = self._script_open.search(message)
        if opening is None:
            return False
        return self._script_close.search(message, opening.end()) is not None
