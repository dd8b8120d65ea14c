"""Tests for the audit log."""

import logging
import pytest

from burnread.audit import AuditEvent, AuditLogger


@pytest.fixture
def audit():
    return AuditLogger()


class TestAuditLogger:
    """Test audit records and their log lines."""

    def test_created_record(self, audit, caplog):
        caplog.set_level(logging.INFO, logger="burnread.audit")

        record = audit.log_message_created("abc", 5000, "10.0.0.1")

        assert record.event == AuditEvent.MESSAGE_CREATED
        line = caplog.records[-1].getMessage()
        assert line.startswith('AUDIT: timestamp="')
        assert 'event="MESSAGE_CREATED" messageId="abc" ttl="5000" ip="10.0.0.1"' in line
        assert caplog.records[-1].name == "burnread.audit"

    def test_timestamp_is_utc_iso8601(self, audit):
        record = audit.log_message_read("abc", "10.0.0.1")
        assert record.format().split('"')[1].endswith("+00:00")

    @pytest.mark.parametrize(
        "call, event",
        [
            (lambda a: a.log_message_read("id", "ip"), AuditEvent.MESSAGE_READ),
            (lambda a: a.log_message_expired("id"), AuditEvent.MESSAGE_EXPIRED),
            (lambda a: a.log_message_not_found("id"), AuditEvent.MESSAGE_NOT_FOUND),
            (lambda a: a.log_access_denied("ip", "INTERNAL_ERROR"), AuditEvent.ACCESS_DENIED),
            (lambda a: a.log_rate_limit_exceeded("ip", 30), AuditEvent.RATE_LIMIT_EXCEEDED),
        ],
    )
    def test_event_types(self, audit, call, event):
        assert call(audit).event == event

    def test_history_filter_and_limit(self, audit):
        audit.log_message_created("a", 1, "ip")
        audit.log_message_read("a", "ip")
        audit.log_message_created("b", 1, "ip")

        created = audit.get_history(AuditEvent.MESSAGE_CREATED)
        assert [r.details["messageId"] for r in created] == ["a", "b"]
        assert len(audit.get_history(limit=2)) == 2
        assert audit.get_history(limit=0) == []

    def test_history_bounded(self):
        audit = AuditLogger(history_size=2)
        for i in range(5):
            audit.log_message_not_found(str(i))
        assert [r.details["messageId"] for r in audit.get_history()] == ["3", "4"]
