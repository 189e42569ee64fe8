"""Unit tests for logging configuration and PII redaction."""

import structlog

from core.logging import PIIRedactor, setup_logging


class TestPIIRedactor:
    def test_redacts_sensitive_keys(self):
        event = PIIRedactor()(None, "info", {
            "event": "profile_added",
            "email": "ann@example.com",
            "password": "hunter2",
            "identifier": "abc_1",
        })

        assert event["email"] == "[REDACTED]"
        assert event["password"] == "[REDACTED]"
        assert event["identifier"] == "abc_1"

    def test_redacts_patterns_in_strings(self):
        event = PIIRedactor()(None, "info", {
            "event": "note",
            "detail": "contact ann@example.com or +1 (555) 010-0000",
        })

        assert event["detail"] == "contact [EMAIL] or [PHONE]"

    def test_redacts_nested_dicts_and_lists(self):
        event = PIIRedactor()(None, "info", {
            "event": "batch",
            "record": {"cell": "555", "city": "Oslo"},
            "emails": ["a@b.co", 3],
        })

        assert event["record"] == {"cell": "[REDACTED]", "city": "Oslo"}
        assert event["emails"] == ["[EMAIL]", 3]

    def test_identifier_is_not_mistaken_for_phone(self):
        identifier = "0f8b1c2d-aaaa-bbbb-cccc-123456789abc_1718000000000"

        event = PIIRedactor()(None, "info", {
            "event": "record_insert_conflict",
            "identifier": identifier,
            "identifier_prefix": identifier[:8],
        })

        assert event["identifier"] == identifier
        assert event["identifier_prefix"] == "0f8b1c2d"

    def test_identifier_inside_free_text_is_kept(self):
        event = PIIRedactor()(None, "info", {
            "event": "note",
            "detail": "kept 0f8b1c2d-aaaa-bbbb-cccc-123456789abc_1718000000000 at 2026-10-19T10:00",
        })

        assert event["detail"] == (
            "kept 0f8b1c2d-aaaa-bbbb-cccc-123456789abc_1718000000000 at 2026-10-19T10:00"
        )

    def test_bare_phone_numbers_are_still_redacted(self):
        event = PIIRedactor()(None, "info", {
            "event": "note",
            "detail": "call (555) 010-0000 or 0049 30 1234567, ext 12",
        })

        assert event["detail"] == "call [PHONE] or [PHONE], ext 12"


class TestSetupLogging:
    def test_installs_redactor_when_enabled(self):
        try:
            setup_logging("DEBUG", "console", redact_pii=True)
            processors = structlog.get_config()["processors"]
            assert any(isinstance(p, PIIRedactor) for p in processors)
        finally:
            structlog.reset_defaults()

    def test_no_redactor_when_disabled(self):
        try:
            setup_logging("INFO", "json", redact_pii=False)
            processors = structlog.get_config()["processors"]
            assert not any(isinstance(p, PIIRedactor) for p in processors)
            assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        finally:
            structlog.reset_defaults()
