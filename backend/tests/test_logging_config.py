"""
Tests for the logging helpers.
"""

import json
import logging

from chatia.config import Settings
from chatia.core.logging_config import (
    ColoredFormatter,
    ConversationLoggerAdapter,
    JSONFormatter,
    setup_logging,
    truncate_text,
)


def _record(msg="hello", **extra):
    record = logging.LogRecord("chatia.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:

    def test_json_formatter_includes_extra_fields(self):
        record = _record(extra_fields={"conversation_id": "conv_1"})

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["conversation_id"] == "conv_1"

    def test_colored_formatter_leaves_record_untouched(self):
        record = _record()

        output = ColoredFormatter("%(levelname)s %(message)s").format(record)

        assert "\033[32m" in output
        assert record.levelname == "INFO"


class TestConversationLoggerAdapter:

    def test_prefixes_message_and_sets_fields(self):
        adapter = ConversationLoggerAdapter(logging.getLogger("chatia.test"), {"conversation_id": "conv_1"})

        msg, kwargs = adapter.process("Reply stored", {})

        assert msg == "[conversation_id=conv_1] Reply stored"
        assert kwargs["extra"]["extra_fields"] == {"conversation_id": "conv_1"}

    def test_keeps_caller_fields(self):
        adapter = ConversationLoggerAdapter(logging.getLogger("chatia.test"), {"conversation_id": "conv_1"})

        _, kwargs = adapter.process("x", {"extra": {"extra_fields": {"count": 2}}})

        assert kwargs["extra"]["extra_fields"] == {"conversation_id": "conv_1", "count": 2}


def test_truncate_text():
    assert truncate_text(None) == ""
    assert truncate_text("short") == "short"
    assert truncate_text("x" * 100, max_length=10) == "x" * 10 + "... (truncated, total length: 100)"


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "chatia.log"
    settings = Settings(
        log_file_path=str(log_file),
        log_file_enabled=True,
        log_console_enabled=False,
        log_level="debug",
    )

    setup_logging(settings)
    logging.getLogger("chatia.test").info("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any(line["message"] == "written to file" for line in lines)
    assert logging.getLogger().level == logging.DEBUG
