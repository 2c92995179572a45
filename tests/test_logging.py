"""
Tests for commerce_advisor/utils/logging.py and utils/time_utils.py.

What we test
------------
  - configure_logging() installs a stderr handler at the configured level
    and an optional file handler.
  - Only known context fields (advisor, sku, reason, counts...) are rendered:
    as top-level JSON keys or as trailing key=value pairs.
  - Advisors attach that context to their skip and summary lines.
  - Date helpers used in reasoning text and forecasts.
"""

from __future__ import annotations

import json
import logging
from datetime import date, timezone

import pytest

from commerce_advisor.config import LoggingConfig
from commerce_advisor.utils.logging import (
    ContextFormatter,
    JsonFormatter,
    configure_logging,
    record_context,
)
from commerce_advisor.utils.time_utils import following_days, format_short_date, utcnow


@pytest.fixture(autouse=True)
def _restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestConfigureLogging:
    def test_console_only(self):
        configure_logging(LoggingConfig(level="WARNING"))
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "advisor.log"
        configure_logging(LoggingConfig(level="INFO", log_file=str(log_file)))
        logging.getLogger("commerce_advisor.test").info("restock run finished")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "restock run finished" in log_file.read_text(encoding="utf-8")


def _record(msg="Restock: %d recommendations", args=(3,), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "commerce_advisor.advisors.restock", logging.INFO, __file__, 1, msg, args, None,
    )
    record.__dict__.update(extra)
    return record


class TestContext:
    def test_only_known_fields_in_order(self):
        record = _record(emitted=3, advisor="restock", unrelated="x")
        assert record_context(record) == {"advisor": "restock", "emitted": 3}

    def test_plain_record_has_no_context(self):
        assert record_context(_record()) == {}


class TestJsonFormatter:
    def test_payload(self):
        record = _record(advisor="restock", emitted=3, considered=5, unrelated="x")
        payload = json.loads(JsonFormatter().format(record))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "commerce_advisor.advisors.restock"
        assert payload["msg"] == "Restock: 3 recommendations"
        assert payload["advisor"] == "restock"
        assert payload["emitted"] == 3
        assert payload["considered"] == 5
        assert "unrelated" not in payload
        assert "args" not in payload


class TestContextFormatter:
    def test_pairs_appended(self):
        record = _record(advisor="pricing", sku="SKU-2", reason="no_cost")
        line = ContextFormatter().format(record)
        assert line.endswith(
            "Restock: 3 recommendations | advisor=pricing sku=SKU-2 reason=no_cost"
        )

    def test_no_context_no_separator(self):
        assert "|" not in ContextFormatter().format(_record())


class TestAdvisorLogContext:
    def test_restock_summary_carries_counts(self, caplog, make_product, constant_forecaster):
        from commerce_advisor.advisors.restock import generate_restock_recommendations

        caplog.set_level(logging.DEBUG, logger="commerce_advisor")
        generate_restock_recommendations(
            [make_product(sku="A"), make_product(sku="B", quantities=[1.0] * 3)],
            constant_forecaster,
        )
        skip = next(r for r in caplog.records if getattr(r, "reason", None) == "short_history")
        assert skip.sku == "B"
        summary = next(r for r in caplog.records if hasattr(r, "emitted"))
        assert record_context(summary) == {"advisor": "restock", "emitted": 1, "considered": 2}


class TestTimeUtils:
    def test_short_date(self):
        assert format_short_date(date(2025, 3, 5)) == "Mar 05"

    def test_following_days(self):
        assert following_days(date(2025, 12, 30), 3) == [
            date(2025, 12, 31), date(2026, 1, 1), date(2026, 1, 2),
        ]

    def test_following_days_negative(self):
        with pytest.raises(ValueError):
            following_days(date(2025, 1, 1), -1)

    def test_utcnow_is_aware(self):
        assert utcnow().tzinfo == timezone.utc
