"""Unit tests for the match analysis report and logging setup."""

import json
import logging

from rally.config import Settings
from rally.log_setup import JsonFormatter, configure_logging
from rally.rating.engine import evaluate_match
from rally.rating.report import build_match_report, log_match_report


class TestBuildMatchReport:

    def test_sweep_report(self, sweep_record):
        report = build_match_report(sweep_record, evaluate_match(sweep_record))

        assert "Kim (A) vs Lee (B)" in report
        assert "Winner:  Lee" in report
        assert "(points 30 : 42)" in report
        assert "0/0 deuce points" in report
        assert "0/0 long rallies" in report
        assert "M_total" in report

    def test_counts_deuce_and_long_rallies(self, match_record):
        record = match_record(["AB" * 20 + "BB", "B" * 21], 0, 2, durations=35.0)
        report = build_match_report(record, evaluate_match(record))

        assert "3/3 deuce points" in report
        assert "43/63 long rallies" in report

    def test_unrated_match(self, match_record):
        record = match_record(["AB"], 0, 0, forced=True)
        report = build_match_report(record, evaluate_match(record))
        assert "Not rated (tied sets)" in report
        assert "Forced:  yes" in report


class TestLogMatchReport:

    def test_logged_at_info(self, sweep_record, caplog):
        caplog.set_level(logging.INFO, logger="rally.rating.report")
        log_match_report(sweep_record, evaluate_match(sweep_record))
        assert "RMR DETAILED ANALYSIS REPORT" in caplog.text

    def test_skipped_when_level_disabled(self, sweep_record, caplog):
        caplog.set_level(logging.WARNING, logger="rally.rating.report")
        log_match_report(sweep_record, evaluate_match(sweep_record))
        assert caplog.text == ""


class TestConfigureLogging:

    def test_json_format(self, restore_root_logging):
        handler = configure_logging(Settings(_env_file=None, log_format="json", log_level="debug"))

        assert isinstance(handler.formatter, JsonFormatter)
        assert logging.getLogger().level == logging.DEBUG

        record = logging.LogRecord("rally.test", logging.INFO, __file__, 1, "rated %s", ("Kim",), None)
        payload = json.loads(handler.format(record))
        assert payload["message"] == "rated Kim"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "rally.test"

    def test_console_format(self, restore_root_logging):
        handler = configure_logging(Settings(_env_file=None, log_format="console"))
        assert not isinstance(handler.formatter, JsonFormatter)
        assert logging.getLogger().handlers == [handler]
