"""Tests for the session debug log."""

import logging
from datetime import datetime

from Listing_Engine.core.debug_log import DebugLog


class TestDebugLog:

    def test_line_format(self, log):
        line = log.start("Starting new generation process...")
        assert line == "[12:30:45] [START] Starting new generation process..."

    def test_oldest_first(self, log):
        log.system("one")
        log.add("SCRAPE", "two")
        log.success("three")
        assert [l.split("] ", 2)[2] for l in log.lines] == ["one", "two", "three"]
        assert len(log) == 3

    def test_lines_is_a_copy(self, log):
        log.error("boom")
        log.lines.clear()
        assert len(log) == 1

    def test_clear(self, log):
        log.system("x")
        log.clear()
        assert log.lines == []

    def test_empty_log_is_still_a_log(self):
        assert len(DebugLog()) == 0

    def test_forwards_to_logger_with_levels(self, caplog):
        log = DebugLog(clock=lambda: datetime(2026, 1, 1))
        with caplog.at_level(logging.DEBUG, logger="Listing_Engine.core.debug_log"):
            log.add("PARSE-HTML", "debug detail")
            log.add("PARSE-HTML-ERROR", "bad json")
            log.success("done")
        levels = {r.getMessage(): r.levelno for r in caplog.records}
        assert levels["[PARSE-HTML] debug detail"] == logging.DEBUG
        assert levels["[PARSE-HTML-ERROR] bad json"] == logging.ERROR
        assert levels["[SUCCESS] done"] == logging.INFO
