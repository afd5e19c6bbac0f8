"""
Tests for wpfiller_logs: logging setup, run reports and screenshots
"""

import dataclasses
import logging
from datetime import datetime

import pytest

from wpfiller_core.results import FillOutcome, FillResult, FillSummary
from wpfiller_logs import RunLogger, capture_error_screenshot, configure_logging
from wpfiller_logs.screenshots import screenshot_name

from fakes import FakePage


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestConfigureLogging:

    def test_console_and_file(self, config, tmp_path, restore_root_logger):
        config = dataclasses.replace(config, log_level="DEBUG", log_file=tmp_path / "logs" / "wp-filler.log")
        root = configure_logging(config)
        assert root.level == logging.DEBUG
        logging.getLogger("wpfiller_core.test").info("hello file")
        for handler in root.handlers:
            handler.flush()
        assert "wpfiller_core.test - INFO - hello file" in (tmp_path / "logs" / "wp-filler.log").read_text()

    def test_repeat_calls_do_not_duplicate(self, config, restore_root_logger):
        configure_logging(config)
        before = len(logging.getLogger().handlers)
        configure_logging(config)
        assert len(logging.getLogger().handlers) == before


class TestRunLogger:

    def test_report(self, tmp_path):
        run_log = RunLogger(headline="Cost Guide", url="https://wp.example.com/wp-admin", log_dir=str(tmp_path))
        run_log.log_heading("Login")
        run_log.log_text("Already logged in (saved session)")
        summary = FillSummary()
        summary.add(FillResult("header_headline", FillOutcome.FILLED, method="selector:#title", verified=True))
        summary.add(FillResult("hero_text_left", FillOutcome.FAILED, panel="panel_hero_area", detail="no input"))
        summary.add(FillResult("cta_text", FillOutcome.SKIPPED_NO_DATA, panel="panel_top_cta"))
        run_log.log_heading("Form Fill")
        run_log.log_fill_summary(summary.to_dict())
        run_log.finalize(success=True, duration_ms=1200, url="https://example.com/?preview=true")

        text = open(run_log.log_path, encoding="utf-8").read()
        assert text.count("<!-- TOC_PLACEHOLDER -->") == 1
        assert "- [Login](#login)\n- [Form Fill](#form-fill)" in text
        assert "**Filled:** 1 | **Skipped:** 1 | **Failed:** 1" in text
        assert "FAILED" in text and "no input" in text
        assert "**Duration:** 1200ms" in text

    def test_failure_summary(self, tmp_path):
        run_log = RunLogger(headline="X", url=None, log_dir=str(tmp_path), session_id="fixed")
        run_log.finalize(success=False, error="WordPress login failed")
        text = (tmp_path / "run-fixed.md").read_text(encoding="utf-8")
        assert "**Status:** FAILED" in text
        assert "**Error:** WordPress login failed" in text


class TestScreenshots:

    def test_name(self):
        assert screenshot_name("Cost Guide: 2024!", datetime(2024, 5, 1, 9, 30, 0)) == \
            "error-cost-guide-2024-20240501-093000.png"
        assert screenshot_name(None, datetime(2024, 5, 1)).startswith("error-run-")

    @pytest.mark.asyncio
    async def test_capture(self, tmp_path):
        page = FakePage()
        path = await capture_error_screenshot(page, tmp_path / "shots", "Cost Guide")
        assert path is not None
        assert (tmp_path / "shots").exists()
        assert page.calls_of("screenshot") == [("screenshot", path)]

    @pytest.mark.asyncio
    async def test_capture_failure_returns_none(self, tmp_path):
        class BrokenPage:
            async def screenshot(self, path, full_page=False):
                raise RuntimeError("Target closed")

        assert await capture_error_screenshot(BrokenPage(), tmp_path, "X") is None
