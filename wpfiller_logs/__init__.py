"""
wpfiller_logs - Logging helpers for wpfiller runs

This package provides:
- Process-wide logging setup (console + file)
- Markdown run reports with a per-field fill table
- Error screenshots

Usage:
    from wpfiller_logs import RunLogger, configure_logging

    configure_logging(Config.from_env())
    run_log = RunLogger(headline="Cost Guide", url=config.admin_url, log_dir="logs")
    run_log.log_heading("Form Fill")
    run_log.log_fill_summary(summary.to_dict())
    run_log.finalize(success=True, duration_ms=9000)
"""

from .log_config import LOG_FORMAT, configure_logging
from .run_logger import RunLogger
from .screenshots import capture_error_screenshot, capture_page_screenshot

__all__ = [
    'LOG_FORMAT',
    'configure_logging',
    'RunLogger',
    'capture_error_screenshot',
    'capture_page_screenshot',
]

__version__ = '1.0.0'
