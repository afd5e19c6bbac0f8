"""
Screenshot helpers for failed runs.

Screenshots land in a flat directory, one file per capture, named after
the entry headline and a timestamp.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


async def capture_page_screenshot(
    page: "Page",
    output_path: str,
    full_page: bool = False
) -> str:
    """
    Simple helper to capture a screenshot.

    Args:
        page: Playwright page
        output_path: Where to save the screenshot
        full_page: Whether to capture full page

    Returns:
        Path to saved screenshot
    """
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    await page.screenshot(path=output_path, full_page=full_page)
    return output_path


def screenshot_name(label: Optional[str], now: Optional[datetime] = None) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (label or "run").lower()).strip("-")[:40] or "run"
    stamp = (now or datetime.now()).strftime("%Y%m%d-%H%M%S")
    return f"error-{slug}-{stamp}.png"


async def capture_error_screenshot(page: "Page", screenshot_dir, label: Optional[str] = None) -> Optional[str]:
    """Full-page screenshot of the state a run failed in; None if it cannot be taken."""
    output_path = str(Path(screenshot_dir) / screenshot_name(label))
    try:
        await capture_page_screenshot(page, output_path, full_page=True)
    except Exception as e:
        logger.warning(f"Error screenshot failed: {e}")
        return None
    logger.info(f"Error screenshot saved: {output_path}")
    return output_path
