#!/usr/bin/env python3
"""
Browser session lifecycle: launch -> context (with saved storage state)
-> page, and on the way out persist the storage state and close.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from .config import Config
from .stealth import StealthConfig

logger = logging.getLogger(__name__)


class SessionStateStore:
    """Playwright storage-state file (cookies + local storage) at a fixed path"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[str]:
        """Path to pass as storage_state, or None when there is nothing saved."""
        if self.path.is_file():
            return str(self.path)
        return None

    async def save(self, context) -> Optional[Path]:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            await context.storage_state(path=str(self.path))
            logger.info("Browser state saved for future sessions")
            return self.path
        except Exception as e:
            logger.warning(f"Could not save browser state: {e}")
            return None

    def clear(self) -> bool:
        """Remove the saved state so the next run logs in from scratch."""
        if not self.path.is_file():
            return False
        self.path.unlink()
        if not any(self.path.parent.iterdir()):
            self.path.parent.rmdir()
        logger.info(f"Browser session cleared: {self.path}")
        return True


@asynccontextmanager
async def browser_session(config: Config, store: SessionStateStore, stealth: Optional[StealthConfig] = None):
    """Yield a fresh page; state is persisted and the browser closed on every exit path."""
    from playwright.async_api import async_playwright

    stealth = stealth or StealthConfig()
    playwright = await async_playwright().start()
    browser = None
    context = None
    try:
        browser = await playwright.chromium.launch(
            headless=config.headless,
            slow_mo=config.slow_mo,
            args=stealth.get_chrome_args(),
        )
        context_args = stealth.get_context_args()
        saved = store.load()
        if saved:
            context_args["storage_state"] = saved
            logger.info("Using saved browser session")
        context = await browser.new_context(**context_args)
        context.set_default_timeout(config.timeouts.selector_ms)
        context.set_default_navigation_timeout(config.timeouts.navigation_ms)
        await stealth.apply_to_context(context)
        page = await context.new_page()
        yield page
    finally:
        if context is not None:
            await store.save(context)
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                logger.debug(f"Browser close failed: {e}")
        try:
            await playwright.stop()
        except Exception as e:
            logger.debug(f"Playwright stop failed: {e}")
