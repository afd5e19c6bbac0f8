#!/usr/bin/env python3
import logging
from typing import Optional

from .config import Config
from .errors import NavigationError
from .locators import Locator, chain_for, click_action, resolve_and_act
from .mapping import SelectorMapping
from .payload import HEADLINE_KEY

logger = logging.getLogger(__name__)

SIDEBAR_ENTRY = "landing_page_main_sidebar"
NEW_ENTRY_BUTTON = "new_landing_page_button"
DEFAULT_TEXT = {
    SIDEBAR_ENTRY: "Landing Pages",
    NEW_ENTRY_BUTTON: "New Landing Page",
}


class Navigator:
    """Drives the session from the dashboard to the "new landing page" editor.

    Each step walks the same chain: primary selector, declared alternatives
    in order, a text match, then the direct URL.
    """

    def __init__(self, config: Config, mapping: SelectorMapping):
        self.config = config
        self.mapping = mapping

    def chain(self, entry_name: str, url: str):
        target = self.mapping.navigation_target(entry_name)
        if target is None:
            return chain_for(text=DEFAULT_TEXT.get(entry_name), url=url)
        return chain_for(
            target.selector,
            target.alternative_selectors,
            text=target.label or DEFAULT_TEXT.get(entry_name),
            url=url,
        )

    async def go_to_new_entry_editor(self, page) -> bool:
        logger.info("Starting navigation to New Landing Page...")
        used = await self._step(page, SIDEBAR_ENTRY, self.config.list_url)
        if used is None:
            raise NavigationError("Could not reach the landing page list on the way to the editor")
        logger.info(f"Landing page list reached via {used}")
        await self._settle(page)

        used = await self._step(page, NEW_ENTRY_BUTTON, self.config.new_entry_url)
        if used is None:
            raise NavigationError("New landing page editor could not be opened")
        logger.info(f"New landing page editor opened via {used}")

        await self._wait_for_editor(page)
        logger.info("Successfully navigated to new landing page editor")
        return True

    async def _step(self, page, entry_name: str, url: str) -> Optional[Locator]:
        timeouts = self.config.timeouts
        return await resolve_and_act(
            page,
            self.chain(entry_name, url),
            click_action(page, timeouts.selector_ms),
            url_timeout_ms=timeouts.navigation_ms,
        )

    async def _settle(self, page) -> None:
        try:
            await page.wait_for_load_state("networkidle", timeout=self.config.timeouts.navigation_ms)
        except Exception as e:
            logger.debug(f"Landing page list did not go idle: {e}")

    async def _wait_for_editor(self, page) -> None:
        timeout = self.config.timeouts.selector_ms
        title = self.mapping.find_field(HEADLINE_KEY)
        title_selector = title.selector if title else "#title"
        try:
            await page.wait_for_selector(title_selector, timeout=timeout)
            return
        except Exception as e:
            logger.debug(f"Title field not visible yet: {e}")
        try:
            await page.wait_for_load_state("domcontentloaded", timeout=timeout)
        except Exception as e:
            raise NavigationError(f"New landing page editor did not finish loading: {e}") from e
