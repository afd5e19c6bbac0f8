#!/usr/bin/env python3
import logging

from .config import Config
from .errors import AuthError
from .locators import chain_for, resolve_and_act
from .pacing import Pacing

logger = logging.getLogger(__name__)

DASHBOARD_MARKER = "#adminmenu"
LOGIN_USER_SELECTORS = ("#user_login", "input[name='log']")
LOGIN_PASS_SELECTORS = ("#user_pass", "input[name='pwd']")
REMEMBER_SELECTOR = "#rememberme"
SUBMIT_SELECTORS = ("#wp-submit", "input[type='submit'][value*='Log']")


class Authenticator:
    """Makes sure the browser session is logged into wp-admin.

    A failed login is never retried: repeated attempts are what trips
    account lockout and bot detection on the target site.
    """

    def __init__(self, config: Config, pacing: Pacing):
        self.config = config
        self.pacing = pacing

    async def ensure_logged_in(self, page) -> bool:
        """Returns True when the dashboard is reachable; raises AuthError otherwise."""
        timeouts = self.config.timeouts
        await page.goto(self.config.admin_url, wait_until="domcontentloaded", timeout=timeouts.navigation_ms)
        await self._settle(page)

        if await self._on_dashboard(page):
            logger.info("Already logged in (saved session)")
            return True

        if not self.config.username or not self.config.password:
            raise AuthError("WordPress login required but WP_USERNAME / WP_PASSWORD are not set")

        logger.info("Logging in to WordPress")
        if not await self._is_visible(page, LOGIN_USER_SELECTORS[0]):
            await page.goto(self.config.login_url, wait_until="domcontentloaded", timeout=timeouts.navigation_ms)

        await self.pacing.pause("pre_action")
        await self._type_into(page, LOGIN_USER_SELECTORS, self.config.username, "username")
        await self.pacing.pause("between_fields")
        await self._type_into(page, LOGIN_PASS_SELECTORS, self.config.password, "password")
        await self._remember_session(page)

        await self.pacing.pause("pre_submit")
        submitted = await resolve_and_act(
            page,
            chain_for(SUBMIT_SELECTORS[0], SUBMIT_SELECTORS[1:]),
            lambda sel: page.click(sel, timeout=timeouts.selector_ms),
        )
        if submitted is None:
            raise AuthError("WordPress login failed: submit button not found")
        await self._settle(page)

        if not await self._on_dashboard(page, wait=True):
            raise AuthError("WordPress login failed: dashboard not reached after submitting credentials")
        logger.info(f"Successfully logged in to WordPress as {self.config.username}")
        return True

    async def _type_into(self, page, selectors, value: str, what: str) -> None:
        timeout = self.config.timeouts.selector_ms

        async def _type(selector: str):
            await page.click(selector, timeout=timeout)
            await self.pacing.pause("focus")
            await page.fill(selector, "", timeout=timeout)
            await page.type(selector, value, delay=self.pacing.keystroke_delay(), timeout=timeout)

        if await resolve_and_act(page, chain_for(selectors[0], selectors[1:]), _type) is None:
            raise AuthError(f"WordPress login failed: {what} input not found")

    async def _remember_session(self, page) -> None:
        try:
            remember = await page.query_selector(REMEMBER_SELECTOR)
            if remember and not await remember.is_checked():
                await remember.click()
        except Exception as e:
            logger.debug(f"Remember-me toggle skipped: {e}")

    async def _on_dashboard(self, page, wait: bool = False) -> bool:
        if not wait:
            return await self._is_visible(page, DASHBOARD_MARKER)
        try:
            await page.wait_for_selector(DASHBOARD_MARKER, timeout=self.config.timeouts.selector_ms)
            return True
        except Exception:
            return False

    async def _settle(self, page) -> None:
        try:
            await page.wait_for_load_state("networkidle", timeout=self.config.timeouts.navigation_ms)
        except Exception as e:
            logger.debug(f"Network did not go idle: {e}")

    @staticmethod
    async def _is_visible(page, selector: str) -> bool:
        try:
            return await page.is_visible(selector)
        except Exception:
            return False
