"""
Ordered locator chains.

A chain is data: primary selector, declared alternatives in order, a
text match, then a direct URL. resolve_and_act walks it and stops at the
first locator whose action succeeds.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Iterable, List, Optional

logger = logging.getLogger(__name__)


class LocatorKind(Enum):
    SELECTOR = "selector"
    TEXT = "text"
    URL = "url"


@dataclass(frozen=True)
class Locator:
    kind: LocatorKind
    target: str

    def as_selector(self) -> str:
        if self.kind is LocatorKind.TEXT:
            return f'text="{self.target}"'
        return self.target

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.target}"


SelectorAction = Callable[[str], Awaitable[object]]


def chain_for(
    selector: Optional[str] = None,
    alternatives: Iterable[str] = (),
    text: Optional[str] = None,
    url: Optional[str] = None,
) -> List[Locator]:
    """Build primary -> alternatives -> text -> url, skipping missing levels."""
    chain: List[Locator] = []
    if selector:
        chain.append(Locator(LocatorKind.SELECTOR, selector))
    for alt in alternatives:
        if alt:
            chain.append(Locator(LocatorKind.SELECTOR, alt))
    if text:
        chain.append(Locator(LocatorKind.TEXT, text))
    if url:
        chain.append(Locator(LocatorKind.URL, url))
    return chain


async def resolve_and_act(
    page,
    chain: List[Locator],
    action: SelectorAction,
    url_timeout_ms: int = 30000,
) -> Optional[Locator]:
    """
    Try each locator in order; return the one that worked, or None.

    Selector and text locators are passed to `action`; URL locators are
    navigated to directly.
    """
    for locator in chain:
        try:
            if locator.kind is LocatorKind.URL:
                await page.goto(locator.target, wait_until="domcontentloaded", timeout=url_timeout_ms)
            else:
                await action(locator.as_selector())
            logger.debug(f"Locator succeeded: {locator}")
            return locator
        except Exception as e:
            logger.debug(f"Locator failed: {locator} ({e})")
            continue
    return None


def click_action(page, timeout_ms: int) -> SelectorAction:
    async def _click(selector: str):
        await page.click(selector, timeout=timeout_ms)
    return _click


def fill_action(page, value: str, timeout_ms: int) -> SelectorAction:
    async def _fill(selector: str):
        await page.fill(selector, value, timeout=timeout_ms)
    return _fill


async def wait_for_count(page, selector: str, count: int, timeout_ms: int, poll_ms: int = 100) -> bool:
    """Poll until at least `count` elements match; bounded by timeout_ms."""
    polls = max(1, timeout_ms // poll_ms)
    for _ in range(polls):
        try:
            if len(await page.query_selector_all(selector)) >= count:
                return True
        except Exception as e:
            logger.debug(f"Count query failed for {selector}: {e}")
        await page.wait_for_timeout(poll_ms)
    return False
