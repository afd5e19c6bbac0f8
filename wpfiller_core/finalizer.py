#!/usr/bin/env python3
import logging
from enum import Enum
from typing import Optional

from .config import Config
from .errors import SaveError
from .locators import chain_for, click_action, resolve_and_act
from .mapping import SelectorMapping

logger = logging.getLogger(__name__)


class SaveMode(Enum):
    DRAFT = "draft"
    PUBLISH = "publish"

    @classmethod
    def parse(cls, raw: Optional[str], default: "SaveMode" = None) -> "SaveMode":
        if not raw:
            return default or cls.DRAFT
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown save mode '{raw}' (expected draft or publish)") from None


CONTROLS = {
    SaveMode.DRAFT: ("save_draft_button", "#save-post", "Save Draft"),
    SaveMode.PUBLISH: ("publish_button", "#publish", "Publish"),
}

# Only rendered in the "updated" notice after WordPress stored the entry.
# The editor's own Preview button (#post-preview) exists before any save
# and must not count.
SAVED_SIGNAL = ", ".join([
    "#message.notice-success",
    "#message a[href*='preview=true']",
    "#message a:has-text(\"Preview\")",
    "#message a:has-text(\"View\")",
])

EXTRACT_RESULT_URL = """(mode) => {
  const anchors = Array.from(document.querySelectorAll('a[href]'));
  const text = (a) => (a.textContent || '').trim().toLowerCase();
  const notice = document.querySelector('#message a[href], .notice-success a[href]');
  if (notice) return notice.href;
  if (mode === 'publish') {
    const permalink = document.querySelector('#sample-permalink a[href]');
    if (permalink) return permalink.href;
  }
  for (const a of anchors) {
    if (a.target === '_blank' && text(a).includes('preview')) return a.href;
  }
  for (const a of anchors) {
    if (a.href.includes('preview=true')) return a.href;
  }
  const permalink = document.querySelector('#sample-permalink a[href]');
  return permalink ? permalink.href : null;
}"""


class Finalizer:
    """Saves the entry as draft or publishes it and reports the resulting URL."""

    def __init__(self, config: Config, mapping: SelectorMapping):
        self.config = config
        self.mapping = mapping

    async def save_draft_or_publish(self, page, mode: SaveMode = SaveMode.DRAFT) -> Optional[str]:
        timeouts = self.config.timeouts
        entry_name, fallback_selector, label = CONTROLS[mode]
        logger.info(f"Saving landing page ({mode.value})")

        # save/publish controls sit in the fixed submit box at the top
        try:
            await page.evaluate("() => window.scrollTo(0, 0)")
            await page.wait_for_timeout(500)
        except Exception as e:
            logger.debug(f"Scroll to top failed: {e}")

        target = self.mapping.navigation_target(entry_name)
        if target is not None:
            chain = chain_for(target.selector, target.alternative_selectors, text=target.label or label)
        else:
            chain = chain_for(fallback_selector, text=label)
        used = await resolve_and_act(page, chain, click_action(page, timeouts.selector_ms))
        if used is None:
            raise SaveError(f"Could not click the {label} control to save the landing page")
        logger.info(f"Clicked {label} via {used}")

        # the click submits the form and reloads the editor
        try:
            await page.wait_for_load_state("networkidle", timeout=timeouts.save_ms)
        except Exception as e:
            logger.debug(f"Editor still loading after {label}: {e}")

        try:
            await page.wait_for_selector(SAVED_SIGNAL, timeout=timeouts.save_ms)
        except Exception:
            logger.warning(f"No save confirmation within {timeouts.save_ms}ms")
            return None

        try:
            url = await page.evaluate(EXTRACT_RESULT_URL, mode.value)
        except Exception as e:
            logger.warning(f"Could not read result URL: {e}")
            return None
        if url:
            logger.info(f"Result URL captured: {url}")
        else:
            logger.warning("Saved, but no preview/permalink URL found")
        return url or None
