"""
Field fill strategies, one per mapped field type.

Strategies raise on failure; the orchestrator catches, logs and records
a FAILED result. Soft problems (a value that reads back differently, a
link dialog that would not open) come back as results instead.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .config import Timeouts
from .locators import Locator, LocatorKind, chain_for, click_action, fill_action, resolve_and_act, wait_for_count
from .mapping import Field, FieldType
from .pacing import Pacing
from .results import FillOutcome, FillResult

logger = logging.getLogger(__name__)


class FieldFillError(Exception):
    """A single field could not be filled"""
    pass


@dataclass
class FillContext:
    page: object
    timeouts: Timeouts
    pacing: Pacing


class LinkValue(NamedTuple):
    url: str
    text: str


class FieldStrategy:
    async def fill(self, ctx: FillContext, field: Field, value) -> FillResult:
        raise NotImplementedError


def _filled(field: Field, method: str, verified: Optional[bool] = None, detail: str = "") -> FillResult:
    return FillResult(field.payload_key, FillOutcome.FILLED, panel=field.panel,
                      method=method, verified=verified, detail=detail)


# --- plain text ------------------------------------------------------------

class TextStrategy(FieldStrategy):
    """Locate the input, replace its value, read it back."""

    async def fill(self, ctx: FillContext, field: Field, value: str) -> FillResult:
        page = ctx.page
        chain = chain_for(field.selector, field.alternative_selectors)
        used = await resolve_and_act(page, chain, fill_action(page, value, ctx.timeouts.selector_ms))
        if used is None:
            raise FieldFillError(f"no input matched for '{field.payload_key}'")
        verified = await self._verify(ctx, used.as_selector(), value)
        if verified is False:
            logger.warning(f"Field '{field.payload_key}' reads back a different value after fill")
        return _filled(field, str(used), verified)

    @staticmethod
    async def _verify(ctx: FillContext, selector: str, value: str) -> Optional[bool]:
        try:
            return (await ctx.page.input_value(selector, timeout=ctx.timeouts.selector_ms)) == value
        except Exception as e:
            logger.debug(f"Could not read back {selector}: {e}")
            return None


# --- radio / option --------------------------------------------------------

SCROLL_INTO_VIEW = "el => el.scrollIntoView({block: 'center', inline: 'nearest'})"


class RadioStrategy(FieldStrategy):
    """
    Click the option matching the value. Selectors may carry a {value}
    placeholder (page design a/b/c). Off-screen radios are scrolled into
    view first; the checked state is verified afterwards.
    """

    async def fill(self, ctx: FillContext, field: Field, value: str) -> FillResult:
        page = ctx.page
        timeout = ctx.timeouts.selector_ms
        primary = field.selector.replace("{value}", value)
        alternatives = [s.replace("{value}", value) for s in field.alternative_selectors]

        async def _select(selector: str):
            await page.wait_for_selector(selector, timeout=timeout)
            await page.eval_on_selector(selector, SCROLL_INTO_VIEW)
            await page.click(selector, timeout=timeout)

        used = await resolve_and_act(page, chain_for(primary, alternatives), _select)
        if used is None:
            raise FieldFillError(f"option '{value}' not found for '{field.payload_key}'")

        verified = None
        try:
            verified = await page.is_checked(primary, timeout=timeout)
        except Exception as e:
            logger.debug(f"Could not verify {primary}: {e}")
        if verified is False:
            logger.warning(f"Option '{value}' for '{field.payload_key}' clicked but not checked")
        return _filled(field, str(used), verified)


# --- rich text (TinyMCE) ---------------------------------------------------

class RichTextPath(Enum):
    SCRIPT_API = "script-api"
    EDITABLE_SURFACE = "editable-surface"
    PLAIN_TEXT = "plain-text"


@dataclass(frozen=True)
class EditorCapabilities:
    has_api: bool = False
    initialized: bool = False
    has_surface: bool = False
    has_plain: bool = False

    @classmethod
    def from_probe(cls, raw) -> "EditorCapabilities":
        raw = raw or {}
        return cls(
            has_api=bool(raw.get("hasApi")),
            initialized=bool(raw.get("initialized")),
            has_surface=bool(raw.get("hasSurface")),
            has_plain=bool(raw.get("hasPlain")),
        )


def plan_rich_text_paths(caps: EditorCapabilities) -> List[RichTextPath]:
    """Fill paths worth trying for an editor, in preference order."""
    paths: List[RichTextPath] = []
    if caps.has_api and caps.initialized:
        paths.append(RichTextPath.SCRIPT_API)
    if caps.has_surface:
        paths.append(RichTextPath.EDITABLE_SURFACE)
    if caps.has_plain:
        paths.append(RichTextPath.PLAIN_TEXT)
    return paths


EDITOR_INIT_TEXT = "Click to initialize TinyMCE"

PROBE_EDITOR = """(id) => {
  const out = {hasApi: false, initialized: false, hasSurface: false, hasPlain: false};
  if (typeof tinymce !== 'undefined') {
    const ed = tinymce.get(id);
    if (ed) { out.hasApi = true; out.initialized = !!ed.initialized; }
  }
  const iframe = document.getElementById(id + '_ifr');
  if (iframe && iframe.contentDocument && iframe.contentDocument.getElementById('tinymce')) {
    out.hasSurface = true;
  }
  out.hasPlain = !!document.getElementById(id);
  return out;
}"""

SET_VIA_API = """(args) => {
  if (typeof tinymce === 'undefined') return false;
  const ed = tinymce.get(args.id);
  if (!ed || !ed.initialized) return false;
  ed.setContent(args.html);
  ed.save();
  return true;
}"""

SET_VIA_SURFACE = """(args) => {
  const iframe = document.getElementById(args.id + '_ifr');
  if (!iframe || !iframe.contentDocument) return false;
  const body = iframe.contentDocument.getElementById('tinymce');
  if (!body) return false;
  body.innerHTML = args.html;
  body.dispatchEvent(new Event('input', {bubbles: true}));
  body.dispatchEvent(new Event('change', {bubbles: true}));
  const textarea = document.getElementById(args.id);
  if (textarea) {
    textarea.value = args.html;
    textarea.dispatchEvent(new Event('change', {bubbles: true}));
  }
  return true;
}"""


class RichTextStrategy(FieldStrategy):
    """
    TinyMCE editors created by ACF start as a placeholder that must be
    clicked before the editor exists. After initialization the content is
    set through the first path that works: the tinymce API (then saved back
    to the textarea), the iframe body with synthetic input/change events,
    or the "Text" tab textarea.
    """

    async def fill(self, ctx: FillContext, field: Field, value: str) -> FillResult:
        editor_id = field.editor_id
        await self.ensure_initialized(ctx, editor_id)
        caps = await self.probe(ctx, editor_id)
        paths = plan_rich_text_paths(caps)
        logger.debug(f"Editor {editor_id}: {caps} -> {[p.value for p in paths]}")

        for path in paths:
            try:
                if await self.apply(ctx, path, editor_id, value):
                    logger.info(f"Filled '{field.payload_key}' via {path.value}")
                    return _filled(field, path.value)
            except Exception as e:
                logger.debug(f"{path.value} failed for {editor_id}: {e}")
            logger.info(f"{path.value} did not take for '{field.payload_key}', trying next path")
        raise FieldFillError(f"no editor path succeeded for '{field.payload_key}' ({editor_id})")

    async def ensure_initialized(self, ctx: FillContext, editor_id: str) -> bool:
        page = ctx.page
        try:
            needs_init = await page.is_visible(f'text="{EDITOR_INIT_TEXT}"')
        except Exception:
            needs_init = False
        if not needs_init:
            return False
        logger.info(f"Editor {editor_id} needs initialization, clicking...")
        chain = chain_for(f"#wp-{editor_id}-wrap .acf-editor-toolbar") + [Locator(LocatorKind.TEXT, EDITOR_INIT_TEXT)]
        chain += chain_for(None, [".acf-editor-toolbar", ".acf-editor-wrap"])
        used = await resolve_and_act(page, chain, click_action(page, ctx.timeouts.selector_ms))
        if used is None:
            logger.warning(f"Could not trigger initialization of {editor_id}")
            return False
        await page.wait_for_timeout(ctx.timeouts.editor_init_ms)
        return True

    async def probe(self, ctx: FillContext, editor_id: str) -> EditorCapabilities:
        try:
            return EditorCapabilities.from_probe(await ctx.page.evaluate(PROBE_EDITOR, editor_id))
        except Exception as e:
            logger.debug(f"Editor probe failed for {editor_id}: {e}")
            return EditorCapabilities(has_plain=True)

    async def apply(self, ctx: FillContext, path: RichTextPath, editor_id: str, html: str) -> bool:
        page = ctx.page
        if path is RichTextPath.SCRIPT_API:
            return bool(await page.evaluate(SET_VIA_API, {"id": editor_id, "html": html}))
        if path is RichTextPath.EDITABLE_SURFACE:
            return bool(await page.evaluate(SET_VIA_SURFACE, {"id": editor_id, "html": html}))
        # the Text tab only exists on some editors; the textarea is filled either way
        try:
            await page.click(f"#{editor_id}-html", timeout=ctx.timeouts.selector_ms)
            await page.wait_for_timeout(300)
        except Exception as e:
            logger.debug(f"No Text tab for {editor_id}: {e}")
        await page.fill(f"#{editor_id}", html, timeout=ctx.timeouts.selector_ms)
        return True


# --- repeater grid ---------------------------------------------------------

DEFAULT_ROW_SELECTOR = ".acf-repeater tbody > tr.acf-row:not(.acf-clone)"


def rows_needed(desired: int, existing: int) -> int:
    return max(0, desired - existing)


class GridSelectStrategy:
    """
    Services repeater: add rows until there are enough for the desired
    values, then assign value i to the i-th row select. Extra existing rows
    are left alone.
    """

    async def fill_rows(self, ctx: FillContext, entries: Sequence[Tuple[Field, str]]) -> List[FillResult]:
        if not entries:
            return []
        page = ctx.page
        timeouts = ctx.timeouts
        first = entries[0][0]
        row_selector = first.row_selector or DEFAULT_ROW_SELECTOR

        existing = len(await page.query_selector_all(row_selector))
        to_add = rows_needed(len(entries), existing)
        logger.info(f"Grid has {existing} rows, {len(entries)} wanted, adding {to_add}")

        add_chain = chain_for(first.add_row_selectors[0], first.add_row_selectors[1:])
        for i in range(to_add):
            used = await resolve_and_act(page, add_chain, click_action(page, timeouts.selector_ms))
            if used is None:
                logger.warning(f"Could not add grid row {i + 1} of {to_add}")
                break
            if not await wait_for_count(page, row_selector, existing + i + 1, timeouts.row_render_ms):
                logger.warning(f"Grid row {existing + i + 1} did not render in {timeouts.row_render_ms}ms")

        selects = await page.query_selector_all(first.selector)
        results: List[FillResult] = []
        for i, (field, value) in enumerate(entries):
            if i >= len(selects):
                results.append(FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel,
                                          detail=f"no grid row {i + 1} available"))
                continue
            try:
                target = await self._row_target(selects[i])
                await page.select_option(target, value, timeout=timeouts.selector_ms)
                logger.debug(f"Selected grid row {i + 1}: {value}")
                results.append(_filled(field, f"row {i + 1}"))
            except Exception as e:
                logger.warning(f"Could not select grid row {i + 1} ({value}): {e}")
                results.append(FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel, detail=str(e)))
        return results

    @staticmethod
    async def _row_target(element) -> str:
        select_id = await element.get_attribute("id")
        if select_id:
            return f'[id="{select_id}"]'
        name = await element.get_attribute("name")
        if name:
            return f'select[name="{name}"]'
        raise FieldFillError("grid select has neither id nor name")


# --- link dialog -----------------------------------------------------------

LINK_TEXT_INPUT = "#wp-link-text"
LINK_SUBMIT = "#wp-link-submit"

# The "Select Link" button comes from editor chrome without a stable id,
# so it is matched by exact text among visible anchors.
CLICK_LINK_TRIGGER = """(label) => {
  const links = Array.from(document.querySelectorAll('a'));
  for (const link of links) {
    if (link.textContent.trim() === label && link.offsetParent !== null
        && !link.closest('[aria-hidden="true"]')) {
      link.click();
      return true;
    }
  }
  return false;
}"""


class LinkStrategy(FieldStrategy):
    """Select Link -> wpLink dialog -> URL + text -> submit."""

    async def fill(self, ctx: FillContext, field: Field, value: LinkValue) -> FillResult:
        page = ctx.page
        timeout = ctx.timeouts.selector_ms
        label = field.label or "Select Link"

        def not_set(detail: str) -> FillResult:
            logger.warning(f"Link '{field.payload_key}' not set: {detail}")
            return FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel, detail=detail)

        try:
            clicked = await page.evaluate(CLICK_LINK_TRIGGER, label)
        except Exception as e:
            return not_set(f"trigger lookup failed: {e}")
        if not clicked:
            return not_set(f"'{label}' trigger not found")

        try:
            await page.wait_for_selector(field.selector, timeout=timeout)
        except Exception as e:
            return not_set(f"link dialog did not open: {e}")

        steps = (
            ("url", lambda: page.fill(field.selector, value.url, timeout=timeout)),
            ("text", lambda: page.fill(LINK_TEXT_INPUT, value.text, timeout=timeout)),
            ("submit", lambda: page.click(LINK_SUBMIT, timeout=timeout)),
        )
        for name, step in steps:
            if name == "submit":
                await ctx.pacing.pause("pre_submit")
            try:
                await step()
            except Exception as e:
                return not_set(f"{name} step failed: {e}")
        logger.info(f"Link set: {value.text} -> {value.url}")
        return _filled(field, "link-dialog")


def default_strategies() -> Dict[FieldType, FieldStrategy]:
    return {
        FieldType.TEXT: TextStrategy(),
        FieldType.RADIO: RadioStrategy(),
        FieldType.RICH_TEXT: RichTextStrategy(),
        FieldType.LINK: LinkStrategy(),
    }
