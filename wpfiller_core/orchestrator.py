"""
Panel Fill Orchestrator

Walks the editor panels top to bottom, activates each tab and fills the
fields that have data. Field failures are logged and recorded; they never
abort the run, so as much of the page as possible gets filled.

Panel order follows the visual layout of the editor. Tab activation of a
later panel depends on scroll position and on earlier panels being
collapsed, so the order is fixed and processing is strictly sequential.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .config import Config
from .locators import chain_for, click_action, resolve_and_act
from .mapping import PANEL_ORDER, Field, FieldType, Panel, SelectorMapping
from .pacing import Pacing
from .payload import LandingPageRequest
from .results import FillOutcome, FillResult, FillSummary, PanelState
from .strategies import (
    FieldStrategy,
    FillContext,
    GridSelectStrategy,
    LinkValue,
    default_strategies,
)

logger = logging.getLogger(__name__)


class PanelFillOrchestrator:
    def __init__(
        self,
        config: Config,
        mapping: SelectorMapping,
        pacing: Pacing,
        strategies: Optional[Dict[FieldType, FieldStrategy]] = None,
        grid_strategy: Optional[GridSelectStrategy] = None,
    ):
        self.config = config
        self.mapping = mapping
        self.pacing = pacing
        self.strategies = strategies or default_strategies()
        self.grid_strategy = grid_strategy or GridSelectStrategy()

    async def fill_form(self, page, request: LandingPageRequest) -> FillSummary:
        summary = FillSummary()
        ctx = FillContext(page=page, timeouts=self.config.timeouts, pacing=self.pacing)

        # page title and design live above the panels
        await self._fill_fields(ctx, request, self.mapping.fields_for_panel(None), summary)

        for panel_key in PANEL_ORDER:
            panel = self.mapping.find_panel(panel_key)
            if panel is None:
                logger.warning(f"Panel '{panel_key}' is not in the mapping; skipping")
                continue
            fields = self.mapping.fields_for_panel(panel_key)
            logger.info(f"Filling {panel.label or panel.key} panel")

            if not await self.activate_panel(page, panel, summary.panels):
                logger.warning(f"Could not activate {panel.label or panel.key}; skipping its fields")
                for field in fields:
                    if self.value_for(field, request) is None:
                        summary.add(self._skipped(field))
                    else:
                        summary.add(FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel,
                                               detail="panel tab could not be activated"))
                continue

            await self._fill_fields(ctx, request, fields, summary)

        counts = summary.counts()
        logger.info(
            f"Form fill finished: {counts['filled']} filled, "
            f"{counts['skipped-no-data']} skipped, {counts['failed']} failed"
        )
        return summary

    async def activate_panel(self, page, panel: Panel, state: PanelState) -> bool:
        chain = chain_for(panel.selector, panel.alternative_selectors, text=panel.label)
        used = await resolve_and_act(page, chain, click_action(page, self.config.timeouts.selector_ms))
        if used is None:
            state.mark_failed(panel.key)
            return False
        logger.debug(f"Activated panel {panel.key} via {used}")
        state.mark_activated(panel.key)
        await page.wait_for_timeout(self.config.timeouts.panel_settle_ms)
        return True

    def value_for(self, field: Field, request: LandingPageRequest):
        """The value to fill, or None when the payload leaves this field untouched."""
        if field.type is FieldType.LINK:
            url = request.first_value(field.keys)
            text = request.first_value(field.text_keys)
            if url is None or text is None:
                return None
            return LinkValue(url=url, text=text)
        return request.first_value(field.keys)

    async def _fill_fields(self, ctx: FillContext, request: LandingPageRequest,
                           fields: List[Field], summary: FillSummary) -> None:
        grid_entries: List[Tuple[Field, str]] = []
        grid_done = False

        for field in fields:
            value = self.value_for(field, request)
            if field.type is FieldType.GRID_SELECT:
                if value is None:
                    summary.add(self._skipped(field))
                else:
                    grid_entries.append((field, value))
                continue
            if grid_entries and not grid_done:
                await self._fill_grid(ctx, grid_entries, summary)
                grid_done = True
            if value is None:
                summary.add(self._skipped(field))
                continue
            summary.add(await self._fill_one(ctx, field, value))

        if grid_entries and not grid_done:
            await self._fill_grid(ctx, grid_entries, summary)

    async def _fill_one(self, ctx: FillContext, field: Field, value) -> FillResult:
        strategy = self.strategies.get(field.type)
        if strategy is None:
            return FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel,
                              detail=f"no strategy for type {field.type.value}")
        try:
            result = await strategy.fill(ctx, field, value)
            if result.outcome is FillOutcome.FILLED:
                logger.debug(f"Filled {field.payload_key}")
        except Exception as e:
            logger.warning(f"Failed to fill {field.payload_key}: {e}")
            result = FillResult(field.payload_key, FillOutcome.FAILED, panel=field.panel, detail=str(e))
        await self.pacing.pause("between_fields")
        return result

    async def _fill_grid(self, ctx: FillContext, entries: List[Tuple[Field, str]], summary: FillSummary) -> None:
        try:
            results = await self.grid_strategy.fill_rows(ctx, entries)
        except Exception as e:
            logger.warning(f"Grid fill failed: {e}")
            results = [FillResult(f.payload_key, FillOutcome.FAILED, panel=f.panel, detail=str(e))
                       for f, _ in entries]
        for result in results:
            summary.add(result)

    @staticmethod
    def _skipped(field: Field) -> FillResult:
        return FillResult(field.payload_key, FillOutcome.SKIPPED_NO_DATA, panel=field.panel)
