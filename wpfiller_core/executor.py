#!/usr/bin/env python3
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from wpfiller_logs import RunLogger, capture_error_screenshot

from .auth import Authenticator
from .config import Config
from .finalizer import Finalizer, SaveMode
from .mapping import SelectorMapping
from .navigator import Navigator
from .orchestrator import PanelFillOrchestrator
from .pacing import Pacing, pacing_for
from .payload import LandingPageRequest
from .results import FillOutcome, FillSummary
from .session import SessionStateStore, browser_session

logger = logging.getLogger(__name__)

SUCCESS_MESSAGES = {
    SaveMode.DRAFT: "Landing page created and saved as draft successfully",
    SaveMode.PUBLISH: "Landing page created and published successfully",
}


@dataclass
class RunResult:
    success: bool
    url: Optional[str]
    message: str
    summary: FillSummary = field(default_factory=FillSummary)
    mode: SaveMode = SaveMode.DRAFT
    duration_ms: int = 0
    report_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "url": self.url,
            "message": self.message,
            "mode": self.mode.value,
            "duration_ms": self.duration_ms,
            "fields": self.summary.to_dict(),
        }


class LandingPageExecutor:
    """
    One landing-page run per call:
    launch -> login -> new entry editor -> panels -> save/publish -> close.

    Field problems end up in the FillSummary. Login, navigation and save
    failures propagate; the browser is closed and its session state kept
    on every path.
    """

    def __init__(
        self,
        config: Config,
        mapping: SelectorMapping,
        pacing: Optional[Pacing] = None,
        session_factory: Optional[Callable] = None,
    ):
        self.config = config
        self.mapping = mapping
        self.pacing = pacing or pacing_for(config)
        self.session_factory = session_factory or browser_session
        self.state_store = SessionStateStore(config.state_path)
        self.authenticator = Authenticator(config, self.pacing)
        self.navigator = Navigator(config, mapping)
        self.orchestrator = PanelFillOrchestrator(config, mapping, self.pacing)
        self.finalizer = Finalizer(config, mapping)

    async def create_landing_page(self, request: LandingPageRequest, mode: Optional[SaveMode] = None) -> RunResult:
        mode = mode or SaveMode.parse(self.config.save_mode)
        started = time.monotonic()
        run_log = self._run_logger(request)
        logger.info(f"Creating landing page '{request.headline}' ({mode.value})")

        try:
            async with self.session_factory(self.config, self.state_store) as page:
                try:
                    url, summary = await self._run(page, request, mode, run_log)
                except Exception as e:
                    await self._on_failure(page, request, e, run_log)
                    raise
        except Exception as e:
            if run_log:
                run_log.finalize(success=False, duration_ms=self._elapsed(started), error=str(e))
            raise

        result = RunResult(
            success=True,
            url=url,
            message=SUCCESS_MESSAGES[mode],
            summary=summary,
            mode=mode,
            duration_ms=self._elapsed(started),
            report_path=run_log.log_path if run_log else None,
        )
        if run_log:
            run_log.finalize(success=True, duration_ms=result.duration_ms, url=url)
        logger.info(f"{result.message} in {result.duration_ms}ms" + (f": {url}" if url else ""))
        return result

    async def _run(self, page, request: LandingPageRequest, mode: SaveMode, run_log: Optional[RunLogger]):
        await self.pacing.warm_up(page)

        self._phase(run_log, "Login")
        await self.authenticator.ensure_logged_in(page)
        # keep the login even if a later step fails
        await self.state_store.save(page.context)
        if run_log:
            run_log.log_text(f"Logged in as {self.config.username}")

        self._phase(run_log, "Navigation")
        await self.navigator.go_to_new_entry_editor(page)
        if run_log:
            run_log.log_text(f"Editor opened at {page.url}")

        self._phase(run_log, "Form Fill")
        summary = await self.orchestrator.fill_form(page, request)
        if run_log:
            run_log.log_fill_summary(summary.to_dict())
            failed = summary.keys_with(FillOutcome.FAILED)
            if failed:
                run_log.log_warning(f"Fields not filled: {', '.join(failed)}")
            if summary.panels.failed:
                run_log.log_warning(f"Panels not activated: {', '.join(sorted(summary.panels.failed))}")

        self._phase(run_log, "Save")
        url = await self.finalizer.save_draft_or_publish(page, mode)
        if run_log:
            run_log.log_kv("Mode", mode.value)
            if url:
                run_log.log_kv("URL", url)
            else:
                run_log.log_warning("Result URL was not captured")
        return url, summary

    async def _on_failure(self, page, request: LandingPageRequest, error: Exception,
                          run_log: Optional[RunLogger]) -> None:
        logger.error(f"Landing page run failed: {error}")
        if run_log:
            run_log.log_error(str(error))
        if not self.config.screenshot_on_error:
            return
        path = await capture_error_screenshot(page, self.config.screenshot_dir, request.headline)
        if path and run_log:
            run_log.log_image(path, "error state")

    def _run_logger(self, request: LandingPageRequest) -> Optional[RunLogger]:
        if not self.config.run_reports:
            return None
        try:
            return RunLogger(headline=request.headline, url=self.config.admin_url, log_dir=str(self.config.log_dir))
        except OSError as e:
            logger.warning(f"Run report disabled: {e}")
            return None

    @staticmethod
    def _phase(run_log: Optional[RunLogger], name: str) -> None:
        if run_log:
            run_log.log_heading(name)

    @staticmethod
    def _elapsed(started: float) -> int:
        return int((time.monotonic() - started) * 1000)
