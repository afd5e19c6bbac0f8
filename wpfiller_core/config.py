#!/usr/bin/env python3
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


@dataclass(frozen=True)
class Timeouts:
    """Upper bounds (ms) for every wait the automation performs"""
    navigation_ms: int = 30000
    selector_ms: int = 5000
    panel_settle_ms: int = 1500
    row_render_ms: int = 5000
    save_ms: int = 10000
    editor_init_ms: int = 1500


@dataclass(frozen=True)
class Config:
    """Application configuration, built once per process and passed down"""
    admin_url: str = "http://localhost/wp-admin"
    username: str = ""
    password: str = ""
    post_type: str = "landing"
    save_mode: str = "draft"
    headless: bool = True
    slow_mo: int = 100
    timeouts: Timeouts = field(default_factory=Timeouts)
    mapping_path: Path = Path("config/mapping.json")
    state_path: Path = Path.home() / ".wp-filler" / "browser-data" / "browser-state.json"
    human_pacing: bool = True
    port: int = 3000
    webhook_secret: Optional[str] = None
    environment: str = "production"
    max_concurrent_runs: int = 1
    screenshot_on_error: bool = False
    screenshot_dir: Path = Path("logs/screenshots")
    log_dir: Path = Path("logs")
    log_level: str = "INFO"
    log_file: Optional[Path] = Path("logs/wp-filler.log")
    run_reports: bool = False

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables (and a local .env)"""
        state_default = Path.home() / ".wp-filler" / "browser-data" / "browser-state.json"
        log_file = os.getenv("LOG_FILE", "logs/wp-filler.log")
        return cls(
            admin_url=os.getenv("WP_ADMIN_URL", "http://localhost/wp-admin").rstrip("/"),
            username=os.getenv("WP_USERNAME", ""),
            password=os.getenv("WP_PASSWORD", ""),
            post_type=os.getenv("WP_POST_TYPE", "landing"),
            save_mode=os.getenv("WP_SAVE_MODE", "draft").lower(),
            headless=_env_bool("HEADLESS", "true"),
            slow_mo=_env_int("SLOW_MO", 100),
            timeouts=Timeouts(
                navigation_ms=_env_int("NAVIGATION_TIMEOUT", 30000),
                selector_ms=_env_int("SELECTOR_TIMEOUT", 5000),
                panel_settle_ms=_env_int("PANEL_SETTLE_MS", 1500),
                row_render_ms=_env_int("ROW_RENDER_TIMEOUT", 5000),
                save_ms=_env_int("SAVE_TIMEOUT", 10000),
            ),
            mapping_path=Path(os.getenv("WPFILLER_MAPPING", "config/mapping.json")),
            state_path=Path(os.path.expanduser(os.getenv("WPFILLER_STATE_FILE", str(state_default)))),
            human_pacing=_env_bool("WPFILLER_HUMAN_PACING", "true"),
            port=_env_int("PORT", 3000),
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            environment=os.getenv("WPFILLER_ENV", "production").lower(),
            max_concurrent_runs=max(1, _env_int("WPFILLER_MAX_CONCURRENT_RUNS", 1)),
            screenshot_on_error=_env_bool("SCREENSHOT_ON_ERROR", "false"),
            screenshot_dir=Path(os.getenv("SCREENSHOT_PATH", "logs/screenshots")),
            log_dir=Path(os.getenv("WPFILLER_LOG_DIR", "logs")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file) if log_file else None,
            run_reports=_env_bool("WPFILLER_RUN_REPORTS", "false"),
        )

    @property
    def login_url(self) -> str:
        return f"{self.admin_url}/wp-login.php"

    @property
    def list_url(self) -> str:
        return f"{self.admin_url}/edit.php?post_type={self.post_type}"

    @property
    def new_entry_url(self) -> str:
        return f"{self.admin_url}/post-new.php?post_type={self.post_type}"
