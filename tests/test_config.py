"""
Tests for environment-driven configuration
"""

from pathlib import Path

import pytest

from wpfiller_core.config import Config, Timeouts
from wpfiller_core.pacing import HumanPacing, NoPacing, pacing_for

ENV_KEYS = (
    "WP_ADMIN_URL", "WP_USERNAME", "WP_PASSWORD", "WP_POST_TYPE", "WP_SAVE_MODE", "HEADLESS",
    "SLOW_MO", "NAVIGATION_TIMEOUT", "SELECTOR_TIMEOUT", "PANEL_SETTLE_MS", "ROW_RENDER_TIMEOUT",
    "SAVE_TIMEOUT", "WPFILLER_MAPPING", "WPFILLER_STATE_FILE", "WPFILLER_HUMAN_PACING", "PORT",
    "WEBHOOK_SECRET", "WPFILLER_ENV", "WPFILLER_MAX_CONCURRENT_RUNS", "SCREENSHOT_ON_ERROR",
    "SCREENSHOT_PATH", "WPFILLER_LOG_DIR", "LOG_LEVEL", "LOG_FILE", "WPFILLER_RUN_REPORTS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = Config.from_env()
    assert config.post_type == "landing"
    assert config.save_mode == "draft"
    assert config.headless is True
    assert config.slow_mo == 100
    assert config.timeouts == Timeouts()
    assert config.port == 3000
    assert config.webhook_secret is None
    assert config.environment == "production"
    assert config.max_concurrent_runs == 1
    assert config.state_path.name == "browser-state.json"
    assert config.log_file == Path("logs/wp-filler.log")


def test_from_env(clean_env):
    clean_env.setenv("WP_ADMIN_URL", "https://site.example/wp-admin/")
    clean_env.setenv("WP_POST_TYPE", "promo")
    clean_env.setenv("WP_SAVE_MODE", "PUBLISH")
    clean_env.setenv("HEADLESS", "false")
    clean_env.setenv("NAVIGATION_TIMEOUT", "45000")
    clean_env.setenv("PANEL_SETTLE_MS", "500")
    clean_env.setenv("WEBHOOK_SECRET", "s3cret")
    clean_env.setenv("WPFILLER_MAX_CONCURRENT_RUNS", "0")
    clean_env.setenv("LOG_FILE", "")

    config = Config.from_env()
    assert config.admin_url == "https://site.example/wp-admin"
    assert config.save_mode == "publish"
    assert config.headless is False
    assert config.timeouts.navigation_ms == 45000
    assert config.timeouts.panel_settle_ms == 500
    assert config.webhook_secret == "s3cret"
    assert config.max_concurrent_runs == 1
    assert config.log_file is None
    assert config.list_url == "https://site.example/wp-admin/edit.php?post_type=promo"
    assert config.new_entry_url == "https://site.example/wp-admin/post-new.php?post_type=promo"
    assert config.login_url == "https://site.example/wp-admin/wp-login.php"


def test_bad_number(clean_env):
    clean_env.setenv("PORT", "eighty")
    with pytest.raises(ValueError):
        Config.from_env()


def test_pacing_choice(config):
    assert isinstance(pacing_for(config), NoPacing)
    assert isinstance(pacing_for(Config(human_pacing=True)), HumanPacing)
