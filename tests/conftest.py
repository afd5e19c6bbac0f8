"""
Pytest configuration and shared fixtures
"""


import pytest

from wpfiller_core.config import Config, Timeouts
from wpfiller_core.mapping import load_mapping
from wpfiller_core.pacing import NoPacing

from fakes import MAPPING_PATH, FakePage



@pytest.fixture
def config(tmp_path):
    """Config with short timeouts and every file path under tmp_path"""
    return Config(
        admin_url="https://wp.example.com/wp-admin",
        username="editor",
        password="secret",
        timeouts=Timeouts(
            navigation_ms=1000,
            selector_ms=100,
            panel_settle_ms=0,
            row_render_ms=300,
            save_ms=100,
            editor_init_ms=0,
        ),
        mapping_path=MAPPING_PATH,
        state_path=tmp_path / "browser-data" / "browser-state.json",
        human_pacing=False,
        screenshot_dir=tmp_path / "screenshots",
        log_dir=tmp_path / "logs",
        log_file=None,
    )


@pytest.fixture(scope="session")
def mapping():
    return load_mapping(MAPPING_PATH)


@pytest.fixture
def pacing():
    return NoPacing()


@pytest.fixture
def page(mapping):
    """Logged-in fake session with the new landing page editor open"""
    return FakePage.editor_ready(mapping)
