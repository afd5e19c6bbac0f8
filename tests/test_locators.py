"""
Tests for ordered locator chains and the navigator that walks them
"""

import pytest

from wpfiller_core.errors import NavigationError
from wpfiller_core.locators import (
    Locator,
    LocatorKind,
    chain_for,
    click_action,
    resolve_and_act,
    wait_for_count,
)
from wpfiller_core.navigator import Navigator

from fakes import FakePage


SIDEBAR = "#menu-posts-landing > a"
SIDEBAR_ALT = 'a[href*="edit.php?post_type=landing"]'
NEW_BUTTON = "a.page-title-action"


class TestChainFor:

    def test_order(self):
        chain = chain_for("#primary", ["#alt1", "#alt2"], text="Landing Pages", url="https://x/edit.php")
        assert [(l.kind, l.target) for l in chain] == [
            (LocatorKind.SELECTOR, "#primary"),
            (LocatorKind.SELECTOR, "#alt1"),
            (LocatorKind.SELECTOR, "#alt2"),
            (LocatorKind.TEXT, "Landing Pages"),
            (LocatorKind.URL, "https://x/edit.php"),
        ]

    def test_missing_levels_skipped(self):
        chain = chain_for(None, ["", "#alt"], text=None, url=None)
        assert chain == [Locator(LocatorKind.SELECTOR, "#alt")]

    def test_text_selector(self):
        assert Locator(LocatorKind.TEXT, "Save Draft").as_selector() == 'text="Save Draft"'
        assert Locator(LocatorKind.SELECTOR, "#save-post").as_selector() == "#save-post"


@pytest.mark.asyncio
class TestResolveAndAct:

    async def test_stops_at_first_success(self):
        page = FakePage(present={"#alt1", "#alt2"})
        chain = chain_for("#primary", ["#alt1", "#alt2"], url="https://x/list")
        used = await resolve_and_act(page, chain, click_action(page, 100))
        assert used == Locator(LocatorKind.SELECTOR, "#alt1")
        assert page.calls == [("click", "#alt1")]

    async def test_text_before_url(self):
        page = FakePage(present={'text="Landing Pages"'})
        chain = chain_for("#primary", text="Landing Pages", url="https://x/list")
        used = await resolve_and_act(page, chain, click_action(page, 100))
        assert used.kind is LocatorKind.TEXT
        assert page.calls_of("goto") == []

    async def test_url_fallback(self):
        page = FakePage()
        chain = chain_for("#primary", ["#alt"], text="Landing Pages", url="https://x/list")
        used = await resolve_and_act(page, chain, click_action(page, 100))
        assert used.kind is LocatorKind.URL
        assert page.url == "https://x/list"

    async def test_everything_fails(self):
        page = FakePage()
        page.failing_urls.add("https://x/list")
        chain = chain_for("#primary", url="https://x/list")
        assert await resolve_and_act(page, chain, click_action(page, 100)) is None

    async def test_empty_chain(self):
        assert await resolve_and_act(FakePage(), [], click_action(FakePage(), 100)) is None


@pytest.mark.asyncio
class TestWaitForCount:

    async def test_already_there(self, page):
        page.rows = 3
        assert await wait_for_count(page, ".acf-repeater tbody > tr.acf-row:not(.acf-clone)", 2, 500)
        assert page.waits == []

    async def test_bounded(self, page):
        page.rows = 1
        assert not await wait_for_count(page, ".acf-repeater tbody > tr.acf-row:not(.acf-clone)", 2, 500)
        assert len(page.waits) == 5


@pytest.mark.asyncio
class TestNavigator:

    async def test_primary_selectors(self, config, mapping, page):
        assert await Navigator(config, mapping).go_to_new_entry_editor(page)
        assert [c[1] for c in page.calls_of("click")] == [SIDEBAR, NEW_BUTTON]
        assert page.calls_of("goto") == []

    async def test_alternative_used_when_primary_missing(self, config, mapping, page):
        page.present.discard(SIDEBAR)
        page.present.add(SIDEBAR_ALT)
        await Navigator(config, mapping).go_to_new_entry_editor(page)
        assert page.calls_of("click")[0] == ("click", SIDEBAR_ALT)
        assert page.calls_of("goto") == []
        assert '#wp-submit' not in page.clicked

    async def test_direct_url_as_last_resort(self, config, mapping, page):
        page.present.discard(SIDEBAR)
        page.present.discard(NEW_BUTTON)
        await Navigator(config, mapping).go_to_new_entry_editor(page)
        assert [c[1] for c in page.calls_of("goto")] == [
            "https://wp.example.com/wp-admin/edit.php?post_type=landing",
            "https://wp.example.com/wp-admin/post-new.php?post_type=landing",
        ]

    async def test_chain_shape(self, config, mapping):
        chain = Navigator(config, mapping).chain("landing_page_main_sidebar", config.list_url)
        kinds = [l.kind for l in chain]
        assert kinds[0] is LocatorKind.SELECTOR
        assert kinds[-2:] == [LocatorKind.TEXT, LocatorKind.URL]
        assert chain[-2].target == "Landing Pages"

    async def test_unreachable(self, config, mapping, page):
        page.present.discard(SIDEBAR)
        page.failing_urls.add(config.list_url)
        with pytest.raises(NavigationError):
            await Navigator(config, mapping).go_to_new_entry_editor(page)
