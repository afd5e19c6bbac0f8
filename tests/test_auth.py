"""
Tests for the wp-admin login flow
"""

import dataclasses

import pytest

from wpfiller_core.auth import Authenticator
from wpfiller_core.errors import AuthError

from fakes import FakePage

LOGIN_FORM = {"#user_login", "#user_pass", "#wp-submit", "#rememberme"}


@pytest.fixture
def login_page():
    return FakePage(present=LOGIN_FORM, logged_in=False)


@pytest.mark.asyncio
class TestEnsureLoggedIn:

    async def test_saved_session_skips_login(self, config, pacing, page):
        assert await Authenticator(config, pacing).ensure_logged_in(page)
        assert page.calls == [("goto", config.admin_url)]

    async def test_login_with_credentials(self, config, pacing, login_page):
        assert await Authenticator(config, pacing).ensure_logged_in(login_page)
        assert login_page.values["#user_login"] == "editor"
        assert login_page.values["#user_pass"] == "secret"
        assert "#rememberme" in login_page.clicked
        assert login_page.calls_of("click")[-1] == ("click", "#wp-submit")
        # already on the login form, no extra navigation
        assert login_page.calls_of("goto") == [("goto", config.admin_url)]

    async def test_credentials_typed_after_clearing(self, config, pacing, login_page):
        await Authenticator(config, pacing).ensure_logged_in(login_page)
        user_calls = [c for c in login_page.calls if len(c) > 1 and c[1] == "#user_login"]
        assert user_calls == [
            ("click", "#user_login"),
            ("fill", "#user_login", ""),
            ("type", "#user_login", "editor"),
        ]

    async def test_goes_to_login_page_when_form_not_shown(self, config, pacing):
        page = FakePage(present=set(), logged_in=False)

        original_goto = page.goto

        async def goto(url, wait_until=None, timeout=None):
            await original_goto(url, wait_until=wait_until, timeout=timeout)
            if url == config.login_url:
                page.present.update(LOGIN_FORM)

        page.goto = goto
        assert await Authenticator(config, pacing).ensure_logged_in(page)
        assert [c[1] for c in page.calls_of("goto")] == [config.admin_url, config.login_url]

    async def test_rejected_login_is_not_retried(self, config, pacing, login_page):
        login_page.accept_login = False
        with pytest.raises(AuthError, match="dashboard not reached"):
            await Authenticator(config, pacing).ensure_logged_in(login_page)
        assert len([c for c in login_page.calls_of("click") if c[1] == "#wp-submit"]) == 1

    async def test_missing_credentials(self, config, pacing, login_page):
        config = dataclasses.replace(config, password="")
        with pytest.raises(AuthError, match="WP_PASSWORD"):
            await Authenticator(config, pacing).ensure_logged_in(login_page)
        assert login_page.calls_of("type") == []

    async def test_missing_login_form(self, config, pacing):
        page = FakePage(present=set(), logged_in=False)
        with pytest.raises(AuthError, match="username input not found"):
            await Authenticator(config, pacing).ensure_logged_in(page)
