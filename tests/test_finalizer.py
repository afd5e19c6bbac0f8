"""
Tests for save/publish and result URL capture
"""

import pytest

from wpfiller_core.errors import SaveError
from wpfiller_core.finalizer import SAVED_SIGNAL, Finalizer, SaveMode


class TestSaveMode:

    def test_parse(self):
        assert SaveMode.parse("publish") is SaveMode.PUBLISH
        assert SaveMode.parse(" Draft ") is SaveMode.DRAFT
        assert SaveMode.parse(None) is SaveMode.DRAFT
        assert SaveMode.parse("", SaveMode.PUBLISH) is SaveMode.PUBLISH

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown save mode"):
            SaveMode.parse("schedule")


@pytest.mark.asyncio
class TestSaveDraftOrPublish:

    async def test_draft(self, config, mapping, page):
        url = await Finalizer(config, mapping).save_draft_or_publish(page, SaveMode.DRAFT)
        assert url == "https://example.com/?p=123&preview=true"
        assert page.calls_of("click") == [("click", "#save-post")]
        assert page.calls_of("evaluate")[-1] == ("evaluate", "extract_result_url", "draft")

    async def test_publish(self, config, mapping, page):
        page.result_url = "https://example.com/cost-guide/"
        url = await Finalizer(config, mapping).save_draft_or_publish(page, SaveMode.PUBLISH)
        assert url == "https://example.com/cost-guide/"
        assert page.calls_of("click") == [("click", "#publish")]

    async def test_scrolls_to_top_first(self, config, mapping, page):
        await Finalizer(config, mapping).save_draft_or_publish(page)
        first = page.calls[0]
        assert first[0] == "evaluate" and "scrollTo" in first[1]

    async def test_alternative_control(self, config, mapping, page):
        page.present.discard("#save-post")
        page.present.add('input[name="save"]')
        await Finalizer(config, mapping).save_draft_or_publish(page)
        assert page.calls_of("click") == [("click", 'input[name="save"]')]

    async def test_no_confirmation_returns_none(self, config, mapping, page):
        page.save_succeeds = False
        assert await Finalizer(config, mapping).save_draft_or_publish(page) is None
        assert [c for c in page.calls_of("evaluate") if c[1] == "extract_result_url"] == []

    async def test_saved_without_url(self, config, mapping, page):
        page.result_url = None
        assert await Finalizer(config, mapping).save_draft_or_publish(page) is None

    async def test_control_missing_raises(self, config, mapping, page):
        page.present.discard("#save-post")
        with pytest.raises(SaveError, match="Save Draft"):
            await Finalizer(config, mapping).save_draft_or_publish(page)

    async def test_waits_for_editor_reload_before_confirming(self, config, mapping, page):
        assert "#post-preview" in page.present
        url = await Finalizer(config, mapping).save_draft_or_publish(page, SaveMode.DRAFT)
        assert page.saved is True
        assert page.save_pending is False
        assert page.load_states == ["networkidle"]
        assert url == "https://example.com/?p=123&preview=true"

    async def test_preview_button_is_not_a_save_confirmation(self, config, mapping, page):
        page.load_hangs = True
        url = await Finalizer(config, mapping).save_draft_or_publish(page, SaveMode.DRAFT)
        assert url is None
        assert page.saved is False
        assert page.save_pending is True
        assert [c for c in page.calls_of("evaluate") if c[1] == "extract_result_url"] == []


def test_saved_signal_only_matches_the_updated_notice():
    for selector in SAVED_SIGNAL.split(", "):
        assert selector.startswith("#message")
    assert "#post-preview" not in SAVED_SIGNAL
