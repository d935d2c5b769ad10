"""Tests for scenario registration, requirements, tags and the check context."""

import asyncio

import pytest

from pagecheck.scenarios import (
    CheckContext,
    current_context,
    expect,
    get_requirement_registry,
    get_scenario_registry,
    requirement,
    scenario,
    tag,
)
from pagecheck.scenarios.context import check_context_scope
from pagecheck.scenarios.scenario import get_scenario
from pagecheck.scenarios.tags import get_tag_data
from pagecheck.types import VIEWPORTS


class TestScenarioDecorator:
    def test_registers_and_returns_function(self):
        @scenario("REQ-1", "Arrows visible", category="Navigation", path="/home")
        def check_arrows(ctx):
            """Both arrows are shown."""

        scn = get_scenario(check_arrows)
        assert callable(check_arrows)
        assert scn is not None
        assert scn.id == f"{__name__}::check_arrows"
        assert get_scenario_registry()[scn.id] is scn
        assert scn.category == "Navigation"
        assert scn.path == "/home"
        assert scn.description == "Both arrows are shown."
        assert not scn.is_async

    def test_attaches_to_requirement(self):
        @scenario("REQ-9", "Video plays", category="Video")
        async def check_video(ctx):
            pass

        req = get_requirement_registry()["REQ-9"]
        assert req.title == "Video plays"
        assert req.category == "Video"
        assert [s.fn for s in req.scenarios] == [check_video]
        assert get_scenario(check_video).is_async

    def test_custom_name_changes_id(self):
        @scenario("REQ-1", "t", name="renamed")
        def check_original(ctx):
            pass

        assert get_scenario(check_original).id.endswith("::renamed")

    def test_viewport_restriction(self):
        @scenario("REQ-1", "t", viewports=["mobile", "tablet"])
        def check_mobile(ctx):
            pass

        scn = get_scenario(check_mobile)
        assert scn.viewports == ("mobile", "tablet")
        assert scn.runs_on("mobile")
        assert not scn.runs_on("desktop")

    def test_rejects_non_callable(self):
        with pytest.raises(TypeError, match="must be callable"):
            scenario("REQ-1", "t")("not a function")


class TestRequirement:
    def test_declared_requirement_without_checks(self):
        req = requirement("REQ-4", "Contact method removed", "Field is gone", category="Forms")
        coverage = req.to_coverage()
        assert coverage.status == "FAIL"
        assert coverage.description == "Field is gone"
        assert coverage.category == "Forms"

    def test_declaring_after_scenario_keeps_scenarios(self):
        @scenario("REQ-2", "Email required", category="Validation")
        def check_email(ctx):
            pass

        req = requirement("REQ-2", "Email Address is required", "Must be filled out")

        assert req.title == "Email Address is required"
        assert req.category == "Validation"
        assert len(req.scenarios) == 1
        assert req.to_coverage().category == "Validation"

    def test_redeclaring_updates_in_place(self):
        first = requirement("REQ-1", "Old", category="A")
        second = requirement("REQ-1", "New")
        assert first is second
        assert second.title == "New"
        assert second.category == "A"


def test_tag_decorator_records_metadata():
    @tag("carousel", "smoke")
    @tag.skip(reason="site down")
    def sample(ctx):
        pass

    data = get_tag_data(sample)
    assert data.tags == {"carousel", "smoke", "skip"}
    assert data.skip_reason == "site down"


def test_tags_apply_in_either_decorator_order():
    @scenario("REQ-1", "outer tag")
    @tag("inner")
    def check_inner(ctx):
        pass

    @tag("outer")
    @scenario("REQ-1", "inner tag")
    def check_outer(ctx):
        pass

    assert get_scenario(check_inner).tags == {"inner"}
    assert get_scenario(check_outer).tags == {"outer"}


def test_skip_without_reason():
    @tag.skip()
    @scenario("REQ-1", "t")
    def check_skipped(ctx):
        pass

    assert get_scenario(check_skipped).skip_reason == "skipped via tag"


class TestCheckContext:
    def make_context(self, **kwargs) -> CheckContext:
        @scenario("REQ-7", "Layout holds", category="Layout")
        def check_layout(ctx):
            pass

        defaults = {
            "page": None,
            "scenario": get_scenario(check_layout),
            "base_url": "http://localhost:3000/",
        }
        defaults.update(kwargs)
        return CheckContext(**defaults)

    def test_expect_records_and_returns_outcome(self):
        ctx = self.make_context(viewport=VIEWPORTS["mobile"], browser="webkit")

        assert ctx.expect("Card ratio", True, "0.75") is True
        assert ctx.expect("Arrows", 0) is False

        first, second = ctx.records
        assert first.name == "Card ratio"
        assert first.passed
        assert first.details == "0.75"
        assert first.requirement_id == "REQ-7"
        assert first.category == "Layout"
        assert first.viewport == "mobile"
        assert first.browser == "webkit"
        assert second.passed is False

    def test_viewport_prefix(self):
        ctx = self.make_context(viewport=VIEWPORTS["tablet"], prefix_viewport=True)
        ctx.expect("Arrows", True)
        assert ctx.records[0].name == "tablet - Arrows"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/", "http://localhost:3000/"),
            ("/pricing", "http://localhost:3000/pricing"),
            ("book?x=1", "http://localhost:3000/book?x=1"),
        ],
    )
    def test_url_joins_base(self, path, expected):
        assert self.make_context().url(path) == expected

    def test_settle_uses_page_wait(self):
        class Page:
            def __init__(self):
                self.waits = []

            async def wait_for_timeout(self, ms):
                self.waits.append(ms)

        page = Page()
        ctx = self.make_context(page=page, settle_ms=250)
        asyncio.run(ctx.settle())
        asyncio.run(ctx.settle(0))
        asyncio.run(ctx.settle(10))
        assert page.waits == [250, 10]

    def test_module_level_expect_uses_current_context(self):
        ctx = self.make_context()
        with check_context_scope(ctx):
            assert current_context() is ctx
            expect("inside", True)
        assert [r.name for r in ctx.records] == ["inside"]

    def test_expect_outside_a_check_raises(self):
        with pytest.raises(RuntimeError, match="No check is running"):
            expect("nowhere", True)
