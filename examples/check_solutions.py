"""Solutions section performance and accessibility checks.

Load time budgets follow Core Web Vitals: the page loads within five seconds,
the DOM within three, and the largest paint lands under 2.5 seconds.
"""

from pagecheck import dom, requirement, scenario, tag


requirement(
    "PERF-001",
    "Page loads within budget",
    "Total load under 5 s, DOMContentLoaded under 3 s, LCP under 2.5 s, CLS under 0.1",
    category="Performance",
)
requirement(
    "A11Y-001",
    "Solutions section is accessible",
    "Images carry alt text, controls have names and the section is reachable by keyboard",
    category="Accessibility",
)


@tag("performance")
@scenario(
    "PERF-001",
    "Navigation timing within budget",
    category="Performance",
    settle_ms=2_000,
    expected=["The page finishes loading in under five seconds"],
)
async def check_navigation_timing(ctx):
    timing = await dom.navigation_timing(ctx.page)
    ctx.expect(
        "Total page load under 5 seconds",
        dom.within_budget(timing["window_load"], dom.LOAD_BUDGET_MS),
        f"Total load time: {timing['window_load']:.0f}ms",
    )
    ctx.expect(
        "DOM loaded under 3 seconds",
        dom.within_budget(timing["dom_load"], dom.DOM_LOAD_BUDGET_MS),
        f"DOM load time: {timing['dom_load']:.0f}ms",
    )


@tag("performance")
@scenario("PERF-001", "Paint metrics within budget", category="Performance", settle_ms=2_000)
async def check_paint_metrics(ctx):
    metrics = await dom.paint_metrics(ctx.page, wait_ms=1_000)
    lcp = metrics["largest_contentful_paint"] or metrics["first_contentful_paint"]
    ctx.expect("LCP under 2.5 seconds", dom.within_budget(lcp, dom.LCP_BUDGET_MS), f"LCP: {lcp}ms")
    cls = metrics["cumulative_layout_shift"]
    if cls is not None:
        ctx.expect("CLS under 0.1", cls < dom.CLS_BUDGET, f"CLS: {cls:.3f}")


@tag("accessibility")
@scenario(
    "A11Y-001",
    "Solutions images and controls are named",
    category="Accessibility",
    steps=["Inspect the solutions section with a screen reader"],
    expected=["Every image is described and every button or link is announced by name"],
)
async def check_accessible_names(ctx):
    missing = await dom.missing_accessible_names(ctx.page, "#solutions")
    if missing is None:
        ctx.expect("Solutions section present", False, "#solutions not found")
        return
    ctx.expect(
        "Images and controls have accessible names",
        not missing,
        f"Missing: {', '.join(missing)}" if missing else "",
    )
    label = await ctx.page.locator("#solutions").get_attribute("aria-label")
    ctx.expect("Section has aria-label", bool(label), f"aria-label: {label or 'missing'}")


@tag("accessibility", "keyboard")
@scenario(
    "A11Y-001",
    "Solutions section is reachable with Tab",
    category="Accessibility",
    steps=["Press Tab repeatedly from the top of the page"],
    expected=["Focus reaches the buttons and links in the solutions section"],
)
async def check_tab_order(ctx):
    order = await dom.focus_order(ctx.page, steps=20, within="#solutions")
    inside = [entry["element"] for entry in order if entry["inside"]]
    ctx.expect(
        "Tab order includes solutions elements",
        bool(inside),
        f"Found {len(inside)} focusable elements after {len(order)} tabs",
    )
